"""Business logic for the folder hierarchy.

The hierarchy is a forest per user: every folder's parent belongs to
the same user and no folder is its own ancestor. Writes that change
the shape of the tree (create, move) lock the owner's row first, so
two concurrent moves cannot build a cycle together.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q, QuerySet

from server.apps.files.exceptions import (
    FolderCycleError,
    FolderDepthExceededError,
    FolderHierarchyCorruptedError,
    FolderNotEmptyError,
    ParentFolderNotFoundError,
    SelfParentError,
)
from server.apps.files.logic.access import get_owned_folder
from server.apps.files.logic.file_operations import list_files
from server.apps.files.models import File, Folder
from server.common.exceptions import ResourceNotFoundError

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FolderContents:
    """Direct children of a folder (or of the root)."""

    folders: list[Folder]
    files: list[File] = field(default_factory=list)


def get_max_depth() -> int:
    """Get the maximum nesting depth of folders.

    Returns:
        Depth limit from settings (a root-level folder has depth 1).
    """
    return getattr(settings, 'DRIVE_MAX_FOLDER_DEPTH', 32)


def with_child_counts(folders: QuerySet[Folder]) -> QuerySet[Folder]:
    """Annotate folders with live counts of child folders and files.

    Args:
        folders: Folder queryset.

    Returns:
        Queryset with ``child_count`` and ``file_count`` annotations.
    """
    return folders.annotate(
        child_count=Count('children', distinct=True),
        file_count=Count('files', distinct=True),
    )


def create_folder(
    user: _User,
    name: str,
    parent_id: uuid.UUID | None = None,
) -> Folder:
    """Create a folder owned by ``user``.

    Args:
        user: Owner of the new folder.
        name: Folder name.
        parent_id: Parent folder ID, None for root.

    Returns:
        Created Folder instance.

    Raises:
        ParentFolderNotFoundError: If parent is absent or not owned.
        FolderDepthExceededError: If the new folder would be too deep.
    """
    with transaction.atomic():
        _lock_hierarchy(user)

        parent = None
        if parent_id is not None:
            parent = get_owned_folder(
                user,
                parent_id,
                error=ParentFolderNotFoundError,
            )
            if _depth_of(user, parent.id) + 1 > get_max_depth():
                raise FolderDepthExceededError()

        folder = Folder.objects.create(
            user=user,
            name=name,
            parent=parent,
        )

    logger.info(
        'Folder created: %s (ID: %s, parent: %s, user: %s)',
        name,
        folder.id,
        parent_id,
        user.pk,
    )
    return folder


def get_folder(user: _User, folder_id: uuid.UUID) -> Folder:
    """Fetch an owned folder with child counts.

    Args:
        user: Acting principal.
        folder_id: Folder ID.

    Returns:
        Folder annotated with ``child_count`` and ``file_count``.

    Raises:
        ResourceNotFoundError: If absent or not owned.
    """
    get_owned_folder(user, folder_id)
    return with_child_counts(
        Folder.objects.filter(id=folder_id, user=user),
    ).select_related('parent').get()


def rename_folder(user: _User, folder_id: uuid.UUID, name: str) -> Folder:
    """Rename an owned folder.

    Args:
        user: Acting principal.
        folder_id: Folder ID.
        name: New name.

    Returns:
        Updated Folder instance.

    Raises:
        ResourceNotFoundError: If absent or not owned.
    """
    folder = get_owned_folder(user, folder_id)
    old_name = folder.name
    folder.name = name
    folder.save(update_fields=['name', 'updated_at'])

    logger.info(
        'Folder renamed: %s -> %s (ID: %s)',
        old_name,
        name,
        folder_id,
    )
    return folder


def move_folder(
    user: _User,
    folder_id: uuid.UUID,
    parent_id: uuid.UUID | None,
) -> Folder:
    """Move an owned folder under another owned folder (or to root).

    The whole ancestor chain of the new parent is checked, so a folder
    can never end up below itself.

    Args:
        user: Acting principal.
        folder_id: Folder to move.
        parent_id: New parent ID, None for root.

    Returns:
        Updated Folder instance.

    Raises:
        ResourceNotFoundError: If the folder is absent or not owned.
        SelfParentError: If ``parent_id`` is the folder itself.
        ParentFolderNotFoundError: If the parent is absent or not owned.
        FolderCycleError: If the parent is a descendant of the folder.
        FolderDepthExceededError: If the subtree would sit too deep.
    """
    if parent_id is not None and parent_id == folder_id:
        raise SelfParentError()

    with transaction.atomic():
        _lock_hierarchy(user)
        folder = get_owned_folder(user, folder_id)

        if parent_id is not None:
            get_owned_folder(user, parent_id, error=ParentFolderNotFoundError)
            ancestor_ids = _ancestor_ids(user, parent_id)
            if folder.id in ancestor_ids:
                logger.warning(
                    'Rejected folder move into own subtree: %s -> %s',
                    folder_id,
                    parent_id,
                )
                raise FolderCycleError()
            new_depth = len(ancestor_ids) + _subtree_height(user, folder.id)
            if new_depth > get_max_depth():
                raise FolderDepthExceededError()

        folder.parent_id = parent_id
        folder.save(update_fields=['parent', 'updated_at'])

    logger.info('Folder moved: %s -> parent %s', folder_id, parent_id)
    return folder


def delete_folder(user: _User, folder_id: uuid.UUID) -> None:
    """Delete an owned, empty folder.

    Emptiness is checked with live counts of child folders and files
    (trashed files included) at delete time.

    Args:
        user: Acting principal.
        folder_id: Folder ID.

    Raises:
        ResourceNotFoundError: If absent or not owned.
        FolderNotEmptyError: If the folder has children or files.
    """
    with transaction.atomic():
        folder = with_child_counts(
            Folder.objects.select_for_update().filter(
                id=folder_id,
                user=user,
                trashed=False,
            ),
        ).first()
        if folder is None:
            raise ResourceNotFoundError()

        if folder.child_count > 0 or folder.file_count > 0:
            logger.warning(
                'Rejected delete of non-empty folder %s '
                '(%d folders, %d files)',
                folder_id,
                folder.child_count,
                folder.file_count,
            )
            raise FolderNotEmptyError()

        folder.delete()

    logger.info('Folder deleted: %s (user: %s)', folder_id, user.pk)


def list_folder_contents(
    user: _User,
    parent_id: uuid.UUID | None = None,
    *,
    include_files: bool = False,
) -> FolderContents:
    """List direct children of a folder.

    Args:
        user: Acting principal.
        parent_id: Folder ID, None for root.
        include_files: Also list active files of the folder.

    Returns:
        FolderContents with child folders (annotated with counts),
        ordered by name, and files ordered by name.

    Raises:
        ParentFolderNotFoundError: If ``parent_id`` is absent or not owned.
    """
    if parent_id is not None:
        get_owned_folder(user, parent_id, error=ParentFolderNotFoundError)

    parent_filter = (
        Q(parent__isnull=True) if parent_id is None else Q(parent_id=parent_id)
    )
    folders = with_child_counts(
        Folder.objects.filter(parent_filter, user=user, trashed=False),
    ).order_by('name')

    files: list[File] = []
    if include_files:
        files = list(list_files(user, parent_id))

    return FolderContents(folders=list(folders), files=files)


def resolve_folder_path(folder: Folder) -> list[Folder]:
    """Collect a folder's ancestors for breadcrumbs.

    Walks ``parent`` links upward and stops at the root or at the
    first broken link.

    Args:
        folder: Folder to resolve.

    Returns:
        Folders from the root down to ``folder`` (inclusive).

    Raises:
        FolderHierarchyCorruptedError: If the walk exceeds the depth limit.
    """
    path = [folder]
    parent_id = folder.parent_id
    while parent_id is not None:
        if len(path) >= get_max_depth():
            _report_corruption(folder.id)
        parent = Folder.objects.filter(
            id=parent_id,
            user_id=folder.user_id,
        ).first()
        if parent is None:
            logger.warning(
                'Broken parent link %s while resolving path of %s',
                parent_id,
                folder.id,
            )
            break
        path.append(parent)
        parent_id = parent.parent_id

    path.reverse()
    return path


def _lock_hierarchy(user: _User) -> None:
    """Serialize hierarchy writes of one owner."""
    get_user_model().objects.select_for_update().filter(pk=user.pk).first()


def _ancestor_ids(user: _User, folder_id: uuid.UUID) -> list[uuid.UUID]:
    """IDs from ``folder_id`` up to its root-level ancestor (inclusive).

    Raises:
        FolderHierarchyCorruptedError: If the walk exceeds the depth limit.
    """
    ancestor_ids: list[uuid.UUID] = []
    current_id: uuid.UUID | None = folder_id
    while current_id is not None:
        if len(ancestor_ids) >= get_max_depth():
            _report_corruption(folder_id)
        ancestor_ids.append(current_id)
        current_id = (
            Folder.objects.filter(id=current_id, user=user)
            .values_list('parent_id', flat=True)
            .first()
        )
    return ancestor_ids


def _depth_of(user: _User, folder_id: uuid.UUID) -> int:
    return len(_ancestor_ids(user, folder_id))


def _subtree_height(user: _User, folder_id: uuid.UUID) -> int:
    """Number of levels in the subtree rooted at ``folder_id``.

    Raises:
        FolderHierarchyCorruptedError: If the subtree exceeds the limit.
    """
    height = 0
    level = [folder_id]
    while level:
        height += 1
        if height > get_max_depth():
            _report_corruption(folder_id)
        level = list(
            Folder.objects.filter(user=user, parent_id__in=level)
            .values_list('id', flat=True),
        )
    return height


def _report_corruption(folder_id: uuid.UUID) -> None:
    logger.error(
        'Folder hierarchy exceeds depth limit %d at folder %s',
        get_max_depth(),
        folder_id,
    )
    raise FolderHierarchyCorruptedError()
