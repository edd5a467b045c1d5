"""Ownership and shared-access lookups.

Every lookup filters by id and principal in the same query, never
fetching first and comparing afterwards. A resource owned by someone
else is reported exactly like a missing one.
"""

import uuid
from typing import Any

from server.apps.files.exceptions import FileRecordNotFoundError
from server.apps.files.models import File, FileShare, Folder
from server.common.exceptions import ApiError, ResourceNotFoundError

# User type for Django's dynamic user model
_User = Any


def get_owned_folder(
    user: _User,
    folder_id: uuid.UUID,
    *,
    error: type[ApiError] = ResourceNotFoundError,
) -> Folder:
    """Fetch a non-trashed folder owned by ``user``.

    Args:
        user: Acting principal.
        folder_id: Folder ID.
        error: Error raised when nothing matches.

    Returns:
        Folder instance.

    Raises:
        ApiError: ``error`` when absent or not owned.
    """
    folder = Folder.objects.filter(
        id=folder_id,
        user=user,
        trashed=False,
    ).first()
    if folder is None:
        raise error()
    return folder


def get_owned_file(
    user: _User,
    file_id: uuid.UUID,
    *,
    trashed: bool | None = None,
    error: type[ApiError] = ResourceNotFoundError,
) -> File:
    """Fetch a file owned by ``user``.

    Args:
        user: Acting principal.
        file_id: File ID.
        trashed: Required trash state, or None for either.
        error: Error raised when nothing matches.

    Returns:
        File instance.

    Raises:
        ApiError: ``error`` when absent, not owned or in the wrong state.
    """
    files = File.objects.owned_by(user).filter(id=file_id)
    if trashed is not None:
        files = files.filter(trashed=trashed)
    file_instance = files.select_related('folder').first()
    if file_instance is None:
        raise error()
    return file_instance


def get_readable_file(
    user: _User,
    file_id: uuid.UUID,
    *,
    error: type[ApiError] = FileRecordNotFoundError,
) -> File:
    """Fetch an active file owned by or shared with ``user``.

    Only read paths (and access tracking) use this lookup; every
    mutation goes through ``get_owned_file``.

    Args:
        user: Acting principal.
        file_id: File ID.
        error: Error raised when nothing matches.

    Returns:
        File instance.

    Raises:
        ApiError: ``error`` when absent or not accessible.
    """
    file_instance = (
        File.objects.readable_by(user)
        .active()
        .filter(id=file_id)
        .select_related('folder', 'user')
        .first()
    )
    if file_instance is None:
        raise error()
    return file_instance


def get_share_permission(user: _User, file_instance: File) -> str | None:
    """Permission granted to ``user`` on a file.

    Args:
        user: Principal.
        file_instance: File to check.

    Returns:
        ``None`` for the owner, otherwise the granted permission.
    """
    if file_instance.user_id == getattr(user, 'pk', None):
        return None
    return (
        FileShare.objects.filter(file=file_instance, user=user)
        .values_list('permission', flat=True)
        .first()
    )
