"""Business logic for file operations."""

import logging
import uuid
from typing import Any

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from server.apps.files.exceptions import (
    FileRecordNotFoundError,
    FolderNotFoundError,
    UploadTooLargeError,
)
from server.apps.files.infrastructure.storage import rollback_blob, upload_blob
from server.apps.files.logic.access import (
    get_owned_file,
    get_owned_folder,
    get_readable_file,
)
from server.apps.files.models import File
from server.common.exceptions import ResourceNotFoundError

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def get_max_upload_bytes() -> int:
    """Get the upload size limit.

    Returns:
        Maximum accepted file size in bytes.
    """
    return getattr(settings, 'DRIVE_MAX_UPLOAD_BYTES', 100 * 1024 * 1024)


def upload_file(  # noqa: WPS211
    user: _User,
    content: Any,
    name: str,
    mime_type: str,
    size_bytes: int,
    folder_id: uuid.UUID | None = None,
) -> File:
    """Upload file to storage and create database record.

    Transaction safety: Upload to storage first, then create DB record.
    If DB transaction fails, the uploaded blob is deleted from storage
    (rollback).

    Args:
        user: Owner of the file.
        content: Uploaded file (Django ``UploadedFile``).
        name: Display name of the file.
        mime_type: Declared MIME type.
        size_bytes: Declared size in bytes.
        folder_id: Target folder ID, None for root.

    Returns:
        Created File instance.

    Raises:
        FolderNotFoundError: If the folder is absent or not owned.
        UploadTooLargeError: If the file exceeds the size limit.
        StorageError: If the blob upload fails.
    """
    if folder_id is not None:
        get_owned_folder(user, folder_id, error=FolderNotFoundError)

    limit = get_max_upload_bytes()
    actual_size = getattr(content, 'size', None) or size_bytes
    if max(actual_size, size_bytes) > limit:
        logger.warning(
            'Rejected upload of %s (%d bytes, limit %d, user: %s)',
            name,
            actual_size,
            limit,
            user.pk,
        )
        raise UploadTooLargeError(actual_size, limit)

    # Step 1: Upload to storage first
    blob = upload_blob(user.pk, folder_id, name, content)

    # Step 2: Create database record (in transaction)
    try:
        with transaction.atomic():
            file_instance = File.objects.create(
                user=user,
                folder_id=folder_id,
                name=name,
                mime_type=mime_type,
                size_bytes=size_bytes,
                url=blob.url,
                storage_path=blob.path,
                blob_id=blob.blob_id,
            )
    except Exception:
        # Rollback: Delete blob from storage since DB transaction failed
        logger.exception(
            'Database transaction failed, rolling back storage upload: %s',
            blob.path,
        )
        rollback_blob(blob.path)
        raise

    logger.info(
        'File uploaded: %s (ID: %s, folder: %s, user: %s)',
        name,
        file_instance.id,
        folder_id,
        user.pk,
    )
    return file_instance


def get_file(user: _User, file_id: uuid.UUID) -> File:
    """Fetch an active file readable by ``user``.

    Args:
        user: Acting principal.
        file_id: File ID.

    Returns:
        File instance.

    Raises:
        ResourceNotFoundError: If absent or neither owned nor shared.
    """
    return get_readable_file(user, file_id, error=ResourceNotFoundError)


def rename_file(user: _User, file_id: uuid.UUID, name: str) -> File:
    """Rename an owned file.

    Only the record changes, the blob keeps its storage path.

    Args:
        user: Acting principal.
        file_id: File ID.
        name: New display name.

    Returns:
        Updated File instance.

    Raises:
        ResourceNotFoundError: If absent or not owned.
    """
    file_instance = get_owned_file(user, file_id)
    old_name = file_instance.name
    file_instance.name = name
    file_instance.save(update_fields=['name', 'updated_at'])

    logger.info(
        'File renamed: %s -> %s (ID: %s)',
        old_name,
        name,
        file_id,
    )
    return file_instance


def move_file(
    user: _User,
    file_id: uuid.UUID,
    folder_id: uuid.UUID | None,
) -> File:
    """Move an owned file to another owned folder (or to root).

    Args:
        user: Acting principal.
        file_id: File ID.
        folder_id: Target folder ID, None for root.

    Returns:
        Updated File instance.

    Raises:
        ResourceNotFoundError: If the file is absent or not owned.
        FolderNotFoundError: If the target folder is absent or not owned.
    """
    file_instance = get_owned_file(user, file_id)
    if folder_id is not None:
        get_owned_folder(user, folder_id, error=FolderNotFoundError)

    file_instance.folder_id = folder_id
    file_instance.save(update_fields=['folder', 'updated_at'])

    logger.info('File moved: %s -> folder %s', file_id, folder_id)
    return file_instance


def set_starred(user: _User, file_id: uuid.UUID, *, starred: bool) -> File:
    """Set the starred flag of an owned, active file.

    Args:
        user: Acting principal.
        file_id: File ID.
        starred: New flag value.

    Returns:
        Updated File instance.

    Raises:
        FileRecordNotFoundError: If absent, not owned or trashed.
    """
    file_instance = get_owned_file(
        user,
        file_id,
        trashed=False,
        error=FileRecordNotFoundError,
    )
    if file_instance.starred != starred:
        file_instance.starred = starred
        file_instance.save(update_fields=['starred', 'updated_at'])
        logger.info('File %s starred=%s', file_id, starred)
    return file_instance


def record_access(user: _User, file_id: uuid.UUID) -> File:
    """Bump ``last_accessed_at`` of a file the user can read.

    Both the owner and share grantees may do this.

    Args:
        user: Acting principal.
        file_id: File ID.

    Returns:
        Updated File instance.

    Raises:
        FileRecordNotFoundError: If absent or neither owned nor shared.
    """
    file_instance = get_readable_file(user, file_id)
    file_instance.last_accessed_at = timezone.now()
    file_instance.save(update_fields=['last_accessed_at'])

    logger.debug('File accessed: %s (user: %s)', file_id, user.pk)
    return file_instance


def list_files(
    user: _User,
    folder_id: uuid.UUID | None = None,
) -> QuerySet[File]:
    """List active files directly inside a folder.

    Args:
        user: Owner of files.
        folder_id: Folder ID, None for root.

    Returns:
        QuerySet of File objects ordered by name.
    """
    return (
        File.objects.owned_by(user)
        .active()
        .in_folder(folder_id)
        .order_by('name')
    )


def list_recent_files(user: _User, limit: int | None = None) -> list[File]:
    """List the most recently accessed active files.

    Args:
        user: Owner of files.
        limit: Maximum number of files, defaults to the configured limit.

    Returns:
        Files ordered by ``last_accessed_at`` descending.
    """
    if limit is None:
        limit = getattr(settings, 'DRIVE_RECENT_FILES_LIMIT', 20)
    return list(
        File.objects.owned_by(user)
        .active()
        .filter(last_accessed_at__isnull=False)
        .order_by('-last_accessed_at')[:limit],
    )


def list_starred_files(user: _User) -> QuerySet[File]:
    """List starred active files.

    Args:
        user: Owner of files.

    Returns:
        QuerySet of File objects, newest first.
    """
    return File.objects.owned_by(user).active().filter(starred=True)

