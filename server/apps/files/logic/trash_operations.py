"""Business logic for trash (soft delete) and permanent deletion.

Permanent deletion spans two stores and runs in two phases:

1. ``purge_requested_at`` is set on the record.
2. The blob is deleted; on failure the record stays (marker included)
   and the error propagates.
3. The record is deleted.

Rows left with the marker set are finished by ``reconcile_pending_purges``.
Deleting a blob that is already gone succeeds, so every phase is safe to
repeat.
"""

import logging
import uuid
from datetime import timedelta
from typing import Any

from django.conf import settings
from django.db.models import QuerySet
from django.utils import timezone

from server.apps.files.exceptions import (
    FileNotInTrashError,
    FileNotTrashedError,
    FileRecordNotFoundError,
)
from server.apps.files.infrastructure.storage import delete_blob
from server.apps.files.logic.access import get_owned_file
from server.apps.files.models import File

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def trash_file(user: _User, file_id: uuid.UUID) -> File:
    """Move an owned, active file to trash (soft delete).

    Args:
        user: Acting principal.
        file_id: ID of file to soft delete.

    Returns:
        Updated File instance.

    Raises:
        FileRecordNotFoundError: If absent, not owned or already trashed.
    """
    file_instance = get_owned_file(
        user,
        file_id,
        trashed=False,
        error=FileRecordNotFoundError,
    )
    file_instance.trashed = True
    file_instance.trashed_at = timezone.now()
    file_instance.save(update_fields=['trashed', 'trashed_at', 'updated_at'])

    logger.info(
        'File moved to trash: %s (ID: %s)',
        file_instance.name,
        file_id,
    )
    return file_instance


def restore_file(user: _User, file_id: uuid.UUID) -> File:
    """Restore an owned file from trash.

    Args:
        user: Acting principal.
        file_id: ID of file to restore.

    Returns:
        Updated File instance.

    Raises:
        FileNotInTrashError: If absent, not owned, not trashed or
            already being purged.
    """
    file_instance = get_owned_file(
        user,
        file_id,
        trashed=True,
        error=FileNotInTrashError,
    )
    if file_instance.purge_requested_at is not None:
        # The blob may already be gone, only reconcile_purges may finish it
        logger.warning(
            'Refusing to restore file with pending purge: %s',
            file_id,
        )
        raise FileNotInTrashError()
    file_instance.trashed = False
    file_instance.trashed_at = None
    file_instance.save(update_fields=['trashed', 'trashed_at', 'updated_at'])

    logger.info(
        'File restored: %s (ID: %s)',
        file_instance.name,
        file_id,
    )
    return file_instance


def permanent_delete_file(user: _User, file_id: uuid.UUID) -> None:
    """Permanently delete an owned file from trash.

    Args:
        user: Acting principal.
        file_id: ID of file to permanently delete.

    Raises:
        ResourceNotFoundError: If absent or not owned.
        FileNotTrashedError: If the file is not in trash.
        StorageError: If the blob deletion fails (the record is kept).
    """
    file_instance = get_owned_file(user, file_id)
    if not file_instance.trashed:
        logger.warning(
            'Rejected permanent delete of active file %s',
            file_id,
        )
        raise FileNotTrashedError()

    purge_file(file_instance)


def purge_file(file_instance: File) -> None:
    """Delete a file's blob, then its record.

    Args:
        file_instance: File to purge.

    Raises:
        StorageError: If the blob deletion fails (the record is kept).
    """
    if file_instance.purge_requested_at is None:
        file_instance.purge_requested_at = timezone.now()
        file_instance.save(update_fields=['purge_requested_at'])

    try:
        delete_blob(file_instance.storage_path)
    except Exception:
        logger.exception(
            'Blob deletion failed, keeping record for reconciliation: %s',
            file_instance.id,
        )
        raise

    file_id = file_instance.id
    file_instance.delete()

    logger.info(
        'File permanently deleted: %s (ID: %s, size: %d)',
        file_instance.name,
        file_id,
        file_instance.size_bytes,
    )


def list_trash(user: _User) -> QuerySet[File]:
    """List all files in user's trash.

    Args:
        user: User whose trash to list.

    Returns:
        QuerySet of trashed files, most recently trashed first.
    """
    return File.objects.owned_by(user).in_trash().order_by('-trashed_at')


def get_retention_days() -> int:
    """Get how long trashed files are kept.

    Returns:
        Retention period in days.
    """
    return getattr(settings, 'DRIVE_TRASH_RETENTION_DAYS', 30)


def expired_trash(days: int | None = None) -> QuerySet[File]:
    """Files trashed longer than the retention period.

    Args:
        days: Retention period, defaults to the configured one.

    Returns:
        QuerySet of files ordered by ``trashed_at``, oldest first.
    """
    if days is None:
        days = get_retention_days()
    cutoff = timezone.now() - timedelta(days=days)
    return File.objects.in_trash().filter(
        trashed_at__lte=cutoff,
    ).order_by('trashed_at')


def pending_purges() -> QuerySet[File]:
    """Files whose purge started but never finished.

    Returns:
        QuerySet of files ordered by ``purge_requested_at``.
    """
    return File.objects.in_trash().filter(
        purge_requested_at__isnull=False,
    ).order_by('purge_requested_at')


def reconcile_pending_purges(limit: int | None = None) -> tuple[int, int]:
    """Finish interrupted purges.

    Args:
        limit: Maximum number of files to process.

    Returns:
        Tuple of (purged, failed) counts.
    """
    files = pending_purges()
    if limit is not None:
        files = files[:limit]

    purged = 0
    failed = 0
    for file_instance in files:
        try:
            purge_file(file_instance)
        except Exception:
            logger.exception(
                'Failed to reconcile purge of file: %s',
                file_instance.id,
            )
            failed += 1
        else:
            purged += 1

    logger.info(
        'Purge reconciliation finished: %d purged, %d failed',
        purged,
        failed,
    )
    return purged, failed
