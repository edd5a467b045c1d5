"""Blob storage gateway backed by S3-compatible storage."""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, final, override

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from botocore.exceptions import ConnectionError as BotoConnectionError
from botocore.exceptions import ReadTimeoutError
from django.core.files.storage import default_storage
from storages.backends.s3 import S3Storage

from server.apps.files.infrastructure.metadata import (
    build_storage_path,
    extract_blob_id,
    validate_storage_path,
)
from server.common.exceptions import StorageError, StorageUnavailableError

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for user files.

    Extends django-storages S3Storage with:
    - Transaction rollback support for failed DB operations
    - Enhanced error logging
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used (may differ from name if conflicts).

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Deleting a missing object succeeds, so retries are safe.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def rollback_upload(self, name: str) -> None:
        """Delete uploaded file for DB transaction rollback.

        This method is called when a database transaction fails after
        a file has been successfully uploaded to S3. It attempts to
        delete the file to maintain consistency.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised, as the DB rollback has already occurred.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            # The blob stays in storage without a record
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )


@dataclass(frozen=True, slots=True)
class BlobLocation:
    """Where an uploaded blob lives."""

    url: str
    path: str
    blob_id: str


def _get_storage() -> FileStorage:
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


@contextmanager
def _storage_errors(operation: str, path: str) -> Iterator[None]:
    """Translate S3 client failures into API errors.

    Args:
        operation: Operation name for logs.
        path: Storage path involved.

    Raises:
        StorageUnavailableError: On connection failures and timeouts.
        StorageError: On any other S3 failure.
    """
    try:
        yield
    except (BotoConnectionError, ReadTimeoutError) as error:
        logger.error('Storage unreachable during %s: %s', operation, path)
        raise StorageUnavailableError() from error
    except (Boto3Error, BotoCoreError, ClientError, OSError) as error:
        logger.error('Storage %s failed: %s', operation, path)
        raise StorageError() from error


def upload_blob(
    user_id: uuid.UUID,
    folder_id: uuid.UUID | None,
    filename: str,
    content: Any,
) -> BlobLocation:
    """Store uploaded bytes under a path namespaced by owner and folder.

    Args:
        user_id: Owner's ID.
        folder_id: Target folder ID or None for root.
        filename: Display name of the file.
        content: Django ``File``/``UploadedFile``.

    Returns:
        Locator of the stored blob.

    Raises:
        StorageError: If the upload fails.
    """
    storage_path = build_storage_path(user_id, folder_id, filename)
    validate_storage_path(user_id, storage_path)

    storage = _get_storage()
    with _storage_errors('upload', storage_path):
        saved_name = storage.save(storage_path, content)
        url = storage.url(saved_name)

    return BlobLocation(
        url=url,
        path=saved_name,
        blob_id=extract_blob_id(url),
    )


def delete_blob(storage_path: str) -> None:
    """Delete a blob.

    Args:
        storage_path: Storage path of the blob.

    Raises:
        StorageError: If the deletion fails.
    """
    with _storage_errors('delete', storage_path):
        _get_storage().delete(storage_path)


def blob_exists(storage_path: str) -> bool:
    """Check whether a blob is still present in storage.

    Args:
        storage_path: Storage path of the blob.

    Returns:
        True if the object exists.

    Raises:
        StorageError: If storage cannot answer.
    """
    with _storage_errors('exists', storage_path):
        return _get_storage().exists(storage_path)


def rollback_blob(storage_path: str) -> None:
    """Best-effort removal of a blob whose record was never written."""
    _get_storage().rollback_upload(storage_path)
