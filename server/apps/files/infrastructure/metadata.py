"""Storage path and blob locator helpers."""

import secrets
import uuid
from datetime import UTC, datetime
from pathlib import PurePosixPath
from typing import Final

from django.core.exceptions import SuspiciousFileOperation, ValidationError
from django.utils.text import get_valid_filename

_TOKEN_BYTES: Final = 4
_FALLBACK_FILENAME: Final = 'file'


def generate_upload_token() -> str:
    """Generate a unique prefix for an uploaded blob name.

    Combines a UTC timestamp with microseconds and a random suffix,
    so identically named uploads never collide.

    Returns:
        Token such as '20260131T143052123456-9f2c4a1b'.
    """
    timestamp = datetime.now(tz=UTC).strftime('%Y%m%dT%H%M%S%f')
    return f'{timestamp}-{secrets.token_hex(_TOKEN_BYTES)}'


def safe_filename(filename: str) -> str:
    """Reduce a user supplied name to a single safe path component.

    Args:
        filename: Name as provided by the client.

    Returns:
        Filename without directories or unsafe characters.
    """
    base_name = PurePosixPath(filename.replace('\\', '/')).name
    try:
        return get_valid_filename(base_name)
    except SuspiciousFileOperation:
        return _FALLBACK_FILENAME


def build_storage_path(
    user_id: uuid.UUID,
    folder_id: uuid.UUID | None,
    filename: str,
) -> str:
    """Build the storage key for a new upload.

    Example: '<user>/<folder>/20260131T143052123456-9f2c4a1b-report.pdf'

    Args:
        user_id: Owner's ID.
        folder_id: Target folder ID or None for root.
        filename: Client filename.

    Returns:
        Storage path namespaced by owner (and folder).
    """
    blob_name = f'{generate_upload_token()}-{safe_filename(filename)}'
    if folder_id is None:
        return f'{user_id}/{blob_name}'
    return f'{user_id}/{folder_id}/{blob_name}'


def validate_storage_path(user_id: uuid.UUID, storage_path: str) -> None:
    """Validate storage path follows user isolation rules.

    Ensures the storage path starts with the user's ID to maintain
    multi-user isolation. This is a critical security check.

    Args:
        user_id: Owner's user ID.
        storage_path: Proposed storage path.

    Raises:
        ValidationError: If path doesn't start with user_id or is invalid.
    """
    if not storage_path:
        raise ValidationError('Storage path cannot be empty')

    path_parts = PurePosixPath(storage_path).parts
    if len(path_parts) < 2:
        raise ValidationError('Storage path must contain a file name')

    if '..' in path_parts:
        raise ValidationError('Storage path cannot contain ".."')

    if path_parts[0] != str(user_id):
        raise ValidationError(
            f'Storage path owner ({path_parts[0]}) does not match '
            f'owner ({user_id})',
        )


def extract_blob_id(url: str) -> str:
    """Extract the blob identifier (last URL segment).

    Args:
        url: Public blob URL.

    Returns:
        Last path segment of the URL.
    """
    return url.rstrip('/').rsplit('/', 1)[-1]
