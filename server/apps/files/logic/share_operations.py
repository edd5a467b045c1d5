"""Business logic for sharing files with other users."""

import logging
import uuid
from typing import Any

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import QuerySet

from server.apps.accounts.models import normalize_email_address
from server.apps.files.exceptions import (
    FileRecordNotFoundError,
    SelfShareError,
    ShareNotFoundError,
    UserNotFoundError,
)
from server.apps.files.logic.access import get_owned_file
from server.apps.files.models import FileShare, SharePermission

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def share_file(
    user: _User,
    file_id: uuid.UUID,
    email: str,
    permission: str = SharePermission.VIEW,
) -> FileShare:
    """Grant another user access to an owned file.

    Sharing again with the same user replaces the permission of the
    existing grant.

    Args:
        user: Owner of the file.
        file_id: File ID.
        email: Email of the user to share with.
        permission: ``VIEW`` or ``EDIT``.

    Returns:
        Created or updated FileShare.

    Raises:
        FileRecordNotFoundError: If the file is absent, not owned or trashed.
        UserNotFoundError: If no account has that email.
        SelfShareError: If the email is the owner's own.
    """
    file_instance = get_owned_file(
        user,
        file_id,
        trashed=False,
        error=FileRecordNotFoundError,
    )

    target = get_user_model().objects.filter(
        email=normalize_email_address(email),
    ).first()
    if target is None:
        raise UserNotFoundError()
    if target.pk == user.pk:
        logger.warning('Rejected self-share of file %s', file_id)
        raise SelfShareError()

    with transaction.atomic():
        share, created = FileShare.objects.update_or_create(
            file=file_instance,
            user=target,
            defaults={'permission': permission},
        )

    logger.info(
        'File %s %s with user %s (%s)',
        file_id,
        'shared' if created else 'share updated',
        target.pk,
        permission,
    )
    return share


def list_file_shares(user: _User, file_id: uuid.UUID) -> QuerySet[FileShare]:
    """List grants on an owned file.

    Args:
        user: Owner of the file.
        file_id: File ID.

    Returns:
        QuerySet of FileShare with grantees loaded.

    Raises:
        FileRecordNotFoundError: If the file is absent, not owned or trashed.
    """
    file_instance = get_owned_file(
        user,
        file_id,
        trashed=False,
        error=FileRecordNotFoundError,
    )
    return FileShare.objects.filter(file=file_instance).select_related('user')


def revoke_share(
    user: _User,
    file_id: uuid.UUID,
    share_id: uuid.UUID,
) -> None:
    """Delete a grant on an owned file.

    Only the file owner may revoke.

    Args:
        user: Owner of the file.
        file_id: File ID.
        share_id: FileShare ID.

    Raises:
        FileRecordNotFoundError: If the file is absent, not owned or trashed.
        ShareNotFoundError: If the grant is not attached to that file.
    """
    file_instance = get_owned_file(
        user,
        file_id,
        trashed=False,
        error=FileRecordNotFoundError,
    )
    deleted, _ = FileShare.objects.filter(
        id=share_id,
        file=file_instance,
    ).delete()
    if not deleted:
        raise ShareNotFoundError()

    logger.info('Share revoked: %s (file: %s)', share_id, file_id)


def list_shared_with(user: _User) -> QuerySet[FileShare]:
    """List grants where ``user`` is the target.

    Files in their owner's trash are left out.

    Args:
        user: Grantee.

    Returns:
        QuerySet of FileShare with file and owner loaded, newest first.
    """
    return (
        FileShare.objects.filter(user=user, file__trashed=False)
        .select_related('file', 'file__user')
        .order_by('-created_at')
    )
