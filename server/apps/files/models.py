"""Database models for files app."""

import uuid
from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models
from django.db.models import Q

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_MIME_TYPE_MAX_LENGTH: Final = 255
_URL_MAX_LENGTH: Final = 1024
_STORAGE_PATH_MAX_LENGTH: Final = 1024
_PERMISSION_MAX_LENGTH: Final = 4


@final
class Folder(models.Model):
    """Folder in a user's hierarchy.

    ``parent`` is None for root-level folders. A parent always belongs
    to the same user and a folder can never be its own parent; both
    rules are enforced by ``folder_operations`` and the latter also by
    a database check constraint.

    Deletion is ``RESTRICT``: a folder still referenced by child
    folders or files cannot be removed.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
    )

    # Owner relationship (immutable)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='folders',
        db_index=True,
    )

    parent = models.ForeignKey(
        'self',
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name='children',
        help_text='Containing folder, empty for root',
    )

    # Soft-delete markers
    trashed = models.BooleanField(default=False)
    trashed_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Folder'  # type: ignore[mutable-override]
        verbose_name_plural = 'Folders'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['name']

        indexes: ClassVar[list[models.Index]] = [
            # Optimize directory listing queries
            models.Index(
                fields=['user', 'parent'],
                name='folders_user_parent_idx',
            ),
        ]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.CheckConstraint(
                condition=~Q(parent=models.F('id')),
                name='folders_not_own_parent',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user}:{self.name}'


class FileQuerySet(models.QuerySet['File']):
    """Reusable filters for File queries."""

    def owned_by(self, user: object) -> 'FileQuerySet':
        """Files whose owner is ``user``."""
        return self.filter(user=user)

    def active(self) -> 'FileQuerySet':
        """Files not in the trash."""
        return self.filter(trashed=False)

    def in_trash(self) -> 'FileQuerySet':
        """Files in the trash."""
        return self.filter(trashed=True)

    def in_folder(self, folder_id: uuid.UUID | None) -> 'FileQuerySet':
        """Files directly inside a folder (None means root)."""
        if folder_id is None:
            return self.filter(folder__isnull=True)
        return self.filter(folder_id=folder_id)

    def readable_by(self, user: object) -> 'FileQuerySet':
        """Files owned by or shared with ``user``."""
        return self.filter(
            Q(user=user) | Q(shares__user=user),
        ).distinct()


@final
class File(models.Model):
    """File record pointing at a blob in S3-compatible storage.

    Blob bytes and the record are removed together by
    ``trash_operations.permanent_delete_file``: the blob goes first,
    and ``purge_requested_at`` marks rows whose purge has started so an
    interrupted purge can be finished by ``reconcile_purges``.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        help_text='MIME type declared at upload',
    )

    size_bytes = models.PositiveBigIntegerField(
        help_text='File size in bytes',
    )

    # Blob locator
    url = models.URLField(
        max_length=_URL_MAX_LENGTH,
        help_text='Public URL of the blob',
    )

    storage_path = models.CharField(
        max_length=_STORAGE_PATH_MAX_LENGTH,
        help_text='Path in storage: {user_id}/[{folder_id}/]{token}-{name}',
    )

    blob_id = models.CharField(
        max_length=_STORAGE_PATH_MAX_LENGTH,
        help_text='Last segment of the blob URL',
    )

    # Owner relationship
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    folder = models.ForeignKey(
        Folder,
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name='files',
        help_text='Containing folder, empty for root',
    )

    starred = models.BooleanField(default=False)

    # Soft-delete markers
    trashed = models.BooleanField(default=False)
    trashed_at = models.DateTimeField(null=True, blank=True)

    last_accessed_at = models.DateTimeField(null=True, blank=True)

    # Set once the blob deletion of a permanent delete has started
    purge_requested_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = FileQuerySet.as_manager()

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at']

        indexes: ClassVar[list[models.Index]] = [
            # Optimize directory listing queries
            models.Index(
                fields=['user', 'folder', 'trashed'],
                name='files_user_folder_idx',
            ),
            # Optimize recent files queries
            models.Index(
                fields=['user', '-last_accessed_at'],
                name='files_user_recent_idx',
            ),
        ]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.CheckConstraint(
                condition=Q(size_bytes__gt=0),
                name='files_size_positive',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user}:{self.name}'


class SharePermission(models.TextChoices):
    """Access level granted by a FileShare."""

    VIEW = 'VIEW', 'View'
    EDIT = 'EDIT', 'Edit'


@final
class FileShare(models.Model):
    """Grant letting another user access a file.

    One grant per (file, user): sharing again updates ``permission``.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    file = models.ForeignKey(
        File,
        on_delete=models.CASCADE,
        related_name='shares',
    )

    # Grant target (never the file owner)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='file_shares',
        db_index=True,
    )

    permission = models.CharField(
        max_length=_PERMISSION_MAX_LENGTH,
        choices=SharePermission.choices,
        default=SharePermission.VIEW,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File Share'  # type: ignore[mutable-override]
        verbose_name_plural = 'File Shares'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at']

        constraints: ClassVar[list[models.BaseConstraint]] = [
            # One grant per file and user
            models.UniqueConstraint(
                fields=['file', 'user'],
                name='file_shares_file_user_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.file_id}->{self.user}:{self.permission}'
