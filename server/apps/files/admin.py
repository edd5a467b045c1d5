"""Django admin configuration for files app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.models import File, FileShare, Folder


def _format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'


@admin.register(Folder)
class FolderAdmin(admin.ModelAdmin):
    """Admin interface for Folder model."""

    list_display = [
        'name',
        'user',
        'parent',
        'trashed',
        'created_at',
    ]

    list_filter = [
        'trashed',
        'created_at',
    ]

    search_fields = [
        'name',
        'user__email',
    ]

    readonly_fields = [
        'id',
        'created_at',
        'updated_at',
    ]

    raw_id_fields = ['user', 'parent']

    def get_queryset(self, request: HttpRequest) -> QuerySet[Folder]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user', 'parent')


@admin.register(File)
class FileAdmin(admin.ModelAdmin):
    """Admin interface for File model.

    Blob locators are read-only: editing them here would detach the
    record from its stored bytes.
    """

    list_display = [
        'name',
        'user',
        'folder',
        'size_display',
        'mime_type',
        'starred',
        'trashed',
        'created_at',
    ]

    list_filter = [
        'mime_type',
        'starred',
        'trashed',
        'created_at',
    ]

    search_fields = [
        'name',
        'storage_path',
        'user__email',
    ]

    readonly_fields = [
        'id',
        'url',
        'storage_path',
        'blob_id',
        'size_bytes',
        'mime_type',
        'purge_requested_at',
        'created_at',
        'updated_at',
    ]

    raw_id_fields = ['user', 'folder']

    fieldsets = (
        ('File Information', {
            'fields': ('id', 'name', 'user', 'folder'),
        }),
        ('Storage', {
            'fields': (
                'url',
                'storage_path',
                'blob_id',
                'size_bytes',
                'mime_type',
            ),
        }),
        ('State', {
            'fields': (
                'starred',
                'trashed',
                'trashed_at',
                'last_accessed_at',
                'purge_requested_at',
            ),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
        }),
    )

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string.
        """
        return _format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user', 'folder')


@admin.register(FileShare)
class FileShareAdmin(admin.ModelAdmin):
    """Admin interface for FileShare model."""

    list_display = [
        'file',
        'owner_display',
        'user',
        'permission',
        'created_at',
    ]

    list_filter = [
        'permission',
        'created_at',
    ]

    search_fields = [
        'file__name',
        'user__email',
    ]

    raw_id_fields = ['file', 'user']

    readonly_fields = ['created_at', 'updated_at']

    def owner_display(self, obj: FileShare) -> str:
        """Display the owner of the shared file.

        Args:
            obj: FileShare instance.

        Returns:
            Owner's email.
        """
        return obj.file.user.email
    owner_display.short_description = 'Owner'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[FileShare]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related(
            'file__user',
            'user',
        )
