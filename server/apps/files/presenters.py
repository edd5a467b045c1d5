"""JSON representations of folders, files and shares (camelCase keys)."""

from datetime import datetime
from typing import Any

from server.apps.accounts.presenters import present_user
from server.apps.files.models import File, FileShare, Folder


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _optional_id(value: Any) -> str | None:
    return str(value) if value is not None else None


def present_folder(folder: Folder) -> dict[str, Any]:
    """Folder fields, with child counts when annotated.

    Args:
        folder: Folder instance.

    Returns:
        Dictionary ready for the success envelope.
    """
    data: dict[str, Any] = {
        'id': str(folder.id),
        'name': folder.name,
        'parentId': _optional_id(folder.parent_id),
        'createdAt': _timestamp(folder.created_at),
        'updatedAt': _timestamp(folder.updated_at),
    }
    if hasattr(folder, 'child_count'):
        data['counts'] = {
            'children': folder.child_count,
            'files': folder.file_count,
        }
    return data


def present_folder_detail(
    folder: Folder,
    path: list[Folder],
) -> dict[str, Any]:
    """Folder fields plus its breadcrumb path.

    Args:
        folder: Folder annotated with child counts.
        path: Folders from root to ``folder``.

    Returns:
        Dictionary ready for the success envelope.
    """
    data = present_folder(folder)
    data['path'] = [
        {'id': str(ancestor.id), 'name': ancestor.name}
        for ancestor in path
    ]
    return data


def present_file(
    file_instance: File,
    permission: str | None = None,
) -> dict[str, Any]:
    """File fields.

    Args:
        file_instance: File instance.
        permission: Grant of a non-owner viewer, if any.

    Returns:
        Dictionary ready for the success envelope.
    """
    data: dict[str, Any] = {
        'id': str(file_instance.id),
        'name': file_instance.name,
        'type': file_instance.mime_type,
        'size': file_instance.size_bytes,
        'url': file_instance.url,
        'storagePath': file_instance.storage_path,
        'blobId': file_instance.blob_id,
        'folderId': _optional_id(file_instance.folder_id),
        'userId': str(file_instance.user_id),
        'starred': file_instance.starred,
        'trashed': file_instance.trashed,
        'trashedAt': _timestamp(file_instance.trashed_at),
        'lastAccessedAt': _timestamp(file_instance.last_accessed_at),
        'createdAt': _timestamp(file_instance.created_at),
        'updatedAt': _timestamp(file_instance.updated_at),
    }
    if permission is not None:
        data['permission'] = permission
    return data


def present_listing(
    folders: list[Folder],
    files: list[File],
) -> dict[str, Any]:
    """Combined folder and file listing."""
    return {
        'folders': [present_folder(folder) for folder in folders],
        'files': [present_file(file_instance) for file_instance in files],
    }


def present_share(share: FileShare) -> dict[str, Any]:
    """A grant as seen by the file owner."""
    return {
        'id': str(share.id),
        'fileId': str(share.file_id),
        'permission': share.permission,
        'user': present_user(share.user),
        'createdAt': _timestamp(share.created_at),
        'updatedAt': _timestamp(share.updated_at),
    }


def present_shared_with(share: FileShare) -> dict[str, Any]:
    """A grant as seen by its target, with the file and its owner."""
    return {
        'id': str(share.id),
        'permission': share.permission,
        'file': present_file(share.file),
        'owner': present_user(share.file.user),
        'createdAt': _timestamp(share.created_at),
    }
