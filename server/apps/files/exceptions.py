"""Exceptions for files app.

Ownership failures are reported exactly like missing resources, so a
caller cannot probe for other users' folders, files or shares.
"""

from server.common.exceptions import ApiError, ResourceNotFoundError


class FolderNotFoundError(ResourceNotFoundError):
    """Raised when a target folder for a file is absent or not owned."""

    code = 'FOLDER_001'
    default_message = 'Folder not found'


class ParentFolderNotFoundError(ResourceNotFoundError):
    """Raised when a parent folder is absent or not owned."""

    code = 'FOLDER_002'
    default_message = 'Parent folder not found or access denied'


class SelfParentError(ApiError):
    """Raised when a folder would become its own parent."""

    code = 'FOLDER_003'
    default_message = 'Folder cannot be its own parent'


class FolderNotEmptyError(ApiError):
    """Raised when deleting a folder that has child folders or files."""

    code = 'FOLDER_004'
    default_message = 'Folder is not empty'


class FolderCycleError(ApiError):
    """Raised when a folder would be moved below one of its descendants."""

    code = 'FOLDER_005'
    default_message = 'Folder cannot be moved into its own subfolder'


class FolderDepthExceededError(ApiError):
    """Raised when a create or move would nest folders too deeply."""

    code = 'FOLDER_006'
    default_message = 'Folder nesting is too deep'


class FolderHierarchyCorruptedError(ApiError):
    """Raised when walking up the hierarchy exceeds the depth bound."""

    status_code = 500
    code = 'FOLDER_007'
    default_message = 'Folder hierarchy is corrupted'


class FileRecordNotFoundError(ResourceNotFoundError):
    """Raised when an active file is absent or not accessible."""

    code = 'FILE_001'
    default_message = 'File not found'


class FileNotInTrashError(ResourceNotFoundError):
    """Raised when restoring a file that is not in the owner's trash."""

    code = 'FILE_002'
    default_message = 'File not found in trash'


class FileNotTrashedError(ApiError):
    """Raised when permanently deleting a file outside the trash."""

    code = 'FILE_003'
    default_message = 'File must be in trash before it can be deleted'


class UploadTooLargeError(ApiError):
    """Raised when an upload exceeds the configured size limit."""

    status_code = 413
    code = 'FILE_004'

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        """Initialize UploadTooLargeError.

        Args:
            size_bytes: Size of the rejected upload.
            limit_bytes: Configured maximum.
        """
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f'File too large: {size_bytes} bytes '
            f'(limit: {limit_bytes} bytes)',
        )


class MissingUploadPartsError(ApiError):
    """Raised when a multipart upload lacks the file or its metadata."""

    code = 'VALIDATION_002'
    default_message = 'File and metadata are required'


class UserNotFoundError(ResourceNotFoundError):
    """Raised when the share target email has no account."""

    code = 'USER_001'
    default_message = 'User not found'


class SelfShareError(ApiError):
    """Raised when an owner shares a file with themselves."""

    code = 'SHARE_001'
    default_message = 'Cannot share with yourself'


class ShareNotFoundError(ResourceNotFoundError):
    """Raised when a share does not belong to the caller's file."""

    code = 'SHARE_001'
    default_message = 'Share not found'
