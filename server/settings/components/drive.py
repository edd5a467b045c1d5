"""Settings for folder, file and trash behaviour."""

from server.settings.components import config

# Longest allowed chain of nested folders (root-level folder has depth 1).
# Also bounds every upward traversal of the hierarchy.
DRIVE_MAX_FOLDER_DEPTH = config(
    'DRIVE_MAX_FOLDER_DEPTH',
    cast=int,
    default=32,
)

# Number of entries returned by the "recent" listing
DRIVE_RECENT_FILES_LIMIT = config(
    'DRIVE_RECENT_FILES_LIMIT',
    cast=int,
    default=20,
)

# Largest accepted upload in bytes (100 MB)
DRIVE_MAX_UPLOAD_BYTES = config(
    'DRIVE_MAX_UPLOAD_BYTES',
    cast=int,
    default=100 * 1024 * 1024,
)

# Days a trashed file is kept before `cleanup_trash` purges it
DRIVE_TRASH_RETENTION_DAYS = config(
    'DRIVE_TRASH_RETENTION_DAYS',
    cast=int,
    default=30,
)
