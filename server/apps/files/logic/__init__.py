"""Business logic layer for files app.

This package contains all business logic for files and folders:
- Ownership and shared-access lookups (``access``)
- Folder hierarchy: create, rename, move, delete, listing, paths
- File lifecycle: upload, rename, move, star, access tracking
- Trash: soft delete, restore, two-phase permanent delete
- Sharing: grant, list, revoke

Every function takes the acting principal as an explicit ``user``
argument; nothing reads the request or session.

All business logic should be implemented here, separate from
models (data layer), infrastructure (external systems) and views.
"""
