"""Infrastructure layer for files app.

This package contains integrations with external systems:
- S3-compatible blob storage (upload, delete, existence checks)
- Storage path and blob locator helpers

Keep infrastructure concerns separate from business logic.
"""
