"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Custom storage backend (S3/MinIO/R2)
- Storage key, size and preview helpers

Keep infrastructure concerns separate from business logic.
"""
