"""Business logic layer for files app.

This package contains all business logic for the file catalog:
- Resolving which category a stored file belongs to
- Building the user's file catalog from storage and categories
- Upload, delete and recategorize as ordered multi-step operations

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).

Reference: https://github.com/dry-python
for decoupling business logic from Django views.
"""
