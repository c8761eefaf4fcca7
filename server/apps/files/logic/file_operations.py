"""Business logic for file upload, delete and recategorize.

Every operation writes to two independent stores (blob storage and
category documents) as an ordered saga. Nothing is rolled back: after
a failure the caller refreshes the catalog to see the real state.
"""

import logging
from typing import Any

from server.apps.files.exceptions import NotFound, PreconditionFailed
from server.apps.files.infrastructure.metadata import (
    build_storage_key,
    extract_filename,
)
from server.apps.files.infrastructure.storage import get_storage
from server.apps.files.logic.category_operations import (
    add_file_to_category,
    category_exists,
    delete_attachments_for,
    remove_file_from_category,
)
from server.apps.files.logic.saga import SagaStep, run_saga

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def upload_file(user: _User, file_obj: Any, category_id: int | None) -> str:
    """Upload a file and file it under a category.

    Steps:
    1. Write the blob to "<owner>'s Files/<name>" (overwrites silently).
    2. Get its download URL.
    3. Add the URL to the category's files.

    A failure in step 1 leaves nothing behind. A failure after step 1
    leaves the file stored but uncategorized.

    Args:
        user: Owner of the file.
        file_obj: File-like object with a ``name``.
        category_id: Target category id.

    Returns:
        Download URL of the uploaded file.

    Raises:
        PreconditionFailed: If the file or category id is missing.
        NotFound: If the user has no such category.
        StoreUnavailable: If a store call fails.
    """
    if file_obj is None or not getattr(file_obj, 'name', None):
        raise PreconditionFailed('file')
    if category_id is None:
        raise PreconditionFailed('category_id')
    if not category_exists(user, category_id):
        raise NotFound('category', category_id)

    storage = get_storage()
    storage_key = build_storage_key(user, extract_filename(file_obj.name))
    uploaded: dict[str, str] = {}

    def put_blob() -> None:
        uploaded['key'] = storage.put(storage_key, file_obj)

    def get_locator() -> None:
        uploaded['url'] = storage.download_locator(uploaded['key'])

    def link_category() -> None:
        add_file_to_category(user, category_id, uploaded['url'])

    try:
        run_saga('upload', [
            SagaStep('put_blob', put_blob),
            SagaStep('get_locator', get_locator),
            SagaStep('link_category', link_category),
        ])
    except Exception:
        if 'key' in uploaded:
            logger.warning(
                'Uploaded file left uncategorized: %s',
                uploaded['key'],
            )
        raise

    return uploaded['url']


def delete_file(
    user: _User,
    file_name: str,
    file_url: str,
    category_id: int | None,
) -> None:
    """Delete a file and every reference to it.

    Steps:
    1. Delete the blob (NotFound if absent).
    2. Remove the URL from the category's files, if a category is given.
    3. Delete attachment records pointing at the URL.

    Steps 2 and 3 run only after step 1 succeeded. If one of them
    fails, references to the deleted file stay behind; readers
    tolerate them.

    Args:
        user: Owner of the file.
        file_name: Display name of the file.
        file_url: Download URL of the file.
        category_id: Category currently holding the file, or None.

    Raises:
        PreconditionFailed: If the file name or URL is missing.
        NotFound: If the file or category does not exist.
        StoreUnavailable: If a store call fails.
    """
    if not file_name:
        raise PreconditionFailed('file_name')
    if not file_url:
        raise PreconditionFailed('file_url')

    storage = get_storage()
    storage_key = build_storage_key(user, file_name)

    steps = [SagaStep('delete_blob', lambda: storage.remove(storage_key))]
    if category_id is not None:
        steps.append(SagaStep(
            'unlink_category',
            lambda: remove_file_from_category(user, category_id, file_url),
        ))
    steps.append(SagaStep(
        'delete_attachments',
        lambda: delete_attachments_for(file_url),
    ))

    run_saga('delete', steps)


def recategorize_file(
    user: _User,
    file_url: str,
    old_category_id: int | None,
    new_category_id: int | None,
) -> None:
    """Move a file from one category to another.

    Removal from the old category happens first, so a failure can
    leave the file uncategorized but never listed twice.

    Args:
        user: Owner of the file and categories.
        file_url: Download URL of the file.
        old_category_id: Category currently holding the file, or None.
        new_category_id: Target category id.

    Raises:
        PreconditionFailed: If the URL or new category id is missing.
        NotFound: If either category does not exist.
        StoreUnavailable: If a store call fails.
    """
    if not file_url:
        raise PreconditionFailed('file_url')
    if new_category_id is None:
        raise PreconditionFailed('new_category_id')
    if not category_exists(user, new_category_id):
        raise NotFound('category', new_category_id)

    steps = []
    if old_category_id is not None:
        steps.append(SagaStep(
            'unlink_old_category',
            lambda: remove_file_from_category(user, old_category_id, file_url),
        ))
    steps.append(SagaStep(
        'link_new_category',
        lambda: add_file_to_category(user, new_category_id, file_url),
    ))

    try:
        completed = run_saga('recategorize', steps)
    except Exception:
        if old_category_id is not None:
            logger.warning(
                'File may be left uncategorized after failed move: %s',
                file_url,
            )
        raise

    logger.info(
        'File recategorized: %s (%s -> %s, steps: %d)',
        file_url,
        old_category_id,
        new_category_id,
        len(completed),
    )
