"""Business logic for category membership and attachment records."""

import logging
from typing import Any

from django.db import DatabaseError, transaction

from server.apps.files.exceptions import NotFound, StoreUnavailable
from server.apps.files.models import Category, CategoryAttachment

# User type for Django's dynamic user model
_User = Any

_CATEGORY_STORE = 'category'
_FILES_FIELD = 'files'

logger = logging.getLogger(__name__)


def list_user_categories(user: _User) -> list[Category]:
    """Fetch every category owned by the user.

    Args:
        user: Category owner.

    Returns:
        Categories in id order.

    Raises:
        StoreUnavailable: If the query fails.
    """
    try:
        categories = list(
            Category.objects.filter(created_by=user).order_by('id'),
        )
    except DatabaseError as error:
        logger.exception('Failed to fetch categories for user %s', user.pk)
        raise StoreUnavailable(
            _CATEGORY_STORE,
            'read_all',
            f'user={user.pk}',
        ) from error

    logger.debug(
        'Fetched %d categories for user %s',
        len(categories),
        user.pk,
    )
    return categories


def category_exists(user: _User, category_id: int) -> bool:
    """Check that the category exists and belongs to the user.

    Args:
        user: Expected category owner.
        category_id: Category id.

    Returns:
        True if the user owns a category with this id.

    Raises:
        StoreUnavailable: If the query fails.
    """
    try:
        return Category.objects.filter(
            id=category_id,
            created_by=user,
        ).exists()
    except DatabaseError as error:
        raise StoreUnavailable(
            _CATEGORY_STORE,
            'read',
            str(category_id),
        ) from error


def add_file_to_category(
    user: _User,
    category_id: int,
    file_url: str,
) -> bool:
    """Add a download URL to a category's files (set union).

    Adding a URL that is already listed is a no-op.

    Args:
        user: Category owner.
        category_id: Category id.
        file_url: Download URL of the file.

    Returns:
        True if the list changed.

    Raises:
        NotFound: If the user has no category with this id.
        StoreUnavailable: If the update fails.
    """
    try:
        with transaction.atomic():
            category = _get_locked_category(user, category_id)
            files = list(category.listed_files)
            if file_url in files:
                logger.debug(
                    'File already in category %s: %s',
                    category_id,
                    file_url,
                )
                return False
            files.append(file_url)
            category.files = files
            category.save(update_fields=[_FILES_FIELD])
    except DatabaseError as error:
        logger.exception('Failed to add file to category %s', category_id)
        raise StoreUnavailable(
            _CATEGORY_STORE,
            'array_add',
            str(category_id),
        ) from error

    logger.info('Added file to category %s: %s', category_id, file_url)
    return True


def remove_file_from_category(
    user: _User,
    category_id: int,
    file_url: str,
) -> bool:
    """Remove a download URL from a category's files (set difference).

    Every occurrence is removed. Removing a URL that is not listed
    is a no-op.

    Args:
        user: Category owner.
        category_id: Category id.
        file_url: Download URL of the file.

    Returns:
        True if the list changed.

    Raises:
        NotFound: If the user has no category with this id.
        StoreUnavailable: If the update fails.
    """
    try:
        with transaction.atomic():
            category = _get_locked_category(user, category_id)
            files = list(category.listed_files)
            remaining = [listed for listed in files if listed != file_url]
            if len(remaining) == len(files):
                logger.debug(
                    'File not in category %s: %s',
                    category_id,
                    file_url,
                )
                return False
            category.files = remaining
            category.save(update_fields=[_FILES_FIELD])
    except DatabaseError as error:
        logger.exception(
            'Failed to remove file from category %s',
            category_id,
        )
        raise StoreUnavailable(
            _CATEGORY_STORE,
            'array_remove',
            str(category_id),
        ) from error

    logger.info('Removed file from category %s: %s', category_id, file_url)
    return True


def delete_attachments_for(file_url: str) -> int:
    """Delete every attachment record that points at a file.

    Args:
        file_url: Download URL of the deleted file.

    Returns:
        Number of attachment records deleted.

    Raises:
        StoreUnavailable: If the query or delete fails.
    """
    try:
        deleted, _ = CategoryAttachment.objects.filter(
            file_url=file_url,
        ).delete()
    except DatabaseError as error:
        logger.exception('Failed to delete attachments for %s', file_url)
        raise StoreUnavailable(
            _CATEGORY_STORE,
            'delete_attachments',
            file_url,
        ) from error

    logger.info('Deleted %d attachments for %s', deleted, file_url)
    return deleted


def _get_locked_category(user: _User, category_id: int) -> Category:
    """Get one of the user's categories with a row lock.

    Must be called inside ``transaction.atomic()``.

    Args:
        user: Category owner.
        category_id: Category id.

    Returns:
        Locked Category instance.

    Raises:
        NotFound: If the user has no category with this id.
    """
    try:
        return Category.objects.select_for_update().get(
            id=category_id,
            created_by=user,
        )
    except Category.DoesNotExist as error:
        logger.warning(
            'Category not found for user %s: %s',
            user.pk,
            category_id,
        )
        raise NotFound('category', category_id) from error
