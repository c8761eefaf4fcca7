"""Resolve file to category associations from category membership."""

import logging
from collections.abc import Iterable, Sequence
from typing import Final

from server.apps.files.models import Category

UNCATEGORIZED: Final = 'Uncategorized'

logger = logging.getLogger(__name__)


def resolve_category(
    file_url: str,
    categories: Iterable[Category],
) -> int | None:
    """Find the category that lists a file.

    Pure function over the given snapshot. If several categories list
    the same URL, the first one in iteration order wins and the others
    stay invisible.

    Args:
        file_url: Download URL of the file.
        categories: Category snapshot in a fixed order.

    Returns:
        Id of the first category listing the URL, or None.
    """
    for category in categories:
        if category.has_file(file_url):
            return category.id
    return None


def find_duplicate_claims(
    categories: Sequence[Category],
) -> dict[str, list[int]]:
    """Find download URLs listed by more than one category.

    Args:
        categories: Category snapshot.

    Returns:
        Mapping of URL to the ids of every category listing it,
        only for URLs claimed more than once.
    """
    claims: dict[str, list[int]] = {}
    for category in categories:
        for file_url in dict.fromkeys(category.listed_files):
            claims.setdefault(file_url, []).append(category.id)

    duplicates = {
        file_url: category_ids
        for file_url, category_ids in claims.items()
        if len(category_ids) > 1
    }
    if duplicates:
        logger.debug(
            'Files claimed by several categories: %d',
            len(duplicates),
        )
    return duplicates


def get_category_name(
    category_id: int | None,
    categories: Iterable[Category],
) -> str:
    """Get the label shown for a file's category.

    Args:
        category_id: Resolved category id, may be None.
        categories: Category snapshot.

    Returns:
        Category name, or 'Uncategorized' if the id is None or unknown.
    """
    if category_id is None:
        return UNCATEGORIZED
    for category in categories:
        if category.id == category_id:
            return category.name
    return UNCATEGORIZED
