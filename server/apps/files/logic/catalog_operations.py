"""Business logic for building the user's file catalog."""

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Final, final

from django.conf import settings

from server.apps.files.infrastructure.metadata import (
    build_namespace,
    format_file_size,
    get_preview_kind,
)
from server.apps.files.infrastructure.storage import FileStorage, get_storage
from server.apps.files.logic.association import (
    find_duplicate_claims,
    resolve_category,
)
from server.apps.files.logic.category_operations import list_user_categories
from server.apps.files.models import Category

# User type for Django's dynamic user model
_User = Any

ALL_CATEGORIES: Final = 'all'

logger = logging.getLogger(__name__)


@final
@dataclass(frozen=True, slots=True)
class FileRef:
    """Catalog entry for a file present in storage.

    ``url`` is the file identity. ``category`` is derived from the
    category snapshot the catalog was built with.
    """

    name: str
    url: str
    size_bytes: int
    size: str
    category: int | None

    @property
    def preview_kind(self) -> str:
        """Preview type of the file ('image' or 'document')."""
        return get_preview_kind(self.name)


def refresh_catalog(user: _User) -> list[FileRef]:
    """Build the user's file catalog from storage and categories.

    Categories are fetched first, then storage is listed. Every stored
    file is described concurrently (download URL, category, size).
    Any single failure fails the whole refresh, no partial catalog
    is returned.

    Args:
        user: Owner of the files.

    Returns:
        FileRef list in storage listing order.

    Raises:
        StoreUnavailable: If any store call fails.
        NotFound: If a listed file vanished before its size was read.
    """
    categories = list_user_categories(user)
    duplicates = find_duplicate_claims(categories)
    if duplicates:
        logger.warning(
            'User %s has %d files listed by several categories',
            user.pk,
            len(duplicates),
        )

    namespace = build_namespace(user)
    storage = get_storage()
    names = storage.list_names(namespace)
    if not names:
        logger.info('Catalog refreshed for user %s: empty', user.pk)
        return []

    # Non-positive settings fall back to a single worker
    max_workers = max(
        1,
        min(settings.FILES_CATALOG_MAX_WORKERS, len(names)),
    )
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(
                _describe_file,
                storage,
                namespace,
                file_name,
                categories,
            )
            for file_name in names
        ]

    # Executor exit waits for every future, so nothing is still running
    try:
        catalog = [future.result() for future in futures]
    except Exception:
        logger.exception('Catalog refresh failed for user %s', user.pk)
        raise

    logger.info(
        'Catalog refreshed for user %s: %d files',
        user.pk,
        len(catalog),
    )
    return catalog


def _describe_file(
    storage: FileStorage,
    namespace: str,
    file_name: str,
    categories: Sequence[Category],
) -> FileRef:
    """Collect catalog data for one stored file.

    Args:
        storage: Storage backend.
        namespace: User's storage prefix.
        file_name: Object name relative to the prefix.
        categories: Category snapshot used for resolution.

    Returns:
        FileRef for the file.
    """
    storage_key = f'{namespace}{file_name}'
    file_url = storage.download_locator(storage_key)
    category_id = resolve_category(file_url, categories)
    size_bytes = storage.size_of(storage_key)
    return FileRef(
        name=file_name,
        url=file_url,
        size_bytes=size_bytes,
        size=format_file_size(size_bytes),
        category=category_id,
    )


def filter_catalog(
    files: Iterable[FileRef],
    search_term: str = '',
    category_filter: int | str = ALL_CATEGORIES,
) -> list[FileRef]:
    """Filter the catalog by name and category.

    Args:
        files: Catalog entries.
        search_term: Case-insensitive substring of the file name.
            Empty string matches every file.
        category_filter: Category id, or 'all' to keep every category.

    Returns:
        Matching entries in their original order.
    """
    needle = search_term.lower()
    return [
        file_ref
        for file_ref in files
        if needle in file_ref.name.lower()
        and (
            category_filter == ALL_CATEGORIES
            or file_ref.category == category_filter
        )
    ]
