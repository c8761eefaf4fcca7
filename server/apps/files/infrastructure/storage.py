"""Custom storage backend for S3-compatible storage."""

import logging
from typing import Any, final, override

from botocore.exceptions import BotoCoreError, ClientError
from django.core.files.storage import default_storage
from storages.backends.s3 import S3Storage

from server.apps.files.exceptions import NotFound, StoreUnavailable

logger = logging.getLogger(__name__)

_BLOB_STORE = 'blob'
_STORE_ERRORS = (BotoCoreError, ClientError)


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for user files.

    Extends django-storages S3Storage with the calls the file catalog
    needs: put, list, download locator, size and delete. Each of them
    is a single attempt; retries and timeouts belong to boto3.
    Library errors are re-raised as ``StoreUnavailable`` and a missing
    object as ``NotFound``.
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used.

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def put(self, key: str, content: Any) -> str:
        """Write an object, replacing whatever was stored at the key.

        Args:
            key: Storage key ("<owner>'s Files/<file name>").
            content: File-like object to store.

        Returns:
            Storage key the object was written to.

        Raises:
            StoreUnavailable: If the write fails.
        """
        try:
            return self.save(key, content)
        except _STORE_ERRORS as error:
            raise StoreUnavailable(_BLOB_STORE, 'put', key) from error

    def list_names(self, prefix: str) -> list[str]:
        """List names of objects stored directly under a prefix.

        Args:
            prefix: Namespace prefix (e.g. "alice's Files/").

        Returns:
            Object names relative to the prefix, in key order.

        Raises:
            StoreUnavailable: If the listing fails.
        """
        try:
            _, names = self.listdir(prefix)
        except _STORE_ERRORS as error:
            logger.exception('Failed to list storage prefix: %s', prefix)
            raise StoreUnavailable(_BLOB_STORE, 'list', prefix) from error
        logger.debug('Listed %d objects under %s', len(names), prefix)
        return names

    def download_locator(self, key: str) -> str:
        """Build the stable download URL of an object.

        The URL is unsigned, so the same key always maps to the
        same locator.

        Args:
            key: Storage key of the object.

        Returns:
            Download URL.

        Raises:
            StoreUnavailable: If the URL cannot be built.
        """
        try:
            return self.url(key)
        except _STORE_ERRORS as error:
            raise StoreUnavailable(_BLOB_STORE, 'url', key) from error

    def size_of(self, key: str) -> int:
        """Read object size from storage metadata.

        Args:
            key: Storage key of the object.

        Returns:
            Size in bytes.

        Raises:
            NotFound: If no object exists at the key.
            StoreUnavailable: If the metadata request fails.
        """
        try:
            return self.size(key)
        except FileNotFoundError as error:
            raise NotFound('file', key) from error
        except ClientError as error:
            if _is_missing_object(error):
                raise NotFound('file', key) from error
            raise StoreUnavailable(_BLOB_STORE, 'size', key) from error
        except BotoCoreError as error:
            raise StoreUnavailable(_BLOB_STORE, 'size', key) from error

    def remove(self, key: str) -> None:
        """Delete an object that must exist.

        S3 reports success for deletes of missing keys, so the object
        metadata is read first.

        Args:
            key: Storage key of the object.

        Raises:
            NotFound: If no object exists at the key.
            StoreUnavailable: If the existence check or delete fails.
        """
        self.size_of(key)
        try:
            self.delete(key)
        except _STORE_ERRORS as error:
            raise StoreUnavailable(_BLOB_STORE, 'delete', key) from error


def _is_missing_object(error: ClientError) -> bool:
    """Check whether a client error means the object does not exist."""
    response = error.response
    status = response.get('ResponseMetadata', {}).get('HTTPStatusCode')
    code = response.get('Error', {}).get('Code')
    return status == 404 or code in {'404', 'NoSuchKey'}


def get_storage() -> FileStorage:
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]
