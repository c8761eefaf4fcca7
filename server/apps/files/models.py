"""Database models for files app."""

from typing import Final, final, override

from django.contrib.auth import get_user_model
from django.db import models

User = get_user_model()

# Constants for field max lengths
_CATEGORY_NAME_MAX_LENGTH: Final = 100
_FILE_URL_MAX_LENGTH: Final = 2048
_LABEL_MAX_LENGTH: Final = 255


@final
class Category(models.Model):
    """User-defined category that files are filed under.

    Blob storage carries no custom metadata, so a category's ``files``
    list is the only record of which files belong to it. Each entry is
    the download URL of a stored file. A URL is expected to appear in
    at most one category of a user, but nothing in the database
    enforces that.
    """

    created_by = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='categories',
        db_index=True,
    )

    name = models.CharField(
        max_length=_CATEGORY_NAME_MAX_LENGTH,
    )

    # Membership list of download URLs (order irrelevant, no duplicates)
    files = models.JSONField(
        default=list,
        blank=True,
        help_text='Download URLs of files filed under this category',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Category'  # type: ignore[mutable-override]
        verbose_name_plural = 'Categories'  # type: ignore[mutable-override]
        ordering = ['id']

        indexes = [
            models.Index(
                fields=['created_by', 'id'],
                name='category_owner_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.created_by.get_username()}:{self.name}'

    @property
    def listed_files(self) -> list[str]:
        """Membership list, empty if the stored value is not a list."""
        if isinstance(self.files, list):
            return self.files
        return []

    def has_file(self, file_url: str) -> bool:
        """Check whether the category lists the given download URL.

        Args:
            file_url: Download URL of a stored file.

        Returns:
            True if the URL is in the membership list.
        """
        return file_url in self.listed_files


@final
class CategoryAttachment(models.Model):
    """Auxiliary link between a category and a stored file.

    Attachments are created outside the files catalog but point at a
    file by its download URL, so they must be removed when that file
    is deleted.
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name='attachments',
        null=True,
        blank=True,
    )

    file_url = models.CharField(
        max_length=_FILE_URL_MAX_LENGTH,
        db_index=True,
    )

    label = models.CharField(
        max_length=_LABEL_MAX_LENGTH,
        blank=True,
        default='',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Category Attachment'  # type: ignore[mutable-override]
        verbose_name_plural = 'Category Attachments'  # type: ignore[mutable-override]
        ordering = ['id']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.label or "attachment"} -> {self.file_url}'
