"""Metadata helpers for stored files."""

from decimal import ROUND_HALF_UP, Decimal
from pathlib import PurePosixPath
from typing import Any, Final

_SIZE_BASE: Final = 1024
_SIZE_UNITS: Final = ('Bytes', 'KB', 'MB', 'GB', 'TB')
_SIZE_PRECISION: Final = Decimal('0.01')
_IMAGE_EXTENSIONS: Final = frozenset(('jpg', 'jpeg', 'png', 'gif'))

# User type for Django's dynamic user model
_User = Any


def get_display_name(user: _User) -> str:
    """Get the name that owns a user's storage namespace.

    Args:
        user: File owner.

    Returns:
        Full name if set, otherwise the username.
    """
    return user.get_full_name() or user.get_username()


def build_namespace(user: _User) -> str:
    """Build the storage prefix under which all user files live.

    Args:
        user: File owner.

    Returns:
        Namespace prefix (e.g. "alice's Files/").
    """
    return f"{get_display_name(user)}'s Files/"


def build_storage_key(user: _User, file_name: str) -> str:
    """Build the storage key of a user file.

    Args:
        user: File owner.
        file_name: Display name of the file.

    Returns:
        Storage key (e.g. "alice's Files/report.pdf").
    """
    return f'{build_namespace(user)}{file_name}'


def extract_filename(storage_path: str) -> str:
    """Extract filename from storage path.

    Args:
        storage_path: Full path (e.g., "alice's Files/file.pdf").

    Returns:
        Filename (e.g., 'file.pdf').
    """
    return PurePosixPath(storage_path).name


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = PurePosixPath(filename).suffix
    return extension.lstrip('.').lower()


def get_preview_kind(filename: str) -> str:
    """Decide how a file is previewed.

    Args:
        filename: Filename with extension.

    Returns:
        'image' for jpg, jpeg, png and gif files, 'document' otherwise.
    """
    if get_file_extension(filename) in _IMAGE_EXTENSIONS:
        return 'image'
    return 'document'


def format_file_size(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Uses base-1024 units rounded half up to two decimal places, with
    trailing zeros dropped.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '0 Bytes', '1 KB', '1.5 KB').
    """
    if size_bytes == 0:
        return '0 Bytes'

    exponent = 0
    while (
        exponent < len(_SIZE_UNITS) - 1
        and size_bytes >= _SIZE_BASE ** (exponent + 1)
    ):
        exponent += 1

    scaled = Decimal(size_bytes) / _SIZE_BASE**exponent
    rounded = scaled.quantize(_SIZE_PRECISION, rounding=ROUND_HALF_UP)
    # Drop trailing zeros: 1.50 -> 1.5, 1.00 -> 1
    number = f'{rounded:f}'.rstrip('0').rstrip('.')
    return f'{number} {_SIZE_UNITS[exponent]}'
