"""Exceptions raised by the theming services."""
from __future__ import annotations


class ThemingError(Exception):
    """Base class for all theming errors."""


class ValidationError(ThemingError):
    """A setting value is oversized or malformed. Nothing was written."""


class UploadError(ThemingError):
    """An upload request could not be processed (answered with HTTP 422)."""


class UnsupportedImageError(UploadError):
    """The uploaded bytes could not be decoded as an image."""


class NotFoundError(ThemingError):
    """A folder, stored file or compiled artifact does not exist."""


class StorageError(ThemingError):
    """The config store or app data storage failed."""


class StylesheetCompileError(StorageError):
    """The SCSS compiler could not produce the themed stylesheet."""
