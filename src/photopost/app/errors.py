from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class PhotoPostError(Exception):
    """Base class for errors raised by photopost."""


class ConfigurationError(PhotoPostError):
    """Missing collaborator or invalid configuration value."""


class ValidationError(PhotoPostError):
    """A form field failed validation."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class TransportError(PhotoPostError):
    """Network or service failure while talking to the photo service."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.message} (HTTP {self.status})"
        return self.message


class ResourceError(PhotoPostError):
    """A selected file could not be read or decoded."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.path = path
