"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from typing import Optional


class CastCatalogError(Exception):
    """Base exception for all application-specific errors."""


class TransportError(CastCatalogError):
    """Raised when the manifest request fails before a response is received."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class HttpStatusError(CastCatalogError):
    """Raised when the manifest server answers with a status other than 200."""

    def __init__(self, status: int, url: Optional[str] = None):
        super().__init__(f"HTTP {status} while loading {url or 'manifest'}")
        self.status = status
        self.url = url


class MalformedManifestError(CastCatalogError):
    """Raised when the manifest cannot be parsed or is structurally invalid."""


class MissingFieldError(MalformedManifestError):
    """Raised when a required manifest key is absent."""

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Manifest is missing required field '{field}'.")
        self.field = field


class SourceNotFoundError(MalformedManifestError):
    """Raised when a video has no source entry of the expected format."""

    def __init__(self, index: int, video_format: str):
        super().__init__(
            f"Video at 'videos.{index}' has no '{video_format}' entry in 'sources'."
        )
        self.index = index
        self.video_format = video_format


class ConfigurationError(CastCatalogError):
    """Raised for issues related to configuration loading or validation."""
