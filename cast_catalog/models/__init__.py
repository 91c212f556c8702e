"""
Data Models Layer.

This package contains the media tree types produced by decoding, the Pydantic
models describing the raw manifest, and the application configuration.
"""

from .config import CatalogConfig
from .media import (
    MediaInformation,
    MediaItem,
    MediaMetadata,
    MediaTrack,
    MediaTree,
    StreamType,
    TextTrackSubtype,
    TrackType,
)

__all__ = [
    "CatalogConfig",
    "MediaInformation",
    "MediaItem",
    "MediaMetadata",
    "MediaTrack",
    "MediaTree",
    "StreamType",
    "TextTrackSubtype",
    "TrackType",
]
