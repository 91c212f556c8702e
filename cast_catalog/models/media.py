"""
Domain model for a decoded media catalog.

A catalog is a tree of `MediaItem` nodes. Group nodes only hold children;
playable leaves carry a `MediaInformation` payload.
"""

import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

# Keys used when metadata is exported as a flat dictionary
KEY_TITLE = "title"
KEY_STUDIO = "studio"
KEY_DESCRIPTION = "description"
KEY_POSTER_URL = "posterUrl"


class StreamType(Enum):
    NONE = "none"
    BUFFERED = "buffered"
    LIVE = "live"


class MetadataType(Enum):
    GENERIC = "generic"
    MOVIE = "movie"


class TrackType(Enum):
    UNKNOWN = "unknown"
    AUDIO = "audio"
    TEXT = "text"
    VIDEO = "video"


class TextTrackSubtype(Enum):
    UNKNOWN = "unknown"
    CAPTIONS = "captions"
    CHAPTERS = "chapters"
    DESCRIPTIONS = "descriptions"
    METADATA = "metadata"
    SUBTITLES = "subtitles"


@dataclass(frozen=True)
class WebImage:
    """An image reference with its intended display size."""

    url: str
    width: int
    height: int


@dataclass(frozen=True)
class TextTrackStyle:
    """Rendering style for text tracks. The defaults leave styling to the receiver."""

    font_scale: float = 1.0
    foreground_color: Optional[str] = None
    background_color: Optional[str] = None
    edge_type: Optional[str] = None
    font_family: Optional[str] = None

    @classmethod
    def default(cls) -> "TextTrackStyle":
        return cls()


@dataclass(frozen=True)
class MediaMetadata:
    """Descriptive metadata attached to a playable item."""

    metadata_type: MetadataType = MetadataType.MOVIE
    title: Optional[str] = None
    studio: Optional[str] = None
    description: Optional[str] = None
    poster_url: Optional[str] = None
    images: tuple[WebImage, ...] = ()

    def to_dict(self) -> dict[str, str]:
        """Returns the string-valued fields that are set, keyed like the cast metadata bag."""
        values = {
            KEY_TITLE: self.title,
            KEY_STUDIO: self.studio,
            KEY_DESCRIPTION: self.description,
            KEY_POSTER_URL: self.poster_url,
        }
        return {key: value for key, value in values.items() if value is not None}


@dataclass(frozen=True)
class MediaTrack:
    """A supplementary stream (captions, alternate audio, ...) of a playable item."""

    identifier: int
    content_id: Optional[str]
    content_type: str
    type: TrackType = TrackType.UNKNOWN
    text_subtype: TextTrackSubtype = TextTrackSubtype.UNKNOWN
    name: Optional[str] = None
    language_code: Optional[str] = None


@dataclass(frozen=True)
class MediaInformation:
    """The playable payload of a leaf `MediaItem`."""

    content_id: str
    content_type: str
    stream_duration: float
    stream_type: StreamType = StreamType.BUFFERED
    metadata: MediaMetadata = field(default_factory=MediaMetadata)
    # None rather than an empty tuple when the item has no tracks
    media_tracks: Optional[tuple[MediaTrack, ...]] = None
    text_track_style: TextTrackStyle = field(default_factory=TextTrackStyle.default)


class MediaItem:
    """
    A node in the catalog tree.

    The parent is held through a weak reference, so a subtree does not keep
    its ancestors alive; the tree is owned by whoever holds the root.
    """

    def __init__(
        self,
        title: Optional[str] = None,
        image_url: Optional[str] = None,
        parent: Optional["MediaItem"] = None,
        media_information: Optional[MediaInformation] = None,
    ):
        self.title = title
        self.image_url = image_url
        self.media_information = media_information
        self.items: list[MediaItem] = []
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    @classmethod
    def from_media_information(
        cls, media_information: MediaInformation, parent: Optional["MediaItem"] = None
    ) -> "MediaItem":
        """Creates a leaf item, taking its title and thumbnail from the metadata."""
        metadata = media_information.metadata
        image_url = metadata.images[0].url if metadata.images else None
        return cls(
            title=metadata.title,
            image_url=image_url,
            parent=parent,
            media_information=media_information,
        )

    @property
    def parent(self) -> Optional["MediaItem"]:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def is_playable(self) -> bool:
        return self.media_information is not None

    def walk(self) -> Iterator["MediaItem"]:
        """Yields this item and all of its descendants, depth-first."""
        yield self
        for child in self.items:
            yield from child.walk()

    def __repr__(self) -> str:
        return (
            f"MediaItem(title={self.title!r}, items={len(self.items)}, "
            f"playable={self.is_playable})"
        )


@dataclass(frozen=True)
class MediaTree:
    """The result of decoding a manifest: the root group and the catalog title."""

    root: MediaItem
    title: str = ""

    def __len__(self) -> int:
        return len(self.root.items)
