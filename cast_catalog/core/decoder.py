"""
Decodes a media catalog manifest into a tree of `MediaItem` nodes.

Only the first category that carries a `videos` list is decoded. Relative
locators are resolved against that category's base URLs, and each video
contributes one playable leaf built from its MP4 source.

Decoding is fail-fast: a missing required field aborts the whole decode with
an error naming the field, so a partially built tree is never returned.
"""

import json
import logging
from typing import Any, Optional
from urllib.parse import urljoin

from pydantic import ValidationError

from cast_catalog.exceptions import (
    MalformedManifestError,
    MissingFieldError,
    SourceNotFoundError,
)
from cast_catalog.models.manifest import (
    ManifestCategory,
    ManifestSource,
    ManifestTrack,
    ManifestVideo,
)
from cast_catalog.models.media import (
    MediaInformation,
    MediaItem,
    MediaMetadata,
    MediaTrack,
    MediaTree,
    MetadataType,
    StreamType,
    TextTrackSubtype,
    TrackType,
    WebImage,
)

log = logging.getLogger(__name__)

KEY_CATEGORIES = "categories"
KEY_VIDEOS = "videos"

VIDEO_FORMAT = "mp4"
DEFAULT_TRACK_MIME_TYPE = "text/vtt"

THUMBNAIL_WIDTH = 480
THUMBNAIL_HEIGHT = 720
POSTER_WIDTH = 780
POSTER_HEIGHT = 1200

_ABSOLUTE_PREFIXES = ("http://", "https://")

_TRACK_TYPES = {
    "audio": TrackType.AUDIO,
    "text": TrackType.TEXT,
    "video": TrackType.VIDEO,
}

_TEXT_TRACK_SUBTYPES = {
    "captions": TextTrackSubtype.CAPTIONS,
    "chapters": TextTrackSubtype.CHAPTERS,
    "descriptions": TextTrackSubtype.DESCRIPTIONS,
    "metadata": TextTrackSubtype.METADATA,
    "subtitles": TextTrackSubtype.SUBTITLES,
}


def track_type_from_string(value: Optional[str]) -> TrackType:
    """Maps a manifest track type to `TrackType`; unrecognized values are UNKNOWN."""
    return _TRACK_TYPES.get(value, TrackType.UNKNOWN)


def text_track_subtype_from_string(value: Optional[str]) -> TextTrackSubtype:
    """Maps a manifest track subtype to `TextTrackSubtype`; unrecognized values are UNKNOWN."""
    return _TEXT_TRACK_SUBTYPES.get(value, TextTrackSubtype.UNKNOWN)


def build_url(candidate: Optional[str], base_url: str) -> Optional[str]:
    """
    Resolves a manifest locator against a base URL.

    Absolute http(s) locators are returned unchanged, anything else is joined
    onto `base_url`. A missing locator yields None.
    """
    if candidate is None:
        return None
    if candidate.startswith(_ABSOLUTE_PREFIXES):
        return candidate
    return urljoin(base_url, candidate)


def parse_manifest(data: bytes) -> dict[str, Any]:
    """Parses raw manifest bytes into a JSON object."""
    try:
        document = json.loads(data)
    except (ValueError, RecursionError) as e:
        raise MalformedManifestError(f"Manifest is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise MalformedManifestError(
            f"Manifest must be a JSON object, got {type(document).__name__}."
        )
    return document


def decode_media_tree(document: dict[str, Any]) -> MediaTree:
    """
    Converts a parsed manifest into a `MediaTree`.

    Raises:
        MissingFieldError: If `categories`, a category with `videos`, or any
            other required field is absent.
        SourceNotFoundError: If a video has no MP4 source.
        MalformedManifestError: If a field has a value of the wrong type.
    """
    categories = document.get(KEY_CATEGORIES)
    if not isinstance(categories, list):
        raise MissingFieldError(KEY_CATEGORIES)

    for position, element in enumerate(categories):
        if not isinstance(element, dict):
            continue
        if isinstance(element.get(KEY_VIDEOS), list):
            log.debug(f"Decoding category {position} of {len(categories)}.")
            return _decode_category(element)

    raise MissingFieldError(
        KEY_VIDEOS, "No category in the manifest contains a 'videos' list."
    )


def _decode_category(raw_category: dict[str, Any]) -> MediaTree:
    try:
        category = ManifestCategory.model_validate(raw_category)
    except ValidationError as e:
        raise _translate_validation_error(e) from e

    root = MediaItem()
    for index, video in enumerate(category.videos):
        media_information = _decode_media_information(video, index, category)
        root.items.append(
            MediaItem.from_media_information(media_information, parent=root)
        )

    log.debug(f"Decoded {len(root.items)} items from category '{category.name}'.")
    return MediaTree(root=root, title=category.name or "")


def _translate_validation_error(error: ValidationError) -> MalformedManifestError:
    """Turns the first pydantic error into a manifest error naming the offending key."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    # JSON null counts as absent
    if first["type"] == "missing" or first.get("input") is None:
        return MissingFieldError(field)
    return MalformedManifestError(f"Invalid value for '{field}': {first['msg']}")


def _select_source(
    sources: list[ManifestSource], video_format: str
) -> Optional[tuple[int, ManifestSource]]:
    for position, source in enumerate(sources):
        if source.type == video_format:
            return position, source
    return None


def _decode_media_information(
    video: ManifestVideo, index: int, category: ManifestCategory
) -> MediaInformation:
    selected = _select_source(video.sources, VIDEO_FORMAT)
    if selected is None:
        raise SourceNotFoundError(index, VIDEO_FORMAT)

    position, source = selected
    if source.url is None:
        raise MissingFieldError(f"{KEY_VIDEOS}.{index}.sources.{position}.url")
    if source.mime is None:
        raise MissingFieldError(f"{KEY_VIDEOS}.{index}.sources.{position}.mime")

    images = []
    thumbnail_url = build_url(video.image_url, category.images_base_url)
    if thumbnail_url:
        images.append(WebImage(thumbnail_url, THUMBNAIL_WIDTH, THUMBNAIL_HEIGHT))

    poster_url = build_url(video.poster_url, category.images_base_url)
    if poster_url:
        images.append(WebImage(poster_url, POSTER_WIDTH, POSTER_HEIGHT))

    metadata = MediaMetadata(
        metadata_type=MetadataType.MOVIE,
        title=video.title,
        studio=video.studio,
        description=video.subtitle,
        poster_url=poster_url,
        images=tuple(images),
    )

    return MediaInformation(
        content_id=build_url(source.url, category.videos_base_url),
        content_type=source.mime,
        stream_duration=float(video.duration),
        stream_type=StreamType.BUFFERED,
        metadata=metadata,
        media_tracks=_decode_tracks(video.tracks, category.tracks_base_url),
    )


def _decode_tracks(
    tracks: Optional[list[ManifestTrack]], tracks_base_url: str
) -> Optional[tuple[MediaTrack, ...]]:
    decoded = tuple(
        MediaTrack(
            identifier=track.id,
            content_id=build_url(track.content_id, tracks_base_url),
            content_type=DEFAULT_TRACK_MIME_TYPE,
            type=track_type_from_string(track.type),
            text_subtype=text_track_subtype_from_string(track.subtype),
            name=track.name,
            language_code=track.language,
        )
        for track in tracks or ()
    )
    # The playback layer expects "no tracks" rather than an empty list
    return decoded or None
