"""
Pydantic models for the raw manifest JSON.

These mirror the document as published, with the JSON keys as aliases. They
only describe shape; URL resolution and source selection live in the decoder.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _reject_bool(value: Any) -> Any:
    """JSON booleans are not accepted where an integer is expected."""
    if isinstance(value, bool):
        raise ValueError("Input should be an integer, not a boolean")
    return value


def _objects_only(value: Any) -> Any:
    """Drops list elements that are not JSON objects."""
    if isinstance(value, list):
        return [element for element in value if isinstance(element, dict)]
    return value


class _ManifestModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ManifestSource(_ManifestModel):
    type: Optional[str] = None
    mime: Optional[str] = None
    url: Optional[str] = None


class ManifestTrack(_ManifestModel):
    id: int
    name: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    content_id: Optional[str] = Field(default=None, alias="contentId")
    language: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def reject_bool_id(cls, v: Any) -> Any:
        return _reject_bool(v)


class ManifestVideo(_ManifestModel):
    title: Optional[str] = None
    studio: Optional[str] = None
    subtitle: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="image-480x270")
    poster_url: Optional[str] = Field(default=None, alias="image-780x1200")
    duration: int = Field(ge=0)
    sources: list[ManifestSource] = Field(default_factory=list)
    tracks: Optional[list[ManifestTrack]] = None

    @field_validator("duration", mode="before")
    @classmethod
    def reject_bool_duration(cls, v: Any) -> Any:
        return _reject_bool(v)

    @field_validator("sources", mode="before")
    @classmethod
    def keep_source_objects(cls, v: Any) -> Any:
        if v is None or not isinstance(v, list):
            return []
        return _objects_only(v)

    @field_validator("tracks", mode="before")
    @classmethod
    def keep_track_objects(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return None
        return _objects_only(v)


class ManifestCategory(_ManifestModel):
    """The category whose `videos` list is decoded, with its three base URLs."""

    name: Optional[str] = None
    videos_base_url: str = Field(alias="mp4")
    images_base_url: str = Field(alias="images")
    tracks_base_url: str = Field(alias="tracks")
    videos: list[ManifestVideo]

    @field_validator("videos", mode="before")
    @classmethod
    def keep_video_objects(cls, v: Any) -> Any:
        return _objects_only(v)
