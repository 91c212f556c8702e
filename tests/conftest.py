"""
Shared pytest fixtures for the cast-catalog test suite.

No test touches the internet: HTTP tests run against an in-process aiohttp server.
"""

import asyncio
import json
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

MP4_BASE = "https://commondatastorage.googleapis.com/gtv-videos-bucket/CastVideos/mp4/"
IMAGES_BASE = "https://commondatastorage.googleapis.com/gtv-videos-bucket/CastVideos/images/"
TRACKS_BASE = "https://commondatastorage.googleapis.com/gtv-videos-bucket/CastVideos/tracks/"


def make_video(
    title: str,
    *,
    duration: Any = 596,
    sources: list[Any] | None = None,
    tracks: Any = None,
    **extra: Any,
) -> dict[str, Any]:
    """A video entry shaped like the published CastVideos manifest."""
    slug = title.replace(" ", "")
    video = {
        "title": title,
        "subtitle": f"{title}, an open movie",
        "studio": "Blender Foundation",
        "image-480x270": f"images_480x270/{slug}.jpg",
        "image-780x1200": f"images_780x1200/{slug}-780x1200.jpg",
        "duration": duration,
        "sources": sources
        if sources is not None
        else [
            {"type": "hls", "mime": "application/x-mpegurl", "url": f"{slug}.m3u8"},
            {"type": "mp4", "mime": "video/mp4", "url": f"{slug}.mp4"},
        ],
    }
    if tracks is not None:
        video["tracks"] = tracks
    video.update(extra)
    return video


def make_category(videos: list[Any], **overrides: Any) -> dict[str, Any]:
    category = {
        "name": "Movies",
        "mp4": MP4_BASE,
        "images": IMAGES_BASE,
        "tracks": TRACKS_BASE,
        "videos": videos,
    }
    category.update(overrides)
    return category


def make_manifest() -> dict[str, Any]:
    return {
        "categories": [
            make_category(
                [
                    make_video(
                        "Big Buck Bunny",
                        tracks=[
                            {
                                "id": "1",
                                "type": "text",
                                "subtype": "captions",
                                "contentId": "BigBuckBunny-en.vtt",
                                "name": "English Subtitle",
                                "language": "en-US",
                            },
                            {
                                "id": 2,
                                "type": "audio",
                                "contentId": "https://cdn.example.com/bbb-fr.mp4",
                                "name": "French",
                                "language": "fr",
                            },
                        ],
                    ),
                    make_video("Elephant Dream", duration=653),
                    make_video("Sintel", duration=887, tracks=[]),
                ]
            )
        ]
    }


@pytest.fixture
def manifest() -> dict[str, Any]:
    """A fresh, valid manifest document per test."""
    return make_manifest()


@pytest.fixture
def manifest_bytes(manifest: dict[str, Any]) -> bytes:
    return json.dumps(manifest).encode("utf-8")


class RecordingListener:
    """Fetcher listener that records every callback."""

    def __init__(self) -> None:
        self.loaded: list[bytes] = []
        self.failed: list[Exception] = []

    def on_loaded(self, data: bytes) -> None:
        self.loaded.append(data)

    def on_failed(self, error: Exception) -> None:
        self.failed.append(error)


class RecordingDelegate:
    """Media list delegate that records every notification."""

    def __init__(self) -> None:
        self.loaded: list[Any] = []
        self.failed: list[Exception] = []

    def media_list_did_load(self, media_list: Any) -> None:
        self.loaded.append(media_list)

    def media_list_did_fail(self, media_list: Any, error: Exception) -> None:
        self.failed.append(error)


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def delegate() -> RecordingDelegate:
    return RecordingDelegate()


@pytest_asyncio.fixture
async def manifest_server(manifest_bytes: bytes):
    """
    Serves:
        /media.json   the sample manifest
        /missing.json 404
        /broken.json  200 with a body that is not JSON
        /slow.json    200, but only once the test releases it (or the server stops)
    """
    release = asyncio.Event()

    async def media(request: web.Request) -> web.Response:
        return web.Response(body=manifest_bytes, content_type="application/json")

    async def missing(request: web.Request) -> web.Response:
        return web.Response(status=404, text="not found")

    async def broken(request: web.Request) -> web.Response:
        return web.Response(text="<html>not a manifest</html>")

    async def slow(request: web.Request) -> web.Response:
        await release.wait()
        return web.Response(body=manifest_bytes, content_type="application/json")

    app = web.Application()
    app.router.add_get("/media.json", media)
    app.router.add_get("/missing.json", missing)
    app.router.add_get("/broken.json", broken)
    app.router.add_get("/slow.json", slow)

    server = TestServer(app)
    await server.start_server()
    server.release = release
    try:
        yield server
    finally:
        release.set()
        await server.close()
