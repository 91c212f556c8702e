"""Tests for MediaListModel (core/media_list.py): fetch, decode and notify."""

import asyncio
import json

import pytest

from cast_catalog.core.media_list import MediaListModel
from cast_catalog.exceptions import (
    HttpStatusError,
    MalformedManifestError,
    SourceNotFoundError,
)
from tests.conftest import make_category, make_video


@pytest.mark.asyncio
async def test_load_decodes_and_notifies(manifest_server, delegate):
    model = MediaListModel(delegate)
    try:
        await model.load(str(manifest_server.make_url("/media.json")))
    finally:
        await model.close()

    assert delegate.failed == []
    assert delegate.loaded == [model]
    assert model.is_loaded
    assert model.title == "Movies"
    assert [item.title for item in model.root_item.items] == [
        "Big Buck Bunny",
        "Elephant Dream",
        "Sintel",
    ]


@pytest.mark.asyncio
async def test_http_error_reaches_delegate_without_a_tree(manifest_server, delegate):
    model = MediaListModel(delegate)
    try:
        await model.load(str(manifest_server.make_url("/missing.json")))
    finally:
        await model.close()

    assert delegate.loaded == []
    assert isinstance(delegate.failed[0], HttpStatusError)
    assert delegate.failed[0].status == 404
    assert model.root_item is None
    assert not model.is_loaded


@pytest.mark.asyncio
async def test_invalid_json_is_reported_as_malformed(manifest_server, delegate):
    model = MediaListModel(delegate)
    try:
        await model.load(str(manifest_server.make_url("/broken.json")))
    finally:
        await model.close()

    assert delegate.loaded == []
    assert isinstance(delegate.failed[0], MalformedManifestError)


@pytest.mark.asyncio
async def test_cancelled_load_notifies_nobody(manifest_server, delegate):
    model = MediaListModel(delegate)
    try:
        task = model.load(str(manifest_server.make_url("/slow.json")))
        await asyncio.sleep(0.05)
        assert model.is_loading
        model.cancel_load()
        manifest_server.release.set()
        with pytest.raises(asyncio.CancelledError):
            await task
    finally:
        await model.close()

    assert delegate.loaded == []
    assert delegate.failed == []
    assert model.root_item is None


def test_failed_decode_keeps_previous_tree(delegate, manifest_bytes):
    model = MediaListModel(delegate)
    model.on_loaded(manifest_bytes)
    previous_root = model.root_item

    broken = {
        "categories": [
            make_category([make_video("Sintel", sources=[{"type": "hls", "url": "x"}])])
        ]
    }
    model.on_loaded(json.dumps(broken).encode())

    assert model.root_item is previous_root
    assert len(delegate.loaded) == 1
    assert isinstance(delegate.failed[0], SourceNotFoundError)


def test_successful_reload_replaces_the_tree(delegate, manifest_bytes):
    model = MediaListModel(delegate)
    model.on_loaded(manifest_bytes)
    first_root = model.root_item

    replacement = {
        "categories": [make_category([make_video("Tears of Steel")], name="Shorts")]
    }
    model.on_loaded(json.dumps(replacement).encode())

    assert model.root_item is not first_root
    assert model.title == "Shorts"
    assert [item.title for item in model.root_item.items] == ["Tears of Steel"]
    assert len(delegate.loaded) == 2


def test_model_without_delegate_still_loads(manifest_bytes):
    model = MediaListModel()
    model.on_loaded(manifest_bytes)
    model.on_failed(HttpStatusError(500))

    assert model.is_loaded


def test_deeply_nested_manifest_is_reported_as_malformed(delegate):
    model = MediaListModel(delegate)
    model.on_loaded(b"[" * 100000 + b"]" * 100000)

    assert not model.is_loaded
    assert delegate.loaded == []
    assert isinstance(delegate.failed[0], MalformedManifestError)
