"""
The media list model: fetches a manifest, decodes it and notifies a delegate.
"""

import logging
from typing import Optional, Protocol

import aiohttp

from cast_catalog.api.fetcher import DEFAULT_TIMEOUT, ManifestFetcher
from cast_catalog.core.decoder import decode_media_tree, parse_manifest
from cast_catalog.exceptions import CastCatalogError, MalformedManifestError
from cast_catalog.models.media import MediaItem, MediaTree
from cast_catalog.utils.structured_logger import (
    CatalogLogger,
    FetchLogger,
    StructuredLogger,
)

log = logging.getLogger(__name__)


class MediaListDelegate(Protocol):
    """Receives notifications from a `MediaListModel`."""

    def media_list_did_load(self, media_list: "MediaListModel") -> None:
        ...  # pragma: no cover

    def media_list_did_fail(
        self, media_list: "MediaListModel", error: CastCatalogError
    ) -> None:
        ...  # pragma: no cover


class MediaListModel:
    """
    An object representing a hierarchy of media items.

    The model owns exactly one tree at a time. A successful load replaces it
    wholesale; a failed load leaves the previous tree in place.
    """

    def __init__(
        self,
        delegate: Optional[MediaListDelegate] = None,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = DEFAULT_TIMEOUT,
        fetch_logger: Optional[FetchLogger] = None,
        catalog_logger: Optional[CatalogLogger] = None,
    ):
        self.delegate = delegate
        self._tree: Optional[MediaTree] = None
        self._fetcher = ManifestFetcher(
            self, session=session, timeout=timeout, fetch_logger=fetch_logger
        )
        self._catalog_logger = catalog_logger or CatalogLogger(
            StructuredLogger(__name__, enable_json=False)
        )

    @property
    def root_item(self) -> Optional[MediaItem]:
        """The root item (top-level group), or None before the first load."""
        return self._tree.root if self._tree else None

    @property
    def title(self) -> str:
        """The name of the decoded category."""
        return self._tree.title if self._tree else ""

    @property
    def is_loaded(self) -> bool:
        return self._tree is not None

    @property
    def is_loading(self) -> bool:
        return self._fetcher.is_loading

    def load(self, url: str):
        """
        Begins loading the model from the given URL. The delegate is messaged
        when the load completes or fails.

        Returns:
            The asyncio task performing the fetch.
        """
        log.debug(f"Loading media list from {url}")
        return self._fetcher.load(url)

    def cancel_load(self) -> None:
        self._fetcher.cancel_load()

    async def close(self) -> None:
        await self._fetcher.close()

    # ManifestListener

    def on_loaded(self, data: bytes) -> None:
        try:
            tree = decode_media_tree(parse_manifest(data))
        except MalformedManifestError as e:
            self._catalog_logger.catalog_decode_failed(type(e).__name__, str(e))
            self._notify_failure(e)
            return

        self._tree = tree
        self._catalog_logger.catalog_decoded(tree.title, len(tree))
        if self.delegate is not None:
            self.delegate.media_list_did_load(self)

    def on_failed(self, error: CastCatalogError) -> None:
        self._notify_failure(error)

    def _notify_failure(self, error: CastCatalogError) -> None:
        if self.delegate is not None:
            self.delegate.media_list_did_fail(self, error)
