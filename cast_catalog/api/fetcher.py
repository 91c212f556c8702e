"""
Async fetcher for the catalog manifest.

One GET per `load()`, with the result reported to a single listener exactly
once. Cancelling, or starting another load, abandons the in-flight request and
its callbacks never fire.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Optional, Protocol

import aiohttp

from cast_catalog.exceptions import CastCatalogError, HttpStatusError, TransportError
from cast_catalog.utils.structured_logger import FetchLogger, StructuredLogger

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ManifestListener(Protocol):
    """Receives the outcome of a manifest fetch."""

    def on_loaded(self, data: bytes) -> None:
        """Called with the raw response body when the server answered 200."""
        ...  # pragma: no cover

    def on_failed(self, error: CastCatalogError) -> None:
        """Called with a `TransportError` or `HttpStatusError`."""
        ...  # pragma: no cover


class FetchState(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"
    FAILED = "failed"


class ManifestFetcher:
    """
    Loads a manifest over HTTP with aiohttp and reports to a `ManifestListener`.

    `load()` must be called from within a running event loop. The returned task
    can be awaited, but the result is only ever delivered through the listener.
    """

    def __init__(
        self,
        listener: ManifestListener,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = DEFAULT_TIMEOUT,
        fetch_logger: Optional[FetchLogger] = None,
    ):
        """
        Args:
            listener: Receives `on_loaded` / `on_failed`.
            session: An existing session to reuse. It is not closed by `close()`.
            timeout: Total request timeout in seconds.
            fetch_logger: Event logger; a console-only one is created if omitted.
        """
        self.listener = listener
        self.timeout = timeout
        self.state = FetchState.IDLE

        self._session = session
        self._owns_session = session is None
        self._task: Optional[asyncio.Task] = None
        self._url: Optional[str] = None
        self._fetch_logger = fetch_logger or FetchLogger(
            StructuredLogger(__name__, enable_json=False)
        )

    @property
    def is_loading(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True

    async def close(self) -> None:
        """Cancels any pending load and closes the session if this fetcher created it."""
        self.cancel_load()
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    def load(self, url: str) -> asyncio.Task:
        """Starts loading `url`, abandoning any request that is still in flight."""
        self.cancel_load()
        self._url = url
        self.state = FetchState.IN_FLIGHT
        self._task = asyncio.get_running_loop().create_task(self._fetch(url))
        return self._task

    def cancel_load(self) -> None:
        """Aborts the in-flight request. No callback fires for it afterwards."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        self.state = FetchState.IDLE
        self._fetch_logger.load_cancelled(self._url)

    def _is_current(self) -> bool:
        return self._task is not None and self._task is asyncio.current_task()

    async def _fetch(self, url: str) -> None:
        self._fetch_logger.load_started(url)
        start_time = time.monotonic()

        try:
            await self._initialize_session()
            async with self._session.get(
                url, timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                status = response.status
                data = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            reason = str(e) or type(e).__name__
            self._fetch_logger.load_failed(url, reason, duration_ms)
            error = TransportError(f"Failed to load {url}: {reason}", url=url)
            error.__cause__ = e
            self._deliver_failure(error)
            return

        duration_ms = (time.monotonic() - start_time) * 1000
        self._fetch_logger.load_completed(url, status, len(data), duration_ms)

        if status != 200:
            self._deliver_failure(HttpStatusError(status, url=url))
            return

        if not self._is_current():
            return
        self._task = None
        self.state = FetchState.COMPLETED
        self.listener.on_loaded(data)

    def _deliver_failure(self, error: CastCatalogError) -> None:
        if not self._is_current():
            log.debug(f"Dropping result of abandoned request: {error}")
            return
        self._task = None
        self.state = FetchState.FAILED
        self.listener.on_failed(error)
