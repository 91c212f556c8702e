"""
Structured logging for catalog loading.
Events carry a name plus key=value context and can also be written as JSON lines.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any


class StructuredLogger:
    """
    Logger that outputs both human-readable and machine-parseable events.

    Usage:
        logger = StructuredLogger("cast_catalog")
        logger.info("manifest_load_completed",
                    url="https://example.com/media.json",
                    status_code=200)
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None

        self._logger = logging.getLogger(name)

        self._json_file = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"cast_catalog_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
        }

    def _format_message(self, event: str, **context) -> str:
        parts = [f"[{event}]"]
        for key, value in context.items():
            parts.append(f"{key}={value}")
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context) -> None:
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except OSError as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def _log(self, level: int, event: str, **context) -> None:
        self._logger.log(level, self._format_message(event, **context))
        if self.enable_json:
            self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context) -> None:
        self._log(logging.DEBUG, event, **context)

    def info(self, event: str, **context) -> None:
        self._log(logging.INFO, event, **context)

    def error(self, event: str, **context) -> None:
        self._log(logging.ERROR, event, **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class FetchLogger:
    """Specialized logger for manifest fetch events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def load_started(self, url: str):
        self.logger.info("manifest_load_started", url=url)

    def load_failed(self, url: str, error: str, duration_ms: float):
        """Log a transport failure (no HTTP status was received)."""
        self.logger.error(
            "manifest_load_failed",
            url=url,
            error=error,
            duration_ms=round(duration_ms, 2),
        )

    def load_completed(
        self, url: str, status_code: int, size_bytes: int, duration_ms: float
    ):
        self.logger.info(
            "manifest_load_completed",
            url=url,
            status_code=status_code,
            size_bytes=size_bytes,
            duration_ms=round(duration_ms, 2),
        )

    def load_cancelled(self, url: str):
        self.logger.debug("manifest_load_cancelled", url=url)


class CatalogLogger:
    """Specialized logger for catalog decode events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def catalog_decoded(self, title: str, item_count: int):
        self.logger.info("catalog_decoded", title=title, item_count=item_count)

    def catalog_decode_failed(self, error_type: str, error: str):
        self.logger.error("catalog_decode_failed", error_type=error_type, error=error)


def create_structured_logger(
    log_dir: Path | None = None, enable_json: bool = False
) -> tuple[StructuredLogger, FetchLogger, CatalogLogger]:
    """
    Create all structured loggers.

    Returns:
        Tuple of (base_logger, fetch_logger, catalog_logger)
    """
    base = StructuredLogger("cast_catalog", log_dir=log_dir, enable_json=enable_json)
    return base, FetchLogger(base), CatalogLogger(base)
