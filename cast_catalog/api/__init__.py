"""
Network Layer.

This package handles fetching the catalog manifest over HTTP.
"""

from .fetcher import FetchState, ManifestFetcher, ManifestListener

__all__ = ["FetchState", "ManifestFetcher", "ManifestListener"]
