"""
Core catalog logic.

The decoder turns a parsed manifest into a tree of media items, and the
`MediaListModel` ties a fetch to a decode and reports to its delegate.
"""

from .decoder import build_url, decode_media_tree, parse_manifest
from .media_list import MediaListDelegate, MediaListModel

__all__ = [
    "MediaListDelegate",
    "MediaListModel",
    "build_url",
    "decode_media_tree",
    "parse_manifest",
]
