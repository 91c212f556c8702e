"""
Helper functions for formatting catalog data into human-readable strings.
"""

from cast_catalog.models.media import MediaTrack, TrackType


def format_duration(seconds: float) -> str:
    """
    Formats a duration in seconds into a human-readable string (e.g., '2h 34m 12s').
    """
    s = int(seconds)
    hours, remainder = divmod(s, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def describe_track(track: MediaTrack) -> str:
    """Builds a one-line label such as '#1 English (text/subtitles, en)'."""
    kind = track.type.value
    if track.type is TrackType.TEXT:
        kind = f"{kind}/{track.text_subtype.value}"
    details = ", ".join(part for part in (kind, track.language_code) if part)
    name = track.name or "Untitled"
    return f"#{track.identifier} {name} ({details})"
