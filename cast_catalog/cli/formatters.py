"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from cast_catalog.models.media import MediaItem
from cast_catalog.utils.formatting import describe_track, format_duration


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "TransportError": [
            "• Check your internet connection.",
            "• Verify the manifest host name is correct.",
            "• Increase the timeout with --timeout.",
        ],
        "HttpStatusError": [
            "• Verify the manifest URL is correct.",
            "• The server might be temporarily unavailable.",
        ],
        "MissingFieldError": [
            "• The manifest lacks a field required to build the catalog.",
            "• Check the named field in the manifest JSON.",
        ],
        "SourceNotFoundError": [
            "• Every video needs an 'mp4' entry in its 'sources' list.",
        ],
        "MalformedManifestError": [
            "• The URL may not point to a catalog manifest.",
            "• Validate the manifest JSON.",
        ],
        "ConfigurationError": [
            "• Run `cast-catalog init <MANIFEST_URL> --force` to rewrite the config.",
            "• Use `cast-catalog --show-config` to inspect current values.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration."""
    console = Console()
    content = "\n".join(f"{key} = {value}" for key, value in config_data.items())
    console.print(
        Panel(
            escape(content),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def build_media_tree(title: str, root: MediaItem, show_tracks: bool = False) -> Tree:
    """Renders a decoded catalog as a Rich tree."""
    tree = Tree(f"[bold cyan]{escape(title or 'Media')}[/bold cyan]")
    _add_children(tree, root, show_tracks)
    return tree


def _add_children(branch: Tree, item: MediaItem, show_tracks: bool) -> None:
    for child in item.items:
        info = child.media_information
        label = f"[bold]{escape(child.title or 'Untitled')}[/bold]"
        if info is None:
            node = branch.add(label)
            _add_children(node, child, show_tracks)
            continue

        label += (
            f" [dim]({format_duration(info.stream_duration)}, "
            f"{escape(info.content_type)})[/dim]"
        )
        node = branch.add(label)
        node.add(f"[green]{escape(info.content_id)}[/green]")
        if info.metadata.studio:
            node.add(f"Studio: {escape(info.metadata.studio)}")
        if show_tracks and info.media_tracks:
            tracks = node.add("[yellow]Tracks[/yellow]")
            for track in info.media_tracks:
                tracks.add(escape(describe_track(track)))


def print_media_tree(title: str, root: MediaItem, show_tracks: bool = False) -> None:
    console = Console()
    console.print(build_media_tree(title, root, show_tracks))
    console.print(f"\n[dim]{len(root.items)} items[/dim]")
