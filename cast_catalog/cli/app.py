"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from cast_catalog import __version__
from cast_catalog.core.media_list import MediaListModel
from cast_catalog.exceptions import CastCatalogError, ConfigurationError
from cast_catalog.models.config import CatalogConfig
from cast_catalog.storage.config_manager import ConfigManager
from cast_catalog.utils.structured_logger import create_structured_logger

from .formatters import print_config, print_media_tree

console = Console()

logging.basicConfig(
    level="WARNING",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
    ],
)
log = logging.getLogger("cast_catalog")

app = typer.Typer(
    name="cast-catalog",
    help="Load and inspect a cast media catalog manifest.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "cast-catalog"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Cast media catalog tools"""
    if version:
        console.print(f"[bold]cast-catalog[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "WARNING"
    if verbose == 1:
        log_level = "INFO"
    elif verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("cast_catalog").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]cast-catalog init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config = ConfigManager(CONFIG_FILE).load_config()
        print_config(CONFIG_FILE, config.model_dump(exclude={"config_path"}))
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    manifest_url: str = typer.Argument(
        ..., help="URL of the JSON manifest describing the catalog."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Request timeout in seconds."
    ),
    json_logs: bool = typer.Option(
        False, "--json-logs", help="Also write JSON-lines logs to the config dir."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration."
    ),
):
    """Save the default manifest URL and request settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {
        "manifest_url": manifest_url,
        "json_logs": json_logs,
    }
    if timeout is not None:
        settings["request_timeout"] = timeout
    try:
        CatalogConfig(**settings, config_path=str(CONFIG_DIR))
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    ConfigManager(CONFIG_FILE).save_new_config(settings)
    console.print(f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")


def _resolve_config(url: Optional[str], timeout: Optional[float]) -> CatalogConfig:
    """Builds the effective config from the config file and command-line overrides."""
    cli_options = {"manifest_url": url, "request_timeout": timeout}
    if CONFIG_FILE.is_file():
        return ConfigManager(CONFIG_FILE).load_config(cli_options)
    if url is None:
        raise ConfigurationError(
            "No manifest URL given and no configuration file found. "
            "Pass a URL or run 'cast-catalog init <MANIFEST_URL>'."
        )
    try:
        return CatalogConfig(
            **{key: value for key, value in cli_options.items() if value is not None},
            config_path=str(CONFIG_DIR),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid options:\n{e}") from e


class _LoadWaiter:
    """Media list delegate that resolves a future with the load outcome."""

    def __init__(self) -> None:
        self.future: asyncio.Future = asyncio.get_running_loop().create_future()

    def media_list_did_load(self, media_list: MediaListModel) -> None:
        if not self.future.done():
            self.future.set_result(media_list)

    def media_list_did_fail(
        self, media_list: MediaListModel, error: CastCatalogError
    ) -> None:
        if not self.future.done():
            self.future.set_exception(error)


async def load_catalog(config: CatalogConfig) -> MediaListModel:
    """Loads the configured manifest and returns the populated model."""
    base_logger, fetch_logger, catalog_logger = create_structured_logger(
        log_dir=Path(config.config_path) / "logs" if config.json_logs else None,
        enable_json=config.json_logs,
    )
    with base_logger:
        waiter = _LoadWaiter()
        model = MediaListModel(
            waiter,
            timeout=config.request_timeout,
            fetch_logger=fetch_logger,
            catalog_logger=catalog_logger,
        )
        try:
            await model.load(config.manifest_url)
            return await waiter.future
        finally:
            await model.close()


@app.command(name="list")
def list_command(
    url: Optional[str] = typer.Argument(
        None, help="Manifest URL. Defaults to the configured one."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Request timeout in seconds."
    ),
    tracks: bool = typer.Option(
        False, "--tracks", help="Show the text and audio tracks of each item."
    ),
):
    """Load a catalog manifest and print its media tree."""
    config = _resolve_config(url, timeout)
    log.debug(f"Using manifest {config.manifest_url}")
    model = asyncio.run(load_catalog(config))
    print_media_tree(model.title, model.root_item, show_tracks=tracks)
