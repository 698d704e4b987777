"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from rich.markup import escape

from ...core.exceptions import ConfigError
from ...core.logging import setup_logging, get_logger, get_stderr_console
from ..config.loader import ConfigLoader
from .mux import register_mux_commands

logger = get_logger(__name__)

app = typer.Typer(
    name="sshmux",
    add_completion=False,
    help="Shared ssh connections through control sockets",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

register_mux_commands(app)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML)",
    ),
    control_dir: Optional[str] = typer.Option(
        None,
        "--control-dir",
        help="Directory for control sockets",
    ),
):
    """
    sshmux - shared ssh connections through control sockets
    
    The first command to a host starts a background master; later commands
    to the same user, host and port reuse it until it has been idle for the
    configured ControlPersist time.
    """
    try:
        setup_logging(level=log_level, log_file=log_file)
        ctx.obj = ConfigLoader().load(
            toml_path=config_file,
            cli_overrides={"mux": {"control_dir": control_dir}},
        )
    except ConfigError as e:
        get_stderr_console().print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    logger.debug("Configuration: %s", ctx.obj)


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
