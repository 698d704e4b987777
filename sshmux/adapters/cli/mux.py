"""
Multiplexed connection CLI commands
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from ...core.exceptions import MuxError
from ...core.logging import get_logger, get_stdout_console, get_stderr_console
from ...domain.mux import ConnectionParams
from ..config.loader import build_dialer
from .connection import MuxConnectionFactory, resolve_connection_params

logger = get_logger(__name__)
stdout_console = get_stdout_console()
stderr_console = get_stderr_console()


def register_mux_commands(app: typer.Typer) -> None:
    """Register connection commands directly on the main app"""
    app.command(name="connect")(mux_connect)
    app.command(name="exec")(mux_exec)
    app.command(name="check")(mux_check)
    app.command(name="close")(mux_close)
    app.command(name="put")(mux_put)
    app.command(name="get")(mux_get)
    app.command(name="info")(mux_info)


def _config(ctx: typer.Context) -> Dict[str, Any]:
    return ctx.obj or {}


def _fail(error: Exception) -> None:
    stderr_console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(1)


def _factory(ctx: typer.Context, timeout: Optional[float]) -> MuxConnectionFactory:
    return MuxConnectionFactory(build_dialer(_config(ctx)), timeout=timeout)


def _params(ctx, host, user, port, ssh_config) -> Dict[str, Any]:
    return resolve_connection_params(host, user=user, port=port, ssh_config=ssh_config, cfg=_config(ctx))


def mux_connect(
    ctx: typer.Context,
    host: str = typer.Argument(..., help="Target: host, user@host or user@host:port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Remote user"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Remote port"),
    ssh_config: bool = typer.Option(False, "--ssh-config", help="Resolve HOST from ~/.ssh/config"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Seconds to wait for ssh"),
):
    """
    Start (or reuse) a shared connection
    
    Examples:
        sshmux connect root@example.com
        sshmux connect example.com -p 2222 --timeout 30
    """
    try:
        client = _factory(ctx, timeout).create(_params(ctx, host, user, port, ssh_config))
    except MuxError as e:
        _fail(e)
    stdout_console.print(f"[green]✓[/green] Connected to {escape(client.target)}:{client.port}")
    stdout_console.print(f"  control path: {escape(client.control_path)}")


def mux_exec(
    ctx: typer.Context,
    host: str = typer.Argument(..., help="Target: host, user@host or user@host:port"),
    command: List[str] = typer.Argument(..., help="Remote command (put it after --)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Remote user"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Remote port"),
    ssh_config: bool = typer.Option(False, "--ssh-config", help="Resolve HOST from ~/.ssh/config"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Seconds to wait for ssh"),
):
    """
    Run a command over the shared connection
    
    The exit code of the remote command becomes the exit code of sshmux.
    
    Examples:
        sshmux exec root@example.com -- uname -a
    """
    try:
        client = _factory(ctx, timeout).create(_params(ctx, host, user, port, ssh_config))
        result = client.run(command, timeout=timeout)
    except MuxError as e:
        _fail(e)
    
    if result.stdout:
        typer.echo(result.stdout, nl=False)
    if result.stderr:
        typer.echo(result.stderr, nl=False, err=True)
    if not result.ok:
        raise typer.Exit(result.exit_code)


def mux_check(
    ctx: typer.Context,
    host: str = typer.Argument(..., help="Target: host, user@host or user@host:port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Remote user"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Remote port"),
    ssh_config: bool = typer.Option(False, "--ssh-config", help="Resolve HOST from ~/.ssh/config"),
):
    """Report whether a shared connection is running (exit 1 if not)"""
    try:
        params = ConnectionParams.from_dict(_params(ctx, host, user, port, ssh_config))
        client = build_dialer(_config(ctx)).handle(params)
        running = client.check()
    except MuxError as e:
        _fail(e)
    
    if running:
        stdout_console.print(f"[green]✓[/green] Master running for {escape(client.target)}:{client.port}")
    else:
        stdout_console.print(f"[yellow]⚠[/yellow] No master for {escape(client.target)}:{client.port}")
        raise typer.Exit(1)


def mux_close(
    ctx: typer.Context,
    host: str = typer.Argument(..., help="Target: host, user@host or user@host:port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Remote user"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Remote port"),
    ssh_config: bool = typer.Option(False, "--ssh-config", help="Resolve HOST from ~/.ssh/config"),
):
    """Stop a shared connection"""
    try:
        params = ConnectionParams.from_dict(_params(ctx, host, user, port, ssh_config))
        client = build_dialer(_config(ctx)).handle(params)
        stopped = client.exit()
    except MuxError as e:
        _fail(e)
    
    if stopped:
        stdout_console.print(f"[green]✓[/green] Closed {escape(client.target)}:{client.port}")
    else:
        stdout_console.print(f"[yellow]⚠[/yellow] No master for {escape(client.target)}:{client.port}")


def mux_put(
    ctx: typer.Context,
    host: str = typer.Argument(..., help="Target: host, user@host or user@host:port"),
    local_path: Path = typer.Argument(..., help="Local file"),
    remote_path: str = typer.Argument(..., help="Remote destination"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Remote user"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Remote port"),
    ssh_config: bool = typer.Option(False, "--ssh-config", help="Resolve HOST from ~/.ssh/config"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Seconds to wait for ssh"),
):
    """Upload a file over the shared connection"""
    try:
        client = _factory(ctx, timeout).create(_params(ctx, host, user, port, ssh_config))
        client.open_sftp().put(str(local_path), remote_path, timeout=timeout)
    except (MuxError, FileNotFoundError) as e:
        _fail(e)
    stdout_console.print(f"[green]✓[/green] {escape(str(local_path))} -> {escape(client.target)}:{escape(remote_path)}")


def mux_get(
    ctx: typer.Context,
    host: str = typer.Argument(..., help="Target: host, user@host or user@host:port"),
    remote_path: str = typer.Argument(..., help="Remote file"),
    local_path: Path = typer.Argument(..., help="Local destination"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Remote user"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Remote port"),
    ssh_config: bool = typer.Option(False, "--ssh-config", help="Resolve HOST from ~/.ssh/config"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Seconds to wait for ssh"),
):
    """Download a file over the shared connection"""
    try:
        client = _factory(ctx, timeout).create(_params(ctx, host, user, port, ssh_config))
        client.open_sftp().get(remote_path, str(local_path), timeout=timeout)
    except MuxError as e:
        _fail(e)
    stdout_console.print(f"[green]✓[/green] {escape(client.target)}:{escape(remote_path)} -> {escape(str(local_path))}")


def mux_info(ctx: typer.Context):
    """Show binaries and control socket locations"""
    try:
        dialer = build_dialer(_config(ctx))
    except MuxError as e:
        _fail(e)
    dialer.check_binary()
    
    table = Table(title="sshmux", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("ssh", dialer.ssh())
    table.add_row("sftp", dialer.sftp())
    table.add_row("control dir", dialer.control_dir())
    table.add_row("control path", dialer.control_path())
    table.add_row("control persist", dialer.control_persist)
    stdout_console.print(table)
