"""
Command-line interface for escpos-io.

This module provides the CLI using Click, supporting configuration via:
1. Environment variables (highest precedence)
2. CLI arguments
3. Config file
4. Default values (lowest precedence)
"""

import asyncio
import sys
from pathlib import Path
from typing import Any

import click

from escpos_io.core.commands import PaperStatus
from escpos_io.core.config import (
    DEFAULT_CONFIG_PATH,
    ENV_BAUD_RATE,
    ENV_CONFIG_FILE,
    ENV_DEVICE_PATH,
    ENV_HOST,
    ENV_PORT,
    Config,
)
from escpos_io.core.logging import get_logger, setup_logging
from escpos_io.device import EscPosDisplay, EscPosPrinter, OverlapPolicy

logger = get_logger()


@click.group()
@click.option(
    "-c", "--config",
    "config_file",
    type=click.Path(exists=False, path_type=Path),
    envvar=ENV_CONFIG_FILE,
    default=None,
    help=f"Path to configuration file. [default: {DEFAULT_CONFIG_PATH}] [env: {ENV_CONFIG_FILE}]",
)
@click.option(
    "--dev",
    "dev_path",
    type=str,
    default=None,
    help=f"Serial device path, e.g. /dev/ttyUSB0. [env: {ENV_DEVICE_PATH}]",
)
@click.option(
    "-b", "--baud-rate",
    type=int,
    default=None,
    help=f"Serial baud rate. [env: {ENV_BAUD_RATE}]",
)
@click.option(
    "-H", "--host",
    type=str,
    default=None,
    help=f"Network device host name or address. [env: {ENV_HOST}]",
)
@click.option(
    "-p", "--port",
    type=int,
    default=None,
    help=f"Network device TCP port. [env: {ENV_PORT}]",
)
@click.option(
    "--codepage",
    type=str,
    default=None,
    help="Python codec name of the device character table (default: cp437).",
)
@click.option(
    "--status-overlap",
    type=click.Choice([p.value for p in OverlapPolicy]),
    default=None,
    help="How to handle a status request issued while another is pending.",
)
@click.option(
    "--traffic-log-file",
    type=str,
    default=None,
    help="Write every byte sent to and received from the device to this file.",
)
@click.option(
    "-v", "--verbose",
    count=True,
    help="Increase logging verbosity (-v debug, -vv raw traffic).",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    default=False,
    help="Suppress all output except errors.",
)
@click.version_option(package_name="escpos-io")
@click.pass_context
def main(
    ctx: click.Context,
    config_file: Path | None,
    dev_path: str | None,
    baud_rate: int | None,
    host: str | None,
    port: int | None,
    codepage: str | None,
    status_overlap: str | None,
    traffic_log_file: str | None,
    verbose: int,
    quiet: bool,
) -> None:
    """
    escpos-io - Drive ESC/POS receipt printers and customer displays.

    The device is reached over a serial port (--dev) or TCP (--host).

    Example usage:

    \b
        # Print two centered lines and cut
        escpos-io --host 192.168.1.50 print --center --cut "Thank you" "Come again"

        # Show a price on a customer display
        escpos-io --dev /dev/ttyUSB0 display --top "Coffee" --bottom "2.50"

        # Ask a printer whether it has paper
        escpos-io --host 192.168.1.50 status
    """
    cli_args: dict[str, Any] = {
        "dev_path": dev_path,
        "baud_rate": baud_rate,
        "host": host,
        "port": port,
        "codepage": codepage,
        "status_overlap": status_overlap,
        "traffic_log_file": traffic_log_file,
    }

    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["cli_args"] = {k: v for k, v in cli_args.items() if v is not None}
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


def _load_config(ctx: click.Context, skip_device_validation: bool = False) -> Config:
    try:
        config = Config.load(
            config_file=ctx.obj["config_file"],
            cli_args=ctx.obj["cli_args"],
            skip_device_validation=skip_device_validation,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    setup_logging(
        verbosity_level=ctx.obj["verbose"],
        quiet=ctx.obj["quiet"],
        traffic_log_file=config.traffic_log_file,
    )
    return config


def _run(ctx: click.Context, coro: Any) -> None:
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except click.ClickException:
        raise
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        if ctx.obj["verbose"]:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@main.command("print")
@click.argument("lines", nargs=-1)
@click.option("--center", is_flag=True, default=False, help="Center each line.")
@click.option("--width", type=int, default=None, help="Line width used for centering.")
@click.option("--cut", "cut", flag_value="full", default=None, help="Full paper cut after printing.")
@click.option("--partial-cut", "cut", flag_value="partial", help="Partial paper cut after printing.")
@click.pass_context
def print_cmd(
    ctx: click.Context,
    lines: tuple[str, ...],
    center: bool,
    width: int | None,
    cut: str | None,
) -> None:
    """Print LINES on a receipt printer (reads stdin when none are given)."""
    config = _load_config(ctx)
    if not lines:
        lines = tuple(sys.stdin.read().splitlines())
    line_width = width if width is not None else config.printer.line_width

    async def run() -> None:
        printer = EscPosPrinter(
            config.target(),
            codepage=config.device.codepage,
            status_overlap=config.device.status_overlap,
        )
        async with printer:
            for line in lines:
                if center:
                    printer.print_centered(line, line_width)
                else:
                    printer.print_line(line)
            if cut:
                printer.cut(partial=cut == "partial")

    _run(ctx, run())


@main.command("display")
@click.option("--top", type=str, default=None, help="Text for the top line.")
@click.option("--bottom", type=str, default=None, help="Text for the bottom line.")
@click.option("--cursor/--no-cursor", default=None, help="Show or hide the cursor.")
@click.option("--clear", is_flag=True, default=False, help="Clear the display first.")
@click.pass_context
def display_cmd(
    ctx: click.Context,
    top: str | None,
    bottom: str | None,
    cursor: bool | None,
    clear: bool,
) -> None:
    """Write centered text to a customer display."""
    config = _load_config(ctx)

    async def run() -> None:
        display = EscPosDisplay(config.target(), codepage=config.device.codepage)
        async with display:
            if clear:
                display.clear()
            if config.display.brightness is not None:
                display.set_brightness(config.display.brightness)
            if cursor is not None:
                display.show_cursor(cursor)
            if top is not None:
                display.centered_top_line(top)
            if bottom is not None:
                display.centered_bottom_line(bottom)

    _run(ctx, run())


@main.command("status")
@click.option(
    "--encoding",
    type=str,
    default="hex",
    show_default=True,
    help="Rendering of the raw reply: hex, base64 or a codec name.",
)
@click.option("--timeout", type=float, default=5.0, show_default=True, help="Seconds to wait.")
@click.pass_context
def status_cmd(ctx: click.Context, encoding: str, timeout: float) -> None:
    """Query the printer's paper roll sensor."""
    config = _load_config(ctx)

    async def run() -> None:
        printer = EscPosPrinter(
            config.target(),
            codepage=config.device.codepage,
            status_overlap=config.device.status_overlap,
        )
        async with printer:
            try:
                reply = await asyncio.wait_for(printer.paper_status(encoding), timeout)
            except asyncio.TimeoutError:
                raise click.ClickException(f"No status reply within {timeout}s") from None

        status = PaperStatus.from_code(reply) if encoding == "hex" else None
        if status is None:
            click.echo(reply)
        else:
            click.echo(f"{reply} ({status.name.lower().replace('_', ' ')})")

    _run(ctx, run())


@main.command("generate-config")
@click.pass_context
def generate_config_cmd(ctx: click.Context) -> None:
    """Write the effective configuration to the config file and exit."""
    config = _load_config(ctx, skip_device_validation=True)
    target_path = ctx.obj["config_file"] or DEFAULT_CONFIG_PATH
    try:
        config.save(target_path)
        click.echo(f"Configuration file generated: {target_path}")
    except OSError as e:
        click.echo(f"Error generating config file: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
