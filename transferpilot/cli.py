"""CLI interface for transferpilot."""

import json
import logging
import signal
import sys

import click

from transferpilot.config import Config
from transferpilot.errors import TransferPilotError
from transferpilot.preflight import PreflightReport, preflight
from transferpilot.scanner import items_from_paths
from transferpilot.transfer import CancelToken, ProgressReporter, TransferExecutor
from transferpilot.volumes import list_volumes


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = Config()


@cli.command()
def volumes() -> None:
    """List mounted volumes and their free space."""
    vols = list_volumes()
    if not vols:
        click.echo("No volumes found.")
        return

    click.echo("Mount point".ljust(40) + "Available".rjust(12) + "Total".rjust(12))
    click.echo("-" * 64)
    for vol in vols:
        click.echo(
            f"{_truncate(vol.mount_point, 39):<40}"
            f"{_format_bytes(vol.avail_bytes):>12}"
            f"{_format_bytes(vol.total_bytes):>12}"
        )


@cli.command("preflight")
@click.argument("paths", nargs=-1, required=True)
@click.option("--dest", "dest_mount", required=True, help="Destination mount point")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def preflight_cmd(paths: tuple[str, ...], dest_mount: str, as_json: bool) -> None:
    """Report file counts, sizes and free space for PATHS before a transfer."""
    items = items_from_paths(paths)

    try:
        report = preflight(items, dest_mount)
    except TransferPilotError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    _print_report(report, dest_mount)


@cli.command("transfer")
@click.argument("paths", nargs=-1, required=True)
@click.option("--dest", "dest_mount", required=True, help="Destination mount point")
@click.option(
    "--mode",
    "copy_mode",
    type=click.Choice(["copy", "move"]),
    default="copy",
    help="Copy files, or move them (delete sources after a successful copy)",
)
@click.option(
    "--conflict",
    "conflict_policy",
    type=click.Choice(["rename", "overwrite", "skip"]),
    default="rename",
    help="What to do when the destination file already exists",
)
@click.option(
    "--verify",
    "verify_mode",
    type=click.Choice(["none", "size", "sha256"]),
    default="none",
    help="Integrity check after each copy",
)
@click.option("--chunk-size", type=int, default=None, help="Copy buffer size in bytes")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def transfer_cmd(
    ctx: click.Context,
    paths: tuple[str, ...],
    dest_mount: str,
    copy_mode: str,
    conflict_policy: str,
    verify_mode: str,
    chunk_size: int | None,
    as_json: bool,
) -> None:
    """Copy or move PATHS into a new session folder under DEST/Transfers."""
    config: Config = ctx.obj["config"]
    if chunk_size is not None:
        if chunk_size <= 0:
            raise click.BadParameter("must be positive", param_hint="--chunk-size")
        config.transfer.chunk_size = chunk_size

    items = items_from_paths(paths)
    reporter = ProgressReporter()
    executor = TransferExecutor(config=config.transfer, sink=reporter)

    cancel = CancelToken()
    previous_handler = signal.signal(signal.SIGINT, lambda _signum, _frame: cancel.cancel())
    try:
        summary = executor.execute(
            items,
            dest_mount,
            copy_mode=copy_mode,
            conflict_policy=conflict_policy,
            verify_mode=verify_mode,
            cancel=cancel,
        )
    except TransferPilotError as e:
        click.echo(f"\nError: {e}", err=True)
        sys.exit(1)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
    else:
        reporter.report_summary(summary)

    if summary.cancelled:
        sys.exit(130)


def _print_report(report: PreflightReport, dest_mount: str) -> None:
    click.echo(f"Files: {report.total_files:,} ({report.total_folders:,} folder picks)")
    click.echo(f"Total size: {_format_bytes(report.total_bytes)}")
    click.echo(f"Available on {dest_mount}: {_format_bytes(report.dest_avail_bytes)}")
    click.echo("Fits: yes" if report.will_fit else "Fits: NO - not enough free space")

    if report.by_category:
        click.echo("\nBy category:")
        for category, count in sorted(report.by_category.items(), key=lambda kv: -kv[1]):
            click.echo(f"  {category:<12} {count:>8,}")

    if report.by_extension:
        click.echo("\nBy extension:")
        for ext, count in sorted(report.by_extension.items(), key=lambda kv: -kv[1]):
            click.echo(f"  {ext:<12} {count:>8,}")


def _format_bytes(size: int | None) -> str:
    if size is None:
        return "0 B"
    size_f = float(size)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_f < 1024:
            return f"{size_f:.1f} {unit}"
        size_f /= 1024
    return f"{size_f:.1f} PB"


def _truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return "..." + text[-(max_len - 3) :]


def main() -> None:
    """Entry point for the CLI."""
    cli(standalone_mode=True)  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()
