"""CLI interface for adbsink."""

import logging
import posixpath
from pathlib import Path, PurePosixPath
from typing import Any, Optional

import click

from .adb import AdbClient
from .config import config
from .exceptions import AdbSinkError
from .output import OutputFormatter
from .sync import SyncDirection, SyncEngine, SyncPolicy, build_transports
from .utils import S_IFDIR, S_IFLNK, S_IFMT, format_size, format_timestamp

logger = logging.getLogger(__name__)

SYNC_OPTIONS = [
    click.option(
        "--delete-if-dne",
        "-d",
        is_flag=True,
        help="Delete files on target that do not exist in source",
    ),
    click.option(
        "--ignore-dir",
        "-i",
        multiple=True,
        help="Ignore directories whose name starts with this string (repeatable)",
    ),
    click.option(
        "--set-times",
        "-t",
        is_flag=True,
        help="Set modification time of copied files to the source's",
    ),
    click.option(
        "--dry-run",
        "-n",
        is_flag=True,
        help="Show what would be done without changing anything",
    ),
]


def sync_options(func: Any) -> Any:
    """Attach the options shared by pull and push."""
    for option in reversed(SYNC_OPTIONS):
        func = option(func)
    return func


def _connect(ctx: Any) -> AdbClient:
    """Start the adb server and check that one device is connected."""
    adb = AdbClient(adb_path=ctx.obj["adb"])
    adb.start_server()
    serial = adb.ensure_device()
    logger.debug("Connected to %s", serial)
    return adb


def _run_sync(
    ctx: Any,
    direction: SyncDirection,
    source_root: str,
    dest_root: str,
    delete_if_dne: bool,
    ignore_dir: tuple[str, ...],
    set_times: bool,
    dry_run: bool,
) -> None:
    """Run one sync and exit with its status."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        policy = SyncPolicy.create(
            preserve_times=set_times,
            delete_orphans=delete_if_dne,
            ignore_prefixes=[*config.default_ignore_prefixes, *ignore_dir],
        )
    except ValueError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    try:
        adb = _connect(ctx)
        source, destination = build_transports(direction, adb)
        engine = SyncEngine(source, destination, out)
        report = engine.sync(source_root, dest_root, policy, dry_run=dry_run)
    except KeyboardInterrupt:
        out.warning("\nSync cancelled by user")
        ctx.exit(130)
        return
    except AdbSinkError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json(report.to_dict())

    if report.has_failures:
        ctx.exit(1)


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.option(
    "--adb",
    "adb_path",
    envvar="ADBSINK_ADB",
    help="Path to the adb binary",
)
@click.version_option()
@click.pass_context
def main(
    ctx: Any,
    quiet: bool,
    json: bool,
    verbose: bool,
    adb_path: Optional[str],
) -> None:
    """adbsink - Sync directories between this machine and an Android device."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["adb"] = adb_path
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("adbsink").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.argument("source")
@click.argument("dest", required=False, type=click.Path(file_okay=False))
@sync_options
@click.pass_context
def pull(
    ctx: Any,
    source: str,
    dest: Optional[str],
    delete_if_dne: bool,
    ignore_dir: tuple[str, ...],
    set_times: bool,
    dry_run: bool,
) -> None:
    """Pull a directory from the device.

    SOURCE is a directory on the device. It is synced into DEST/<name of
    SOURCE>; DEST defaults to the current directory.

    Examples:
        adbsink pull /sdcard/DCIM ~/phone          # -> ~/phone/DCIM
        adbsink pull /sdcard/Music -d -t -i .thumb
    """
    out: OutputFormatter = ctx.obj["out"]
    name = PurePosixPath(source.rstrip("/")).name
    if not name:
        out.error(f"Cannot sync the device root: {source}")
        ctx.exit(1)

    dest_root = Path(dest) if dest else Path.cwd()
    _run_sync(
        ctx,
        SyncDirection.PULL,
        source.rstrip("/"),
        str(dest_root / name),
        delete_if_dne,
        ignore_dir,
        set_times,
        dry_run,
    )


@main.command()
@click.argument("source", type=click.Path(exists=True, file_okay=False))
@click.argument("dest")
@sync_options
@click.pass_context
def push(
    ctx: Any,
    source: str,
    dest: str,
    delete_if_dne: bool,
    ignore_dir: tuple[str, ...],
    set_times: bool,
    dry_run: bool,
) -> None:
    """Push a local directory to the device.

    SOURCE is a local directory. It is synced into DEST/<name of SOURCE> on
    the device.

    Examples:
        adbsink push ~/Music /sdcard               # -> /sdcard/Music
        adbsink push ./photos /sdcard/Pictures -d
    """
    out: OutputFormatter = ctx.obj["out"]
    source_path = Path(source).resolve()
    if not source_path.name:
        out.error(f"Cannot sync a filesystem root: {source}")
        ctx.exit(1)

    _run_sync(
        ctx,
        SyncDirection.PUSH,
        str(source_path),
        posixpath.join(dest, source_path.name),
        delete_if_dne,
        ignore_dir,
        set_times,
        dry_run,
    )


@main.command()
@click.pass_context
def devices(ctx: Any) -> None:
    """List connected devices."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        adb = AdbClient(adb_path=ctx.obj["adb"])
        adb.start_server()
        serials = adb.devices()
    except AdbSinkError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json({"devices": serials})
        return

    if not serials:
        out.warning("No devices connected")
        return
    for serial in serials:
        click.echo(serial)


@main.command()
@click.argument("remote_path")
@click.pass_context
def ls(ctx: Any, remote_path: str) -> None:
    """List a directory on the device.

    Examples:
        adbsink ls /sdcard
        adbsink --json ls /sdcard/DCIM
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        adb = _connect(ctx)
        entries = adb.list_dir(remote_path)
    except AdbSinkError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    rows = []
    for entry in sorted(entries, key=lambda e: e.name):
        file_type = entry.mode & S_IFMT
        if file_type == S_IFDIR:
            kind = "dir"
        elif file_type == S_IFLNK:
            kind = "link"
        else:
            kind = "file"
        rows.append(
            {
                "name": entry.name,
                "type": kind,
                "size": format_size(entry.size) if kind == "file" else "-",
                "modified": format_timestamp(entry.mtime),
            }
        )

    if not rows and not out.json_output:
        out.info("Directory is empty")
        return
    out.output_table(rows, ["name", "type", "size", "modified"], title=remote_path)


if __name__ == "__main__":
    main()
