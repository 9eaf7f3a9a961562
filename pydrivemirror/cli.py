"""CLI interface for pydrivemirror."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from .api import GraphClient
from .auth import ClientCredentialsAuth
from .config import config
from .exceptions import GraphAPIError, GraphConfigError, TypeConflictError
from .models import EntryKind, TreeEntry
from .output import OutputFormatter
from .utils import format_size, join_remote_path, millis_to_display

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_TYPE_CONFLICT = 3
EXIT_INTERRUPTED = 130


def build_client(ctx: Any, drive_api_base: Optional[str]) -> GraphClient:
    """Create an authenticated Graph client from CLI options and config."""
    auth = ClientCredentialsAuth(
        tenant_id=ctx.obj.get("tenant_id"),
        client_id=ctx.obj.get("client_id"),
        client_secret=ctx.obj.get("client_secret"),
    )
    return GraphClient(auth, drive_api_base=drive_api_base)


@click.group()
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Load settings from this .env file instead of searching for one",
)
@click.option("--tenant-id", help="Azure AD tenant ID (default: TENANT_ID)")
@click.option("--client-id", help="Application (client) ID (default: CLIENT_ID)")
@click.option("--client-secret", help="Client secret (default: CLIENT_SECRET)")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pydrivemirror")
@click.pass_context
def main(
    ctx: Any,
    env_file: Optional[str],
    tenant_id: Optional[str],
    client_id: Optional[str],
    client_secret: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """pydrivemirror - Mirror a OneDrive / SharePoint folder to local disk."""
    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pydrivemirror").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    config.load_env_file(env_file)

    ctx.ensure_object(dict)
    ctx.obj["tenant_id"] = tenant_id
    ctx.obj["client_id"] = client_id
    ctx.obj["client_secret"] = client_secret
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose


@main.command()
@click.option(
    "--out-path",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Local directory receiving the mirror (default: OUT_PATH)",
)
@click.option(
    "--parent-folder",
    "-p",
    default=None,
    help="Remote folder to mirror (default: PARENT_FOLDER, else the drive root)",
)
@click.option(
    "--diff-list",
    "-d",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the local path of every downloaded file here (default: DIFF_LIST)",
)
@click.option(
    "--drive-api-base",
    default=None,
    help="Graph URL of the drive, e.g. https://graph.microsoft.com/v1.0/drives/ID",
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be done without changing files"
)
@click.pass_context
def sync(
    ctx: Any,
    out_path: Optional[Path],
    parent_folder: Optional[str],
    diff_list: Optional[Path],
    drive_api_base: Optional[str],
    dry_run: bool,
) -> None:
    """Mirror the remote folder onto the local output directory.

    New and changed files (by modification time) are downloaded, missing
    directories created, and local entries absent remotely deleted. The
    local copy lives in OUT_PATH/PARENT_FOLDER.

    Exit codes: 0 success, 1 error or failed downloads, 3 entry type changed
    between file and directory (the local entry is deleted, rerun to fetch).

    Examples:
        pydrivemirror sync -o /srv/mirror -p Documents
        pydrivemirror sync -o ./out -p Shared/Reports --diff-list changes.txt
        pydrivemirror sync -o ./out --dry-run
    """
    from .sync import MirrorEngine, MirrorPair

    out: OutputFormatter = ctx.obj["out"]

    try:
        pair = MirrorPair.from_config(
            config, out_path=out_path, parent_folder=parent_folder, diff_list=diff_list
        )
    except ValueError as e:
        out.error(str(e))
        ctx.exit(EXIT_ERROR)
        return  # Unreachable, but helps type checker

    try:
        client = build_client(ctx, drive_api_base)
    except GraphConfigError as e:
        out.error(str(e))
        ctx.exit(EXIT_ERROR)
        return

    try:
        with client:
            engine = MirrorEngine(client, out)
            stats = engine.mirror(pair, dry_run=dry_run)
    except TypeConflictError as e:
        out.error(f"{e} - local entry deleted, aborting")
        ctx.exit(EXIT_TYPE_CONFLICT)
        return
    except KeyboardInterrupt:
        out.warning("\nMirror cancelled by user")
        ctx.exit(EXIT_INTERRUPTED)
        return
    except GraphAPIError as e:
        out.error(f"API error: {e}")
        ctx.exit(EXIT_ERROR)
        return
    except OSError as e:
        out.error(f"Filesystem error: {e}")
        ctx.exit(EXIT_ERROR)
        return

    if out.json_output:
        out.output_json(stats)

    if stats["failures"] > 0:
        ctx.exit(EXIT_ERROR)


@main.command()
@click.argument("path", required=False, default="")
@click.option(
    "--parent-folder",
    "-p",
    default=None,
    help="Remote folder PATH is relative to (default: PARENT_FOLDER)",
)
@click.option("--drive-api-base", default=None, help="Graph URL of the drive")
@click.pass_context
def ls(
    ctx: Any, path: str, parent_folder: Optional[str], drive_api_base: Optional[str]
) -> None:
    """List the entries of a remote folder.

    PATH: Folder below PARENT_FOLDER (default: PARENT_FOLDER itself)

    Examples:
        pydrivemirror ls
        pydrivemirror ls Reports/2024
    """
    out: OutputFormatter = ctx.obj["out"]
    if parent_folder is None:
        parent_folder = config.parent_folder
    remote_path = join_remote_path(parent_folder, path)

    try:
        with build_client(ctx, drive_api_base) as client:
            items = client.list_children(remote_path)
    except GraphAPIError as e:
        out.error(f"API error: {e}")
        ctx.exit(EXIT_ERROR)
        return

    rows = []
    for item in items or []:
        name = item.get("name") if isinstance(item, dict) else None
        if not name:
            continue
        entry = TreeEntry.from_api_response(item)
        rows.append(
            [
                entry.name,
                entry.kind.value,
                millis_to_display(entry.modified_ms),
                format_size(entry.size) if entry.kind == EntryKind.FILE else "-",
            ]
        )

    if not rows and not out.json_output:
        out.info(f"No entries in /{remote_path}")
        return

    out.output_table(["Name", "Type", "Modified", "Size"], rows, title=f"/{remote_path}")
