"""Core engine mirroring a remote drive folder onto a local directory."""

import logging
import time
from contextlib import ExitStack
from typing import Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..api import GraphClient
from ..output import OutputFormatter
from .difflog import DiffLog
from .operations import SyncOperations
from .pair import MirrorPair
from .reconciler import Reconciler, create_empty_stats
from .snapshot import LocalTree
from .sweeper import OrphanSweeper
from .walker import RemoteTreeWalker

logger = logging.getLogger(__name__)


class MirrorEngine:
    """Runs one mirror pass: snapshot, remote walk, orphan sweep."""

    def __init__(
        self,
        client: GraphClient,
        output: Optional[OutputFormatter] = None,
    ):
        """Initialize mirror engine.

        Args:
            client: Graph API client
            output: Output formatter for displaying progress/status
        """
        self.client = client
        self.output = output or OutputFormatter()
        self.operations = SyncOperations(client)

    def mirror(self, pair: MirrorPair, dry_run: bool = False) -> dict:
        """Mirror a remote folder onto the local directory of a pair.

        Args:
            pair: Mirror pair to synchronize
            dry_run: If True, only show what would be done

        Returns:
            Dictionary with mirror statistics

        Raises:
            TypeConflictError: If a path changed between file and directory.
                The orphan sweep is skipped in that case.
            OSError: If the local tree cannot be read or an orphan cannot
                be removed

        Examples:
            >>> engine = MirrorEngine(client)
            >>> pair = MirrorPair(Path("/srv/mirror/Docs"), "Docs")
            >>> stats = engine.mirror(pair, dry_run=True)
            >>> print(f"Would download {stats['downloads']} files")
        """
        start_time = time.time()

        if not self.output.quiet:
            self.output.info(f"Mirroring: {pair.remote or '/'} -> {pair.local}")
            if dry_run:
                self.output.info("Dry run: No changes will be made")
            self.output.print("")

        stats = create_empty_stats()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet or self.output.json_output,
        ) as progress:
            task = progress.add_task("Scanning local directory...", total=None)
            snapshot = LocalTree.build(pair.local)
            progress.update(task, description=f"Found {len(snapshot)} local entries")

        walker = RemoteTreeWalker(self.client, pair.remote)

        with ExitStack() as stack:
            diff_log = None
            if pair.diff_list is not None and not dry_run:
                diff_log = stack.enter_context(DiffLog(pair.diff_list))

            reconciler = Reconciler(
                snapshot,
                self.operations,
                diff_log=diff_log,
                dry_run=dry_run,
                stats=stats,
            )

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                transient=True,
                disable=self.output.quiet or self.output.json_output,
            ) as progress:
                task = progress.add_task("Walking remote tree...", total=None)

                def visit(entry, containing_path):
                    progress.update(task, description=f"Processing {entry.path}")
                    return reconciler(entry, containing_path)

                walker.traverse(visit)

        stats["invalid"] = walker.skipped
        logger.info("%d remote items processed", stats["processed"])

        sweeper = OrphanSweeper(self.operations, dry_run=dry_run)
        stats["deletes_local"] = sweeper.sweep(snapshot)

        logger.debug("Mirror run took %.2fs", time.time() - start_time)

        if not self.output.quiet:
            self._display_summary(stats, reconciler.failed_paths, dry_run, diff_log)

        return stats

    def _display_summary(
        self,
        stats: dict,
        failed_paths: list[str],
        dry_run: bool,
        diff_log: Optional[DiffLog] = None,
    ) -> None:
        """Display mirror summary.

        Args:
            stats: Statistics dictionary
            failed_paths: Relative paths whose download failed
            dry_run: Whether this was a dry run
            diff_log: Diff log written during the run, if any
        """
        self.output.print("")
        if dry_run:
            self.output.success("Dry run complete!")
        else:
            self.output.success("Mirror complete!")

        self.output.info(f"Remote items processed: {stats['processed']}")

        total_actions = (
            stats["downloads"]
            + stats["updates"]
            + stats["directories_created"]
            + stats["deletes_local"]
        )
        if total_actions > 0:
            self.output.info(f"Total actions: {total_actions}")
            if stats["downloads"] > 0:
                self.output.info(f"  Downloaded: {stats['downloads']}")
            if stats["updates"] > 0:
                self.output.info(f"  Updated: {stats['updates']}")
            if stats["directories_created"] > 0:
                self.output.info(
                    f"  Directories created: {stats['directories_created']}"
                )
            if stats["deletes_local"] > 0:
                self.output.info(f"  Deleted locally: {stats['deletes_local']}")
        else:
            self.output.info("No changes needed - everything is in sync!")

        if diff_log is not None:
            self.output.info(
                f"Diff list: {diff_log.count} path(s) written to {diff_log.path}"
            )

        if stats["ignored"] or stats["invalid"]:
            self.output.warning(
                f"Skipped {stats['ignored'] + stats['invalid']} unrecognized "
                "remote item(s)"
            )
        if failed_paths:
            self.output.warning(f"{len(failed_paths)} download(s) failed:")
            for path in failed_paths:
                self.output.warning(f"  {path}")
