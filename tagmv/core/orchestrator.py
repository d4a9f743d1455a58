#!/usr/bin/env python3
"""
Batch Orchestrator
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Runs a whole batch: plan every file, resolve conflicts once over the batch,
execute the moves in order and summarize the outcome. Individual failures
end up in the report; only whole-batch problems (such as an unreadable
root) are raised to the caller.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from .executor import MoveExecutor
from .models import Action, MoveOutcome, Report, ResolvedMove, SourceFile, TagRecord
from .planner import plan_all
from .resolver import ConflictResolver

logger = logging.getLogger('BatchOrchestrator')

TagReader = Callable[[Path], Optional[TagRecord]]


def count_folders(resolved: Sequence[ResolvedMove]) -> int:
    """
    Count the distinct album folders a batch places files in.

    Args:
        resolved (list): Resolved moves of the batch

    Returns:
        int: Number of distinct non-unsorted destination folders
    """
    folders = {
        move.folder for move in resolved
        if not move.is_unsorted and not move.failure_reason
        and move.action in (Action.MOVE, Action.SKIP)
    }
    return len(folders)


class BatchOrchestrator:
    """Coordinates planner, resolver and executor over one set of files."""

    def __init__(self, root, tag_reader: Optional[TagReader] = None):
        """
        Args:
            root (str or Path): Scan root; all destinations are placed under it
            tag_reader (callable, optional): Path -> TagRecord or None, used by
                load_sources()
        """
        self.root = Path(root)
        self.tag_reader = tag_reader

    def load_sources(self, paths: Iterable[Path]) -> List[SourceFile]:
        """
        Read tags for every path, keeping scan order.

        A file whose tags cannot be read is kept with no tags so it lands in
        the unsorted bucket.

        Args:
            paths (list): Audio file paths in scan order

        Returns:
            list: SourceFile per path
        """
        sources = []
        for path in paths:
            tags = None
            if self.tag_reader is not None:
                try:
                    tags = self.tag_reader(Path(path))
                except Exception as e:
                    logger.warning(f"Could not read tags from {Path(path).name}: {e}")
            sources.append(SourceFile(path, tags))
        return sources

    def resolve(self, files: Sequence[SourceFile]) -> List[ResolvedMove]:
        """Plan and resolve a batch without executing anything."""
        plans = plan_all(files)
        return ConflictResolver(self.root).resolve(plans)

    def run(self, files: Sequence[SourceFile], dry_run: bool) -> Report:
        """
        Plan, resolve and execute a batch.

        Args:
            files (list): Source files in scan order
            dry_run (bool): Preview only; nothing on disk changes

        Returns:
            Report: Counts and one outcome per file
        """
        resolved = self.resolve(files)
        executor = MoveExecutor(self.root)

        outcomes: List[MoveOutcome] = []
        for i, move in enumerate(resolved, 1):
            logger.debug(f"Processing file {i}/{len(resolved)}: {move.source.path.name}")
            outcomes.append(executor.execute(move, dry_run))

        report = Report(
            total_files=len(files),
            folder_count=count_folders(resolved),
            unsorted_count=sum(1 for move in resolved if move.is_unsorted),
            outcomes=outcomes,
            dry_run=dry_run,
        )

        if report.has_failures:
            logger.error(f"{report.failed_count} of {report.total_files} files could not be moved")
        return report


def run(files: Sequence[SourceFile], dry_run: bool, root) -> Report:
    """Run one batch of already-tagged files under the given scan root."""
    return BatchOrchestrator(root).run(files, dry_run)
