#!/usr/bin/env python3
"""
Move Executor
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Performs the filesystem move for one resolved move.

A move is an atomic rename when source and destination share a volume.
Across volumes it falls back to copy, verify, then delete the source; a
failure at any step is reported for that file only and the source is never
removed unless a complete copy exists.
"""

import errno
import logging
import os
import shutil
from pathlib import Path

from .models import Action, MoveOutcome, ResolvedMove
from .resolver import differs_only_by_case

logger = logging.getLogger('MoveExecutor')


class MoveExecutor:
    """Moves files into their final destination under the scan root."""

    def __init__(self, root):
        """
        Args:
            root (str or Path): Scan root that final destinations are relative to
        """
        self.root = Path(root)

    def destination_path(self, move: ResolvedMove) -> Path:
        """Absolute path of a move's final destination."""
        return self.root.joinpath(*move.final_destination.split("/"))

    def execute(self, move: ResolvedMove, dry_run: bool) -> MoveOutcome:
        """
        Execute a single resolved move.

        Args:
            move (ResolvedMove): Move to perform
            dry_run (bool): Report what would happen without touching the disk

        Returns:
            MoveOutcome: Success, or Failed with a reason
        """
        if move.failure_reason:
            return MoveOutcome.failed(move, move.failure_reason)

        if dry_run or move.action is Action.SKIP:
            return MoveOutcome.success(move)

        source = move.source.path
        destination = self.destination_path(move)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return self._fail(move, f"could not create directory {destination.parent}: {e.strerror or e}")

        # The destination may have appeared since planning; never overwrite it
        if os.path.lexists(destination) and not self._same_file(source, destination):
            return self._fail(move, f"destination already exists (appeared after planning): {destination}")

        try:
            os.rename(source, destination)
        except OSError as e:
            if e.errno != errno.EXDEV:
                return self._fail(move, f"failed to move: {e.strerror or e}")
            logger.debug(f"Cross-device move, copying instead: {source} -> {destination}")
            return self._copy_then_delete(move, source, destination)

        logger.info(f"Moved: {source} -> {destination}")
        return MoveOutcome.success(move)

    def _copy_then_delete(self, move: ResolvedMove, source: Path, destination: Path) -> MoveOutcome:
        """
        Move across volumes: copy, verify the copy, then delete the source.

        Args:
            move (ResolvedMove): Move being performed
            source (Path): Source file
            destination (Path): Destination file on another volume

        Returns:
            MoveOutcome: Success, or Failed naming the step that failed
        """
        try:
            expected_size = os.stat(source).st_size
        except OSError as e:
            return self._fail(move, f"could not read source: {e.strerror or e}")

        created = False
        try:
            with open(source, "rb") as fsrc:
                # Exclusive create, a file that appeared since the check is kept
                with open(destination, "xb") as fdst:
                    created = True
                    shutil.copyfileobj(fsrc, fdst)
        except FileExistsError:
            return self._fail(move, f"destination already exists (appeared after planning): {destination}")
        except OSError as e:
            if created:
                self._remove_partial_copy(destination)
            return self._fail(move, f"failed to copy to other volume: {e.strerror or e}")

        try:
            shutil.copystat(source, destination)
        except OSError as e:
            logger.warning(f"Could not copy timestamps and permissions to {destination}: {e}")

        try:
            copied_size = os.stat(destination).st_size
        except OSError as e:
            copied_size = None
            logger.debug(f"Could not stat copy {destination}: {e}")

        if copied_size != expected_size:
            self._remove_partial_copy(destination)
            return self._fail(move, f"copy verification failed: expected {expected_size} bytes, "
                                    f"copied {copied_size}")

        try:
            os.remove(source)
        except OSError as e:
            # Both copies stay on disk
            return self._fail(move, f"copied to {destination} but could not remove source: "
                                    f"{e.strerror or e}")

        logger.info(f"Moved (copied across devices): {source} -> {destination}")
        return MoveOutcome.success(move)

    @staticmethod
    def _same_file(source: Path, destination: Path) -> bool:
        """Check for the source itself spelled with different case."""
        if not differs_only_by_case(source, destination):
            return False
        try:
            return os.path.samefile(source, destination)
        except OSError:
            return False

    @staticmethod
    def _remove_partial_copy(destination: Path):
        try:
            if os.path.lexists(destination):
                os.remove(destination)
        except OSError as e:
            logger.warning(f"Could not remove incomplete copy {destination}: {e}")

    @staticmethod
    def _fail(move: ResolvedMove, reason: str) -> MoveOutcome:
        logger.error(f"Failed to move {move.source.path}: {reason}")
        return MoveOutcome.failed(move, reason)


def execute(move: ResolvedMove, dry_run: bool, root) -> MoveOutcome:
    """Execute one resolved move relative to the given scan root."""
    return MoveExecutor(root).execute(move, dry_run)
