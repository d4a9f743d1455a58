#!/usr/bin/env python3
"""
Conflict Resolver
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Turns the planned destinations of a whole batch into unique final
destinations.

Files are processed strictly in scan order. The first file to reach a free
destination keeps it; later files (or files whose destination is already
taken on disk by a different file) get " (1)", " (2)", ... inserted before
the extension. With a stable directory listing the result is the same on
every run. A file that already sits at its final destination is skipped.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .models import Action, PlannedMove, ResolvedMove

logger = logging.getLogger('ConflictResolver')

MAX_CONFLICT_ATTEMPTS = 10_000
TOO_MANY_CONFLICTS = "too many naming conflicts"


def relative_location(path: Path, root: Path) -> Optional[str]:
    """
    Get the "/"-separated location of a file relative to the scan root.

    Args:
        path (Path): Absolute file path
        root (Path): Scan root

    Returns:
        str or None: Relative path, or None if the file is outside the root
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return None


def with_suffix_number(candidate: str, extension: str, counter: int) -> str:
    """
    Insert " (N)" right before the extension of a destination.

    Args:
        candidate (str): Destination such as "Artist - Album/01 - Title.mp3"
        extension (str): Extension of the source file, e.g. ".mp3" or ""
        counter (int): Number to insert

    Returns:
        str: e.g. "Artist - Album/01 - Title (1).mp3"
    """
    if extension and candidate.endswith(extension):
        base = candidate[:-len(extension)]
    else:
        base, extension = candidate, ""
    return f"{base} ({counter}){extension}"


def differs_only_by_case(first, second) -> bool:
    """Check whether two paths are spelled the same apart from letter case."""
    return str(first) != str(second) and str(first).casefold() == str(second).casefold()


class ConflictResolver:
    """
    Assigns collision-free destinations across one batch.

    The claimed-destination map lives only for one resolve() call.
    """

    def __init__(self, root, max_attempts: Optional[int] = None):
        """
        Args:
            root (str or Path): Scan root that destinations are relative to
            max_attempts (int, optional): Highest " (N)" suffix tried before
                giving up, MAX_CONFLICT_ATTEMPTS when omitted
        """
        self.root = Path(root)
        self.max_attempts = MAX_CONFLICT_ATTEMPTS if max_attempts is None else max_attempts

    def _occupied_by_other(self, candidate: str, source_path: Path, current: Optional[str]) -> bool:
        """Check whether a different file already sits at the candidate on disk."""
        target = self.root / candidate
        if not os.path.lexists(target):
            return False
        if current is None or not differs_only_by_case(candidate, current):
            # Hardlinks and symlinks to the source still occupy the name
            return True
        try:
            # Case-only rename on a case-insensitive volume
            return not os.path.samefile(target, source_path)
        except OSError:
            return True

    def _is_free(self, candidate: str, source_path: Path, current: Optional[str],
                 claimed: Dict[str, int]) -> bool:
        return (candidate not in claimed
                and not self._occupied_by_other(candidate, source_path, current))

    def resolve_one(self, planned: PlannedMove, claimed: Dict[str, int]) -> ResolvedMove:
        """
        Resolve a single plan against what earlier files in the batch claimed.

        Args:
            planned (PlannedMove): Plan to resolve
            claimed (dict): Destination -> number of times it was requested so
                far in this batch; updated in place

        Returns:
            ResolvedMove: Final destination and action for the file
        """
        source_path = planned.source.path
        current = relative_location(source_path, self.root)
        candidate = planned.relative_destination

        if candidate == current and candidate not in claimed:
            claimed[candidate] = 1
            return ResolvedMove(planned, candidate, Action.SKIP)

        if not self._is_free(candidate, source_path, current, claimed):
            extension = planned.source.extension
            for counter in range(1, self.max_attempts + 1):
                suffixed = with_suffix_number(planned.relative_destination, extension, counter)
                if suffixed == current and suffixed not in claimed:
                    candidate = suffixed
                    break
                if self._is_free(suffixed, source_path, current, claimed):
                    candidate = suffixed
                    break
            else:
                logger.error(f"Gave up finding a free name for {source_path.name} "
                             f"after {self.max_attempts} attempts")
                return ResolvedMove(planned, planned.relative_destination, Action.MOVE,
                                    failure_reason=TOO_MANY_CONFLICTS)
            logger.debug(f"Name conflict resolved: {planned.relative_destination} -> {candidate}")

        claimed[planned.relative_destination] = claimed.get(planned.relative_destination, 0) + 1
        claimed.setdefault(candidate, 1)

        action = Action.SKIP if candidate == current else Action.MOVE
        return ResolvedMove(planned, candidate, action)

    def resolve(self, plans: Sequence[PlannedMove]) -> List[ResolvedMove]:
        """
        Resolve a whole batch, preserving input order.

        Args:
            plans (list): Planned moves in scan order

        Returns:
            list: One ResolvedMove per plan, in the same order
        """
        claimed: Dict[str, int] = {}
        return [self.resolve_one(planned, claimed) for planned in plans]


def resolve(plans: Sequence[PlannedMove], root) -> List[ResolvedMove]:
    """Resolve a batch of plans against the given scan root."""
    return ConflictResolver(root).resolve(plans)
