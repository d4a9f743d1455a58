#!/usr/bin/env python3
"""
Data models for tagmv
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Contains the records passed between the planner, resolver, executor and
orchestrator for a single run.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

UNSORTED_FOLDER = "_Unsorted"


class Action(Enum):
    """What the executor should do with a resolved move"""
    MOVE = "move"
    SKIP = "skip"


class MoveResult(Enum):
    """Result of executing a resolved move"""
    SUCCESS = "success"
    FAILED = "failed"


class TagRecord:
    """Tag data read from one audio file."""

    def __init__(self, artist: Optional[str] = None, album: Optional[str] = None,
                 track_number: Optional[int] = None, title: Optional[str] = None):
        """
        Initialize a TagRecord instance.

        Args:
            artist (str): Track artist
            album (str): Album name
            track_number (int): Track number, None when absent
            title (str): Track title
        """
        self.artist = artist or ""
        self.album = album or ""
        self.track_number = track_number
        self.title = title or ""

    def is_sortable(self) -> bool:
        """
        Check whether the tags are enough to place the file in an album folder.

        Returns:
            bool: True if both artist and album are non-empty after trimming
        """
        return bool(self.artist.strip() and self.album.strip())

    def to_dict(self) -> Dict[str, object]:
        """Convert the tags to dictionary format."""
        return {
            'artist': self.artist,
            'album': self.album,
            'track_number': self.track_number,
            'title': self.title,
        }

    def __eq__(self, other):
        if not isinstance(other, TagRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"TagRecord(artist={self.artist!r}, album={self.album!r}, "
                f"track_number={self.track_number!r}, title={self.title!r})")


class SourceFile:
    """An audio file found by the scanner, with its tags if any."""

    def __init__(self, path, tags: Optional[TagRecord] = None):
        """
        Initialize a SourceFile instance.

        Args:
            path (str or Path): Absolute path of the file
            tags (TagRecord, optional): Tags read from the file
        """
        self.path = Path(path)
        self.tags = tags

    @property
    def stem(self) -> str:
        """File name without its extension."""
        return self.path.stem

    @property
    def extension(self) -> str:
        """Extension exactly as it appears on disk, including the dot."""
        return self.path.suffix

    def __repr__(self):
        return f"SourceFile({str(self.path)!r})"


class PlannedMove:
    """Proposed destination for one source file, relative to the scan root."""

    def __init__(self, source: SourceFile, relative_destination: str, is_unsorted: bool):
        """
        Args:
            source (SourceFile): File being placed
            relative_destination (str): "/"-separated path under the scan root
            is_unsorted (bool): True when the file goes to the unsorted bucket
        """
        self.source = source
        self.relative_destination = relative_destination
        self.is_unsorted = is_unsorted

    def __repr__(self):
        return f"PlannedMove({str(self.source.path)!r} -> {self.relative_destination!r})"


class ResolvedMove:
    """A planned move whose destination is unique within the batch."""

    def __init__(self, planned: PlannedMove, final_destination: str, action: Action,
                 failure_reason: Optional[str] = None):
        """
        Args:
            planned (PlannedMove): The plan this was resolved from
            final_destination (str): Collision-free "/"-separated path under the root
            action (Action): MOVE, or SKIP when the file is already there
            failure_reason (str, optional): Set when no free name could be found
        """
        self.planned = planned
        self.final_destination = final_destination
        self.action = action
        self.failure_reason = failure_reason

    @property
    def source(self) -> SourceFile:
        return self.planned.source

    @property
    def is_unsorted(self) -> bool:
        return self.planned.is_unsorted

    @property
    def folder(self) -> str:
        """Directory part of the final destination."""
        return self.final_destination.rpartition("/")[0]

    @property
    def file_name(self) -> str:
        """File name part of the final destination."""
        return self.final_destination.rpartition("/")[2]

    def __repr__(self):
        return (f"ResolvedMove({str(self.source.path)!r} -> {self.final_destination!r}, "
                f"{self.action.value})")


class MoveOutcome:
    """What happened when a resolved move was executed."""

    def __init__(self, resolved: ResolvedMove, result: MoveResult, reason: Optional[str] = None):
        self.resolved = resolved
        self.result = result
        self.reason = reason

    @classmethod
    def success(cls, resolved: ResolvedMove) -> "MoveOutcome":
        return cls(resolved, MoveResult.SUCCESS)

    @classmethod
    def failed(cls, resolved: ResolvedMove, reason: str) -> "MoveOutcome":
        return cls(resolved, MoveResult.FAILED, reason)

    @property
    def succeeded(self) -> bool:
        return self.result is MoveResult.SUCCESS

    def __repr__(self):
        if self.succeeded:
            return f"MoveOutcome({self.resolved!r}, success)"
        return f"MoveOutcome({self.resolved!r}, failed: {self.reason})"


class Report:
    """Summary of one batch run, consumed by the console output."""

    def __init__(self, total_files: int, folder_count: int, unsorted_count: int,
                 outcomes: List[MoveOutcome], dry_run: bool):
        """
        Args:
            total_files (int): Number of files in the batch
            folder_count (int): Distinct album folders represented
            unsorted_count (int): Files routed to the unsorted bucket
            outcomes (list): One MoveOutcome per file, in execution order
            dry_run (bool): Whether the batch was a preview
        """
        self.total_files = total_files
        self.folder_count = folder_count
        self.unsorted_count = unsorted_count
        self.outcomes = outcomes
        self.dry_run = dry_run

    @property
    def skipped_count(self) -> int:
        """Files already in their final place."""
        return sum(1 for o in self.outcomes if o.succeeded and o.resolved.action is Action.SKIP)

    @property
    def moved_count(self) -> int:
        """Files moved (or that would be moved, in a dry run)."""
        return sum(1 for o in self.outcomes if o.succeeded and o.resolved.action is Action.MOVE)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.succeeded)

    @property
    def has_failures(self) -> bool:
        return self.failed_count > 0

    def failures(self) -> List[MoveOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    def folders(self) -> Dict[str, List[MoveOutcome]]:
        """
        Group outcomes by destination folder.

        Returns:
            dict: Folder name -> outcomes in that folder, sorted by folder name
        """
        grouped: Dict[str, List[MoveOutcome]] = {}
        for outcome in self.outcomes:
            grouped.setdefault(outcome.resolved.folder, []).append(outcome)
        return {folder: grouped[folder] for folder in sorted(grouped)}
