#!/usr/bin/env python3
"""
Destination Planner
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Maps each source file and its tags to a destination relative to the scan
root. Sortable files go to "<Artist> - <Album>/<NN - ><Title><ext>", the
rest to "_Unsorted/<stem><ext>".

The extension is always copied verbatim from the source file name. It is
never sanitized, lower-cased or re-derived from the audio format.
"""

import logging
from typing import Iterable, List

from .models import PlannedMove, SourceFile, UNSORTED_FOLDER
from .sanitizer import sanitize

logger = logging.getLogger('DestinationPlanner')

FOLDER_SEPARATOR = " - "
TRACK_SEPARATOR = " - "


def format_track_prefix(track_number) -> str:
    """
    Build the track prefix for a file name.

    Args:
        track_number (int or None): Track number from the tags

    Returns:
        str: "01 - " style prefix, padded to two digits and never truncated,
             or "" when there is no track number
    """
    if track_number is None:
        return ""
    return f"{track_number:02d}{TRACK_SEPARATOR}"


def plan(source: SourceFile) -> PlannedMove:
    """
    Compute the destination of a single file.

    Args:
        source (SourceFile): File to place

    Returns:
        PlannedMove: Proposed destination relative to the scan root
    """
    tags = source.tags
    extension = source.extension

    if tags is None or not tags.is_sortable():
        file_name = sanitize(source.stem) + extension
        logger.debug(f"No artist/album tags, unsorted: {source.path.name}")
        return PlannedMove(source, f"{UNSORTED_FOLDER}/{file_name}", is_unsorted=True)

    folder = sanitize(tags.artist) + FOLDER_SEPARATOR + sanitize(tags.album)
    title = tags.title if tags.title.strip() else source.stem
    file_name = format_track_prefix(tags.track_number) + sanitize(title) + extension

    return PlannedMove(source, f"{folder}/{file_name}", is_unsorted=False)


def plan_all(sources: Iterable[SourceFile]) -> List[PlannedMove]:
    """Plan every file, keeping scan order."""
    return [plan(source) for source in sources]
