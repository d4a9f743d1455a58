#!/usr/bin/env python3
"""
Tags - Read artist, album, track number and title from audio files
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Uses mutagen for every supported format (MP3, M4A/AAC, FLAC, OGG, WMA, WAV).
Tag reading problems are logged and reported as "no tags"; they never stop
a scan.
"""

import logging
import re
from pathlib import Path
from typing import Any, Optional

from mutagen import File as MutagenFile
from mutagen import MutagenError

from ..core.models import TagRecord

logger = logging.getLogger('TagReader')

# Keys tried in order: easy keys, ID3 frames, MP4 atoms, Vorbis comments, ASF attributes
TAG_KEYS = {
    'artist': ['artist', 'TPE1', '\xa9ART', 'ARTIST', 'Author', 'WM/AlbumArtist'],
    'album': ['album', 'TALB', '\xa9alb', 'ALBUM', 'WM/AlbumTitle'],
    'title': ['title', 'TIT2', '\xa9nam', 'TITLE', 'Title'],
    'track': ['tracknumber', 'TRCK', 'trkn', 'TRACKNUMBER', 'WM/TrackNumber'],
}

TRACK_PATTERN = re.compile(r'^\s*(\d+)')


def _first_value(value: Any) -> Any:
    """Unwrap list-valued tags to their first entry."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _lookup(audio, field: str) -> Any:
    """
    Find the first present key for a field.

    Args:
        audio: Object returned by mutagen.File
        field (str): One of the TAG_KEYS fields

    Returns:
        First value found, or None
    """
    tags = audio.tags
    if tags is None:
        return None
    for key in TAG_KEYS[field]:
        try:
            if key in tags:
                value = _first_value(tags[key])
                if value is not None:
                    return value
        except (KeyError, ValueError):
            # Easy wrappers reject keys they do not know
            continue
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, 'text') and not isinstance(value, str):
        # ID3 frame
        return str(_first_value(value.text) or "")
    return str(value)


def parse_track_number(value: Any) -> Optional[int]:
    """
    Parse a track number tag.

    Args:
        value: "5", "5/12", 5, (5, 12) or a frame holding one of those

    Returns:
        int or None: Track number, None when missing, zero or unparsable
    """
    value = _first_value(value)
    if value is None:
        return None
    if isinstance(value, int):
        number = value
    else:
        match = TRACK_PATTERN.match(_text(value))
        if not match:
            return None
        number = int(match.group(1))
    return number if number > 0 else None


def read_tags(path) -> Optional[TagRecord]:
    """
    Read the tags the planner needs from an audio file.

    Args:
        path (str or Path): Audio file path

    Returns:
        TagRecord or None: None when the file has no readable tags
    """
    path = Path(path)
    try:
        audio = MutagenFile(path, easy=True)
    except (MutagenError, OSError) as e:
        logger.warning(f"Could not read metadata from {path.name}: {e}")
        return None

    if audio is None or audio.tags is None:
        logger.debug(f"No tags found in {path.name}")
        return None

    record = TagRecord(
        artist=_text(_lookup(audio, 'artist')).strip(),
        album=_text(_lookup(audio, 'album')).strip(),
        track_number=parse_track_number(_lookup(audio, 'track')),
        title=_text(_lookup(audio, 'title')).strip(),
    )
    logger.debug(f"Tags for {path.name}: {record.to_dict()}")
    return record
