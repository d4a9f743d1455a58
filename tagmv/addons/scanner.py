#!/usr/bin/env python3
"""
Scanner - Find supported audio files under a directory
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

The order of the returned list is the scan order used to decide which file
keeps a contested destination, so it is sorted and stable across runs.
"""

import logging
import os
from pathlib import Path
from typing import List

from ..core.models import UNSORTED_FOLDER

logger = logging.getLogger('Scanner')

AUDIO_EXTENSIONS = {'.mp3', '.m4a', '.flac', '.ogg', '.wma', '.aac', '.wav'}


def is_audio_file(name: str) -> bool:
    """Check the extension against the supported formats, ignoring case."""
    return os.path.splitext(name)[1].lower() in AUDIO_EXTENSIONS


def is_hidden(name: str) -> bool:
    return name.startswith('.')


def _log_walk_error(error: OSError):
    logger.warning(f"Could not read directory {error.filename}: {error.strerror or error}")


def scan_files(root, recursive: bool = False) -> List[Path]:
    """
    List the audio files to organize.

    Args:
        root (str or Path): Directory to scan
        recursive (bool): Also scan subdirectories, except hidden ones and
            the unsorted bucket

    Returns:
        list: Absolute file paths, sorted component by component

    Raises:
        NotADirectoryError: If root is not a directory
        OSError: If root cannot be read
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    files = []
    if recursive:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
            # Prune in place so os.walk does not descend
            dirnames[:] = [d for d in dirnames if not is_hidden(d) and d != UNSORTED_FOLDER]
            for name in filenames:
                path = Path(dirpath) / name
                if not is_hidden(name) and is_audio_file(name) and path.is_file():
                    files.append(path)
    else:
        with os.scandir(root) as entries:
            for entry in entries:
                if is_hidden(entry.name) or not is_audio_file(entry.name):
                    continue
                if entry.is_file():
                    files.append(Path(entry.path))

    files.sort(key=lambda p: p.parts)
    logger.debug(f"Found {len(files)} audio files in {root}")
    return files
