#!/usr/bin/env python3
"""
Sanitizer
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Converts arbitrary tag strings into path segments that are legal on Linux,
macOS and Windows/FAT filesystems.
"""

import re
import unicodedata

FALLBACK_NAME = "Unknown"

# Replaced with a dash so "AC/DC" stays readable
SEPARATOR_CHARS = {'/': '-', '\\': '-'}

# Removed outright
FORBIDDEN_CHARS = set(':*?"<>|')

# Windows/FAT32 device names that cannot be used as a file or folder name
RESERVED_NAMES = {
    "CON", "PRN", "AUX", "NUL",
    "COM1", "COM2", "COM3", "COM4", "COM5", "COM6", "COM7", "COM8", "COM9",
    "LPT1", "LPT2", "LPT3", "LPT4", "LPT5", "LPT6", "LPT7", "LPT8", "LPT9",
}


def sanitize(raw: str) -> str:
    """
    Clean a string to be safe for use as a single path segment.

    Slashes become dashes, forbidden and control characters are dropped,
    whitespace runs collapse to one space and leading/trailing dots and
    spaces are trimmed. Reserved device names get a leading underscore.

    Args:
        raw (str): Text to sanitize

    Returns:
        str: Sanitized text, never empty ("Unknown" when nothing is left)
    """
    kept = []
    for char in raw:
        if char in SEPARATOR_CHARS:
            kept.append(SEPARATOR_CHARS[char])
        elif char in FORBIDDEN_CHARS:
            continue
        elif unicodedata.category(char) == 'Cc':
            # Covers C0, DEL and C1, so tabs and newlines are dropped too
            continue
        else:
            kept.append(char)

    collapsed = re.sub(r'\s+', ' ', "".join(kept))
    trimmed = collapsed.strip(". ")

    if not trimmed:
        return FALLBACK_NAME

    if trimmed.upper() in RESERVED_NAMES:
        return f"_{trimmed}"

    return trimmed
