#!/usr/bin/env python3
"""
Tagmv Package
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Organize a directory of audio files into "Artist - Album" folders based on
their embedded tags, with a dry-run preview before anything is moved.

Core Modules:
- sanitizer: Turn arbitrary tag text into filesystem-safe path segments
- planner: Map each file and its tags to a destination under the scan root
- resolver: Make destinations unique across a batch and detect no-op moves
- executor: Move one file, with a copy-then-delete fallback across devices
- orchestrator: Run a whole batch and build the summary report

Addon Modules:
- tags: Read artist/album/track/title with mutagen
- scanner: Find supported audio files under a directory
- quick_action: Install a macOS Finder Quick Action that runs tagmv
"""

__version__ = "1.0.0"
__author__ = "Tagmv Contributors"

from .core import sanitizer, planner, resolver, executor, orchestrator
from .addons import tags, scanner, quick_action

__all__ = [
    # Core modules
    'sanitizer', 'planner', 'resolver', 'executor', 'orchestrator',
    # Addon modules
    'tags', 'scanner', 'quick_action',
]
