#!/usr/bin/env python3
"""
Tagmv Addon Modules
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Addon modules that feed the core engine or integrate it with the desktop:
tag reading, directory scanning and the Finder Quick Action installer.
"""

from . import tags
from . import scanner
from . import quick_action

__all__ = ['tags', 'scanner', 'quick_action']
