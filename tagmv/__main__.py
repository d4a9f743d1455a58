#!/usr/bin/env python3
"""
Tagmv module entry point
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Allows running tagmv as "python -m tagmv".
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
