#!/usr/bin/env python3
"""
Tagmv Core Modules Package
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Core modules package for tagmv. These modules hold the planning and
execution engine: sanitizing tag text, planning destinations, resolving
naming conflicts across a batch, moving files and reporting the outcome.
"""
