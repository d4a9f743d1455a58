#!/usr/bin/env python3
"""
Tagmv command line
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Sort the audio files of a directory into "Artist - Album" folders based on
their tags. Runs as a dry-run preview unless --execute is given.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .addons.quick_action import WORKFLOW_NAME, install_quick_action, resolve_program_path
from .addons.scanner import scan_files
from .addons.tags import read_tags
from .core.models import Action, Report, UNSORTED_FOLDER
from .core.orchestrator import BatchOrchestrator

logger = logging.getLogger('Tagmv')


def configure_logging(level: str = "low"):
    """
    Configure logging for a command line run.

    Args:
        level (str): "low" for INFO, "high" for DEBUG
    """
    logging.basicConfig(
        level=logging.DEBUG if level == "high" else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="tagmv",
        description="Organize music files by audio tags",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Preview how the current directory would be sorted
  tagmv

  # Sort a folder and its subfolders for real
  tagmv ~/Downloads/music --recursive --execute

  # Install the Finder Quick Action (macOS)
  tagmv install

Files with artist and album tags go to "Artist - Album/NN - Title.ext".
Everything else goes to "_Unsorted/". Name clashes get " (1)", " (2)", ...
in scan order.
""")
    parser.add_argument(
        "path",
        nargs="?",
        help="Directory to sort (defaults to current directory)"
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Actually move files (default is dry-run preview)"
    )
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Scan subdirectories"
    )
    parser.add_argument(
        "--logging",
        choices=["low", "high"],
        default="low",
        help="Logging level: low (default) or high (verbose)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def resolve_root(raw: Optional[str]) -> Path:
    """
    Turn the path argument into an absolute directory.

    Raises:
        NotADirectoryError: If the path does not exist or is not a directory
    """
    root = Path(raw).expanduser() if raw else Path(os.getcwd())
    if not root.exists():
        raise NotADirectoryError(f"Cannot resolve path: {root}")
    root = root.resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    return root


def print_plan(report: Report):
    """Print the destination folders and files of a batch."""
    for folder, outcomes in report.folders().items():
        label = folder if folder == UNSORTED_FOLDER else f"{folder}/"
        print(f"  {label}")
        for outcome in outcomes:
            move = outcome.resolved
            if move.action is Action.SKIP:
                print(f"    {move.file_name}  (already in place)")
            else:
                print(f"    {move.file_name}  <- {move.source.path.name}")
        print()


def summary_line(report: Report) -> str:
    line = (f"Summary: {report.total_files} files -> {report.folder_count} folders, "
            f"{report.unsorted_count} unsorted")
    if report.skipped_count:
        line += f", {report.skipped_count} already in place"
    return line


def print_failures(report: Report):
    """Print one line per failed file to stderr."""
    for outcome in report.failures():
        move = outcome.resolved
        print(f"  ERROR {move.source.path} -> {move.final_destination}: {outcome.reason}",
              file=sys.stderr)


def print_results(report: Report):
    """Print the outcome of an execute run."""
    line = f"Moved {report.moved_count} files successfully"
    if report.failed_count:
        line += f", {report.failed_count} errors"
    print(line)


def organize(options: Dict) -> Report:
    """
    Scan, plan and (optionally) move the files of one directory.

    Args:
        options (dict): 'root', 'recursive' and 'dry_run'

    Returns:
        Report: Outcome of the batch
    """
    root = options['root']
    files = scan_files(root, options.get('recursive', False))
    print(f"Found {len(files)} audio files\n")

    orchestrator = BatchOrchestrator(root, tag_reader=read_tags)
    sources = orchestrator.load_sources(files)
    return orchestrator.run(sources, options.get('dry_run', True))


def run_install() -> int:
    """Install the Finder Quick Action and print next steps."""
    try:
        program = resolve_program_path()
        wf_dir = install_quick_action(program)
    except (RuntimeError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1

    print(f"Installed Quick Action: \"{WORKFLOW_NAME}\"")
    print(f"  Location: {wf_dir}")
    print(f"  Program:  {program}")
    print()
    print("Next steps:")
    print("  1. Open System Settings -> Privacy & Security -> Extensions -> Finder")
    print(f"  2. Enable \"{WORKFLOW_NAME}\"")
    print("  3. If it doesn't appear, run: killall Finder")
    print()
    print(f"Usage: Right-click a folder in Finder -> Quick Actions -> \"{WORKFLOW_NAME}\"")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for tagmv.

    Returns:
        int: Exit status, 1 if anything failed
    """
    argv = sys.argv[1:] if argv is None else argv
    if argv and argv[0] == "install":
        configure_logging(parse_arguments(argv[1:]).logging)
        return run_install()

    args = parse_arguments(argv)
    configure_logging(args.logging)

    try:
        root = resolve_root(args.path)
    except OSError as e:
        logger.error(f"Error: {e}")
        return 1

    options = {
        'root': root,
        'recursive': args.recursive,
        'dry_run': not args.execute,
    }

    mode = "EXECUTING" if args.execute else "DRY RUN (use --execute to move files)"
    print(f"tagmv v{__version__} -- {mode}\n")
    print(f"Scanning: {root}")

    try:
        report = organize(options)
    except OSError as e:
        logger.error(f"Error: {e}")
        return 1

    if report.total_files == 0:
        return 0

    print_plan(report)
    print(summary_line(report))

    if args.execute:
        print()
        print_results(report)

    print_failures(report)

    return 1 if report.has_failures else 0


if __name__ == "__main__":
    sys.exit(main())
