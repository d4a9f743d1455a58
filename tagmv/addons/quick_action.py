#!/usr/bin/env python3
"""
Quick Action - Install a macOS Finder Quick Action that runs tagmv
Copyright (c) 2025 TAPS OSS
Licensed under the BSD-3-Clause License (see LICENSE file for details)

Creates "Sort Music by Tags.workflow" in ~/Library/Services. Right-clicking
a folder in Finder and choosing the Quick Action runs
"tagmv --execute <folder>" on every selected folder.
"""

import logging
import os
import plistlib
import shlex
import shutil
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger('QuickAction')

WORKFLOW_NAME = "Sort Music by Tags"
FINDER_BUNDLE_ID = "com.apple.finder"
FINDER_PATH = "/System/Library/CoreServices/Finder.app"
RUN_SHELL_SCRIPT_ACTION = "/System/Library/Automator/Run Shell Script.action"


def home_dir() -> Path:
    """
    Get the user's home directory from $HOME.

    Raises:
        RuntimeError: If HOME is unset or not absolute
    """
    home = os.environ.get("HOME")
    if not home or not os.path.isabs(home):
        raise RuntimeError("$HOME is not set or is not an absolute path")
    return Path(home)


def workflow_dir(home: Optional[Path] = None) -> Path:
    home = home or home_dir()
    return home / "Library" / "Services" / f"{WORKFLOW_NAME}.workflow"


def resolve_program_path(raw: Optional[str] = None) -> Path:
    """
    Find the tagmv executable the Quick Action should call.

    Args:
        raw (str, optional): Explicit path to use

    Returns:
        Path: Absolute program path

    Raises:
        RuntimeError: If no executable can be found
    """
    if raw:
        return Path(raw).expanduser().resolve()
    detected = shutil.which("tagmv")
    if detected:
        return Path(detected).resolve()
    argv0 = Path(sys.argv[0]).expanduser()
    if argv0.exists():
        return argv0.resolve()
    raise RuntimeError("Could not determine the path of the tagmv executable")


def shell_script(program: Path) -> str:
    """Shell script run by the Automator action for the selected items."""
    quoted = shlex.quote(str(program))
    return (
        'for f in "$@"; do\n'
        '  if [ -d "$f" ]; then\n'
        f'    {quoted} --execute "$f"\n'
        '  fi\n'
        'done'
    )


def _argument(uuid: str, name: str, default) -> dict:
    return {
        "default value": default,
        "name": name,
        "required": "0",
        "type": "0",
        "uuid": uuid,
    }


def document_wflow(program: Path) -> dict:
    """
    Build the Automator document for the workflow.

    Args:
        program (Path): tagmv executable

    Returns:
        dict: Property list for Contents/document.wflow
    """
    string_list = {"Container": "List", "Types": ["com.apple.cocoa.string"]}
    action = {
        "AMAccepts": dict(string_list, Optional=True),
        "AMActionVersion": "2.0.3",
        "AMApplication": ["Automator"],
        "AMParameterProperties": {
            "COMMAND_STRING": {},
            "CheckedForUserDefaultShell": {},
            "inputMethod": {},
            "shell": {},
            "source": {},
        },
        "AMProvides": dict(string_list),
        "ActionBundlePath": RUN_SHELL_SCRIPT_ACTION,
        "ActionName": "Run Shell Script",
        "ActionParameters": {
            "COMMAND_STRING": shell_script(program),
            "CheckedForUserDefaultShell": True,
            "inputMethod": 1,
            "shell": "/bin/zsh",
            "source": "",
        },
        "BundleIdentifier": "com.apple.RunShellScript",
        "CFBundleVersion": "2.0.3",
        "CanShowSelectedItemsWhenRun": False,
        "CanShowWhenRun": True,
        "Category": ["AMCategoryUtilities"],
        "Class Name": "RunShellScriptAction",
        "InputUUID": "A1B2C3D4-E5F6-7890-ABCD-EF1234567890",
        "Keywords": ["Shell", "Script", "Command", "Run", "Unix"],
        "OutputUUID": "B2C3D4E5-F6A7-8901-BCDE-F12345678901",
        "UUID": "C3D4E5F6-A7B8-9012-CDEF-123456789012",
        "UnlocalizedApplications": ["Automator"],
        "arguments": {
            "0": _argument("0", "inputMethod", 0),
            "1": _argument("1", "CheckedForUserDefaultShell", False),
            "2": _argument("2", "source", ""),
            "3": _argument("3", "COMMAND_STRING", ""),
            "4": _argument("4", "shell", "/bin/sh"),
        },
        "isViewVisible": 1,
        "location": "354.500000:305.000000",
        "nibPath": f"{RUN_SHELL_SCRIPT_ACTION}/Contents/Resources/Base.lproj/main.nib",
    }
    return {
        "AMApplicationBuild": "528",
        "AMApplicationVersion": "2.10",
        "AMDocumentVersion": "2",
        "actions": [{"action": action, "isViewVisible": 1}],
        "connectors": {},
        "workflowMetaData": {
            "applicationBundleID": FINDER_BUNDLE_ID,
            "applicationBundleIDsByPath": {FINDER_PATH: FINDER_BUNDLE_ID},
            "applicationPath": FINDER_PATH,
            "applicationPaths": [FINDER_PATH],
            "backgroundColorName": "blackColor",
            "inputTypeIdentifier": "com.apple.Automator.fileSystemObject",
            "outputTypeIdentifier": "com.apple.Automator.nothing",
            "presentationMode": 15,
            "processesInput": False,
            "serviceApplicationBundleID": FINDER_BUNDLE_ID,
            "serviceApplicationPath": FINDER_PATH,
            "serviceInputTypeIdentifier": "com.apple.Automator.fileSystemObject",
            "serviceOutputTypeIdentifier": "com.apple.Automator.nothing",
            "serviceProcessesInput": False,
            "systemImageName": "NSTouchBarTagIcon",
            "useAutomaticInputType": False,
            "workflowTypeIdentifier": "com.apple.Automator.servicesMenu",
        },
    }


def info_plist() -> dict:
    """Property list for Contents/Info.plist registering the Finder service."""
    return {
        "NSServices": [
            {
                "NSBackgroundColorName": "background",
                "NSBackgroundSystemColorName": "blackColor",
                "NSIconName": "NSTouchBarTagIcon",
                "NSMenuItem": {"default": WORKFLOW_NAME},
                "NSMessage": "runWorkflowAsService",
                "NSRequiredContext": {"NSApplicationIdentifier": FINDER_BUNDLE_ID},
                "NSSendFileTypes": ["public.item"],
            }
        ]
    }


def install_quick_action(program: Optional[Path] = None, home: Optional[Path] = None) -> Path:
    """
    Write the Quick Action bundle, replacing any previous install.

    Args:
        program (Path, optional): tagmv executable, detected when omitted
        home (Path, optional): Home directory, $HOME when omitted

    Returns:
        Path: The installed .workflow directory
    """
    if sys.platform != "darwin":
        logger.warning("Quick Actions are only used by macOS Finder")

    program = program or resolve_program_path()
    wf_dir = workflow_dir(home)
    contents_dir = wf_dir / "Contents"

    if wf_dir.exists():
        logger.debug(f"Removing existing workflow at {wf_dir}")
        shutil.rmtree(wf_dir)

    contents_dir.mkdir(parents=True)
    (contents_dir / "document.wflow").write_bytes(plistlib.dumps(document_wflow(program)))
    (contents_dir / "Info.plist").write_bytes(plistlib.dumps(info_plist()))

    logger.info(f"Installed Quick Action '{WORKFLOW_NAME}' at {wf_dir}")
    return wf_dir
