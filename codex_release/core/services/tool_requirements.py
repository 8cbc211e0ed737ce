"""
Tool requirements — check that the external tools a pipeline needs exist.

A missing tool is an environment error: reported immediately, never
retried.
"""

from __future__ import annotations

import shutil

from codex_release.core.errors import MissingToolError

# What each tool is needed for (used in the error message)
TOOL_PURPOSES: dict[str, str] = {
    "gh": "query and download GitHub releases",
    "zstd": "unpack .zst assets",
    "sudo": "install into a directory you cannot write",
    "git": "check out build tags",
    "cargo": "test and build release binaries",
}


def check_required_tools(tool_ids: list[str]) -> list[str]:
    """Return the subset of ``tool_ids`` that is not on PATH, in order."""
    return [tid for tid in tool_ids if shutil.which(tid) is None]


def ensure_tools(tool_ids: list[str]) -> None:
    """Raise MissingToolError for the first tool that is not installed."""
    missing = check_required_tools(tool_ids)
    if missing:
        tool = missing[0]
        raise MissingToolError(tool, TOOL_PURPOSES.get(tool, ""))
