"""Locate and run the external converter and validator."""

import os
import shutil
import subprocess
from pathlib import Path

from rich.console import Console


class PackagingError(Exception):
    """Packaging could not be completed."""


class ToolNotFoundError(PackagingError):
    """An external tool could not be resolved to an executable."""

    def __init__(self, tool: str, candidates: list[str]):
        self.tool = tool
        self.candidates = candidates
        super().__init__(
            f"{tool} not found (tried: {', '.join(candidates)}). "
            f"Install it or point the {tool.upper()} environment variable at it."
        )


def resolve_tool(tool: str, command: str, fallbacks: list[str] | None = None) -> str:
    """Resolve command to an executable path.

    An executable file path wins, then a PATH lookup of command, then each
    fallback name on PATH.
    """
    candidates = [command, *(fallbacks or [])]
    path = Path(command)
    if path.is_file() and os.access(path, os.X_OK):
        return str(path)
    for candidate in candidates:
        found = shutil.which(candidate)
        if found:
            return found
    raise ToolNotFoundError(tool, candidates)


def run_tool(args: list[str], console: Console | None = None, cwd: Path | None = None) -> int:
    """Run a tool to completion, echoing its combined output line by line.

    Returns the exit status; a failing tool is reported, not raised.
    """
    process = subprocess.Popen(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        cwd=cwd,
    )
    assert process.stdout is not None
    with process.stdout:
        for line in process.stdout:
            if console:
                console.print(line.rstrip("\n"), markup=False, highlight=False)
    returncode = process.wait()
    if returncode != 0 and console:
        console.print(f"[red]{Path(args[0]).name} exited with code {returncode}[/]")
    return returncode
