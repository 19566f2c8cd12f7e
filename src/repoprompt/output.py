"""
Console messages and output sinks (file, stdout, clipboard).
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import pyperclip
from colorama import Fore, Style, init as colorama_init

from .core import OutputError

colorama_init()


def _echo(msg: str, color: str = "") -> None:
    if color:
        msg = color + msg + Style.RESET_ALL
    print(msg, file=sys.stderr)


def info(msg: str) -> None:
    _echo(f"[repoprompt] {msg}")


def success(msg: str) -> None:
    _echo(msg, Fore.GREEN)


def warn(msg: str) -> None:
    _echo(msg, Fore.YELLOW)


def error(msg: str) -> None:
    _echo(msg, Fore.RED)


def write_output_file(text: str, out_path: Path) -> Path:
    try:
        out_path = out_path.resolve()
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not resolve output path '{out_path}': {e}")

    if not out_path.parent.exists():
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create directory '{out_path.parent}': {e}")

    try:
        with out_path.open("w", encoding="utf-8", newline="\n") as out_fh:
            out_fh.write(text)
    except OSError as e:
        raise OutputError(f"Could not write to output file '{out_path}': {e}")
    return out_path


def copy_to_clipboard(text: str) -> bool:
    """Copy text to clipboard. Returns True on success."""
    try:
        pyperclip.copy(text)
    except (pyperclip.PyperclipException, OSError):
        return False
    return True


def emit(
    text: str,
    destination: Optional[Path] = None,
    to_clipboard: bool = True,
    file_count: int = 0,
) -> None:
    """Send *text* to *destination* (or stdout) and optionally the clipboard.

    Clipboard trouble only produces a warning.
    """
    if destination is not None:
        write_output_file(text, destination)
        success(f"✓ Written to {destination}")
    else:
        print(text)

    if not to_clipboard:
        return
    if copy_to_clipboard(text):
        success(
            f"✓ Copied to clipboard ({file_count} files, "
            f"{len(text) / 1024:.1f}KB)"
        )
    else:
        warn("Could not copy to clipboard")
