"""
CLI entrypoint for repoprompt package.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .core import (
    DEFAULT_GLOB,
    IgnoreMatcher,
    RepoPromptError,
    assemble_prompt,
    build_project_tree,
    expand_patterns,
    filter_files,
    parse_size,
    resolve_root,
)
from .output import emit, error, info, warn


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="repo-prompt",
        description="Generate LLM-ready prompts from your codebase.",
    )
    p.add_argument(
        "patterns",
        nargs="*",
        help="File patterns to include (glob syntax, default: **/*)",
    )
    p.add_argument("-o", "--output", type=Path, help="Write to file instead of stdout")
    p.add_argument(
        "-c",
        "--clipboard",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Copy to clipboard (default: on)",
    )
    p.add_argument("-i", "--include", nargs="+", default=[], help="Additional include patterns")
    p.add_argument("-e", "--exclude", nargs="+", default=[], help="Additional exclude patterns")
    p.add_argument(
        "-m",
        "--max-size",
        default="100k",
        help="Max file size, e.g. 50k, 1m (default: 100k)",
    )
    p.add_argument(
        "-t",
        "--tree",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Include directory tree (default: on)",
    )
    p.add_argument("-p", "--prompt", help="Add a system/task prompt at the start")
    p.add_argument("-x", "--xml", action="store_true", help="Use XML tags for file blocks")
    p.add_argument("--root", type=Path, default=Path("."), help="Project root dir")
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def run(ns: argparse.Namespace) -> int:
    root = resolve_root(ns.root)
    patterns = ns.patterns or [DEFAULT_GLOB]
    max_bytes = parse_size(ns.max_size)

    matcher = IgnoreMatcher.for_root(root, ns.exclude)
    if ns.verbose:
        info(f"Scanning {root} …")
        info(f"{len(matcher.patterns)} ignore patterns, max size {max_bytes} bytes")

    found = expand_patterns([*patterns, *ns.include], root)
    files = filter_files(found, matcher, max_bytes, root)
    if ns.verbose:
        info(
            f"{len(found)} files found, {len(files)} kept after filtering "
            f"({len(found) - len(files)} skipped)."
        )
    if not files:
        warn("No files matched the criteria.")
        return 1

    tree = build_project_tree(files) if ns.tree else None
    text = assemble_prompt(files, root, prompt=ns.prompt, tree=tree, xml=ns.xml)
    if ns.verbose:
        info(f"Assembled {len(text)} chars from {len(files)} files.")

    emit(text, ns.output, to_clipboard=ns.clipboard, file_count=len(files))
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    try:
        ns = _parse_args(argv)
        sys.exit(run(ns))
    except RepoPromptError as e:
        error(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
