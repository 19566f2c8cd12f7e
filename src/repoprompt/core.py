"""
Core logic for repoprompt package.
"""

from __future__ import annotations

import glob
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set

import pathspec

# Exceptions
class RepoPromptError(Exception): ...
class InvalidRootError(RepoPromptError): ...
class FileReadError(RepoPromptError): ...
class OutputError(RepoPromptError): ...

# Defaults & helpers
DEFAULT_PATTERNS: List[str] = [
    "node_modules/**",
    ".git/**",
    "dist/**",
    "build/**",
    ".next/**",
    "__pycache__/**",
    "*.pyc",
    ".DS_Store",
    "Thumbs.db",
    "*.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "*.min.js",
    "*.min.css",
    "*.map",
    ".env*",
    "*.log",
]

BINARY_EXTENSIONS = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".ico", ".webp", ".svg",
        ".mp3", ".mp4", ".wav", ".webm", ".ogg",
        ".zip", ".tar", ".gz", ".rar", ".7z",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx",
        ".exe", ".dll", ".so", ".dylib",
        ".ttf", ".otf", ".woff", ".woff2",
        ".sqlite", ".db",
    }
)

DEFAULT_MAX_SIZE = 100 * 1024
DEFAULT_GLOB = "**/*"

_SIZE_RE = re.compile(r"^(\d+)(k|m|kb|mb)?$", re.IGNORECASE)


def parse_size(size: Optional[str]) -> int:
    """Turn ``"50k"``, ``"2mb"`` or ``"100"`` into a byte count.

    Anything unparseable falls back to :data:`DEFAULT_MAX_SIZE`.
    """
    match = _SIZE_RE.match((size or "").strip())
    if not match:
        return DEFAULT_MAX_SIZE
    num = int(match.group(1))
    unit = (match.group(2) or "").lower()
    if unit in ("m", "mb"):
        return num * 1024 * 1024
    if unit in ("k", "kb"):
        return num * 1024
    return num


def _file_name(rel: str) -> str:
    return rel.rsplit("/", 1)[-1]


def extension_of(rel: str) -> str:
    """Final extension of *rel* with its leading dot, or ``""``."""
    name = _file_name(rel)
    if "." not in name:
        return ""
    return "." + name.rsplit(".", 1)[1]


def is_binary_path(rel: str) -> bool:
    return extension_of(rel).lower() in BINARY_EXTENSIONS


# Ignore-file utilities
def load_gitignore(root: Path) -> List[str]:
    gitignore_path = root / ".gitignore"
    if not gitignore_path.is_file():
        return []
    with gitignore_path.open("r", encoding="utf-8", errors="replace") as fh:
        return [line.rstrip("\r\n") for line in fh]


class IgnoreMatcher:
    """Gitignore-style predicate over root-relative POSIX paths.

    Patterns are merged in order: built-in defaults, caller excludes, then
    the root ``.gitignore``. The last matching pattern decides, so a
    ``!pattern`` line can re-include something excluded earlier.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns = tuple(patterns)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)

    @classmethod
    def for_root(
        cls, root: Path, excludes: Optional[Sequence[str]] = None
    ) -> "IgnoreMatcher":
        return cls([*DEFAULT_PATTERNS, *(excludes or []), *load_gitignore(root)])

    def ignores(self, path: str) -> bool:
        return self._spec.match_file(path)


# File-selection helpers
def resolve_root(root: Path) -> Path:
    try:
        root = root.resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidRootError(f"Could not resolve root path '{root}': {e}")
    if not root.exists():
        raise InvalidRootError(f"Root directory '{root}' does not exist")
    if not root.is_dir():
        raise InvalidRootError(f"Root path '{root}' is not a directory")
    return root


def expand_pattern(pattern: str, root: Path) -> List[str]:
    """Files under *root* matching the glob *pattern*, as POSIX paths.

    Hidden names only match pattern segments that start with a dot.
    """
    matches = glob.glob(pattern, root_dir=root, recursive=True)
    return [
        Path(m).as_posix()
        for m in matches
        if (root / m).is_file()
    ]


def _within_size(path: Path, max_bytes: int) -> bool:
    try:
        return path.stat().st_size <= max_bytes
    except OSError:
        return False


def expand_patterns(patterns: Iterable[str], root: Path) -> Set[str]:
    found: Set[str] = set()
    for pattern in patterns:
        found.update(expand_pattern(pattern, root))
    return found


def filter_files(
    paths: Iterable[str],
    matcher: IgnoreMatcher,
    max_bytes: int,
    root: Path,
) -> List[str]:
    """Drop ignored, binary and oversized paths; return the rest sorted."""
    kept = [
        rel
        for rel in paths
        if not matcher.ignores(rel)
        and not is_binary_path(rel)
        and _within_size(root / rel, max_bytes)
    ]
    return sorted(kept)


def select_files(
    patterns: Sequence[str],
    include_patterns: Sequence[str],
    matcher: IgnoreMatcher,
    max_bytes: int,
    root: Path,
) -> List[str]:
    """Expand, dedupe and filter globs into a sorted list of relative paths."""
    found = expand_patterns([*patterns, *include_patterns], root)
    return filter_files(found, matcher, max_bytes, root)


# project-tree renderer
def build_project_tree(paths: Iterable[str]) -> str:
    """
    Return an ASCII tree (à la the Unix ``tree`` utility).

    • Every path segment becomes a node; files are nodes without children.
    • Directories are listed before files, each group case-insensitively.
    • Uses ``├──``, ``└──``, ``│   `` connectors.
    """
    tree: Dict[str, dict] = {}
    for rel in paths:
        cur = tree
        for part in rel.split("/"):
            cur = cur.setdefault(part, {})

    lines: List[str] = []

    def _walk(node: Dict[str, dict], prefix: str = "") -> None:
        # dirs first
        items = sorted(
            node.items(), key=lambda kv: (not kv[1], kv[0].casefold(), kv[0])
        )
        for idx, (name, child) in enumerate(items):
            last = idx == len(items) - 1
            connector = "└── " if last else "├── "
            lines.append(f"{prefix}{connector}{name}{'/' if child else ''}")
            if child:
                _walk(child, prefix + ("    " if last else "│   "))

    _walk(tree)
    return "\n".join(lines)


# Prompt assembly
def read_file_text(root: Path, rel: str) -> str:
    try:
        return (root / rel).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Could not read '{rel}': {e}")


def _file_block(rel: str, content: str, xml: bool) -> List[str]:
    body = content.rstrip()
    if xml:
        return [f'<file path="{rel}">', body, "</file>"]
    hint = extension_of(rel)[1:]
    return [f"### {rel}\n", f"```{hint}", body, "```"]


def assemble_prompt(
    files: Sequence[str],
    root: Path,
    prompt: Optional[str] = None,
    tree: Optional[str] = None,
    xml: bool = False,
) -> str:
    """Join the prompt, project tree and file blocks into one text.

    *tree* is the already rendered tree, or ``None`` to leave it out. Files
    are read in the given order; a read failure aborts with
    :class:`FileReadError`.
    """
    parts: List[str] = []
    if prompt:
        parts += [prompt, ""]
    if tree is not None:
        parts += ["## Project Structure\n", "```", tree, "```", ""]

    parts.append("## Files\n")
    for rel in files:
        parts += _file_block(rel, read_file_text(root, rel), xml)
        parts.append("")

    return "\n".join(parts).rstrip()
