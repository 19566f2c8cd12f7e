"""
Repo Prompt - Turn a codebase into an LLM-ready prompt.

This package scans a directory tree, selects files by glob pattern while
honouring .gitignore rules, built-in exclusions and a size limit, and
assembles a project tree plus the file contents into a single block of
text ready to paste into a chat interface.
"""

__version__ = "0.1.0"
