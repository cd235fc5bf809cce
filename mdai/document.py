"""Markdown file access helpers."""

import sys
from pathlib import Path

from mdai.errors import DocumentError


def validate_markdown_file(path: Path) -> Path:
    """Check that ``path`` exists and has a ``.md`` extension."""
    path = Path(path)
    if not path.exists():
        raise DocumentError(f"file not found: {path}")
    if path.suffix.lower() != ".md":
        raise DocumentError(f"file must have .md extension: {path}")
    return path


def load_content(path: Path | None = None) -> str:
    """Read a document from ``path``, or from stdin when no path is given."""
    if path is None:
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(f"fail in loading content: {e}") from e


def output_path(input_path: Path, suffix: str) -> Path:
    """``docs/guide.md`` with suffix ``_ja`` becomes ``docs/guide_ja.md``."""
    input_path = Path(input_path)
    return input_path.with_name(f"{input_path.stem}{suffix}.md")
