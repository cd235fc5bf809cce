"""Last-quote extraction from markdown transcripts."""

from dataclasses import dataclass
from enum import Enum

QUOTE_MARKER = ">"

# Whitespace recognised on top of str.isspace(). Extend for other scripts.
DEFAULT_EXTRA_WHITESPACE = frozenset({"\u3000"})


class LineKind(Enum):
    QUOTE = "quote"
    BLANK = "blank"
    TEXT = "text"


class _State(Enum):
    OUTSIDE_QUOTE = "outside_quote"
    IN_QUOTE = "in_quote"


@dataclass
class LastQuote:
    """Outcome of scanning a document for its live quote block."""

    found: bool
    quote: str = ""
    remainder: str = ""


def detect_line_separator(content: str) -> str:
    """Return the separator used to split and rejoin ``content``."""
    return "\r\n" if "\r\n" in content else "\n"


def is_blank(line: str, extra_whitespace: frozenset[str] = DEFAULT_EXTRA_WHITESPACE) -> bool:
    return all(ch.isspace() or ch in extra_whitespace for ch in line)


def classify_line(
    line: str,
    marker: str = QUOTE_MARKER,
    extra_whitespace: frozenset[str] = DEFAULT_EXTRA_WHITESPACE,
) -> LineKind:
    """Classify a single line as quote, blank or text."""
    if line.startswith(marker):
        return LineKind.QUOTE
    if is_blank(line, extra_whitespace):
        return LineKind.BLANK
    return LineKind.TEXT


def strip_marker(line: str, marker: str = QUOTE_MARKER) -> str:
    """Drop one leading marker and at most one space after it."""
    stripped = line[len(marker):]
    if stripped.startswith(" "):
        stripped = stripped[1:]
    return stripped


def extract_last_quote(
    content: str,
    marker: str = QUOTE_MARKER,
    extra_whitespace: frozenset[str] = DEFAULT_EXTRA_WHITESPACE,
    line_separator: str | None = None,
) -> LastQuote:
    """Find the quote block sitting at the semantic end of ``content``.

    A quote block stays eligible while only blank lines follow it. Any text
    line after it, or a newer quote block, pushes it back into the remainder
    with its markers intact. A block that runs up to end of input is always
    eligible.

    Every input line lands either in the returned quote or in ``remainder``
    (each remainder line followed by the separator), so the two outputs
    partition the document.
    """
    sep = line_separator or detect_line_separator(content)

    state = _State.OUTSIDE_QUOTE
    current_run: list[str] = []
    candidate: list[str] = []
    remainder: list[str] = []

    for line in content.split(sep):
        kind = classify_line(line, marker, extra_whitespace)

        if kind is LineKind.QUOTE:
            if state is _State.OUTSIDE_QUOTE:
                # A newer block supersedes the pending candidate.
                remainder.extend(quoted + sep for quoted in candidate)
                candidate = []
                state = _State.IN_QUOTE
            current_run.append(line)
            continue

        if state is _State.IN_QUOTE:
            if kind is LineKind.BLANK:
                candidate = current_run
            else:
                # Any older candidate was already demoted when this run began.
                remainder.extend(quoted + sep for quoted in current_run)
                candidate = []
            current_run = []
            state = _State.OUTSIDE_QUOTE
        elif kind is LineKind.TEXT:
            # Prose after the blank gap: the pending block is no longer last.
            # It lands after the blanks already in the remainder.
            remainder.extend(quoted + sep for quoted in candidate)
            candidate = []

        remainder.append(line + sep)

    if state is _State.IN_QUOTE:
        candidate = current_run

    if not candidate:
        return LastQuote(found=False, remainder="".join(remainder))

    quote = sep.join(strip_marker(line, marker) for line in candidate)
    return LastQuote(found=True, quote=quote, remainder="".join(remainder))
