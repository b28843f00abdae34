"""Heuristic location of clinical sections in unstructured document text.

Two passes over the lines of a single document:

1. Heading pass. The first line that mentions a keyword and is shaped like a
   heading (has a colon, or is all upper-case) opens the section. The section
   runs until the next heading-shaped line or the end of the document.
2. Keyword pass. Only when no heading matched: the first line mentioning a
   keyword, widened to its surrounding paragraph and capped in length.

Both passes are pure functions over a sequence of lines so they can be tested
without any I/O.
"""

from typing import Iterable, List, Optional, Sequence

# A line with a colon only ends a section when it is shorter than this
NEXT_HEADING_MAX_LENGTH = 50

# Non-blank lines pulled in above a keyword match
CONTEXT_LINES_BEFORE = 2

# Upper bound on a keyword-pass window, counted from its first line
MAX_WINDOW_LINES = 15


def _normalize_keywords(keywords: Iterable[str]) -> List[str]:
    return [keyword.lower() for keyword in keywords if keyword]


def _mentions_keyword(line: str, keywords: Sequence[str]) -> bool:
    lowered = line.lower()
    return any(keyword in lowered for keyword in keywords)


def is_heading_candidate(line: str) -> bool:
    """A line that can open a section once it mentions a keyword."""
    return ":" in line or line.isupper()


def is_next_heading(line: str) -> bool:
    """A line that closes the section opened above it."""
    if ":" in line and len(line) < NEXT_HEADING_MAX_LENGTH:
        return True
    return line.isupper() and bool(line.strip())


def _locate_by_heading(lines: Sequence[str], keywords: Sequence[str]) -> Optional[range]:
    for start, line in enumerate(lines):
        if not (_mentions_keyword(line, keywords) and is_heading_candidate(line)):
            continue

        end = start + 1
        while end < len(lines) and not is_next_heading(lines[end]):
            end += 1
        return range(start, end)

    return None


def _locate_by_keyword(lines: Sequence[str], keywords: Sequence[str]) -> Optional[range]:
    for index, line in enumerate(lines):
        if not _mentions_keyword(line, keywords):
            continue

        start = index
        while (
            start > 0
            and start > index - CONTEXT_LINES_BEFORE
            and lines[start - 1].strip()
        ):
            start -= 1

        end = index
        while end < len(lines) - 1 and lines[end + 1].strip():
            end += 1

        return range(start, min(end + 1, start + MAX_WINDOW_LINES))

    return None


def locate_section(lines: Sequence[str], keywords: Iterable[str]) -> Optional[range]:
    """Find the line range of the section named by any of `keywords`.

    Args:
        lines: Lines of one document, in order
        keywords: Candidate headings/keywords, matched case-insensitively

    Returns:
        A contiguous range of line indexes, or None if no keyword occurs
    """
    normalized = _normalize_keywords(keywords)
    if not normalized:
        return None

    span = _locate_by_heading(lines, normalized)
    if span is None:
        span = _locate_by_keyword(lines, normalized)
    return span


def find_section(text: str, keywords: Iterable[str]) -> Optional[str]:
    """Return the text of the section named by `keywords`, or None."""
    lines = text.replace("\r\n", "\n").split("\n")
    span = locate_section(lines, keywords)
    if span is None:
        return None
    return "\n".join(lines[span.start : span.stop])
