"""Merge several templates into one document with duplicate patterns removed."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

COMMENT_MARKER = "#"


def iter_lines(text: str) -> Iterator[str]:
    """Yield the lines of *text* without their ``\\n`` / ``\\r\\n`` terminators.

    Unlike ``str.splitlines`` only ``\\n`` ends a line, so form feeds and
    other exotic separators inside a template are kept verbatim.
    """
    if not text:
        return
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line.rstrip("\r")


def is_structural(line: str) -> bool:
    """True for blank lines and comments, which are never deduplicated."""
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_MARKER)


def merge_templates(contents: Sequence[str]) -> str:
    """Concatenate *contents* in order, keeping the first copy of each pattern.

    Pattern lines are compared by their trimmed text, case-sensitively,
    across all inputs.  Comments and blank lines are always kept.  Every
    emitted line keeps its original text and ends with ``\\n``.
    """
    seen: set[str] = set()
    out: list[str] = []
    for content in contents:
        for line in iter_lines(content):
            if is_structural(line):
                out.append(line)
                continue
            pattern = line.strip()
            if pattern in seen:
                continue
            seen.add(pattern)
            out.append(line)
    return "".join(line + "\n" for line in out)
