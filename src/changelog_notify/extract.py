# -*- coding: utf-8 -*-
"""
Pull the latest entry out of the changelog.

Conventions
-----------
- Entries live under a "## Timeline" heading, newest first.
- Each entry opens with a heading at a fixed depth (### by default). The
  heading text is free-form: "### February 2026" and "### Feb 20, 2026" both
  count.
- An entry runs until the next heading at that depth or shallower, a
  horizontal rule (---, ***, ___), or the end of the file. Headings and rules
  inside ``` or ~~~ code fences are part of the entry.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Pattern, Tuple

MAX_CHARS = 3000  # Slack section blocks cap text at 3000 characters
ELLIPSIS = "..."

# CommonMark: block markers may be indented by at most 3 spaces
RULE_RX = re.compile(r"^ {0,3}(?:-{3,}|\*{3,}|_{3,})[ \t]*$")
FENCE_RX = re.compile(r"^ {0,3}(`{3,}|~{3,})")


def entry_heading_pattern(level: int) -> Pattern[str]:
    """Heading with exactly `level` hashes, e.g. level 3 matches '### Feb 2026'."""
    return re.compile(r"^ {0,3}#{%d}(?!#)[ \t]+\S.*$" % level, re.M)


def boundary_heading_pattern(level: int) -> Pattern[str]:
    """Any heading at `level` or shallower."""
    return re.compile(r"^ {0,3}#{1,%d}(?!#)[ \t]+\S.*$" % level, re.M)


def iter_lines(text: str) -> Iterator[Tuple[str, bool]]:
    """Yield (line, fenced) pairs; fenced is True for code fences and their contents."""
    fence = ""
    for line in text.split("\n"):
        m = FENCE_RX.match(line)
        if fence:
            # closing fence: same character, at least as long, nothing after it
            if m and m.group(1)[0] == fence[0] and len(m.group(1)) >= len(fence) and not line[m.end():].strip():
                fence = ""
            yield line, True
        elif m:
            fence = m.group(1)
            yield line, True
        else:
            yield line, False


def truncate(text: str, limit: int = MAX_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def extract_latest_section(
    content: str,
    marker: str = "## Timeline",
    level: int = 3,
    limit: int = MAX_CHARS,
) -> Optional[str]:
    """
    Return the newest Timeline entry (heading included) with blank and rule
    lines removed, or None when there is no Timeline marker or no entry
    heading after it. Headings and rules inside code fences do not count.
    """
    content = content.replace("\r\n", "\n")
    start = content.find(marker)
    if start == -1:
        return None
    after = content[start + len(marker):]

    entry_rx = entry_heading_pattern(level)
    boundary_rx = boundary_heading_pattern(level)
    lines: List[str] = []
    found = False
    for line, fenced in iter_lines(after):
        if not found:
            if not fenced and entry_rx.match(line):
                found = True
                lines.append(line)
            continue
        if not fenced and (boundary_rx.match(line) or RULE_RX.match(line)):
            break
        if line.strip():
            lines.append(line)
    if not found:
        return None

    text = "\n".join(lines).strip()
    return truncate(text, limit)
