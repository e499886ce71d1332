"""
Word and code accounting for chapter sources.

A chapter is scanned line by line with a two-state machine (PROSE,
CODE) toggled by ``` fences. Prose lines contribute words, code lines
contribute to the code count, and each opening fence counts one block.
An unterminated fence simply leaves the scanner in CODE at end of file.
"""

import math
import os
import re
from dataclasses import dataclass
from enum import Enum


FENCE_RE = re.compile(r"^```")


class LineKind(Enum):
    PROSE = "prose"
    CODE = "code"
    BLANK_CODE = "blank_code"
    FENCE_OPEN = "fence_open"
    FENCE_CLOSE = "fence_close"


def classify(line, in_code_block):
    """
    Classify one line given the current fence state.

    Returns (new_in_code_block, LineKind).
    """
    if FENCE_RE.match(line):
        if in_code_block:
            return False, LineKind.FENCE_CLOSE
        return True, LineKind.FENCE_OPEN

    if in_code_block:
        if line.strip():
            return True, LineKind.CODE
        return True, LineKind.BLANK_CODE

    return False, LineKind.PROSE


@dataclass
class FileStats:
    name: str
    word_count: int = 0
    code_line_count: int = 0
    code_block_count: int = 0


@dataclass
class OverallStats:
    word_count: int
    code_line_count: int
    code_block_count: int
    goal_pct: int


def account_lines(lines, name=""):
    """Accumulate FileStats over an iterable of lines."""
    stats = FileStats(name)
    in_code_block = False

    for line in lines:
        in_code_block, kind = classify(line, in_code_block)
        if kind is LineKind.PROSE:
            stats.word_count += len(line.split())
        elif kind is LineKind.CODE:
            stats.code_line_count += 1
        elif kind is LineKind.FENCE_OPEN:
            stats.code_block_count += 1

    return stats


def account(path):
    """Stream one chapter file through the classifier."""
    with open(path, encoding="utf-8") as f:
        return account_lines(f, name=os.path.basename(path))


def iter_code_blocks(text):
    """
    Yield (language, code, line_number) for every fenced block in text.

    line_number is the 1-based line of the opening fence. A block left
    open at end of text is still yielded.
    """
    in_code_block = False
    language = ""
    start = 0
    body = []

    for line_num, line in enumerate(text.splitlines(keepends=True), 1):
        in_code_block, kind = classify(line, in_code_block)
        if kind is LineKind.FENCE_OPEN:
            language = line[3:].strip().split(" ")[0].lower()
            start = line_num
            body = []
        elif kind is LineKind.FENCE_CLOSE:
            yield language, "".join(body), start
        elif kind in (LineKind.CODE, LineKind.BLANK_CODE):
            body.append(line)

    if in_code_block:
        yield language, "".join(body), start


# ── Report ─────────────────────────────────────────────────────────────


def overall(stats_per_file, goal_words=30000):
    """Sum per-file stats and compute the percentage against the goal."""
    words = sum(s.word_count for s in stats_per_file)
    code = sum(s.code_line_count for s in stats_per_file)
    blocks = sum(s.code_block_count for s in stats_per_file)
    return OverallStats(
        word_count=words,
        code_line_count=code,
        code_block_count=blocks,
        # Halves round up, e.g. 12.5% reports as 13%.
        goal_pct=math.floor(words / goal_words * 100 + 0.5),
    )


def format_report(stats_per_file, goal_words=30000):
    lines = [
        f"{s.name}: {s.word_count} {s.code_line_count} {s.code_block_count}"
        for s in stats_per_file
    ]
    total = overall(stats_per_file, goal_words)
    lines.append(
        f"overall: {total.word_count} {total.code_line_count} "
        f"{total.code_block_count} ({total.goal_pct}%)"
    )
    return lines


def report(stats_per_file, goal_words=30000):
    """Print per-file and overall counts to stdout."""
    for line in format_report(stats_per_file, goal_words):
        print(line)
