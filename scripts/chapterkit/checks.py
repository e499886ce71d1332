"""
Manuscript checks.

Each checker scans every source file before reporting, so one run shows
the complete set of problems. run() returns True when nothing was found;
the CLI turns False into a non-zero exit.
"""

import os
import re
import shutil
import subprocess
from abc import ABC, abstractmethod

from chapterkit.counting import iter_code_blocks
from chapterkit.links import check_link, describe, extract_links, is_external


HOURS_RE = re.compile(r"\(([\d.]+)\)")


def count_hours(path):
    """Sum the first '(<hours>)' annotation on each line of the log. None if absent."""
    if not os.path.exists(path):
        return None

    hours = 0.0
    with open(path, encoding="utf-8") as f:
        for line in f:
            match = HOURS_RE.search(line)
            if not match:
                continue
            try:
                hours += float(match.group(1))
            except ValueError:
                continue
    return hours


# ── Checker base ───────────────────────────────────────────────────────


class Checker(ABC):
    """
    Base for per-file checks.

    Subclasses set `title` and implement check_file(), returning a list
    of finding strings for one file.
    """

    title = None

    def __init__(self, book_dir, files, verbose=False):
        self.book_dir = book_dir
        self.files = files
        self.verbose = verbose
        self.total_findings = 0
        self.files_with_issues = 0

    def log(self, msg):
        if self.verbose:
            print(msg)

    def read(self, filepath):
        with open(filepath, encoding="utf-8") as f:
            return f.read()

    def run(self):
        """Check all files. Returns True if nothing was found."""
        print(f"\n  Checking {self.title}")
        for filepath in self.files:
            rel_path = os.path.relpath(filepath, self.book_dir)
            findings = self.check_file(filepath, rel_path)

            if findings:
                self.files_with_issues += 1
                self.total_findings += len(findings)
                for finding in findings:
                    print(finding)
            else:
                self.log(f"  {rel_path} — clean")

        self._summary()
        return self.total_findings == 0

    @abstractmethod
    def check_file(self, filepath, rel_path):
        """Findings for one file; an empty list means clean."""
        ...

    def _summary(self):
        if self.total_findings == 0:
            print(f"  ✓ {self.title}: no issues across {len(self.files)} files")
        else:
            print(
                f"  ✗ {self.title}: {self.total_findings} found across "
                f"{self.files_with_issues}/{len(self.files)} files"
            )


# ── Prose checks ───────────────────────────────────────────────────────


class TicChecker(Checker):
    """Verbal tics ('Essentially', 'Basically', ...)."""

    title = "tics"

    def __init__(self, book_dir, files, tics, verbose=False):
        super().__init__(book_dir, files, verbose=verbose)
        self.pattern = (
            re.compile("|".join(re.escape(t) for t in tics)) if tics else None
        )

    def check_file(self, filepath, rel_path):
        if self.pattern is None:
            return []
        findings = []
        for line_num, line in enumerate(self.read(filepath).splitlines(), 1):
            for match in self.pattern.finditer(line):
                findings.append(f"{rel_path}:{line_num} {match.group(0)}: {line.strip()}")
        return findings


class TodoChecker(Checker):
    title = "todos"

    def __init__(self, book_dir, files, marker="TODO", verbose=False):
        super().__init__(book_dir, files, verbose=verbose)
        self.marker = marker

    def check_file(self, filepath, rel_path):
        findings = []
        with open(filepath, encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                if self.marker in line:
                    findings.append(f"{rel_path}:{line_num} {line.rstrip()}")
        return findings


# ── Code sample syntax ─────────────────────────────────────────────────


def check_python(code):
    """Returns None if code compiles, else the error message."""
    try:
        compile(code, "<check>", "exec")
    except (SyntaxError, ValueError) as e:
        return str(e)
    return None


def check_ruby(code):
    """Runs `ruby -c` on the code. Returns None if it parses, else the error."""
    result = subprocess.run(
        ["ruby", "-c"],
        input=code,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        return (result.stderr or result.stdout).strip()
    return None


SYNTAX_CHECKERS = {
    "python": (check_python, None),
    "ruby": (check_ruby, "ruby"),
}


class SyntaxChecker(Checker):
    """Parse fenced code samples tagged with a supported language."""

    title = "syntax"

    def __init__(self, book_dir, files, languages, verbose=False):
        super().__init__(book_dir, files, verbose=verbose)
        self.checkers = {}
        for language in languages:
            if language not in SYNTAX_CHECKERS:
                print(f"  Warning: no syntax checker for '{language}'")
                continue
            func, tool = SYNTAX_CHECKERS[language]
            if tool and not shutil.which(tool):
                print(f"  Warning: {tool} not found on PATH, skipping {language} samples")
                continue
            self.checkers[language] = func

    def check_file(self, filepath, rel_path):
        findings = []
        for language, code, line_num in iter_code_blocks(self.read(filepath)):
            func = self.checkers.get(language)
            if func is None:
                continue
            error = func(code)
            if error:
                findings.append(
                    f"{rel_path}:{line_num} {language} syntax error\n"
                    f"{code.rstrip()}\n"
                    f"  {error}"
                )
        return findings


# ── Links ──────────────────────────────────────────────────────────────


class LinkChecker(Checker):
    title = "links"

    def __init__(self, book_dir, files, timeout=10, verbose=False):
        super().__init__(book_dir, files, verbose=verbose)
        self.timeout = timeout

    def check_file(self, filepath, rel_path):
        findings = []
        for link in extract_links(self.read(filepath)):
            if not is_external(link.href):
                continue
            self.log(f"  HEAD {link.href}")
            problem = describe(link, check_link(link.href, timeout=self.timeout))
            if problem:
                findings.append(f"{rel_path}: {problem}")
        return findings
