"""
Base builder class for all output formats.

Subclasses implement `build()` and set `format_name` / `extension`.
Shared logic (external tool invocation, logging, artifact resolution)
lives here. Builders receive the aggregated Manuscript explicitly; they
never re-read the chapters themselves.
"""

import os
import subprocess
import shutil
from abc import ABC, abstractmethod

from chapterkit.render import DEFAULT_TEMPLATE
from chapterkit.resolve import resolve_artifact


class BaseBuilder(ABC):
    """
    Abstract base for format builders.

    Subclasses must define:
        format_name:  str   — human-readable name ("EPUB", "PDF", etc.)
        extension:    str   — output file extension (".epub", ".pdf", etc.)
        build():      method — the actual build logic
    """

    format_name = None  # Override in subclass
    extension = None    # Override in subclass

    def __init__(self, config, manuscript, verbose=False):
        self.config = config
        self.manuscript = manuscript
        self.verbose = verbose

    # ── Output path ────────────────────────────────────────

    @property
    def build_dir(self):
        return self.manuscript.build_dir

    @property
    def output_file(self):
        return os.path.join(self.build_dir, self.config.output_name(self.extension))

    @property
    def package_entry(self):
        """Path (relative to the build dir) bundled into packages."""
        return os.path.relpath(self.output_file, self.build_dir)

    # ── Logging ────────────────────────────────────────────

    def log(self, msg):
        if self.verbose:
            print(msg)

    def header(self):
        print(f"\n{'─' * 60}")
        print(f"  Building {self.format_name}: {self.config.title}")
        print(f"{'─' * 60}")

    # ── Artifact resolution ────────────────────────────────

    def resolve(self, filename):
        """Resolve an artifact filename for this book."""
        return resolve_artifact(self.config.book_dir, filename)

    def load_template(self, filename):
        path = self.resolve(filename)
        if not path:
            self.log(f"  Template '{filename}' not found, using built-in page")
            return DEFAULT_TEMPLATE
        self.log(f"  Template: {path}")
        with open(path, encoding="utf-8") as f:
            return f.read()

    # ── External tools ─────────────────────────────────────

    def pandoc_cmd(self, extra_args=None):
        """Base pandoc command with book metadata plus any extras."""
        cmd = ["pandoc"]
        cmd.extend(self.config.metadata_args())
        if extra_args:
            cmd.extend(extra_args)
        return cmd

    def exec_cmd(self, cmd, label="Command", input=None, cwd=None):
        """Execute a command, handle errors consistently."""
        try:
            result = subprocess.run(
                cmd,
                input=input,
                cwd=cwd,
                capture_output=not self.verbose,
                text=True,
            )
            if result.returncode != 0:
                print(f"  ✗ {label} failed (exit {result.returncode})")
                if result.stderr:
                    for line in result.stderr.strip().splitlines()[:20]:
                        print(f"    {line}")
                return False
            return True
        except FileNotFoundError:
            print(f"  ✗ {cmd[0]} not found")
            return False

    def check_tool(self, name):
        """Check that a required external tool is on PATH."""
        if not shutil.which(name):
            print(f"  ✗ {name} not found on PATH")
            return False
        return True

    # ── Abstract interface ─────────────────────────────────

    @abstractmethod
    def build(self):
        """
        Execute the build. Returns True on success, False on failure.
        """
        ...
