"""
Sample-application archive.

Exports the companion source repository as a zip with `git archive`
for the deluxe package.
"""

import os

from chapterkit.builders.base import BaseBuilder


class AppBuilder(BaseBuilder):
    format_name = "app archive"
    extension = ".zip"

    @property
    def output_file(self):
        return os.path.join(self.build_dir, self.config.app.get("archive", "app.zip"))

    def build(self):
        self.header()

        app = self.config.app
        remote = app.get("remote")
        if not remote:
            print("  Warning: app.remote not set in book.yaml, skipping")
            return True

        if not self.check_tool("git"):
            return False

        cmd = [
            "git", "archive",
            "--remote", remote,
            "--format", "zip",
            app.get("ref", "master"),
            "-o", self.output_file,
        ]
        if not self.exec_cmd(cmd, "git archive", cwd=self.build_dir):
            return False

        print(f"  ✓ {self.output_file}")
        return True
