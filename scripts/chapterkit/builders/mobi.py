"""
MOBI builder.

Converts the EPUB from the same build directory with calibre's
ebook-convert, so it must run after the EPUB builder.
"""

import os

from chapterkit.builders.base import BaseBuilder


class MobiBuilder(BaseBuilder):
    format_name = "MOBI"
    extension = ".mobi"

    def build(self):
        self.header()

        converter = self.config.mobi.get("converter", "ebook-convert")
        epub_file = os.path.join(self.build_dir, self.config.output_name(".epub"))

        if not os.path.exists(epub_file):
            print(f"  ✗ {epub_file} not found. Build the EPUB first.")
            return False

        if not self.check_tool(converter):
            print("  Install calibre for ebook-convert: https://calibre-ebook.com")
            return False

        cmd = [converter, epub_file, self.output_file]
        if not self.exec_cmd(cmd, "MOBI conversion"):
            return False

        print(f"  ✓ {self.output_file}")
        return True
