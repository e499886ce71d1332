"""
EPUB builder.

Pipeline: aggregated markdown (stdin) → pandoc → epub.
"""

from chapterkit.builders.base import BaseBuilder


class EpubBuilder(BaseBuilder):
    format_name = "EPUB"
    extension = ".epub"

    def build(self):
        self.header()

        if not self.check_tool("pandoc"):
            return False

        epub = self.config.epub

        extra = [
            "--from", "markdown+smart",
            "--to", "epub",
            "--toc",
            "--epub-title-page=false",
            f"--resource-path={self.config.assets_dir}",
            "-o", self.output_file,
        ]

        css_path = self.resolve(epub.get("css"))
        if css_path:
            extra.extend(["--css", css_path])
            self.log(f"  CSS:   {css_path}")
        else:
            print("  Warning: No epub CSS found")

        cover_path = self.resolve(epub.get("cover"))
        if cover_path:
            extra.extend(["--epub-cover-image", cover_path])
            self.log(f"  Cover: {cover_path}")
        else:
            print("  Warning: No cover image found")

        cmd = self.pandoc_cmd(extra)

        if not self.exec_cmd(cmd, "EPUB generation", input=self.manuscript.text):
            return False

        print(f"  ✓ {self.output_file}")
        return True
