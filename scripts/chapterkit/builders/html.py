"""
HTML builder.

Pipeline: markdown → numbered chapters + TOC → site template, with the
book's assets copied beside the page so relative references resolve.
"""

import os
import shutil

from chapterkit.builders.base import BaseBuilder
from chapterkit.render import render_document


class HtmlBuilder(BaseBuilder):
    format_name = "HTML"
    extension = ".html"

    @property
    def html_dir(self):
        return os.path.join(self.build_dir, "html")

    @property
    def output_file(self):
        return os.path.join(self.html_dir, self.config.output_name(self.extension))

    @property
    def package_entry(self):
        return "html"

    def build(self):
        self.header()

        template = self.load_template(self.config.html.get("template"))
        page = render_document(self.config, self.manuscript, template)

        os.makedirs(self.html_dir, exist_ok=True)
        self._copy_assets()

        with open(self.output_file, "w", encoding="utf-8") as f:
            f.write(page)

        print(f"  ✓ {self.output_file}")
        return True

    def _copy_assets(self):
        assets_dir = self.config.assets_dir
        if not os.path.isdir(assets_dir):
            self.log(f"  No assets directory at {assets_dir}")
            return
        for name in sorted(os.listdir(assets_dir)):
            src = os.path.join(assets_dir, name)
            if os.path.isfile(src):
                shutil.copy2(src, os.path.join(self.html_dir, name))
                self.log(f"  Asset: {name}")
