"""
PDF builder.

Pipeline:
    1. Render the manuscript to a standalone HTML page (PDF template,
       cover, "Table of Contents" heading)
    2. Pandoc hands the page to an HTML-to-PDF engine (weasyprint by
       default) with the assets directory on the resource path
"""

from chapterkit.builders.base import BaseBuilder
from chapterkit.render import render_document


class PdfBuilder(BaseBuilder):
    format_name = "PDF"
    extension = ".pdf"

    def build(self):
        self.header()

        pdf = self.config.pdf
        engine = pdf.get("engine", "weasyprint")

        if not self.check_tool("pandoc") or not self.check_tool(engine):
            return False

        template = self.load_template(pdf.get("template"))
        page = render_document(self.config, self.manuscript, template, toc_heading=True)

        if self.manuscript.is_sample:
            self.log(f"  Sample build: {self.manuscript.chapter_filter}")

        cmd = self.pandoc_cmd([
            "--from", "html",
            f"--pdf-engine={engine}",
            f"--resource-path={self.config.assets_dir}",
            "-o", self.output_file,
        ])

        if not self.exec_cmd(cmd, "PDF generation", input=page):
            return False

        print(f"  ✓ {self.output_file}")
        return True
