"""
Markdown → HTML rendering.

Level-1 headings are chapters: each is numbered and given an anchor
(chapter_1, chapter_2, ...) that the table of contents links to. Code
fences are highlighted with Pygments through codehilite.
"""

import html
import re
import string
import xml.etree.ElementTree as etree

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from bs4 import BeautifulSoup
from pygments.formatters import HtmlFormatter

from chapterkit.resolve import read_optional


HIGHLIGHT_CLASS = "highlight"
CHAPTER_ID_RE = re.compile(r"^chapter_\d+$")

# Used when no site/pdf template artifact is found
DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html lang="$lang">
<head>
<meta charset="utf-8">
<title>$title</title>
<style>
$styles
</style>
</head>
<body>
$content
</body>
</html>
"""


class ChapterNumberingProcessor(Treeprocessor):
    """Number every <h1> and anchor it as chapter_N."""

    def run(self, root):
        for number, heading in enumerate(list(root.iter("h1")), 1):
            heading.set("id", f"chapter_{number}")

            small = etree.Element("small")
            small.text = f"Chapter {number}"
            br = etree.Element("br")
            br.tail = heading.text
            heading.text = None
            heading.insert(0, small)
            heading.insert(1, br)


class ChapterNumberingExtension(Extension):
    def extendMarkdown(self, md):
        # Below the inline processor (20) so heading text is fully parsed
        md.treeprocessors.register(
            ChapterNumberingProcessor(md), "chapter_numbering", 5
        )


def _markdown(numbered):
    extensions = ["fenced_code", "tables", "codehilite"]
    if numbered:
        extensions.append(ChapterNumberingExtension())
    return markdown.Markdown(
        extensions=extensions,
        extension_configs={
            "codehilite": {"guess_lang": False, "css_class": HIGHLIGHT_CLASS},
        },
    )


def _postprocess(document):
    return document.replace("&#39;", "'")


def render_body(text):
    """Render chapters. Returns (html, chapter_titles)."""
    body = _postprocess(_markdown(numbered=True).convert(text))
    return body, chapter_titles(body)


def chapter_titles(body):
    """Plain text of each numbered <h1>, without its "Chapter N" label."""
    titles = []
    soup = BeautifulSoup(body, "html.parser")
    for heading in soup.find_all("h1", id=CHAPTER_ID_RE):
        for tag in ("small", "br"):
            label = heading.find(tag, recursive=False)
            if label is not None:
                label.decompose()
        titles.append(heading.get_text().strip())
    return titles


def render_fragment(text):
    """Render un-numbered markdown such as a cover page."""
    if not text:
        return ""
    return _postprocess(_markdown(numbered=False).convert(text))


def render_toc(chapters):
    """Ordered list linking each chapter anchor."""
    items = [
        f'  <li><a href="#chapter_{i}">{html.escape(title, quote=False)}</a></li>'
        for i, title in enumerate(chapters, 1)
    ]
    return "<ol>\n" + "\n".join(items) + "\n</ol>\n"


def highlight_styles():
    return HtmlFormatter().get_style_defs(f".{HIGHLIGHT_CLASS}")


def fill_template(template_text, config, content):
    """Substitute $title, $lang, $styles and $content into a page template."""
    return string.Template(template_text).safe_substitute(
        title=html.escape(config.title),
        lang=config.get("lang", "en-US"),
        styles=highlight_styles(),
        content=content,
    )


def render_document(config, manuscript, template_text, toc_heading=False):
    """
    Render a complete page for a manuscript.

    With toc_heading (the PDF layout), sample builds of a single chapter
    get the sample cover and no table of contents, and full builds get a
    "Table of Contents" heading over the list.
    """
    body, chapters = render_body(manuscript.text)
    cover = render_fragment(read_optional(config.book_dir, config.cover))

    if not toc_heading:
        content = cover + render_toc(chapters) + body
    elif manuscript.is_sample:
        sample_cover = read_optional(config.book_dir, config.cover_sample)
        content = render_fragment(sample_cover) + body
    else:
        content = cover + "<h1>Table of Contents</h1>\n" + render_toc(chapters) + body

    return fill_template(template_text, config, content)
