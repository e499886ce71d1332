from chapterkit.builders.html import HtmlBuilder
from chapterkit.builders.pdf import PdfBuilder
from chapterkit.builders.epub import EpubBuilder
from chapterkit.builders.mobi import MobiBuilder
from chapterkit.builders.app import AppBuilder

# Build order matters: mobi is converted from the epub.
BUILDERS = {
    "html": HtmlBuilder,
    "pdf": PdfBuilder,
    "epub": EpubBuilder,
    "mobi": MobiBuilder,
    "app": AppBuilder,
}

DEFAULT_FORMATS = list(BUILDERS)
