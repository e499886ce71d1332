"""
chapterkit — ebook checks and build toolchain.

Public API:
    from chapterkit.config import BookConfig
    from chapterkit.counting import classify, account, report
    from chapterkit.aggregate import aggregate, content_hash, prepare_manuscript
    from chapterkit.builders import BUILDERS, DEFAULT_FORMATS
    from chapterkit.checks import TicChecker, TodoChecker, SyntaxChecker, LinkChecker
    from chapterkit.packaging import build_packages
    from chapterkit.publish import publish
"""
