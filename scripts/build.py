#!/usr/bin/env python3
"""
Build script for the book.

Checks the manuscript, builds HTML/PDF/EPUB/MOBI into build/<hash>/,
packages and publishes. See chapterkit.cli for the commands.

Usage:
    python scripts/build.py check
    python scripts/build.py build --all
    python scripts/build.py build --pdf --chapter ch1
    python scripts/build.py package

Requires: PyYAML, Markdown, Pygments, requests, beautifulsoup4
External: pandoc, weasyprint (PDF), calibre ebook-convert (MOBI), git (app archive)
"""

import os
import sys

# Ensure chapterkit is importable from the scripts/ directory
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from chapterkit.cli import run


if __name__ == "__main__":
    run()
