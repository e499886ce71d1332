import os

import pytest

from chapterkit.config import BookConfig


INTRO = "# Intro\nHello world.\n"
CH1 = "# Ch1\n```\ncode line\n```\nMore prose here.\n"

BOOK_YAML = """\
title: Test Book
author: A. Writer
prefix: test_book
"""


def write(path, text):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


@pytest.fixture
def book_dir(tmp_path):
    """A two-chapter book: manifest, chapters, config and an underscore file."""
    root = tmp_path / "book"
    write(str(root / "book.yaml"), BOOK_YAML)
    write(str(root / "chapters"), "intro\nch1\n")
    write(str(root / "intro.md"), INTRO)
    write(str(root / "ch1.md"), CH1)
    write(str(root / "_cover.md"), "Cover page\n")
    return str(root)


@pytest.fixture
def config(book_dir):
    return BookConfig.load(book_dir)
