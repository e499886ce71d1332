import hashlib
import os

import pytest

from chapterkit.aggregate import (
    aggregate,
    chapter_filter_from_env,
    content_hash,
    prepare_manuscript,
    read_manifest,
)

from conftest import CH1, INTRO

EMPTY_SHA1 = "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def manifest(book_dir):
    return os.path.join(book_dir, "chapters")


def test_read_manifest_skips_blank_lines(tmp_path):
    path = tmp_path / "chapters"
    path.write_text("intro\n\nch1\n", encoding="utf-8")
    assert read_manifest(str(path)) == ["intro", "ch1"]


def test_aggregate_in_manifest_order(book_dir):
    assert aggregate(manifest(book_dir)) == INTRO + "\n\n" + CH1 + "\n\n"


def test_aggregate_single_chapter(book_dir):
    assert aggregate(manifest(book_dir), "ch1") == CH1 + "\n\n"


def test_filter_matching_nothing_is_empty(book_dir):
    text = aggregate(manifest(book_dir), "appendix")
    assert text == ""
    assert content_hash(text) == EMPTY_SHA1


def test_missing_chapter_is_fatal(book_dir):
    with open(manifest(book_dir), "a", encoding="utf-8") as f:
        f.write("missing\n")
    with pytest.raises(FileNotFoundError):
        aggregate(manifest(book_dir))


def test_missing_manifest_is_fatal(tmp_path):
    with pytest.raises(FileNotFoundError):
        aggregate(str(tmp_path / "chapters"))


def test_content_hash_is_sha1_of_utf8():
    text = "Café\n\n"
    assert content_hash(text) == hashlib.sha1(text.encode("utf-8")).hexdigest()


def test_hash_is_stable_and_content_sensitive(book_dir):
    first = content_hash(aggregate(manifest(book_dir)))
    assert content_hash(aggregate(manifest(book_dir))) == first

    with open(os.path.join(book_dir, "ch1.md"), "a", encoding="utf-8") as f:
        f.write("!")
    assert content_hash(aggregate(manifest(book_dir))) != first


def test_prepare_manuscript_names_build_dir(config, tmp_path):
    build_root = str(tmp_path / "build")
    manuscript = prepare_manuscript(config, build_root)

    assert manuscript.text == INTRO + "\n\n" + CH1 + "\n\n"
    assert manuscript.build_dir == os.path.join(build_root, manuscript.digest)
    assert os.path.isdir(manuscript.build_dir)
    assert not manuscript.is_sample


def test_sample_manuscript(config, tmp_path):
    manuscript = prepare_manuscript(config, str(tmp_path / "build"), "intro")
    assert manuscript.is_sample
    assert manuscript.text == INTRO + "\n\n"


def test_chapter_filter_from_env():
    assert chapter_filter_from_env({"chapter": "ch1"}) == "ch1"
    assert chapter_filter_from_env({"chapter": ""}) is None
    assert chapter_filter_from_env({}) is None


def test_line_endings_are_kept_verbatim(book_dir):
    chapter = os.path.join(book_dir, "ch1.md")
    with open(chapter, "wb") as f:
        f.write(b"x\ny\n")
    first = content_hash(aggregate(manifest(book_dir), "ch1"))

    with open(chapter, "wb") as f:
        f.write(b"x\ry\n")
    text = aggregate(manifest(book_dir), "ch1")

    assert text == "x\ry\n\n\n"
    assert content_hash(text) != first


def test_crlf_chapter_is_not_normalized(book_dir):
    with open(os.path.join(book_dir, "ch1.md"), "wb") as f:
        f.write(b"# Ch1\r\nBody\r\n")
    assert aggregate(manifest(book_dir), "ch1") == "# Ch1\r\nBody\r\n\n\n"
