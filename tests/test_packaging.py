import os
import zipfile

import pytest

from chapterkit.aggregate import Manuscript
from chapterkit.packaging import PackageError, build_packages, make_zip_file

from conftest import write


@pytest.fixture
def manuscript(tmp_path):
    build_dir = tmp_path / "build" / "abc123"
    for name in ["Test Book.pdf", "Test Book.mobi", "Test Book.epub", "app.zip"]:
        write(str(build_dir / name), name)
    write(str(build_dir / "html" / "Test Book.html"), "<html></html>")
    write(str(build_dir / "html" / "style.css"), "body {}")
    return Manuscript(text="", digest="abc123", build_dir=str(build_dir))


def names(zip_path):
    with zipfile.ZipFile(zip_path) as zf:
        return sorted(zf.namelist())


def test_basic_and_deluxe(config, manuscript):
    config.app["remote"] = "git@example.com:me/sales.git"
    basic, deluxe = build_packages(config, manuscript)

    assert os.path.basename(basic) == "test_book.zip"
    assert names(basic) == [
        "Test Book.epub",
        "Test Book.mobi",
        "Test Book.pdf",
        "html/Test Book.html",
        "html/style.css",
    ]
    assert os.path.basename(deluxe) == "test_book_deluxe.zip"
    assert names(deluxe) == sorted(names(basic) + ["app.zip"])


def test_single_package(config, manuscript):
    config.app["remote"] = "git@example.com:me/sales.git"
    written = build_packages(config, manuscript, ["deluxe"])
    assert [os.path.basename(p) for p in written] == ["test_book_deluxe.zip"]


def test_unknown_package(config, manuscript):
    with pytest.raises(PackageError):
        build_packages(config, manuscript, ["platinum"])


def test_unknown_format(config, manuscript):
    config.packages["odd"] = ["docx"]
    with pytest.raises(PackageError, match="docx"):
        build_packages(config, manuscript, ["odd"])


def test_missing_output_is_fatal(tmp_path):
    with pytest.raises(FileNotFoundError):
        make_zip_file(str(tmp_path / "out.zip"), str(tmp_path), ["nothing.pdf"])


def test_app_package_needs_remote(config, manuscript):
    with pytest.raises(PackageError, match="'deluxe' needs app.remote"):
        build_packages(config, manuscript)
    assert not os.path.exists(os.path.join(manuscript.build_dir, "test_book.zip"))


def test_basic_package_without_remote(config, manuscript):
    written = build_packages(config, manuscript, ["basic"])
    assert [os.path.basename(p) for p in written] == ["test_book.zip"]
