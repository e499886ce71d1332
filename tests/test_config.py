import pytest

from chapterkit.config import BookConfig, ConfigError


def test_load_applies_defaults(config):
    assert config.title == "Test Book"
    assert config.manifest == "chapters"
    assert config.goal_words == 30000
    assert config.tics == ["Essentially", "Basically"]
    assert config.pdf["engine"] == "weasyprint"
    assert config.app["remote"] is None
    assert config.packages["deluxe"][-1] == "app"


def test_missing_book_yaml(tmp_path):
    with pytest.raises(ConfigError, match="No book.yaml"):
        BookConfig.load(str(tmp_path))


def test_missing_required_fields(tmp_path):
    (tmp_path / "book.yaml").write_text("title: Only A Title\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="author, prefix"):
        BookConfig.load(str(tmp_path))


def test_not_a_mapping(tmp_path):
    (tmp_path / "book.yaml").write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        BookConfig.load(str(tmp_path))


def test_section_overrides_keep_other_defaults(tmp_path):
    data = {
        "title": "T", "author": "A", "prefix": "t",
        "pdf": {"engine": "wkhtmltopdf"},
        "goal_words": "50000",
    }
    config = BookConfig.from_dict(data, str(tmp_path))
    assert config.pdf == {"engine": "wkhtmltopdf", "template": "template.html"}
    assert config.goal_words == 50000


def test_bad_goal(tmp_path):
    data = {"title": "T", "author": "A", "prefix": "t", "goal_words": 0}
    with pytest.raises(ConfigError, match="positive"):
        BookConfig.from_dict(data, str(tmp_path))


def test_defaults_are_not_shared(tmp_path):
    first = BookConfig.from_dict({"title": "T", "author": "A", "prefix": "t"}, str(tmp_path))
    first.tics.append("Literally")
    second = BookConfig.from_dict({"title": "T", "author": "A", "prefix": "t"}, str(tmp_path))
    assert second.tics == ["Essentially", "Basically"]


def test_names(config):
    assert config.output_name(".pdf") == "Test Book.pdf"
    assert config.package_name("basic") == "test_book.zip"
    assert config.package_name("deluxe") == "test_book_deluxe.zip"


def test_unknown_attribute(config):
    with pytest.raises(AttributeError):
        config.nonexistent
