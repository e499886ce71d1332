"""
Book configuration: load, validate, and provide defaults for book.yaml.
"""

import copy
import os

import yaml


# Fields required in every book.yaml
REQUIRED_FIELDS = ["title", "author", "prefix"]

# Defaults applied if missing
DEFAULTS = {
    "lang": "en-US",
    "manifest": "chapters",
    "goal_words": 30000,
    "tics": ["Essentially", "Basically"],
    "todo_marker": "TODO",
    "hours_file": "_hours.md",
    "assets": "assets",
    "cover": "_cover.md",
    "cover_sample": "_cover_sample.md",
    "syntax": {},
    "links": {},
    "html": {},
    "pdf": {},
    "epub": {},
    "mobi": {},
    "app": {},
    "publish": {},
}

# Defaults within section sub-configs
SECTION_DEFAULTS = {
    "syntax": {
        "languages": ["ruby", "python"],
    },
    "links": {
        "timeout": 10,
    },
    "html": {
        "template": "site_template.html",
    },
    "pdf": {
        "template": "template.html",
        "engine": "weasyprint",
    },
    "epub": {
        "css": "epub.css",
        "cover": "cover.jpg",
    },
    "mobi": {
        "converter": "ebook-convert",
    },
    "app": {
        "remote": None,
        "ref": "master",
        "archive": "app.zip",
    },
    "publish": {
        "url": None,
        "token_env": "CHAPTERKIT_UPLOAD_TOKEN",
        "timeout": 300,
    },
}

# Formats bundled into each package. "app" is the exported source archive.
PACKAGE_DEFAULTS = {
    "basic": ["pdf", "mobi", "epub", "html"],
    "deluxe": ["pdf", "mobi", "epub", "html", "app"],
}


class ConfigError(Exception):
    """Raised when book.yaml is missing or invalid."""
    pass


class BookConfig:
    """
    Loaded, validated book configuration.

    Usage:
        config = BookConfig.load(book_dir)
        config.title            # "Mastering Modern Payments"
        config.pdf["engine"]    # "weasyprint"
        config.get("series")    # None if not set
    """

    def __init__(self, data, book_dir):
        self._data = data
        self.book_dir = book_dir

    @classmethod
    def load(cls, book_dir):
        """Load and validate book.yaml from a book directory."""
        yaml_path = os.path.join(book_dir, "book.yaml")
        if not os.path.exists(yaml_path):
            raise ConfigError(f"No book.yaml found in {book_dir}")

        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data, book_dir)

    @classmethod
    def from_dict(cls, data, book_dir):
        """Validate a raw mapping and fill in defaults."""
        if not isinstance(data, dict):
            raise ConfigError(f"book.yaml must be a YAML mapping, got {type(data).__name__}")

        missing = [key for key in REQUIRED_FIELDS if not data.get(key)]
        if missing:
            raise ConfigError(
                f"book.yaml missing required fields: {', '.join(missing)}"
            )

        for key, default in DEFAULTS.items():
            data.setdefault(key, copy.deepcopy(default))

        for section, defaults in SECTION_DEFAULTS.items():
            if not isinstance(data[section], dict):
                raise ConfigError(f"book.yaml section '{section}' must be a mapping")
            for key, default in defaults.items():
                data[section].setdefault(key, copy.deepcopy(default))

        data.setdefault("packages", copy.deepcopy(PACKAGE_DEFAULTS))
        if not isinstance(data["packages"], dict):
            raise ConfigError("book.yaml 'packages' must map package names to format lists")

        try:
            data["goal_words"] = float(data["goal_words"])
        except (TypeError, ValueError):
            raise ConfigError(f"goal_words must be a number, got {data['goal_words']!r}")
        if data["goal_words"] <= 0:
            raise ConfigError("goal_words must be positive")

        return cls(data, book_dir)

    # ── Attribute access ───────────────────────────────────

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"BookConfig has no field '{name}'")

    def get(self, key, default=None):
        return self._data.get(key, default)

    def __getitem__(self, key):
        return self._data[key]

    def __contains__(self, key):
        return key in self._data

    # ── Convenience ────────────────────────────────────────

    @property
    def manifest_path(self):
        return os.path.join(self.book_dir, self.manifest)

    @property
    def assets_dir(self):
        return os.path.join(self.book_dir, self.assets)

    def output_name(self, extension):
        """Deliverable file name, e.g. 'Mastering Modern Payments.pdf'."""
        return f"{self.title}{extension}"

    def package_name(self, package):
        """Zip name for a package: '<prefix>.zip' for basic, '<prefix>_<name>.zip' otherwise."""
        if package == "basic":
            return f"{self.prefix}.zip"
        return f"{self.prefix}_{package}.zip"

    def metadata_args(self):
        """Build pandoc --metadata arguments list."""
        args = []
        for key in ["title", "author", "lang"]:
            value = self.get(key)
            if value:
                args.extend(["--metadata", f"{key}={value}"])
        return args

    def summary(self):
        """Print a short config summary."""
        print(f"\n  Book:   {self.title}")
        print(f"  Author: {self.author}")
        print(f"  Source: {self.book_dir}")
