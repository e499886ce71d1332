"""
Chapter aggregation and content-addressed build naming.

The manifest lists chapter identifiers in document order; each maps to
<identifier>.md beside it. The aggregated text is hashed to name the
build directory, so identical content always lands in the same place.
"""

import hashlib
import os
from dataclasses import dataclass

# Environment variable selecting a single chapter for sample builds
CHAPTER_ENV = "chapter"


@dataclass(frozen=True)
class Manuscript:
    """Aggregated source handed to every builder."""

    text: str
    digest: str
    build_dir: str
    chapter_filter: str = None

    @property
    def is_sample(self):
        return bool(self.chapter_filter)


def read_manifest(manifest_path):
    """Ordered chapter identifiers. Blank lines are ignored."""
    with open(manifest_path, encoding="utf-8") as f:
        return [line.strip() for line in f.read().split("\n") if line.strip()]


def aggregate(manifest_path, chapter_filter=None):
    """
    Concatenate chapters in manifest order, each followed by a blank line.

    With chapter_filter, only the matching chapter is included; a filter
    that matches nothing yields "".
    """
    book_dir = os.path.dirname(os.path.abspath(manifest_path))
    parts = []

    for chapter in read_manifest(manifest_path):
        if chapter_filter and chapter != chapter_filter:
            continue
        # Line endings are hashed exactly as written
        path = os.path.join(book_dir, chapter + ".md")
        with open(path, encoding="utf-8", newline="") as f:
            parts.append(f.read())
        parts.append("\n\n")

    return "".join(parts)


def content_hash(text):
    """SHA-1 hex digest of the UTF-8 text."""
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def chapter_filter_from_env(environ=None):
    environ = os.environ if environ is None else environ
    return environ.get(CHAPTER_ENV) or None


def prepare_manuscript(config, build_root, chapter_filter=None):
    """Aggregate, hash, and create build/<hash>/."""
    text = aggregate(config.manifest_path, chapter_filter)
    digest = content_hash(text)
    build_dir = os.path.join(build_root, digest)
    os.makedirs(build_dir, exist_ok=True)
    return Manuscript(
        text=text,
        digest=digest,
        build_dir=build_dir,
        chapter_filter=chapter_filter,
    )
