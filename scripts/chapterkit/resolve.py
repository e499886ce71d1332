"""
Book resolution, source discovery, and artifact lookup.

Every command that needs to find the book directory, list its chapter
sources, or locate shared/per-book artifacts imports from here.
"""

import os
import glob

import yaml


def find_book_dir(identifier, project_root):
    """
    Resolve a book identifier to its directory.

    Accepts:
        - Direct path:  manuscript/payments, or "." for the current directory
        - Keyword:      payments  (matches a directory name or YAML title
                                   under manuscript/)

    Returns: absolute path to the book directory, or None.
    """
    manuscript_root = os.path.join(project_root, "manuscript")

    # Direct path (absolute or relative)
    for candidate in [identifier, os.path.join(project_root, identifier)]:
        if os.path.isdir(candidate) and os.path.exists(
            os.path.join(candidate, "book.yaml")
        ):
            return os.path.abspath(candidate)

    if not os.path.isdir(manuscript_root):
        return None

    identifier_lower = identifier.lower()

    for entry in sorted(os.listdir(manuscript_root)):
        book_path = os.path.join(manuscript_root, entry)
        yaml_path = os.path.join(book_path, "book.yaml")
        if not os.path.exists(yaml_path):
            continue

        if identifier_lower in entry.lower():
            return book_path

        with open(yaml_path, encoding="utf-8") as f:
            try:
                cfg = yaml.safe_load(f)
            except yaml.YAMLError:
                continue
        if isinstance(cfg, dict) and identifier_lower in str(cfg.get("title", "")).lower():
            return book_path

    return None


def is_source_name(filename):
    """Chapter sources are *.md files whose names don't start with '_'."""
    return filename.endswith(".md") and not filename.startswith("_")


def discover_sources(book_dir):
    """All chapter sources in the book directory, in lexical order."""
    files = [
        path
        for path in glob.glob(os.path.join(book_dir, "*.md"))
        if is_source_name(os.path.basename(path))
    ]
    files.sort()
    return files


def resolve_artifact(book_dir, filename):
    """
    Resolve an artifact filename to its full path.

    Search order (first match wins):
        1. book artifacts/    (per-book overrides, e.g. cover.jpg)
        2. repo artifacts/    (shared, e.g. epub.css, site_template.html)

    Returns: absolute path or None.
    """
    if not filename:
        return None

    path = os.path.join(book_dir, "artifacts", filename)
    if os.path.exists(path):
        return os.path.abspath(path)

    # Repo-level artifacts/ (up from manuscript/<book>)
    repo_root = os.path.dirname(os.path.dirname(os.path.abspath(book_dir)))
    path = os.path.join(repo_root, "artifacts", filename)
    if os.path.exists(path):
        return os.path.abspath(path)

    return None


def read_optional(book_dir, filename):
    """Contents of a file in the book directory, or "" if it doesn't exist."""
    path = os.path.join(book_dir, filename)
    if not os.path.exists(path):
        return ""
    with open(path, encoding="utf-8") as f:
        return f.read()
