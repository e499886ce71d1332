"""
Distributable zip packages.

Each package bundles a fixed list of build outputs (by format) from the
content-addressed build directory. Directory entries such as html/ are
added recursively with paths relative to the build directory.
"""

import os
import zipfile

from chapterkit.builders import BUILDERS


class PackageError(Exception):
    """Raised when a package names an unknown format."""
    pass


def package_entries(config, manuscript, formats):
    """Build-dir-relative paths for the given formats."""
    entries = []
    for fmt in formats:
        if fmt not in BUILDERS:
            raise PackageError(f"Unknown format '{fmt}' in package")
        builder = BUILDERS[fmt](config=config, manuscript=manuscript)
        entries.append(builder.package_entry)
    return entries


def make_zip_file(zip_path, base_dir, entries, verbose=False):
    """
    Write entries (relative to base_dir) into zip_path.

    A missing entry raises FileNotFoundError; the partial zip is left
    on disk.
    """
    with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
        for entry in entries:
            full_path = os.path.join(base_dir, entry)
            if os.path.isdir(full_path):
                for root, dirs, files in os.walk(full_path):
                    dirs.sort()
                    for fname in sorted(files):
                        path = os.path.join(root, fname)
                        arc_name = os.path.relpath(path, base_dir)
                        zf.write(path, arc_name)
                        if verbose:
                            print(f"    {arc_name}")
            elif os.path.isfile(full_path):
                zf.write(full_path, entry)
                if verbose:
                    print(f"    {entry}")
            else:
                raise FileNotFoundError(f"Cannot package missing file: {full_path}")
    return zip_path


def check_packages(config, names=None):
    """
    Validate the packages to build before anything is written.

    Returns the package names. Raises PackageError for an unknown
    package or format, or for an "app" entry without app.remote.
    """
    packages = config.packages
    names = names or list(packages)

    for name in names:
        if name not in packages:
            raise PackageError(f"No package named '{name}' in book.yaml")
        for fmt in packages[name]:
            if fmt not in BUILDERS:
                raise PackageError(f"Unknown format '{fmt}' in package '{name}'")
            if fmt == "app" and not config.app.get("remote"):
                raise PackageError(f"package '{name}' needs app.remote in book.yaml")

    return names


def build_packages(config, manuscript, names=None, verbose=False):
    """Write each configured package zip into the build dir. Returns zip paths."""
    packages = config.packages
    names = check_packages(config, names)
    written = []

    for name in names:
        zip_path = os.path.join(manuscript.build_dir, config.package_name(name))
        print(f"  Packaging {name}: {zip_path}")
        entries = package_entries(config, manuscript, packages[name])
        written.append(make_zip_file(zip_path, manuscript.build_dir, entries, verbose=verbose))
        print(f"  ✓ {os.path.basename(zip_path)}")

    return written
