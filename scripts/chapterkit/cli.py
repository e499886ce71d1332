"""
Command-line interface: checks, builds, packaging and publishing.

Usage:
    chapterkit check                    Count, hours, tics, todos, syntax
    chapterkit count                    Word/code report against the goal
    chapterkit links                    HEAD every external link
    chapterkit build                    Build all formats into build/<hash>/
    chapterkit build --pdf --chapter ch1
                                        Sample PDF of a single chapter
    chapterkit build --full             check + clean + build
    chapterkit package                  build --full, then zip packages
    chapterkit publish                  package, then upload the zips

Every command takes --book (a path or a keyword under manuscript/,
default: the current directory).
"""

import os
import sys
import shutil
import argparse
import traceback

from chapterkit.aggregate import chapter_filter_from_env, prepare_manuscript
from chapterkit.builders import BUILDERS, DEFAULT_FORMATS
from chapterkit.checks import (
    LinkChecker,
    SyntaxChecker,
    TicChecker,
    TodoChecker,
    count_hours,
)
from chapterkit.config import BookConfig, ConfigError
from chapterkit.counting import account, report
from chapterkit.packaging import PackageError, build_packages, check_packages
from chapterkit.publish import PublishError, publish
from chapterkit.resolve import discover_sources, find_book_dir


# ── Resolve book ───────────────────────────────────────────────────────


def resolve_book(identifier):
    """Find book directory, load config. Exits on failure."""
    project_root = os.getcwd()
    book_dir = find_book_dir(identifier, project_root)

    if not book_dir:
        print(f"Error: Could not find book '{identifier}'")
        print(f"  Searched in: {project_root} and {os.path.join(project_root, 'manuscript')}")
        print("  Tip: Run from the project root, or pass a direct path.")
        sys.exit(1)

    try:
        config = BookConfig.load(book_dir)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    return book_dir, config


def build_root(args):
    return args.build_dir or os.path.join(os.getcwd(), "build")


# ── Checks ─────────────────────────────────────────────────────────────


def run_count(book_dir, config):
    stats = [account(path) for path in discover_sources(book_dir)]
    report(stats, config.goal_words)
    return True


def run_hours(book_dir, config):
    hours = count_hours(os.path.join(book_dir, config.hours_file))
    if hours is None:
        print(f"  No hours log ({config.hours_file}), skipping")
    else:
        print(f"Total hours: {hours:g}")
    return True


def run_tics(book_dir, config, verbose=False):
    files = discover_sources(book_dir)
    return TicChecker(book_dir, files, config.tics, verbose=verbose).run()


def run_todos(book_dir, config, verbose=False):
    files = discover_sources(book_dir)
    return TodoChecker(book_dir, files, config.todo_marker, verbose=verbose).run()


def run_syntax(book_dir, config, verbose=False):
    files = discover_sources(book_dir)
    languages = config.syntax.get("languages", [])
    return SyntaxChecker(book_dir, files, languages, verbose=verbose).run()


def run_links(book_dir, config, verbose=False):
    files = discover_sources(book_dir)
    timeout = config.links.get("timeout", 10)
    return LinkChecker(book_dir, files, timeout=timeout, verbose=verbose).run()


def run_all_checks(book_dir, config, verbose=False):
    """Every check runs even after a failure. Returns True if all passed."""
    results = [
        run_hours(book_dir, config),
        run_count(book_dir, config),
        run_tics(book_dir, config, verbose),
        run_todos(book_dir, config, verbose),
        run_syntax(book_dir, config, verbose),
    ]
    return all(results)


def cmd_check(args):
    book_dir, config = resolve_book(args.book)
    sys.exit(0 if run_all_checks(book_dir, config, args.verbose) else 1)


def cmd_count(args):
    book_dir, config = resolve_book(args.book)
    run_count(book_dir, config)


def cmd_hours(args):
    book_dir, config = resolve_book(args.book)
    run_hours(book_dir, config)


def _single_check(runner):
    def handler(args):
        book_dir, config = resolve_book(args.book)
        sys.exit(0 if runner(book_dir, config, args.verbose) else 1)
    return handler


# ── Build ──────────────────────────────────────────────────────────────


def cmd_clean(args):
    root = build_root(args)
    if os.path.isdir(root):
        shutil.rmtree(root)
        print(f"  Removed {root}")


def selected_formats(args):
    if getattr(args, "all", False):
        return list(DEFAULT_FORMATS)
    formats = [fmt for fmt in BUILDERS if getattr(args, fmt, False)]
    return formats or list(DEFAULT_FORMATS)


def run_build(args, config, book_dir, formats, full=False):
    """
    Aggregate the manuscript and run each builder in order.

    full runs the checks and cleans the build root first. Exits 1 on a
    failed check or the first failed builder.
    """
    if full:
        if not run_all_checks(book_dir, config, args.verbose):
            print("\n  Checks failed, not building.")
            sys.exit(1)
        cmd_clean(args)

    chapter_filter = getattr(args, "chapter", None) or chapter_filter_from_env()

    config.summary()
    if chapter_filter:
        print(f"  Chapter: {chapter_filter} (sample build)")

    manuscript = prepare_manuscript(config, build_root(args), chapter_filter)
    print(f"  Output: {manuscript.build_dir}")

    for fmt in formats:
        builder = BUILDERS[fmt](config=config, manuscript=manuscript, verbose=args.verbose)
        if not builder.build():
            print(f"\n{'─' * 60}")
            print(f"  {fmt} failed, stopping.")
            sys.exit(1)

    print(f"\n{'─' * 60}")
    print(f"  Done. {len(formats)} format(s) built.")
    return manuscript


def cmd_build(args):
    book_dir, config = resolve_book(args.book)
    run_build(args, config, book_dir, selected_formats(args), full=args.full)


def run_package(args, config, book_dir):
    try:
        names = check_packages(config, args.name)
    except PackageError as e:
        print(f"Error: {e}")
        sys.exit(1)

    manuscript = run_build(args, config, book_dir, list(DEFAULT_FORMATS), full=True)
    return build_packages(config, manuscript, names, verbose=args.verbose)


def cmd_package(args):
    book_dir, config = resolve_book(args.book)
    run_package(args, config, book_dir)


def cmd_publish(args):
    book_dir, config = resolve_book(args.book)
    if not config.publish.get("url"):
        print("Error: publish.url not set in book.yaml")
        sys.exit(1)
    zip_paths = run_package(args, config, book_dir)
    try:
        publish(config, zip_paths)
    except PublishError as e:
        print(f"Error: {e}")
        sys.exit(1)


# ── Argument Parser ────────────────────────────────────────────────────


def build_parser():
    parser = argparse.ArgumentParser(
        prog="chapterkit",
        description="Ebook checks and build pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s check                       Run all sanity checks
  %(prog)s build --pdf --chapter ch1   Sample PDF of one chapter
  %(prog)s build --full                Check, clean, then build everything
  %(prog)s package --name deluxe       Build and zip the deluxe package
        """,
    )

    sub = parser.add_subparsers(dest="command")

    for name, help_text in [
        ("check", "Run count, hours, tics, todos and syntax checks"),
        ("count", "Word/code counts against the goal"),
        ("hours", "Total hours logged"),
        ("tics", "Find verbal tics"),
        ("todos", "Find TODO markers"),
        ("syntax", "Parse embedded code samples"),
        ("links", "Check external links"),
    ]:
        p = sub.add_parser(name, help=help_text)
        _add_common_args(p)

    clean_p = sub.add_parser("clean", help="Remove the build directory")
    _add_common_args(clean_p)
    clean_p.add_argument("--build-dir", help="Override build root (default: ./build)")

    build_p = sub.add_parser("build", help="Build output formats")
    _add_common_args(build_p)
    _add_build_args(build_p)
    build_p.add_argument(
        "--full", action="store_true", help="Run checks and clean before building"
    )

    for name, help_text in [
        ("package", "Full build, then zip packages"),
        ("publish", "Package, then upload"),
    ]:
        p = sub.add_parser(name, help=help_text)
        _add_common_args(p)
        p.add_argument("--build-dir", help="Override build root (default: ./build)")
        p.add_argument(
            "--name", action="append", help="Package to build (repeatable, default: all)"
        )

    return parser


def _add_common_args(parser):
    parser.add_argument(
        "--book", default=".", help="Book path or keyword (default: current directory)"
    )
    parser.add_argument("--verbose", "-v", action="store_true")


def _add_build_args(parser):
    """Add format flags and build options to a parser."""
    fmt = parser.add_argument_group("output formats")
    fmt.add_argument("--html", action="store_true", help="Build HTML")
    fmt.add_argument("--pdf", action="store_true", help="Build PDF")
    fmt.add_argument("--epub", action="store_true", help="Build EPUB")
    fmt.add_argument("--mobi", action="store_true", help="Build MOBI (from the EPUB)")
    fmt.add_argument("--app", action="store_true", help="Export the app archive")
    fmt.add_argument("--all", action="store_true", help="Build every format (default)")

    opts = parser.add_argument_group("options")
    opts.add_argument(
        "--chapter", help="Build a single chapter (overrides the 'chapter' env var)"
    )
    opts.add_argument("--build-dir", help="Override build root (default: ./build)")


# ── Main ───────────────────────────────────────────────────────────────


DISPATCH = {
    "check": cmd_check,
    "count": cmd_count,
    "hours": cmd_hours,
    "tics": _single_check(run_tics),
    "todos": _single_check(run_todos),
    "syntax": _single_check(run_syntax),
    "links": _single_check(run_links),
    "clean": cmd_clean,
    "build": cmd_build,
    "package": cmd_package,
    "publish": cmd_publish,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # No subcommand: run the checks
    if args.command is None:
        args = parser.parse_args(["check"])

    DISPATCH[args.command](args)


def run():
    try:
        main()
    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)
    except Exception as e:
        log_path = "build_error.log"
        with open(log_path, "w") as f:
            traceback.print_exc(file=f)
        print(f"\nUnexpected error: {e}")
        print(f"Full traceback written to {log_path}")
        sys.exit(1)
