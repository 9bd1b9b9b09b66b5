"""Argument parser construction for CLI commands."""

from __future__ import annotations

import argparse
from typing import List, Optional


def _add_verbose_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_check_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mdurlcheck",
        description=(
            "Check markdown files for broken relative links, including image "
            "links and #fragment references to headings."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  # Single file
  mdurlcheck README.md

  # Whole tree (directories starting with '.' are skipped)
  mdurlcheck docs/

  # Large trees: one process per file
  find . -name \\*.md -print0 | xargs -0 -P4 -n1 mdurlcheck
""",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Markdown file(s) or directories to check",
    )
    parser.add_argument(
        "--empty-url-is-error",
        action="store_true",
        default=None,
        help="Treat empty link destinations as errors (default: advisory)",
    )
    parser.add_argument(
        "--no-unstable-warnings",
        action="store_false",
        dest="warn_unstable_slugs",
        default=None,
        help="Do not warn about references to suffixed duplicate heading ids",
    )
    _add_verbose_arg(parser)
    return parser.parse_args(argv)


def parse_rename_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mdrename",
        description=(
            "Rename or move a single markdown file, updating links to it in "
            "every .md file under the root directory."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
The operation is not atomic: it may update many files, so run it over files
under version control. Only inline links like [link](dst.md) are updated;
reference links like [link][id] are not. Please check results before
committing them.

Examples:
  mdrename file.md new-name.md
  mdrename guide.md docs/guide.md --no-check
""",
    )
    parser.add_argument("src", help="Markdown file to move")
    parser.add_argument("dst", help="New path of the file")
    parser.add_argument(
        "--root",
        type=str,
        default=".",
        help="Directory scanned for referencing files (default: .)",
    )
    parser.add_argument(
        "--no-check",
        action="store_false",
        dest="check",
        default=None,
        help="Skip the link check that runs after a successful rename",
    )
    _add_verbose_arg(parser)
    return parser.parse_args(argv)
