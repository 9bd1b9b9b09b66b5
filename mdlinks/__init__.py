"""Tools for keeping relative links in a tree of markdown files healthy.

This package provides:

- A link checker that reports broken relative links, missing files and
  ``#fragment`` references to headings that do not exist
- A renamer that moves a markdown file and updates every inline link
  pointing to it (and the relative links inside it)

Example usage:

    from mdlinks import check_paths, rename

    # Check a whole directory tree
    report = check_paths(["docs"])
    for finding in report.errors:
        print(finding.path, finding.destination, finding.reason)

    # Move a file and fix links to it
    result = rename("guide.md", "docs/guide.md")
    print(result.rewritten)

    # Reuse one fragment cache across several checks
    from mdlinks import Checker, FragmentCache
    checker = Checker(cache=FragmentCache())
    checker.check_file("README.md")
    checker.check_file("CONTRIBUTING.md")
"""

from __future__ import annotations

from .checker import Checker, check_paths
from .classify import classify, format_url, parse_url
from .config import Settings
from .document import (
    Anchor,
    CheckReport,
    ClassifiedLink,
    Destination,
    Empty,
    External,
    Finding,
    FragmentOnly,
    LocalPath,
    Outcome,
    RenameReport,
)
from .errors import (
    DestinationExistsError,
    InvalidRenameError,
    MalformedURLError,
    MdLinksError,
    RenameError,
)
from .extractor import Document, build_parser, parse_document, read_document, slugify
from .fragments import FragmentCache
from .rename import rename

__all__ = [
    # Data model
    "Anchor",
    "Destination",
    "ClassifiedLink",
    "External",
    "Empty",
    "FragmentOnly",
    "LocalPath",
    "Finding",
    "Outcome",
    "CheckReport",
    "RenameReport",
    # Errors
    "MdLinksError",
    "MalformedURLError",
    "InvalidRenameError",
    "DestinationExistsError",
    "RenameError",
    # Parsing
    "Document",
    "build_parser",
    "parse_document",
    "read_document",
    "slugify",
    # Classification
    "classify",
    "parse_url",
    "format_url",
    # Checking
    "Checker",
    "FragmentCache",
    "check_paths",
    # Renaming
    "rename",
    # Config
    "Settings",
]
