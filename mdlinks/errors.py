"""Exceptions raised by the checker and the renamer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .document import RenameReport

# Finding reasons, as printed in diagnostics.
EMPTY_URL = "empty url"
BROKEN_LINK = "broken link"
BROKEN_FRAGMENT = "broken link (fragment points to non-existent id)"
UNSTABLE_SLUG = (
    "unstable slug reference, may become incorrect on unrelated header changes"
)


class MdLinksError(Exception):
    """Base class for all mdlinks errors."""


class MalformedURLError(MdLinksError):
    """Raised when a destination is not a valid URI reference."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class InvalidRenameError(MdLinksError, ValueError):
    """Raised when rename arguments are unusable."""


class DestinationExistsError(MdLinksError):
    """Raised when the rename destination already exists."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"destination {path!r} already exists")


class RenameError(MdLinksError):
    """Raised after a rename when some referencing files failed to update."""

    def __init__(self, report: "RenameReport"):
        self.report = report
        super().__init__(f"had errors processing {len(report.errors)} file(s)")
