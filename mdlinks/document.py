"""Data structures describing links, anchors and check results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple, Union

NodeKind = Literal["link", "image"]


@dataclass(frozen=True, slots=True)
class Destination:
    """Raw target of a markdown link or image, as written in the source."""

    url: str
    kind: NodeKind = "link"


@dataclass(frozen=True, slots=True)
class Anchor:
    """Fragment id defined by a heading.

    ``unstable`` marks auto-generated ids that carry a numeric suffix added
    to avoid a clash with an earlier heading of the same text.
    """

    id: str
    level: int
    explicit: bool = False
    unstable: bool = False


# ---------------------------------------------------------------------------
# Classified links
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class External:
    """Destination with a scheme or a host; never checked locally."""

    url: str


@dataclass(frozen=True, slots=True)
class Empty:
    """Empty destination string."""


@dataclass(frozen=True, slots=True)
class FragmentOnly:
    """Reference into the containing document (``#section``)."""

    fragment: str


@dataclass(frozen=True, slots=True)
class LocalPath:
    """Path relative to the containing document, with an optional fragment."""

    path: str
    fragment: Optional[str] = None


ClassifiedLink = Union[External, Empty, FragmentOnly, LocalPath]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class Outcome(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"


@dataclass(slots=True)
class Finding:
    """Single diagnostic reported for a destination."""

    path: str
    destination: str
    reason: str
    error: bool = True


@dataclass(slots=True)
class CheckReport:
    """Aggregated result of a checking session."""

    findings: List[Finding] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    @property
    def errors(self) -> List[Finding]:
        return [f for f in self.findings if f.error]

    @property
    def advisories(self) -> List[Finding]:
        return [f for f in self.findings if not f.error]

    @property
    def dirty(self) -> bool:
        return any(f.error for f in self.findings)

    @property
    def outcome(self) -> Outcome:
        return Outcome.DIRTY if self.dirty else Outcome.CLEAN

    def merge(self, other: "CheckReport") -> None:
        self.findings.extend(other.findings)
        self.files.extend(other.files)


@dataclass(slots=True)
class RenameReport:
    """What a rename touched: rewritten links per file and per-file failures."""

    src: str
    dst: str
    rewritten: Dict[str, List[Tuple[str, str]]] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors
