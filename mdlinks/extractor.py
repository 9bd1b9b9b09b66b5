"""Markdown parsing: link/image destinations and heading ids.

Documents are parsed with markdown-it-py configured close to GitHub
flavoured markdown: tables, strikethrough, footnotes, definition lists and
automatic heading ids. Math extensions are never enabled, so ``$`` carries
no meaning and cannot hide links.

Link destinations are reported exactly as written (after markdown
unescaping): normalization and link validation are turned off, because
the renamer needs the literal text to substitute it, and the classifier
needs to see malformed escapes.

Example usage:

    from mdlinks.extractor import parse_document

    doc = parse_document(b"# Intro\\n\\nSee [setup](setup.md#install).")
    list(doc.destinations())  # [Destination(url='setup.md#install', kind='link')]
    doc.fragment_ids          # frozenset({'intro'})
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import cached_property, lru_cache
from typing import Dict, FrozenSet, Iterator, Optional, Union

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.footnote import footnote_plugin

from .document import Anchor, Destination

EXPLICIT_ID = re.compile(r"\s*\{#(?P<id>[^\s{}]+)\}\s*$")


def slugify(title: str) -> str:
    """GitHub-style heading slug: lowercase, punctuation dropped, spaces to dashes."""
    slug = re.sub(r"[^\w\- ]", "", title.strip().lower())
    return slug.replace(" ", "-")


def _heading_title(inline) -> str:
    # same text the anchors plugin slugs
    return "".join(
        child.content
        for child in inline.children or []
        if child.type in ("text", "code_inline")
    )


def _mark_explicit_ids(state: StateCore) -> None:
    """Strip ``{#id}`` suffixes from headings and remember the base slug."""
    tokens = state.tokens
    for idx, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        inline = tokens[idx + 1]
        children = inline.children or []
        if children and children[-1].type == "text":
            match = EXPLICIT_ID.search(children[-1].content)
            if match:
                token.meta["explicit_id"] = match.group("id")
                children[-1].content = children[-1].content[: match.start()]
                inline.content = EXPLICIT_ID.sub("", inline.content)
        token.meta["base_slug"] = slugify(_heading_title(inline))


def _apply_explicit_ids(state: StateCore) -> None:
    for token in state.tokens:
        if token.type != "heading_open":
            continue
        explicit = token.meta.get("explicit_id")
        if explicit:
            token.attrSet("id", explicit)
            token.meta["unstable"] = False
        else:
            token.meta["unstable"] = token.attrGet("id") != token.meta.get("base_slug")


def _keep_destination(url: str) -> str:
    return url


def _accept_destination(url: str) -> bool:
    return True


def build_parser() -> MarkdownIt:
    """Parser used for every document; fixes the heading-id scheme."""
    md = (
        MarkdownIt("commonmark")
        .enable(["table", "strikethrough"])
        .use(footnote_plugin)
        .use(deflist_plugin)
        .use(anchors_plugin, min_level=1, max_level=6, slug_func=slugify)
    )
    md.core.ruler.before("anchor", "explicit_heading_id", _mark_explicit_ids)
    md.core.ruler.after("anchor", "apply_heading_id", _apply_explicit_ids)
    md.normalizeLink = _keep_destination  # type: ignore[method-assign]
    md.validateLink = _accept_destination  # type: ignore[method-assign]
    return md


@lru_cache(maxsize=1)
def default_parser() -> MarkdownIt:
    return build_parser()


# ---------------------------------------------------------------------------
# Traversal events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LinkEvent:
    destination: Destination


@dataclass(frozen=True, slots=True)
class ImageEvent:
    destination: Destination


@dataclass(frozen=True, slots=True)
class HeadingEvent:
    anchor: Anchor


Event = Union[LinkEvent, ImageEvent, HeadingEvent]


def _node_event(node: SyntaxTreeNode) -> Optional[Event]:
    if node.type == "link":
        return LinkEvent(Destination(str(node.attrs.get("href", "")), "link"))
    if node.type == "image":
        return ImageEvent(Destination(str(node.attrs.get("src", "")), "image"))
    if node.type == "heading":
        anchor_id = node.attrs.get("id")
        if anchor_id is None:
            return None
        return HeadingEvent(
            Anchor(
                id=str(anchor_id),
                level=int(node.tag[1:]),
                explicit=bool(node.meta.get("explicit_id")),
                unstable=bool(node.meta.get("unstable")),
            )
        )
    return None


@dataclass
class Document:
    """Parsed markdown document; discarded once its links are extracted."""

    root: SyntaxTreeNode
    path: Optional[str] = field(default=None)

    def events(self) -> Iterator[Event]:
        """Depth-first, pre-order walk yielding link, image and heading events."""
        for node in self.root.walk():
            event = _node_event(node)
            if event is not None:
                yield event

    def destinations(self, include_images: bool = True) -> Iterator[Destination]:
        for event in self.events():
            if isinstance(event, LinkEvent):
                yield event.destination
            elif isinstance(event, ImageEvent) and include_images:
                yield event.destination

    @cached_property
    def anchors(self) -> Dict[str, Anchor]:
        anchors: Dict[str, Anchor] = {}
        for event in self.events():
            if isinstance(event, HeadingEvent):
                anchors.setdefault(event.anchor.id, event.anchor)
        return anchors

    @property
    def fragment_ids(self) -> FrozenSet[str]:
        return frozenset(self.anchors)


def decode(data: Union[bytes, str]) -> str:
    """Decode file content so that encoding back restores the exact bytes."""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="surrogateescape")


def parse_document(
    data: Union[bytes, str],
    *,
    path: Optional[str] = None,
    parser: Optional[MarkdownIt] = None,
) -> Document:
    """Parse raw markdown content into a :class:`Document`."""
    md = parser or default_parser()
    tokens = md.parse(decode(data))
    return Document(root=SyntaxTreeNode(tokens), path=path)


def read_document(path: str, *, parser: Optional[MarkdownIt] = None) -> Document:
    """Read and parse a file. ``OSError`` propagates to the caller."""
    with open(path, "rb") as fh:
        data = fh.read()
    return parse_document(data, path=path, parser=parser)
