"""Parsing and classification of link destinations."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import SplitResult, quote, unquote, urlsplit

from .document import ClassifiedLink, Empty, External, FragmentOnly, LocalPath
from .errors import MalformedURLError

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})(.{0,2})", re.DOTALL)
_CONTROL = re.compile(r"[\x00-\x1f\x7f]")

# Characters left unescaped when serializing a rewritten local link. Parens
# stay escaped in the path so an inline link destination remains balanced.
_PATH_SAFE = "/$&+,;=:@~"
_FRAGMENT_SAFE = _PATH_SAFE + "?!()*"


def parse_url(raw: str) -> SplitResult:
    """Split a destination into its URL parts with path and fragment decoded.

    Raises:
        MalformedURLError: If ``raw`` is not a valid URI reference.
    """
    # the query is kept raw, only the path and fragment must decode
    rest, _, fragment = raw.partition("#")
    for part in (fragment, rest.split("?", 1)[0]):
        match = _BAD_ESCAPE.search(part)
        if match:
            raise MalformedURLError(
                f'invalid URL escape "%{match.group(1)}"', url=raw
            )
    if _CONTROL.search(raw):
        raise MalformedURLError("invalid control character in URL", url=raw)
    if raw.startswith(":"):
        raise MalformedURLError("missing protocol scheme", url=raw)
    try:
        parts = urlsplit(raw)
    except ValueError as exc:
        raise MalformedURLError(str(exc), url=raw) from exc
    return parts._replace(path=unquote(parts.path), fragment=unquote(parts.fragment))


def classify(raw: str) -> ClassifiedLink:
    """Classify a destination string; touches neither disk nor network."""
    if raw == "":
        return Empty()
    parts = parse_url(raw)
    if parts.scheme or parts.netloc:
        return External(raw)
    if not parts.path:
        return FragmentOnly(parts.fragment)
    fragment: Optional[str] = parts.fragment if "#" in raw else None
    return LocalPath(parts.path, fragment)


def format_url(path: str, fragment: Optional[str] = None) -> str:
    """Serialize a local path (``/``-separated) and optional fragment."""
    text = quote(path, safe=_PATH_SAFE)
    first = text.split("/", 1)[0]
    if ":" in first:
        text = "./" + text
    if fragment:
        text += "#" + quote(fragment, safe=_FRAGMENT_SAFE)
    return text
