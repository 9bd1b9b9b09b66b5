"""Move a markdown file and update relative links pointing to or from it.

The whole operation is not atomic: the file is renamed first, then every
referencing file is rewritten one by one. Run it over files under version
control so a failed run can be restored.

Only inline links like ``[text](dst.md)`` are updated; reference-style
links (``[text][id]``) are not. Links are rewritten by literal substring
replacement of ``(old)`` with ``(new)`` in the raw text, and restricting it
to inline links keeps the risk of replacing unrelated text low. Links with
a title (``[text](dst.md "title")``) are left untouched for the same reason.

Example usage:

    from mdlinks.rename import rename

    report = rename("guide.md", "docs/guide.md")
    for name, pairs in report.rewritten.items():
        print(name, pairs)
"""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, Iterable, List, Optional, Tuple

from markdown_it import MarkdownIt

from .classify import classify, format_url
from .document import LocalPath, RenameReport
from .errors import DestinationExistsError, InvalidRenameError, MalformedURLError, RenameError
from .extractor import decode, parse_document
from .paths import (
    MARKDOWN_SUFFIX,
    is_regular_file,
    iter_markdown_files,
    relative_link,
    resolve_local,
)

LOGGER = logging.getLogger(__name__)

Replacement = Tuple[str, str]


def _local_link(url: str) -> Optional[LocalPath]:
    if not url:
        return None
    try:
        link = classify(url)
    except MalformedURLError:
        return None
    return link if isinstance(link, LocalPath) else None


def _same_path(a: str, b: str) -> bool:
    return os.path.abspath(a) == os.path.abspath(b)


def replace_links(text: str, replacements: Iterable[Replacement]) -> str:
    """Replace ``(old)`` with ``(new)`` in a single left-to-right pass.

    When several patterns match at one position, the one registered first
    wins; replaced text is never rescanned.
    """
    mapping: Dict[str, str] = {}
    for old, new in replacements:
        mapping.setdefault(f"({old})", f"({new})")
    if not mapping:
        return text
    pattern = re.compile("|".join(re.escape(key) for key in mapping))
    return pattern.sub(lambda match: mapping[match.group(0)], text)


def _read(path: str) -> str:
    with open(path, "rb") as fh:
        return decode(fh.read())


def _write(path: str, text: str, replacements: List[Replacement]) -> None:
    text = replace_links(text, replacements)
    with open(path, "wb") as fh:
        fh.write(text.encode("utf-8", errors="surrogateescape"))


def _add(
    replacements: List[Replacement], name: str, text: str, old: str, new: str
) -> None:
    # reference-style and titled links have no literal "(old)" in the text
    if new == old or f"({old})" not in text or (old, new) in replacements:
        return
    LOGGER.info('%s: "%s" -> "%s"', name, old, new)
    replacements.append((old, new))


def update_renamed_file(
    src: str, dst: str, *, parser: Optional[MarkdownIt] = None
) -> List[Replacement]:
    """Re-express relative links of a file just moved from ``src`` to ``dst``.

    Links and images are resolved against the old directory and rewritten
    relative to the new one; a link to the file itself follows the move.
    """
    text = _read(dst)
    document = parse_document(text, path=dst, parser=parser)
    replacements: List[Replacement] = []
    for destination in document.destinations():
        link = _local_link(destination.url)
        if link is None:
            continue
        target = resolve_local(src, link.path)
        if _same_path(target, src):
            target = dst
        if _same_path(resolve_local(dst, link.path), target):
            continue
        new = format_url(relative_link(dst, target), link.fragment)
        _add(replacements, dst, text, destination.url, new)
    if replacements:
        _write(dst, text, replacements)
    return replacements


def update_referrer(
    name: str, src: str, dst: str, *, parser: Optional[MarkdownIt] = None
) -> List[Replacement]:
    """Point inline links in ``name`` that resolve to ``src`` at ``dst`` instead."""
    text = _read(name)
    # cheap check first
    if os.path.basename(src) not in text:
        return []
    document = parse_document(text, path=name, parser=parser)
    replacements: List[Replacement] = []
    for destination in document.destinations(include_images=False):
        link = _local_link(destination.url)
        if link is None or not _same_path(resolve_local(name, link.path), src):
            continue
        new = format_url(relative_link(name, dst), link.fragment)
        _add(replacements, name, text, destination.url, new)
    if replacements:
        _write(name, text, replacements)
    return replacements


def _validate(src: str, dst: str) -> None:
    if not src or not dst:
        raise InvalidRenameError("both source and destination must be set")
    if not src.endswith(MARKDOWN_SUFFIX) or not dst.endswith(MARKDOWN_SUFFIX):
        raise InvalidRenameError(
            f"both source and destination must have '{MARKDOWN_SUFFIX}' suffix"
        )


def rename(
    src: str,
    dst: str,
    *,
    root: str = ".",
    parser: Optional[MarkdownIt] = None,
) -> RenameReport:
    """Rename ``src`` to ``dst`` and fix links in all markdown files under ``root``.

    Args:
        src: Current path of the markdown file.
        dst: New path; missing parent directories are created.
        root: Directory scanned for files referencing ``src``.
        parser: Optional markdown parser (see :func:`mdlinks.extractor.build_parser`).

    Returns:
        RenameReport with the links rewritten in each file.

    Raises:
        InvalidRenameError: If either path is empty or lacks the ``.md`` suffix.
        DestinationExistsError: If ``dst`` already exists; nothing is changed.
        OSError: If the rename, the update of the moved file, or the
            directory walk fails.
        RenameError: If some referencing files could not be updated. The
            rename and all other updates have already been applied.
    """
    _validate(src, dst)
    src = os.path.normpath(src)
    dst = os.path.normpath(dst)
    report = RenameReport(src=src, dst=dst)
    if src == dst:
        return report
    if is_regular_file(dst):
        raise DestinationExistsError(dst)

    parent = os.path.dirname(dst)
    if parent:
        os.makedirs(parent, exist_ok=True)
    os.rename(src, dst)
    LOGGER.debug("Renamed %s to %s", src, dst)

    pairs = update_renamed_file(src, dst, parser=parser)
    if pairs:
        report.rewritten[dst] = pairs

    for name in iter_markdown_files(root):
        try:
            pairs = update_referrer(name, src, dst, parser=parser)
        except OSError as exc:
            LOGGER.error('"%s": %s', name, exc)
            report.errors[name] = str(exc)
            continue
        if pairs:
            report.rewritten.setdefault(name, []).extend(pairs)

    if report.errors:
        raise RenameError(report)
    return report
