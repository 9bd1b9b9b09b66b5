"""Broken-link checker for trees of markdown files.

For every link and image in a document the checker classifies the
destination and then:

- skips external URLs (scheme or host present);
- reports empty destinations (advisory unless configured otherwise);
- checks ``#fragment`` against the document's own heading ids;
- checks local paths for an existing regular file and, if a fragment is
  given, that the target file defines that heading id.

Diagnostics are logged one per line as ``<file>: "<destination>": <reason>``.
A run with error findings is *dirty*; an ``OSError`` while reading or
walking aborts the run and propagates to the caller.

Example usage:

    from mdlinks.checker import Checker

    report = Checker().check_paths(["docs"])
    if report.dirty:
        raise SystemExit(1)
"""

from __future__ import annotations

import json
import logging
import os
from typing import Dict, Iterable, Iterator, Optional

from markdown_it import MarkdownIt

from .classify import classify
from .document import (
    Anchor,
    CheckReport,
    Empty,
    External,
    Finding,
    FragmentOnly,
    LocalPath,
)
from .errors import (
    BROKEN_FRAGMENT,
    BROKEN_LINK,
    EMPTY_URL,
    UNSTABLE_SLUG,
    MalformedURLError,
)
from .extractor import parse_document
from .fragments import FragmentCache
from .paths import is_regular_file, iter_markdown_files, resolve_local

LOGGER = logging.getLogger(__name__)


def quote_destination(url: str) -> str:
    return json.dumps(url, ensure_ascii=False)


def format_finding(finding: Finding) -> str:
    return f"{finding.path}: {quote_destination(finding.destination)}: {finding.reason}"


class Checker:
    """Checks markdown files within one session sharing a :class:`FragmentCache`."""

    def __init__(
        self,
        *,
        cache: Optional[FragmentCache] = None,
        parser: Optional[MarkdownIt] = None,
        empty_url_is_error: bool = False,
        warn_unstable_slugs: bool = True,
    ) -> None:
        self.parser = parser
        self.cache = cache if cache is not None else FragmentCache(parser=parser)
        self.empty_url_is_error = empty_url_is_error
        self.warn_unstable_slugs = warn_unstable_slugs

    # -- public API ---------------------------------------------------------

    def check_paths(self, paths: Iterable[str]) -> CheckReport:
        """Check files and directories (recursively, ``.md`` only)."""
        report = CheckReport()
        for path in paths:
            for name in self._expand(path):
                report.merge(self.check_file(name))
        return report

    def check_file(self, path: str) -> CheckReport:
        """Check a single file. ``OSError`` propagates."""
        with open(path, "rb") as fh:
            data = fh.read()
        document = parse_document(data, path=path, parser=self.parser)
        anchors = document.anchors
        self.cache.store(path, anchors)

        report = CheckReport(files=[path])
        for destination in document.destinations():
            finding = self._check_destination(path, destination.url, anchors)
            if finding is not None:
                self._emit(finding)
                report.findings.append(finding)
        return report

    # -- internals ----------------------------------------------------------

    @staticmethod
    def _expand(path: str) -> Iterator[str]:
        if os.path.isdir(path):
            yield from iter_markdown_files(path)
        else:
            yield path

    def _check_destination(
        self, path: str, url: str, anchors: Dict[str, Anchor]
    ) -> Optional[Finding]:
        try:
            link = classify(url)
        except MalformedURLError as exc:
            return Finding(path, url, str(exc))

        if isinstance(link, External):
            return None
        if isinstance(link, Empty):
            return Finding(path, url, EMPTY_URL, error=self.empty_url_is_error)
        if isinstance(link, FragmentOnly):
            return self._check_fragment(path, url, link.fragment, anchors, BROKEN_LINK)
        if not isinstance(link, LocalPath):
            raise TypeError(f"unexpected link type: {type(link).__name__}")

        target = resolve_local(path, link.path)
        if not is_regular_file(target):
            return Finding(path, url, BROKEN_LINK)
        if not link.fragment:
            return None
        target_anchors = self.cache.ensure_loaded(target)
        return self._check_fragment(path, url, link.fragment, target_anchors, BROKEN_FRAGMENT)

    def _check_fragment(
        self,
        path: str,
        url: str,
        fragment: str,
        anchors: Dict[str, Anchor],
        reason: str,
    ) -> Optional[Finding]:
        if not fragment:
            return None
        anchor = anchors.get(fragment)
        if anchor is None:
            return Finding(path, url, reason)
        if anchor.unstable and self.warn_unstable_slugs:
            return Finding(path, url, UNSTABLE_SLUG, error=False)
        return None

    @staticmethod
    def _emit(finding: Finding) -> None:
        level = logging.ERROR if finding.error else logging.WARNING
        LOGGER.log(level, "%s", format_finding(finding))


def check_paths(paths: Iterable[str], **kwargs) -> CheckReport:
    """Run a fresh checking session over ``paths``."""
    return Checker(**kwargs).check_paths(paths)
