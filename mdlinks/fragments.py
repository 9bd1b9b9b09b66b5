"""Per-session cache of the heading ids defined by each markdown file."""

from __future__ import annotations

import logging
import os
from typing import Callable, Dict, Optional, Tuple

from markdown_it import MarkdownIt

from .document import Anchor
from .extractor import Document, read_document

LOGGER = logging.getLogger(__name__)

Loader = Callable[[str], Document]


class FragmentCache:
    """Maps a file path to the fragment ids (anchors) it defines.

    A missing file entry means "not parsed yet", never "no anchors". Each
    distinct path is parsed at most once via :meth:`ensure_loaded`. The
    cache belongs to one checking session and is not thread-safe; run
    separate processes to check trees in parallel.
    """

    def __init__(
        self,
        *,
        parser: Optional[MarkdownIt] = None,
        loader: Optional[Loader] = None,
    ) -> None:
        self._entries: Dict[str, Dict[str, Anchor]] = {}
        self._loader: Loader = loader or (lambda path: read_document(path, parser=parser))
        self.loads = 0

    @staticmethod
    def _key(path: str) -> str:
        return os.path.normpath(path)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self._key(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, path: str, fragment: str) -> Tuple[bool, bool]:
        """Cache-only check: ``(file_known, fragment_known)``."""
        anchors = self._entries.get(self._key(path))
        if anchors is None:
            return False, False
        return True, fragment in anchors

    def store(self, path: str, anchors: Dict[str, Anchor]) -> None:
        self._entries[self._key(path)] = dict(anchors)

    def ensure_loaded(self, path: str) -> Dict[str, Anchor]:
        """Return the anchors of ``path``, parsing the file on first use.

        Raises:
            OSError: If the file cannot be read.
        """
        key = self._key(path)
        anchors = self._entries.get(key)
        if anchors is not None:
            return anchors
        LOGGER.debug("Loading fragment ids from %s", key)
        document = self._loader(key)
        self.loads += 1
        anchors = dict(document.anchors)
        self._entries[key] = anchors
        return anchors

    def anchor(self, path: str, fragment: str) -> Optional[Anchor]:
        """Anchor for ``fragment`` in ``path``, loading the file if needed."""
        return self.ensure_loaded(path).get(fragment)
