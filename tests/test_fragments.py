"""Tests for mdlinks.fragments module."""

import os

import pytest

from mdlinks.document import Anchor
from mdlinks.extractor import parse_document
from mdlinks.fragments import FragmentCache


class _CountingLoader:
    def __init__(self, text="# Alpha\n\n## Beta\n"):
        self.text = text
        self.calls = []

    def __call__(self, path):
        self.calls.append(path)
        return parse_document(self.text, path=path)


class TestLookup:
    def test_unknown_file(self):
        cache = FragmentCache()
        assert cache.lookup("a.md", "x") == (False, False)

    def test_known_file_after_store(self):
        cache = FragmentCache()
        cache.store("a.md", {"x": Anchor(id="x", level=1)})
        assert cache.lookup("a.md", "x") == (True, True)
        assert cache.lookup("a.md", "y") == (True, False)

    def test_file_with_no_anchors_is_known(self):
        cache = FragmentCache()
        cache.store("a.md", {})
        assert cache.lookup("a.md", "x") == (True, False)

    def test_keys_are_normalized(self):
        cache = FragmentCache()
        cache.store(os.path.join("docs", "..", "a.md"), {})
        assert "a.md" in cache
        assert cache.lookup("./a.md", "x") == (True, False)

    def test_lookup_never_loads(self):
        loader = _CountingLoader()
        cache = FragmentCache(loader=loader)
        cache.lookup("a.md", "alpha")
        assert loader.calls == []


class TestEnsureLoaded:
    def test_loads_once(self):
        loader = _CountingLoader()
        cache = FragmentCache(loader=loader)
        first = cache.ensure_loaded("a.md")
        second = cache.ensure_loaded("a.md")
        assert set(first) == {"alpha", "beta"}
        assert first == second
        assert loader.calls == ["a.md"]
        assert cache.loads == 1

    def test_repeated_anchor_lookup_is_idempotent(self):
        loader = _CountingLoader()
        cache = FragmentCache(loader=loader)
        results = [cache.anchor("a.md", "beta") for _ in range(3)]
        assert results[0] is not None
        assert all(r == results[0] for r in results)
        assert cache.loads == 1
        assert cache.lookup("a.md", "beta") == (True, True)

    def test_store_overwrites(self):
        cache = FragmentCache(loader=_CountingLoader())
        cache.ensure_loaded("a.md")
        cache.store("a.md", {})
        assert cache.lookup("a.md", "alpha") == (True, False)

    def test_stored_entry_skips_loading(self):
        loader = _CountingLoader()
        cache = FragmentCache(loader=loader)
        cache.store("a.md", {"gamma": Anchor(id="gamma", level=2)})
        assert set(cache.ensure_loaded("a.md")) == {"gamma"}
        assert loader.calls == []

    def test_reads_real_files(self, tmp_path):
        path = tmp_path / "doc.md"
        path.write_text("# Real heading\n", encoding="utf-8")
        cache = FragmentCache()
        assert cache.anchor(str(path), "real-heading") == Anchor(id="real-heading", level=1)
        assert len(cache) == 1

    def test_missing_file_raises_and_caches_nothing(self, tmp_path):
        cache = FragmentCache()
        with pytest.raises(FileNotFoundError):
            cache.ensure_loaded(str(tmp_path / "missing.md"))
        assert len(cache) == 0
        assert cache.loads == 0

    def test_sessions_are_independent(self):
        one = FragmentCache(loader=_CountingLoader())
        two = FragmentCache(loader=_CountingLoader())
        one.ensure_loaded("a.md")
        assert "a.md" in one
        assert "a.md" not in two
