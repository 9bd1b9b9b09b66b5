"""Tests for mdlinks.cli module."""

from __future__ import annotations

from pathlib import Path

import pytest
from dotenv import dotenv_values

from mdlinks import cli
from mdlinks.cli_parsers import parse_check_args, parse_rename_args


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "CONFIG_ENV_FILE", tmp_path / "no-such-dir" / ".env")
    for name in (
        "MDLINKS_EMPTY_URL_IS_ERROR",
        "MDLINKS_WARN_UNSTABLE_SLUGS",
        "MDLINKS_RENAME_CHECK",
    ):
        monkeypatch.delenv(name, raising=False)


class TestParseCheckArgs:
    def test_defaults(self):
        args = parse_check_args(["docs"])
        assert args.paths == ["docs"]
        assert args.empty_url_is_error is None
        assert args.warn_unstable_slugs is None
        assert args.verbose is False

    def test_flags(self):
        args = parse_check_args(
            ["a.md", "b.md", "--empty-url-is-error", "--no-unstable-warnings", "-v"]
        )
        assert args.paths == ["a.md", "b.md"]
        assert args.empty_url_is_error is True
        assert args.warn_unstable_slugs is False
        assert args.verbose is True

    def test_paths_required(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_check_args([])
        assert exc_info.value.code == 2


class TestParseRenameArgs:
    def test_defaults(self):
        args = parse_rename_args(["a.md", "b.md"])
        assert (args.src, args.dst) == ("a.md", "b.md")
        assert args.root == "."
        assert args.check is None

    def test_no_check(self):
        assert parse_rename_args(["a.md", "b.md", "--no-check"]).check is False

    def test_two_paths_required(self):
        with pytest.raises(SystemExit):
            parse_rename_args(["a.md"])


class TestMainCheck:
    def test_clean_run(self, write_tree, caplog):
        write_tree({"a.md": "[b](b.md)", "b.md": ""})
        assert cli.main_check(["."]) == 0
        assert caplog.messages == []

    def test_dirty_run_prints_findings_only(self, write_tree, caplog):
        write_tree({"a.md": "[b](missing.md)"})
        assert cli.main_check(["a.md"]) == 1
        assert caplog.messages == ['a.md: "missing.md": broken link']

    def test_fatal_error_reported(self, write_tree, caplog):
        write_tree({})
        assert cli.main_check(["missing.md"]) == 1
        assert any(m.startswith("Error: ") for m in caplog.messages)

    def test_empty_url_flag(self, write_tree):
        write_tree({"a.md": "[x]()"})
        assert cli.main_check(["a.md"]) == 0
        assert cli.main_check(["a.md", "--empty-url-is-error"]) == 1

    def test_empty_url_from_env(self, write_tree, monkeypatch):
        write_tree({"a.md": "[x]()"})
        monkeypatch.setenv("MDLINKS_EMPTY_URL_IS_ERROR", "1")
        assert cli.main_check(["a.md"]) == 1

    def test_env_file_in_working_directory(self, write_tree, monkeypatch):
        write_tree({"a.md": "[x]()", ".env": "MDLINKS_EMPTY_URL_IS_ERROR=true\n"})

        def _load(path):
            for key, value in dotenv_values(path).items():
                monkeypatch.setenv(key, value or "")
            return True

        monkeypatch.setattr(cli, "load_dotenv", _load)
        assert cli.main_check(["a.md"]) == 1


class TestMainRename:
    def test_rename_and_check(self, write_tree):
        write_tree({"a.md": "[c](c.md)", "c.md": "[a](a.md)"})
        assert cli.main_rename(["a.md", "sub/a.md"]) == 0
        assert Path("sub/a.md").read_text() == "[c](../c.md)"
        assert Path("c.md").read_text() == "[a](sub/a.md)"

    def test_post_check_reports_leftovers(self, write_tree, caplog):
        write_tree({"a.md": "", "c.md": "[ref][id]\n\n[id]: a.md\n"})
        assert cli.main_rename(["a.md", "sub/a.md"]) == 1
        assert 'c.md: "a.md": broken link' in caplog.messages

    def test_post_check_can_be_skipped(self, write_tree):
        write_tree({"a.md": "", "c.md": "[ref][id]\n\n[id]: a.md\n"})
        assert cli.main_rename(["a.md", "sub/a.md", "--no-check"]) == 0

    def test_destination_exists(self, write_tree, caplog):
        write_tree({"a.md": "A", "b.md": "B"})
        assert cli.main_rename(["a.md", "b.md"]) == 1
        assert any("already exists" in m for m in caplog.messages)
        assert Path("a.md").read_text() == "A"

    def test_invalid_suffix(self, write_tree, caplog):
        write_tree({"a.md": ""})
        assert cli.main_rename(["a.md", "b.txt"]) == 1
        assert any("suffix" in m for m in caplog.messages)
