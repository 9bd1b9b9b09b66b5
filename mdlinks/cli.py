"""Command-line interface for the link checker and the renamer."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .checker import Checker
from .cli_parsers import parse_check_args, parse_rename_args
from .config import CONFIG_ENV_FILE, Settings, load_config
from .errors import MdLinksError, RenameError
from .rename import rename


def _load_config() -> None:
    """Load .env from the working directory or ~/.config/mdlinks/.env."""
    loaded = load_config(
        config_env_file=CONFIG_ENV_FILE,
        cwd=Path.cwd(),
        load_env=load_dotenv,
    )
    if loaded is not None:
        logging.debug("Loaded configuration from %s", loaded)


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%H:%M:%S",
        )
    else:
        # diagnostics are printed as-is, one finding per line
        logging.basicConfig(level=logging.INFO, format="%(message)s")


def _settings(args) -> Settings:
    settings = Settings.from_env()
    if getattr(args, "empty_url_is_error", None) is not None:
        settings.empty_url_is_error = args.empty_url_is_error
    if getattr(args, "warn_unstable_slugs", None) is not None:
        settings.warn_unstable_slugs = args.warn_unstable_slugs
    if getattr(args, "check", None) is not None:
        settings.rename_check = args.check
    return settings


def _checker(settings: Settings) -> Checker:
    return Checker(
        empty_url_is_error=settings.empty_url_is_error,
        warn_unstable_slugs=settings.warn_unstable_slugs,
    )


def _fail(exc: BaseException, verbose: bool) -> int:
    logging.error("Error: %s", exc)
    if verbose:
        logging.exception("Full traceback:")
    return 1


# =============================================================================
# CHECK COMMAND
# =============================================================================


def main_check(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for mdurlcheck.

    Returns 0 for a clean run and 1 when broken links were reported (no
    further message) or when a fatal error occurred (with a message).
    """
    args = parse_check_args(argv)
    _setup_logging(args.verbose)
    _load_config()
    settings = _settings(args)

    try:
        report = _checker(settings).check_paths(args.paths)
    except KeyboardInterrupt:
        logging.info("Interrupted")
        return 130
    except (OSError, MdLinksError) as exc:
        return _fail(exc, args.verbose)

    logging.debug(
        "Checked %d file(s): %d error(s), %d advisory finding(s)",
        len(report.files),
        len(report.errors),
        len(report.advisories),
    )
    return 1 if report.dirty else 0


# =============================================================================
# RENAME COMMAND
# =============================================================================


def main_rename(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for mdrename."""
    args = parse_rename_args(argv)
    _setup_logging(args.verbose)
    _load_config()
    settings = _settings(args)

    try:
        report = rename(args.src, args.dst, root=args.root)
    except KeyboardInterrupt:
        logging.info("Interrupted")
        return 130
    except RenameError as exc:
        for name, message in exc.report.errors.items():
            logging.debug("%s: %s", name, message)
        return _fail(exc, args.verbose)
    except (OSError, MdLinksError) as exc:
        return _fail(exc, args.verbose)

    logging.debug(
        "Renamed %s to %s; updated %d file(s)",
        report.src,
        report.dst,
        len(report.rewritten),
    )
    if not settings.rename_check:
        return 0

    try:
        check = _checker(settings).check_paths([args.root])
    except OSError as exc:
        return _fail(exc, args.verbose)
    return 1 if check.dirty else 0


if __name__ == "__main__":
    sys.exit(main_check())
