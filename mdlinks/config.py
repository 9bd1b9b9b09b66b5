"""Configuration loading: ``.env`` files and environment-backed settings.

Environment variables are read at call time (inside ``Settings.from_env``)
so that tests can monkeypatch them freely and late ``.env`` loading works.

Recognised variables:

- ``MDLINKS_EMPTY_URL_IS_ERROR``: empty link destinations mark the run dirty
  (default: off, they are reported as advisories).
- ``MDLINKS_WARN_UNSTABLE_SLUGS``: report references to suffixed duplicate
  heading ids such as ``#usage-1`` (default: on).
- ``MDLINKS_RENAME_CHECK``: run the link checker after ``mdrename``
  (default: on).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional

LOGGER = logging.getLogger(__name__)

# Configuration directory for global CLI usage
CONFIG_DIR = Path.home() / ".config" / "mdlinks"
CONFIG_ENV_FILE = CONFIG_DIR / ".env"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def load_config(
    *,
    config_env_file: Path,
    cwd: Path,
    load_env: Callable[[Path], bool],
) -> Optional[Path]:
    """Load .env configuration with fallback to the user config directory.

    Search order:
    1. .env in current working directory
    2. ~/.config/mdlinks/.env

    Returns the file that was loaded, if any.
    """
    local_env = cwd / ".env"
    if local_env.is_file():
        load_env(local_env)
        return local_env

    if config_env_file.is_file():
        load_env(config_env_file)
        return config_env_file

    return None


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    LOGGER.warning("Unknown value %r for %s; using %s.", raw, name, default)
    return default


@dataclass
class Settings:
    """Behaviour switches shared by the command-line tools."""

    empty_url_is_error: bool = False
    warn_unstable_slugs: bool = True
    rename_check: bool = True

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        source = os.environ if env is None else env
        return cls(
            empty_url_is_error=_env_flag(source, "MDLINKS_EMPTY_URL_IS_ERROR", False),
            warn_unstable_slugs=_env_flag(source, "MDLINKS_WARN_UNSTABLE_SLUGS", True),
            rename_check=_env_flag(source, "MDLINKS_RENAME_CHECK", True),
        )
