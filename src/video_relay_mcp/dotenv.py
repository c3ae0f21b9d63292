"""Server-side credential file for the relay.

The browser form never carries a Gemini key, so the server needs one of its
own. When ``GOOGLE_API_KEY`` (or any other relay setting) is missing from the
process environment it is read from ``~/.config/video-relay-mcp/.env``.
Only the variables ``ServerConfig.from_env`` understands are injected; any
other line in the file is ignored.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .config import ENV_VARS, is_env_placeholder

logger = logging.getLogger(__name__)

DEFAULT_ENV_PATH = Path.home() / ".config" / "video-relay-mcp" / ".env"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def parse_dotenv(path: Path) -> dict[str, str]:
    """Read relay settings from a ``KEY=VALUE`` file.

    Blank lines, ``#`` comments, lines without ``=`` and keys the relay
    doesn't read are skipped.
    """
    if not path.is_file():
        return {}

    settings: dict[str, str] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key not in ENV_VARS:
            logger.debug("Ignoring unknown setting %s in %s", key, path)
            continue
        settings[key] = _unquote(value.strip())
    return settings


def _is_unset(value: str | None) -> bool:
    if value is None:
        return True
    value = _unquote(value.strip()).strip()
    return not value or is_env_placeholder(value)


def load_dotenv(path: Path | None = None) -> dict[str, str]:
    """Fill unset relay settings in ``os.environ`` from *path*.

    A variable already set in the process environment wins, unless it is
    blank or an unresolved ``$VAR`` placeholder.

    Returns:
        The variables actually injected.
    """
    path = path or DEFAULT_ENV_PATH
    injected: dict[str, str] = {}
    for key, value in parse_dotenv(path).items():
        if _is_unset(os.environ.get(key)):
            os.environ[key] = value
            injected[key] = value
    return injected
