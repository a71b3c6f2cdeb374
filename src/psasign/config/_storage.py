"""
On-disk settings for psasign: ~/.psasign/config.json.

config.py reads and writes the service URL and timeout here;
credentials.py falls back to it for the API token.
"""

from __future__ import annotations

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "load_config",
    "load_raw_config",
    "save_config",
]

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, TypedDict, cast

from ..constants import MAX_TIMEOUT, MIN_TIMEOUT

_logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".psasign"
CONFIG_FILE = CONFIG_DIR / "config.json"


class ConfigDict(TypedDict, total=False):
    """Known keys of config.json."""

    url: str
    timeout: int
    token: str


def load_raw_config() -> dict[str, object]:
    """Read ~/.psasign/config.json as-is, or {} when missing or unreadable.

    Keys this version does not know about are kept so a later save
    writes them back unchanged.
    """
    try:
        data: Any = json.loads(CONFIG_FILE.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            return cast("dict[str, object]", data)
        _logger.warning("Config file is not a JSON object, ignoring")
    except FileNotFoundError:
        pass
    except json.JSONDecodeError as e:
        _logger.warning("Config file corrupted, ignoring: %s", e)
    except OSError as e:
        _logger.warning("Cannot read config file: %s", e)
    return {}


def _validate_config_dict(data: dict[str, object]) -> ConfigDict:
    """Keep url, token and an in-range timeout; warn about anything mistyped."""
    result: ConfigDict = {}
    for key in ("url", "token"):
        val = data.get(key)
        if isinstance(val, str):
            result[key] = val  # type: ignore[literal-required]  # dynamic key from known set
        elif val is not None:
            _logger.warning("Config %s has wrong type (%s), ignoring", key, type(val).__name__)
    timeout_val = data.get("timeout")
    if isinstance(timeout_val, int) and not isinstance(timeout_val, bool):
        if MIN_TIMEOUT <= timeout_val <= MAX_TIMEOUT:
            result["timeout"] = timeout_val
        else:
            _logger.warning(
                "Config timeout=%d out of range [%d, %d], ignoring",
                timeout_val,
                MIN_TIMEOUT,
                MAX_TIMEOUT,
            )
    elif timeout_val is not None:
        _logger.warning("Config timeout has wrong type (%s), ignoring", type(timeout_val).__name__)
    return result


def load_config() -> ConfigDict:
    """Service settings and token from disk, typed."""
    return _validate_config_dict(load_raw_config())


def _chmod_private(path: Path, mode: int) -> None:
    if os.name == "nt":
        return
    try:
        path.chmod(mode)
    except OSError:
        _logger.warning("Could not restrict permissions of %s to %o", path, mode)


def save_config(config: dict[str, object]) -> None:
    """Replace config.json with ``config``.

    The file is written to a sibling temp file, synced, set to 0600 and
    renamed over the old one, so readers see either the old or the new
    content.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True, mode=0o700)
    _chmod_private(CONFIG_DIR, 0o700)
    payload = json.dumps(config, indent=2, ensure_ascii=False) + "\n"
    fd, tmp_name = tempfile.mkstemp(dir=CONFIG_DIR, suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fd = -1
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        _chmod_private(tmp, 0o600)
        tmp.replace(CONFIG_FILE)
    except BaseException:
        if fd >= 0:
            os.close(fd)
        tmp.unlink(missing_ok=True)
        raise
    _logger.debug("Wrote %s", CONFIG_FILE)
