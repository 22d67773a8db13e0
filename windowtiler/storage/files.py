"""
windowtiler.storage.files - JSON file helpers shared by the stores.

Low-level reads and writes raise `PersistenceError`; the stores catch it
at their public surface and degrade to "nothing loaded/saved".
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from windowtiler.core.errors import PersistenceError

log = logging.getLogger(__name__)

APP_DIR_NAME = "WindowTiler"
HOME_ENV_VAR = "WINDOWTILER_HOME"


def default_data_dir() -> Path:
    """
    Directory holding settings, groups and layouts.

    ``$WINDOWTILER_HOME`` wins; otherwise ``%APPDATA%\\WindowTiler`` on
    Windows and ``$XDG_CONFIG_HOME/windowtiler`` (``~/.config``) elsewhere.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()

    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata) / APP_DIR_NAME

    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / APP_DIR_NAME.lower()


def read_json(path: Path) -> Any:
    """
    Parse *path*.

    Returns None if the file does not exist.

    Raises:
        PersistenceError: unreadable file or invalid JSON.
    """
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, ValueError) as exc:
        raise PersistenceError(f"Cannot read {path}: {exc}") from exc


def write_json_atomic(path: Path, data: Any) -> None:
    """
    Write *data* as indented JSON, replacing *path* atomically.

    Raises:
        PersistenceError: the directory or file could not be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except (OSError, TypeError, ValueError) as exc:
        raise PersistenceError(f"Cannot write {path}: {exc}") from exc

    log.debug("Wrote %s", path)
