"""Small JSON-file key-value store for local state (e.g. the last cleanup run)."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from ..common.config import STATE_PATH

logger = logging.getLogger("blinks.storage.kv")


def write_json_atomic(path: Path, data: Any) -> None:
    """Write JSON to a temp file beside ``path``, then swap it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class KeyValueStore:
    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path else STATE_PATH
        self._lock = threading.RLock()

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Failed to load state file %s: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            write_json_atomic(self._path, data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                write_json_atomic(self._path, data)
