"""JSON file storage backend.

Stores one JSON document per key under a directory. Keys are
percent-encoded into file names.
"""

import json
import os
from pathlib import Path
from typing import Any, List, Optional
from urllib.parse import quote, unquote

from smartreply.errors import PersistenceError
from smartreply.persistence.interface import KeyValueBackend

_SUFFIX = ".json"


class FileBackend(KeyValueBackend):
    """Directory of JSON files, one per key."""

    name = "file"

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}{_SUFFIX}"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}", operation="get", key=key) from e

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to write {path}: {e}", operation="set", key=key) from e

    def delete(self, key: str) -> bool:
        try:
            self._path(key).unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Failed to delete key: {e}", operation="delete", key=key) from e

    def keys(self, prefix: str = "") -> List[str]:
        if not self.directory.exists():
            return []
        try:
            names = [unquote(p.name[: -len(_SUFFIX)]) for p in self.directory.glob(f"*{_SUFFIX}")]
        except OSError as e:
            raise PersistenceError(f"Failed to list keys: {e}", operation="keys") from e
        return sorted(k for k in names if k.startswith(prefix))
