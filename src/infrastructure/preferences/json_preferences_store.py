from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.domain.interfaces.preferences_store_interface import IPreferencesStore

from observability import emit_event

logger = logging.getLogger(__name__)


class JsonPreferencesStore(IPreferencesStore):
    """One JSON file per user under `base_dir`.

    File names are a hash of the user id. Read failures return None so the
    caller falls back to defaults; write failures are logged and dropped.
    """

    def __init__(self, base_dir: str | os.PathLike) -> None:
        self._base = Path(base_dir)

    def _path(self, user_id: str) -> Path:
        digest = hashlib.sha256(str(user_id).encode("utf-8")).hexdigest()[:24]
        return self._base / f"prefs-{digest}.json"

    def _read(self, user_id: str) -> Dict[str, Any]:
        path = self._path(user_id)
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("preferences read failed: %s", e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, user_id: str, key: str, value: Any) -> None:
        data = self._read(user_id)
        data[key] = value
        path = self._path(user_id)
        try:
            self._base.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=str(self._base), suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False, indent=2)
                os.replace(tmp, path)
            except BaseException:
                try:
                    os.unlink(tmp)
                except OSError:
                    pass
                raise
        except OSError as e:
            emit_event("preferences_write_failed", severity="warn", key=key, error=str(e))

    def load_categories(self, user_id: str) -> Optional[List[str]]:
        value = self._read(user_id).get("categories")
        if not isinstance(value, list):
            return None
        return [str(c) for c in value if isinstance(c, str) and c]

    def save_categories(self, user_id: str, categories: List[str]) -> None:
        self._write(user_id, "categories", list(categories))

    def load_filters(self, user_id: str) -> Optional[Dict[str, Any]]:
        value = self._read(user_id).get("filters")
        return value if isinstance(value, dict) else None

    def save_filters(self, user_id: str, filters: Dict[str, Any]) -> None:
        self._write(user_id, "filters", dict(filters))
