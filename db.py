from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


logger = logging.getLogger(__name__)

TRIPS_KEY = "trip_records"
VEHICLES_KEY = "vehicleList"


class LocalStorage:
    """
    Key/value store in one JSON file, values kept as JSON text per key
    (the same shape as browser localStorage).

    Writes go to a temp file in the same directory and are then renamed
    over the original, so a crash never leaves a half-written file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object.")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".tmp-", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError:
            # the unreadable file is kept as <name>.corrupt
            aside = self.path.with_name(self.path.name + ".corrupt")
            os.replace(self.path, aside)
            logger.warning("Storage file %s is corrupt; moved it to %s", self.path, aside)
            data = {}
        data[key] = value
        self._write_all(data)


def load_list(storage: LocalStorage, key: str) -> List[Any]:
    """
    Read a JSON array stored under `key`.
    Missing, unreadable or corrupt data all come back as an empty list.
    """
    try:
        raw = storage.get_item(key)
    except (OSError, ValueError) as e:
        logger.warning("Could not read %r from %s: %s", key, storage.path, e)
        return []

    if not raw:
        return []

    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning("Stored %r is not valid JSON: %s", key, e)
        return []

    if not isinstance(data, list):
        logger.warning("Stored %r is not a list (got %s)", key, type(data).__name__)
        return []
    return data


def save_list(storage: LocalStorage, key: str, items: List[Any]) -> None:
    """Write the whole list under `key`. OSError propagates to the caller."""
    storage.set_item(key, json.dumps(items, ensure_ascii=False))
