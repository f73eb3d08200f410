from __future__ import annotations

import logging
from typing import List

from db import VEHICLES_KEY, LocalStorage, load_list, save_list


logger = logging.getLogger(__name__)


def normalize_vehicle(name: str) -> str:
    return (name or "").strip().upper()


class VehicleList:
    """Vehicle numbers offered in the trip form. Upper-cased, no duplicates."""

    def __init__(self, storage: LocalStorage, key: str = VEHICLES_KEY):
        self._storage = storage
        self._key = key
        self._names: List[str] = []
        for item in load_list(storage, key):
            name = normalize_vehicle(str(item))
            if name and name not in self._names:
                self._names.append(name)

    def list(self) -> List[str]:
        return list(self._names)

    def __contains__(self, name: str) -> bool:
        return normalize_vehicle(name) in self._names

    def add(self, name: str) -> bool:
        """False when the name is blank or already listed."""
        name = normalize_vehicle(name)
        if not name or name in self._names:
            return False
        names = [*self._names, name]
        save_list(self._storage, self._key, names)
        self._names = names
        logger.info("Added vehicle %s", name)
        return True

    def remove(self, name: str) -> bool:
        name = normalize_vehicle(name)
        if name not in self._names:
            return False
        names = [n for n in self._names if n != name]
        save_list(self._storage, self._key, names)
        self._names = names
        logger.info("Removed vehicle %s", name)
        return True
