"""
Favorites persistence.

The file holds a JSON array of station ids. Older versions stored an array
of full station objects; those are read, reduced to ids and rewritten.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable

from loguru import logger

from airwave.core.errors import PersistenceError

LEGACY_ID_KEYS = ("station_uuid", "stationuuid", "uuid", "id")


def dedupe(ids: Iterable[str]) -> list[str]:
    """Drop duplicate ids, keeping first occurrence order."""
    seen: set[str] = set()
    result = []
    for station_id in ids:
        if station_id not in seen:
            seen.add(station_id)
            result.append(station_id)
    return result


def _legacy_id(entry: dict[str, Any]) -> str | None:
    for key in LEGACY_ID_KEYS:
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class FavoritesStore:
    """Load and save the favorites id list at `path`."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> list[str]:
        """Read favorite ids from disk.

        Returns:
            Ordered, duplicate-free ids. Empty if the file does not exist.

        Raises:
            PersistenceError: If the file is unreadable or in an unknown format
        """
        if not self.path.exists():
            logger.info(f"No favorites file at {self.path}, starting empty")
            return []

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(self.path, f"cannot read favorites ({e})") from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceError(self.path, f"favorites file is not valid JSON ({e})") from e

        if not isinstance(data, list):
            raise PersistenceError(self.path, "favorites file must contain a JSON array")

        if all(isinstance(item, str) for item in data):
            return dedupe(item for item in data if item)

        if all(isinstance(item, dict) for item in data):
            legacy_ids = [_legacy_id(entry) for entry in data]
            if None in legacy_ids:
                missing = legacy_ids.count(None)
                raise PersistenceError(
                    self.path, f"unrecognised favorites format ({missing} entries without an id)"
                )
            ids = dedupe(i for i in legacy_ids if i)
            logger.info(f"Migrating {len(ids)} legacy favorites to id format")
            self.save(ids)
            return ids

        raise PersistenceError(self.path, "unrecognised favorites format")

    def save(self, ids: Iterable[str]) -> None:
        """Atomically replace the favorites file.

        Raises:
            PersistenceError: If the file cannot be written
        """
        content = json.dumps(dedupe(ids), indent=2) + "\n"
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(self.path, f"cannot save favorites ({e})") from e

        logger.debug(f"Saved favorites to {self.path}")
