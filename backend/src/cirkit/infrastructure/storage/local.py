"""Browser-style local storage: a string key/value map that survives restarts.

Guest carts and login attempt counters live here. Any ``MutableMapping[str,
str]`` works as storage (a plain dict in tests); ``JsonFileStorage`` keeps
the map in a single JSON file.
"""

import json
from collections.abc import Iterator, MutableMapping
from pathlib import Path

from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

KeyValueStorage = MutableMapping[str, str]


class JsonFileStorage(MutableMapping[str, str]):
    """String map persisted to a JSON file on every write."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("local_storage_unreadable", path=str(self.path), error=str(e))
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self._data, ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(self.path)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._flush()

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)
