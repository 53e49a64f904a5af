"""
Key-value store for the client's last profile and plan.

Backed by a single JSON file; every write rewrites the whole file
(last write wins, single user).
"""
import json
from pathlib import Path
from typing import Any, Optional

from app.core.logger import logger, log_error

PROFILE_KEY = "user-profile"
PLAN_KEY = "fitness-plan"


class LocalStore:
    """Persistent string-keyed store with an explicit load/clear lifecycle."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, Any] = {}

    def load(self) -> "LocalStore":
        """Read the backing file; a missing or corrupt file starts empty."""
        self._data = {}
        if not self.path.exists():
            return self

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log_error(f"loading {self.path}", e)
            return self

        if isinstance(data, dict):
            self._data = data
        else:
            logger.warning(f"Ignoring non-object store file {self.path}")
        return self

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)
        self._flush()

    def clear(self) -> None:
        self._data = {}
        self._flush()

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2, ensure_ascii=False), encoding="utf-8")
