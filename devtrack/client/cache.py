"""Local client cache, the CLI's counterpart of browser local storage.

Keys mirror the web client: ``token``, ``userDetails`` and ``tasks``, plus
``tracker`` for the persisted UI state. The server stays authoritative:
``store_tasks`` replaces the cached list after a fetch and every successful
mutation calls ``invalidate_tasks``.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path("~/.devtrack/cache.json")


class LocalCache:
    def __init__(self, path: str | Path = DEFAULT_CACHE_PATH) -> None:
        self.path = Path(path).expanduser()
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable cache %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._save()

    # ---- session ----

    @property
    def token(self) -> str | None:
        return self.get("token")

    @property
    def user_details(self) -> dict | None:
        return self.get("userDetails")

    def store_session(self, user: dict, token: str) -> None:
        self._data["token"] = token
        self._data["userDetails"] = user
        self._data.pop("tasks", None)
        self._save()

    def clear(self) -> None:
        self._data = {}
        self._save()

    # ---- tasks ----

    @property
    def tasks(self) -> list[dict] | None:
        """Cached task list, or ``None`` when it was invalidated."""
        return self.get("tasks")

    def store_tasks(self, tasks: list[dict]) -> None:
        self.set("tasks", tasks)

    def invalidate_tasks(self) -> None:
        self.remove("tasks")
