from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

LOGGER = logging.getLogger(__name__)

SIDEBAR_CLOSED_KEY = "sidebarClosed"


class PreferenceStore:
    """Small JSON key/value file holding per-user UI flags."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("Ignoring unreadable preferences file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def get_flag(self, key: str, default: bool = False) -> bool:
        value = self._load().get(key, default)
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)

    def set_flag(self, key: str, value: bool) -> None:
        data = self._load()
        data[key] = bool(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")

    def sidebar_closed(self) -> bool:
        return self.get_flag(SIDEBAR_CLOSED_KEY)

    def toggle_sidebar(self) -> bool:
        closed = not self.sidebar_closed()
        self.set_flag(SIDEBAR_CLOSED_KEY, closed)
        return closed
