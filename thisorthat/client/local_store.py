"""
File-backed key/value store for client state that must survive a restart:
the joined player per game and unsent answer drafts.
"""
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def player_key(game_id: str) -> str:
    return f"playerId:{game_id}"


def draft_key(game_id: str, player_id: str) -> str:
    return f"draft:{game_id}:{player_id}"


class LocalStore:
    """
    JSON file of string keys to JSON values. With no path it lives in memory.

    Unreadable or corrupt files read as empty; the next write replaces them.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._memory: Dict[str, Any] = {}

    def _load(self) -> Dict[str, Any]:
        if self.path is None:
            return self._memory
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable local store {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Any]) -> None:
        if self.path is None:
            self._memory = data
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(data, fh)
        os.replace(tmp_path, self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = dict(self._load())
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = dict(self._load())
        if key in data:
            del data[key]
            self._save(data)
