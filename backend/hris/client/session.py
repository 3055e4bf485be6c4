"""
Client-side session persistence.

Holds the two keys the API client reads and clears: ``token`` (bearer access
token) and ``user`` (the signed-in user's profile). ``FileSessionStore``
survives restarts by keeping both in a small JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("hris.client.session")

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionStore:
    """In-memory key/value session."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._persist()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._persist()

    @property
    def token(self) -> Optional[str]:
        return self.get(TOKEN_KEY)

    @property
    def user(self) -> Optional[dict]:
        return self.get(USER_KEY)

    def save_login(self, token: str, user: dict) -> None:
        self._data[TOKEN_KEY] = token
        self._data[USER_KEY] = user
        self._persist()

    def clear(self) -> None:
        self._data.pop(TOKEN_KEY, None)
        self._data.pop(USER_KEY, None)
        self._persist()

    def _persist(self) -> None:
        pass


class FileSessionStore(SessionStore):
    """Session backed by a JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}

    def _persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")
