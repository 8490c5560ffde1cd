"""Persisted client state: auth token, user snapshot and UI preferences.

"Remembered" tokens go to a JSON file (the local store); others live only in
memory for the lifetime of the process (the session store).
"""

import json
from pathlib import Path
from typing import Any

from app.core.logging import get_logger

logger = get_logger(__name__)

LOCAL_TOKEN_KEY = "proviquiz:authToken"
SESSION_TOKEN_KEY = "proviquiz:authToken:session"
USER_KEY = "proviquiz:authUser"
COLOR_MODE_KEY = "proviquiz:colorMode"
COOKIE_ACCEPTED_KEY = "proviquiz:cookieAccepted"

DEFAULT_STORAGE_PATH = Path.home() / ".proviquiz" / "storage.json"


class AuthStorage:
    def __init__(self, path: Path | str = DEFAULT_STORAGE_PATH):
        self.path = Path(path)
        self._session: dict[str, str] = {}

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable client storage {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    # Auth token

    def read_token(self) -> str | None:
        return self.get(LOCAL_TOKEN_KEY) or self._session.get(SESSION_TOKEN_KEY)

    def write_token(self, token: str, remember_me: bool = True) -> None:
        self.clear_token()
        if remember_me:
            self.set(LOCAL_TOKEN_KEY, token)
        else:
            self._session[SESSION_TOKEN_KEY] = token

    def clear_token(self) -> None:
        self.remove(LOCAL_TOKEN_KEY)
        self._session.pop(SESSION_TOKEN_KEY, None)

    # User snapshot

    def read_user(self) -> dict[str, Any] | None:
        user = self.get(USER_KEY)
        if not isinstance(user, dict) or not user.get("id") or not user.get("email"):
            return None
        return user

    def write_user(self, user: dict[str, Any] | None) -> None:
        if user is None:
            self.remove(USER_KEY)
        else:
            self.set(USER_KEY, user)

    def logout(self) -> None:
        self.clear_token()
        self.write_user(None)

    # Preferences

    @property
    def color_mode(self) -> str:
        return self.get(COLOR_MODE_KEY) or "light"

    @color_mode.setter
    def color_mode(self, mode: str) -> None:
        if mode not in ("light", "dark"):
            raise ValueError(f"Unknown color mode: {mode}")
        self.set(COLOR_MODE_KEY, mode)

    @property
    def cookie_accepted(self) -> bool:
        return self.get(COOKIE_ACCEPTED_KEY) == "true"

    def accept_cookies(self) -> None:
        self.set(COOKIE_ACCEPTED_KEY, "true")
