"""Persistent session state shared by the client and the console.

The token and the serialized user are kept under the literal keys
``auth_token`` and ``user``. Every outgoing request reads the token from here;
only a successful login and the 401 handler write to it.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from rag_admin_sdk.models import User

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "user"


class SessionStorage(ABC):
    """Key/value persistence for session data."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        pass


class MemorySessionStorage(SessionStorage):
    """Process-local storage, used by tests and one-shot scripts."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileSessionStorage(SessionStorage):
    """JSON file storage that survives between console invocations."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        """Replace the session file atomically; the file is never group or world readable."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # mkstemp creates the file with mode 0600
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError as e:
                logger.debug(f"Could not remove temporary session file {tmp_name}: {e}")
            raise

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class SessionEvent(str, Enum):
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"
    EXPIRED = "expired"


SessionListener = Callable[[SessionEvent], None]


class Session:
    """Observable view over the persisted token/user pair."""

    def __init__(self, storage: Optional[SessionStorage] = None):
        self.storage = storage or MemorySessionStorage()
        self._listeners: List[SessionListener] = []

    @property
    def token(self) -> Optional[str]:
        return self.storage.get_item(TOKEN_KEY)

    @property
    def user(self) -> Optional[User]:
        raw = self.storage.get_item(USER_KEY)
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"Stored user could not be decoded: {e}")
            return None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def store(self, token: str, user: User) -> None:
        self.storage.set_item(TOKEN_KEY, token)
        self.storage.set_item(USER_KEY, user.model_dump_json(by_alias=True))
        self._notify(SessionEvent.LOGGED_IN)

    def clear(self) -> None:
        self._remove()
        self._notify(SessionEvent.LOGGED_OUT)

    def expire(self) -> None:
        """Drop the session after the backend rejected it."""
        self._remove()
        self._notify(SessionEvent.EXPIRED)

    def _remove(self) -> None:
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)

    def _notify(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
