"""
Session state persistence port.

Holds what a client session carries between requests: the logged-in user,
the active view and the last aggregated snapshot. Keys are namespaced per
session id; values must be JSON-serialisable.
"""
import json
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from protrack.models.session_state import SessionState

USER_KEY = "protrack_user"
ACTIVE_VIEW_KEY = "protrack_active_tab"
SNAPSHOT_KEY = "protrack_state_v4"


class StateStore(ABC):
    def __init__(self, namespace: str = "default"):
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    @abstractmethod
    def load(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def clear(self, key: Optional[str] = None) -> None:
        """Drop one key, or every key of this namespace when ``key`` is None."""


class InMemoryStateStore(StateStore):
    def __init__(self, namespace: str = "default", data: Optional[Dict[str, str]] = None):
        super().__init__(namespace)
        self._data = data if data is not None else {}

    def load(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(self._key(key))
        return default if raw is None else json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self._data[self._key(key)] = json.dumps(value)

    def clear(self, key: Optional[str] = None) -> None:
        if key is not None:
            self._data.pop(self._key(key), None)
            return
        prefix = self._key("")
        for stored in [k for k in self._data if k.startswith(prefix)]:
            del self._data[stored]


class SqlStateStore(StateStore):
    def __init__(self, session_factory: Callable[[], Session], namespace: str = "default"):
        super().__init__(namespace)
        self._session_factory = session_factory

    def load(self, key: str, default: Any = None) -> Any:
        with self._session_factory() as db:
            row = db.get(SessionState, self._key(key))
            return default if row is None else json.loads(row.value)

    def save(self, key: str, value: Any) -> None:
        with self._session_factory() as db:
            row = db.get(SessionState, self._key(key))
            if row is None:
                db.add(SessionState(key=self._key(key), value=json.dumps(value)))
            else:
                row.value = json.dumps(value)
            db.commit()

    def clear(self, key: Optional[str] = None) -> None:
        with self._session_factory() as db:
            q = db.query(SessionState)
            if key is not None:
                q = q.filter(SessionState.key == self._key(key))
            else:
                q = q.filter(SessionState.key.startswith(self._key(""), autoescape=True))
            q.delete(synchronize_session=False)
            db.commit()
