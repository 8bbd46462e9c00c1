"""Bearer-token storage for the API client.

A `CredentialProvider` is handed to each client instead of any module-level
session state, so several clients (or users) can coexist in one process.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    """Where a bearer token lives between calls."""

    def get(self) -> Optional[str]: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    """Keeps the token for the lifetime of the process."""

    def __init__(self, token: Optional[str] = None):
        self._token = token
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        with self._lock:
            self._token = token

    def clear(self) -> None:
        with self._lock:
            self._token = None


class FileTokenStore:
    """Persists the token as JSON so a CLI session survives restarts."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        with self._lock:
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                return None
            except (OSError, ValueError):
                logger.warning("Ignoring unreadable token file %s", self.path)
                return None
        token = data.get("access_token") if isinstance(data, dict) else None
        return token or None

    def set(self, token: str) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps({"access_token": token}), encoding="utf-8"
            )

    def clear(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)


class CredentialProvider:
    """Reads and writes the caller's bearer token through one `TokenStore`."""

    def __init__(self, store: Optional[TokenStore] = None):
        self.store = store if store is not None else MemoryTokenStore()

    @property
    def token(self) -> Optional[str]:
        return self.store.get()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def save(self, token: str) -> None:
        self.store.set(token)

    def clear(self) -> None:
        self.store.clear()

    def auth_headers(self) -> Dict[str, str]:
        token = self.token
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}


__all__ = ["TokenStore", "MemoryTokenStore", "FileTokenStore", "CredentialProvider"]
