"""
Client-side auth state: the logged-in user, persisted to a JSON file so it
survives restarts (the frontend kept it in localStorage under "messe_user").
"""

import json
import logging
import os
from pathlib import Path

from messe.client.api import ApiError

logger = logging.getLogger(__name__)

STORAGE_KEY = "messe_user"


def default_storage_path() -> Path:
    return Path(os.getenv("MESSE_SESSION_FILE", Path.home() / ".messe" / "session.json"))


class AuthSession:

    def __init__(self, api, storage_path=None):
        self.api = api
        self.storage_path = Path(storage_path) if storage_path is not None else default_storage_path()
        self.user = self._load()

    def _load(self):
        if not self.storage_path.exists():
            return None
        try:
            return json.loads(self.storage_path.read_text(encoding="utf-8")).get(STORAGE_KEY)
        except (OSError, ValueError, AttributeError):
            logger.warning("session.corrupt", extra={"path": str(self.storage_path)})
            return None

    def _store(self):
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        self.storage_path.write_text(json.dumps({STORAGE_KEY: self.user}), encoding="utf-8")

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == "ADMIN"

    def login(self, email, password=None) -> bool:
        try:
            found = self.api.login(email, password)
        except ApiError as e:
            logger.error("session.login_failed", extra={"error": e.message})
            return False

        if not found:
            return False
        self.user = found
        self._store()
        return True

    def logout(self):
        self.user = None
        if self.storage_path.exists():
            self.storage_path.unlink()
