"""
Durable key-value storage for the session mirror.

Two keys are used: ``authToken`` holds the opaque bearer token and
``userData`` holds the serialized user profile. They are written together on
sign-in and removed together on sign-out; a store holding only one of them
does not describe a session.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from schemas.auth import UserProfile

logger = logging.getLogger(__name__)

TOKEN_KEY = "authToken"
USER_KEY = "userData"


class KeyValueStore:
    """String key-value storage persisted as a JSON object in a single file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when missing."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_many(self, values: dict[str, str]) -> None:
        """Store several keys in one write."""
        data = self._read()
        data.update(values)
        self._write(data)

    def remove_many(self, keys: list[str]) -> None:
        """Remove several keys in one write."""
        data = self._read()
        for key in keys:
            data.pop(key, None)
        self._write(data)

    def _read(self) -> dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable session file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.chmod(0o600)
        tmp_path.replace(self.path)


class SessionStore:
    """Persists the session as the token + user profile pair."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def save(self, token: str, profile: UserProfile) -> None:
        """Write token and profile together."""
        self.store.set_many({
            TOKEN_KEY: token,
            USER_KEY: profile.model_dump_json(),
        })

    def load(self) -> tuple[str, UserProfile] | None:
        """
        Return the persisted token and profile.

        Returns None unless both keys are present and the profile parses.
        The token itself is not validated; an expired token only shows up as
        a failed API call later.
        """
        token = self.store.get(TOKEN_KEY)
        user_data = self.store.get(USER_KEY)
        if not token or not user_data:
            return None
        try:
            profile = UserProfile.model_validate_json(user_data)
        except ValidationError:
            logger.warning("Persisted user profile is invalid; ignoring stored session")
            return None
        return token, profile

    def clear(self) -> None:
        """Remove token and profile together."""
        self.store.remove_many([TOKEN_KEY, USER_KEY])
