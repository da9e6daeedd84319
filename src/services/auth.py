"""Mock authentication backed by a key-value store.

Two blobs under fixed keys:
- businessUser: the logged-in user (no password)
- businessUsers: every registered user, password included

This is a local mock: passwords are compared as stored and there is no
rate limiting.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any, Callable, Optional

from src.errors import AuthError, StorageCorruptionError
from src.models.business import User
from src.storage import KeyValueStore, decode, encode
from src.utils.calculations import generate_id

logger = logging.getLogger(__name__)

SESSION_KEY = "businessUser"
USERS_KEY = "businessUsers"

MIN_PASSWORD_LENGTH = 6
_USER_FIELDS = ("id", "email", "business_name", "owner_name", "phone")


def user_to_record(user: User) -> dict:
    record = asdict(user)
    record["created_at"] = user.created_at.isoformat()
    return record


def user_from_record(key: str, record: Any) -> User:
    if not isinstance(record, dict):
        raise StorageCorruptionError(key, "user record is not an object")
    missing = [f for f in _USER_FIELDS if not isinstance(record.get(f), str)]
    if missing:
        raise StorageCorruptionError(key, f"missing fields: {', '.join(missing)}")

    created_raw = record.get("created_at")
    try:
        created_at = (
            datetime.fromisoformat(created_raw.replace("Z", "+00:00"))
            if isinstance(created_raw, str) else datetime.now()
        )
    except ValueError:
        raise StorageCorruptionError(key, f"bad created_at: {created_raw}")

    return User(created_at=created_at, **{f: record[f] for f in _USER_FIELDS})


class SessionRepository:
    """Reads and writes the session/user blobs."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    def load_current_user(self) -> Optional[User]:
        raw = self._kv.get(SESSION_KEY)
        if raw is None:
            return None
        return user_from_record(SESSION_KEY, decode(SESSION_KEY, raw))

    def save_current_user(self, user: User) -> None:
        self._kv.set(SESSION_KEY, encode(user_to_record(user)))

    def clear_current_user(self) -> None:
        self._kv.delete(SESSION_KEY)

    def load_registered(self) -> list[dict]:
        raw = self._kv.get(USERS_KEY)
        if raw is None:
            return []
        records = decode(USERS_KEY, raw)
        if not isinstance(records, list):
            raise StorageCorruptionError(USERS_KEY, "user list is not an array")
        return records

    def save_registered(self, records: list[dict]) -> None:
        self._kv.set(USERS_KEY, encode(records))


class AuthService:
    """Signup, login, logout and session bootstrap."""

    def __init__(
        self,
        repository: SessionRepository,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = generate_id,
    ) -> None:
        self._repo = repository
        self._clock = clock
        self._id_factory = id_factory
        self._user: Optional[User] = None
        self.bootstrap_error: Optional[StorageCorruptionError] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def bootstrap(self) -> Optional[User]:
        """Restores the saved session; a corrupt blob is discarded and means logged out."""
        self.bootstrap_error = None
        try:
            self._user = self._repo.load_current_user()
        except StorageCorruptionError as e:
            logger.warning("Discarding saved session: %s", e)
            self._repo.clear_current_user()
            self.bootstrap_error = e
            self._user = None

        if self._user is not None:
            logger.info("Session restored: %s", self._user.email)
        return self._user

    def _registered(self) -> list[dict]:
        try:
            return self._repo.load_registered()
        except StorageCorruptionError as e:
            logger.error("Registered users unreadable: %s", e)
            raise AuthError("User records are unavailable") from e

    def signup(
        self,
        email: str,
        password: str,
        business_name: str,
        owner_name: str,
        phone: str,
        confirm_password: Optional[str] = None,
    ) -> User:
        if confirm_password is not None and confirm_password != password:
            raise AuthError("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if not email or "@" not in email:
            raise AuthError("Please enter a valid email")

        records = self._registered()
        if any(r.get("email") == email for r in records if isinstance(r, dict)):
            raise AuthError("Email already exists")

        user = User(
            id=self._id_factory(),
            email=email,
            business_name=business_name,
            owner_name=owner_name,
            phone=phone,
            created_at=self._clock(),
        )
        records.append({**user_to_record(user), "password": password})
        self._repo.save_registered(records)
        self._repo.save_current_user(user)
        self._user = user
        logger.info("User registered: %s", email)
        return user

    def login(self, email: str, password: str) -> User:
        for record in self._registered():
            if not isinstance(record, dict):
                continue
            if record.get("email") == email and record.get("password") == password:
                try:
                    user = user_from_record(USERS_KEY, record)
                except StorageCorruptionError as e:
                    logger.error("Registered user record unreadable: %s", e)
                    raise AuthError("User records are unavailable") from e
                self._repo.save_current_user(user)
                self._user = user
                logger.info("User logged in: %s", email)
                return user

        logger.info("Login failed for %s", email)
        raise AuthError("Invalid email or password")

    def logout(self) -> None:
        self._repo.clear_current_user()
        self._user = None
