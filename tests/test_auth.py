"""Mock authentication and session persistence tests."""

import json
from datetime import datetime, timezone

import pytest

from src.errors import AuthError
from src.services.auth import SESSION_KEY, USERS_KEY, AuthService, SessionRepository
from src.storage import MemoryKeyValueStore, decode, encode

NOW = datetime(2024, 3, 1, 9, 30)

SIGNUP = dict(
    email="ravi@example.com",
    password="secret123",
    business_name="Sharma General Store",
    owner_name="Ravi Sharma",
    phone="+91-9000000000",
)


def _create_auth(kv=None):
    kv = kv if kv is not None else MemoryKeyValueStore()
    return AuthService(SessionRepository(kv), clock=lambda: NOW, id_factory=lambda: "user1"), kv


class TestSignup:

    def test_signup_logs_in_and_persists(self):
        auth, kv = _create_auth()
        user = auth.signup(**SIGNUP)
        assert auth.current_user == user
        assert auth.is_authenticated is True

        session = decode(SESSION_KEY, kv.get(SESSION_KEY))
        assert session["email"] == "ravi@example.com"
        assert "password" not in session

        registered = decode(USERS_KEY, kv.get(USERS_KEY))
        assert registered[0]["password"] == "secret123"

    def test_duplicate_email(self):
        auth, _ = _create_auth()
        auth.signup(**SIGNUP)
        with pytest.raises(AuthError, match="Email already exists"):
            auth.signup(**SIGNUP)

    def test_password_mismatch(self):
        auth, _ = _create_auth()
        with pytest.raises(AuthError, match="Passwords do not match"):
            auth.signup(**SIGNUP, confirm_password="other")

    def test_short_password(self):
        auth, kv = _create_auth()
        with pytest.raises(AuthError, match="at least 6"):
            auth.signup(**{**SIGNUP, "password": "12345"})
        assert kv.get(USERS_KEY) is None

    def test_invalid_email(self):
        auth, _ = _create_auth()
        with pytest.raises(AuthError, match="valid email"):
            auth.signup(**{**SIGNUP, "email": "ravi"})


class TestLogin:

    def test_login_and_logout(self):
        auth, kv = _create_auth()
        auth.signup(**SIGNUP)
        auth.logout()
        assert auth.current_user is None
        assert kv.get(SESSION_KEY) is None

        user = auth.login("ravi@example.com", "secret123")
        assert user.owner_name == "Ravi Sharma"
        assert user.created_at == NOW
        assert kv.get(SESSION_KEY) is not None

    def test_wrong_password(self):
        auth, _ = _create_auth()
        auth.signup(**SIGNUP)
        auth.logout()
        with pytest.raises(AuthError, match="Invalid email or password"):
            auth.login("ravi@example.com", "wrong")
        assert auth.current_user is None

    def test_corrupt_user_list(self):
        auth, _ = _create_auth(MemoryKeyValueStore({USERS_KEY: "not json"}))
        with pytest.raises(AuthError, match="unavailable"):
            auth.login("ravi@example.com", "secret123")

    def test_malformed_matching_record(self):
        kv = MemoryKeyValueStore({USERS_KEY: encode([{"email": "a@b.c", "password": "secret1"}])})
        auth, _ = _create_auth(kv)
        with pytest.raises(AuthError, match="unavailable"):
            auth.login("a@b.c", "secret1")
        assert auth.current_user is None
        assert kv.get(SESSION_KEY) is None


class TestBootstrap:

    def test_restores_session(self):
        first, kv = _create_auth()
        user = first.signup(**SIGNUP)
        second, _ = _create_auth(kv)
        assert second.bootstrap() == user
        assert second.bootstrap_error is None

    def test_no_session(self):
        auth, _ = _create_auth()
        assert auth.bootstrap() is None
        assert auth.bootstrap_error is None

    def test_corrupt_session_is_discarded(self):
        auth, kv = _create_auth(MemoryKeyValueStore({SESSION_KEY: "{broken"}))
        assert auth.bootstrap() is None
        assert auth.bootstrap_error is not None
        assert auth.bootstrap_error.key == SESSION_KEY
        assert kv.get(SESSION_KEY) is None

    def test_session_missing_fields_is_discarded(self):
        kv = MemoryKeyValueStore({SESSION_KEY: json.dumps({"schema_version": 1, "data": {"id": "1"}})})
        auth, _ = _create_auth(kv)
        assert auth.bootstrap() is None
        assert "missing fields" in auth.bootstrap_error.reason

    def test_legacy_session_is_migrated(self):
        legacy = {
            "id": "1",
            "email": "ravi@example.com",
            "businessName": "Sharma General Store",
            "ownerName": "Ravi Sharma",
            "phone": "+91-9000000000",
            "createdAt": "2024-01-01T00:00:00.000Z",
        }
        auth, _ = _create_auth(MemoryKeyValueStore({SESSION_KEY: json.dumps(legacy)}))
        user = auth.bootstrap()
        assert user.business_name == "Sharma General Store"
        assert user.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_negative_schema_version_is_discarded(self):
        kv = MemoryKeyValueStore({SESSION_KEY: json.dumps({"schema_version": -1, "data": {}})})
        auth, _ = _create_auth(kv)
        assert auth.bootstrap() is None
        assert "unsupported schema version -1" in auth.bootstrap_error.reason
        assert kv.get(SESSION_KEY) is None
