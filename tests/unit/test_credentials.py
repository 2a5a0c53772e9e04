"""Unit tests for secure credential store helpers."""

from __future__ import annotations

from keyring.backends.fail import Keyring as FailKeyring
from keyring.errors import PasswordDeleteError
import pytest

from speakgenie.credentials import KeyringCredentialStore


class _UsableBackend:
    """Stand-in for a real keyring backend instance."""


class FakeKeyringModule:
    """In-memory keyring stub for deterministic credential store tests."""

    def __init__(self, backend: object | None = None) -> None:
        """Initialize fake storage dictionary."""

        self._storage: dict[tuple[str, str], str] = {}
        self._backend = backend if backend is not None else _UsableBackend()

    def get_keyring(self) -> object:
        """Return the active backend object."""

        return self._backend

    def get_password(self, service_name: str, account_name: str) -> str | None:
        """Return previously stored password if present."""

        return self._storage.get((service_name, account_name))

    def set_password(self, service_name: str, account_name: str, value: str) -> None:
        """Store password value for the service/account key."""

        self._storage[(service_name, account_name)] = value

    def delete_password(self, service_name: str, account_name: str) -> None:
        """Delete password value or raise like keyring when missing."""

        if (service_name, account_name) not in self._storage:
            raise PasswordDeleteError("not found")
        del self._storage[(service_name, account_name)]


def test_keyring_store_roundtrip_set_get_clear() -> None:
    """Keyring store should set/get/clear API key values via keyring backend."""

    fake_keyring = FakeKeyringModule()
    store = KeyringCredentialStore(backend=fake_keyring)

    assert store.is_available() is True
    assert store.get_api_key() is None

    store.set_api_key("  abc123  ")
    assert store.get_api_key() == "abc123"
    assert fake_keyring.get_password("speakgenie", "openai_api_key") == "abc123"

    assert store.clear_api_key() is True
    assert store.get_api_key() is None
    assert store.clear_api_key() is False


def test_keyring_store_rejects_blank_api_key() -> None:
    """Blank keys are rejected before touching the backend."""

    store = KeyringCredentialStore(backend=FakeKeyringModule())

    with pytest.raises(ValueError, match="non-empty"):
        store.set_api_key("   ")


def test_keyring_store_handles_fail_backend() -> None:
    """The no-op fail backend reports unavailable and refuses to store keys."""

    store = KeyringCredentialStore(backend=FakeKeyringModule(backend=FailKeyring()))

    assert store.is_available() is False
    assert store.get_api_key() is None
    assert store.clear_api_key() is False
    with pytest.raises(RuntimeError, match="unavailable"):
        store.set_api_key("abc123")
