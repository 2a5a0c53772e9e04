"""Secure credential storage helpers for the SpeakGenie CLI.

Responsibilities:
- Persist the chat provider API key in an OS-backed secure credential store.
- Provide deterministic read/write/delete operations for that key.
- Avoid logging or exposing secret values in diagnostics.

Key types:
- `CredentialStore`: interface for provider credential persistence.
- `KeyringCredentialStore`: keyring-backed secure credential storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from .parsing import normalize_optional_string


_DEFAULT_SERVICE_NAME = "speakgenie"
_DEFAULT_ACCOUNT_NAME = "openai_api_key"


class CredentialStore:
    """Interface for secure provider credential operations."""

    def is_available(self) -> bool:
        """Return whether secure credential operations are available."""

        raise NotImplementedError

    def get_api_key(self) -> str | None:
        """Load the stored API key from secure storage, when available."""

        raise NotImplementedError

    def set_api_key(self, api_key: str) -> None:
        """Persist an API key in secure storage."""

        raise NotImplementedError

    def clear_api_key(self) -> bool:
        """Delete a stored API key and return whether one existed."""

        raise NotImplementedError


@dataclass(slots=True)
class KeyringCredentialStore(CredentialStore):
    """Secure credential store backed by the `keyring` package.

    `backend` defaults to the `keyring` module itself; tests pass any object
    exposing `get_password`, `set_password`, `delete_password` and
    `get_keyring`.
    """

    service_name: str = _DEFAULT_SERVICE_NAME
    account_name: str = _DEFAULT_ACCOUNT_NAME
    backend: Any = field(default=keyring)

    def is_available(self) -> bool:
        """Return `False` when keyring resolved to its no-op fail backend."""

        try:
            active = self.backend.get_keyring()
        except KeyringError:
            return False
        return type(active).__module__ != "keyring.backends.fail"

    def get_api_key(self) -> str | None:
        """Get a normalized API key from keyring, returning `None` when missing."""

        if not self.is_available():
            return None
        try:
            value = self.backend.get_password(self.service_name, self.account_name)
        except KeyringError:
            return None
        return normalize_optional_string(value)

    def set_api_key(self, api_key: str) -> None:
        """Persist a normalized API key in keyring or raise when unavailable."""

        normalized = normalize_optional_string(api_key)
        if normalized is None:
            raise ValueError("API key must be a non-empty string.")
        if not self.is_available():
            raise RuntimeError(
                "Secure credential storage is unavailable: no usable keyring backend "
                "was found on this system."
            )
        self.backend.set_password(self.service_name, self.account_name, normalized)

    def clear_api_key(self) -> bool:
        """Remove the stored API key from keyring and report if one was present."""

        if self.get_api_key() is None:
            return False
        try:
            self.backend.delete_password(self.service_name, self.account_name)
        except PasswordDeleteError:
            return False
        return True


def create_credential_store() -> CredentialStore:
    """Create the default secure credential store implementation."""

    return KeyringCredentialStore()
