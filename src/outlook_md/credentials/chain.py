"""Credential store composition and platform selection."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from outlook_md.credentials.base import CredentialStore
from outlook_md.credentials.environment import EnvironmentCredentialStore
from outlook_md.credentials.keychain import KeychainCredentialStore


class ChainedCredentialStore(CredentialStore):
    """Returns the first non-empty value for a key across several stores."""

    name = "chain"

    def __init__(self, stores: Sequence[CredentialStore]) -> None:
        self.stores = list(stores)

    def get(self, key: str) -> str | None:
        for store in self.stores:
            value = store.get(key)
            if value:
                return value
        return None


def default_store(platform: str | None = None) -> ChainedCredentialStore:
    """Build the credential store for this platform.

    Keychain is consulted first on macOS, then the environment.
    """
    platform = platform or sys.platform
    stores: list[CredentialStore] = []
    if platform == "darwin":
        stores.append(KeychainCredentialStore())
    stores.append(EnvironmentCredentialStore())
    return ChainedCredentialStore(stores)
