"""Credential sources for the Azure AD application identity.

Usage:
    from outlook_md.credentials import default_store

    credential = default_store().load()
    print(credential.client_id, credential.tenant_id)
"""

from __future__ import annotations

from outlook_md.credentials.base import (
    CLIENT_ID_KEY,
    TENANT_ID_KEY,
    Credential,
    CredentialStore,
)
from outlook_md.credentials.chain import ChainedCredentialStore, default_store
from outlook_md.credentials.environment import EnvironmentCredentialStore
from outlook_md.credentials.keychain import KeychainCredentialStore, store_keychain_value

__all__ = [
    "CLIENT_ID_KEY",
    "TENANT_ID_KEY",
    "Credential",
    "CredentialStore",
    "ChainedCredentialStore",
    "EnvironmentCredentialStore",
    "KeychainCredentialStore",
    "default_store",
    "store_keychain_value",
]
