"""Credential store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from outlook_md.config import ENV_CLIENT_ID, ENV_TENANT_ID, KEYCHAIN_SERVICE
from outlook_md.exceptions import ConfigurationError

CLIENT_ID_KEY = "client-id"
TENANT_ID_KEY = "tenant-id"

# Environment variable backing each key, used in remediation messages
ENV_VARS = {
    CLIENT_ID_KEY: ENV_CLIENT_ID,
    TENANT_ID_KEY: ENV_TENANT_ID,
}


@dataclass(frozen=True)
class Credential:
    """Azure AD application identity used for one run."""

    client_id: str
    tenant_id: str


class CredentialStore(ABC):
    """Abstract base class for credential sources."""

    name: str = "store"

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get a single value ("client-id" or "tenant-id").

        Returns:
            The value, or None if this store doesn't hold it.

        Raises:
            ConfigurationError: If the store exists but cannot be read.
        """

    def load(self) -> Credential:
        """Resolve a complete credential.

        Raises:
            ConfigurationError: If either value is missing.
        """
        client_id = self.get(CLIENT_ID_KEY)
        if not client_id:
            raise missing_value_error(CLIENT_ID_KEY)

        tenant_id = self.get(TENANT_ID_KEY)
        if not tenant_id:
            raise missing_value_error(TENANT_ID_KEY)

        return Credential(client_id=client_id, tenant_id=tenant_id)


def missing_value_error(key: str) -> ConfigurationError:
    """Build the error shown when a credential value cannot be found."""
    label = key.replace("-", " ").replace("id", "ID")
    return ConfigurationError(
        f"{label} not found. Please set {ENV_VARS[key]} environment variable "
        f"or add to Keychain:\n"
        f"  security add-generic-password -s {KEYCHAIN_SERVICE} -a {key} -w '<YOUR_VALUE>'"
    )
