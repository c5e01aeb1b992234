"""macOS Keychain credential store."""

from __future__ import annotations

import logging
import subprocess
import sys

from outlook_md.config import KEYCHAIN_SERVICE
from outlook_md.credentials.base import CredentialStore
from outlook_md.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# `security` exit codes
ITEM_NOT_FOUND = 44
ACCESS_DENIED = 36


class KeychainCredentialStore(CredentialStore):
    """Reads values from the login Keychain via the `security` CLI.

    Entries are generic passwords under service
    com.github.obsidian-outlook-sync with account "client-id" / "tenant-id".
    """

    name = "keychain"

    def __init__(self, service: str = KEYCHAIN_SERVICE) -> None:
        self.service = service

    def get(self, key: str) -> str | None:
        try:
            result = subprocess.run(
                [
                    "security",
                    "find-generic-password",
                    "-s",
                    self.service,
                    "-a",
                    key,
                    "-w",
                ],
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError:
            logger.debug("security CLI not available")
            return None
        except subprocess.CalledProcessError as e:
            if e.returncode == ITEM_NOT_FOUND:
                return None
            if e.returncode == ACCESS_DENIED:
                raise ConfigurationError(
                    "Keychain access denied. Please grant access to the keychain "
                    "or use environment variables"
                ) from e
            raise ConfigurationError(f"Failed to read from Keychain: {e}") from e

        return result.stdout.strip() or None


def store_keychain_value(key: str, value: str, service: str = KEYCHAIN_SERVICE) -> bool:
    """Store a credential value in macOS Keychain.

    Args:
        key: "client-id" or "tenant-id".
        value: Value to store.
        service: Keychain service name.

    Returns:
        True if stored successfully.
    """
    if sys.platform != "darwin":
        return False

    try:
        # Delete existing entry if present
        subprocess.run(
            ["security", "delete-generic-password", "-s", service, "-a", key],
            capture_output=True,
            check=False,
        )
        subprocess.run(
            ["security", "add-generic-password", "-s", service, "-a", key, "-w", value],
            capture_output=True,
            check=True,
        )
        return True
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False
