"""Environment variable credential store."""

from __future__ import annotations

import os

from outlook_md.credentials.base import ENV_VARS, CredentialStore


class EnvironmentCredentialStore(CredentialStore):
    """Reads OUTLOOK_MD_CLIENT_ID / OUTLOOK_MD_TENANT_ID.

    The ~/.outlook-md/.env file is folded into the environment when
    outlook_md.config is imported, so its values are visible here too.
    """

    name = "environment"

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        self._environ = environ

    def get(self, key: str) -> str | None:
        environ = os.environ if self._environ is None else self._environ
        value = environ.get(ENV_VARS[key], "").strip()
        return value or None
