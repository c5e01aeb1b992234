"""Centralized configuration.

Per-user state lives under ~/.outlook-md:
    .env        - OUTLOOK_MD_CLIENT_ID, OUTLOOK_MD_TENANT_ID (optional)
    token.json  - cached OAuth tokens (mode 0600)

This module auto-loads the .env file on import. Values already present in
the process environment always win over the file.
"""

import os
from pathlib import Path

# State directory (override with OUTLOOK_MD_HOME, mainly for tests)
STATE_DIR = Path(os.environ.get("OUTLOOK_MD_HOME", Path.home() / ".outlook-md"))

ENV_FILE = STATE_DIR / ".env"
TOKEN_CACHE = STATE_DIR / "token.json"

# Environment variable names
ENV_CLIENT_ID = "OUTLOOK_MD_CLIENT_ID"
ENV_TENANT_ID = "OUTLOOK_MD_TENANT_ID"
ENV_ACCESS_TOKEN = "OUTLOOK_MD_ACCESS_TOKEN"

# macOS Keychain service holding client-id / tenant-id entries
KEYCHAIN_SERVICE = "com.github.obsidian-outlook-sync"

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
AUTHORITY_HOST = "https://login.microsoftonline.com"


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            # Env vars take precedence
            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def get_status() -> dict:
    """Get status of configuration sources.

    Returns:
        Dictionary with configuration status.
    """
    return {
        "state_dir": str(STATE_DIR),
        "env_file": ENV_FILE.exists(),
        "token_cache": TOKEN_CACHE.exists(),
        "env": {
            "client_id": bool(os.environ.get(ENV_CLIENT_ID)),
            "tenant_id": bool(os.environ.get(ENV_TENANT_ID)),
            "access_token": bool(os.environ.get(ENV_ACCESS_TOKEN)),
        },
    }


_loaded = _load_env_file(ENV_FILE)
