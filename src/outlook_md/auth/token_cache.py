"""On-disk token cache.

A single JSON record at ~/.outlook-md/token.json, readable by the owner
only. Writes go to a temp file in the same directory and are moved into
place with os.replace, so readers never observe a partial file.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path

from outlook_md.auth.exceptions import (
    CacheCorruptionError,
    TokenCacheNotFoundError,
    TokenCacheWriteError,
)
from outlook_md.auth.models import TokenRecord
from outlook_md.config import TOKEN_CACHE

logger = logging.getLogger(__name__)

FILE_MODE = 0o600
DIR_MODE = 0o700


class TokenCache:
    """Persists one TokenRecord.

    Example:
        >>> cache = TokenCache()
        >>> cache.save(record)
        >>> cache.load().access_token
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path else TOKEN_CACHE

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> TokenRecord:
        """Read the cached record.

        Raises:
            TokenCacheNotFoundError: If the cache file does not exist.
            CacheCorruptionError: If the file cannot be read or parsed.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise TokenCacheNotFoundError(str(self.path)) from e
        except json.JSONDecodeError as e:
            raise CacheCorruptionError(str(self.path), f"invalid JSON ({e})") from e
        except (OSError, UnicodeDecodeError) as e:
            raise CacheCorruptionError(str(self.path), str(e)) from e

        if not isinstance(data, dict):
            raise CacheCorruptionError(str(self.path), "expected a JSON object")

        try:
            record = TokenRecord.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise CacheCorruptionError(str(self.path), str(e)) from e

        logger.debug(f"Loaded cached token (expiry: {record.expiry})")
        return record

    def save(self, record: TokenRecord) -> None:
        """Atomically replace the cache file with `record`.

        Raises:
            TokenCacheWriteError: If the file cannot be written.
        """
        payload = json.dumps(record.to_dict(), indent=2, sort_keys=True)

        try:
            self.path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".token-", suffix=".tmp"
            )
        except OSError as e:
            raise TokenCacheWriteError(f"Failed to write token cache: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                os.chmod(tmp_name, FILE_MODE)
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            if isinstance(e, OSError):
                raise TokenCacheWriteError(f"Failed to write token cache: {e}") from e
            raise

        logger.info(f"Token saved to {self.path}")

    def clear(self) -> bool:
        """Delete the cache file.

        Returns:
            True if a file was removed.
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.info(f"Removed token cache {self.path}")
        return True
