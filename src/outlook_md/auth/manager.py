"""Access token lifecycle: override, cache, refresh, then device flow."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from outlook_md.auth.device_flow import DeviceCodeAuthenticator
from outlook_md.auth.exceptions import (
    PersistenceWarning,
    TokenCacheNotFoundError,
    TokenCacheWriteError,
    TokenRefreshError,
)
from outlook_md.auth.models import DEFAULT_EXPIRY_SKEW, TokenRecord
from outlook_md.auth.oauth import MicrosoftOAuth
from outlook_md.auth.token_cache import TokenCache
from outlook_md.credentials import Credential

logger = logging.getLogger(__name__)


class TokenLifecycleManager:
    """Produces a usable access token for one invocation.

    Priority order:
    1. an explicit override token, returned untouched;
    2. the cached token, if it has not expired;
    3. a refresh-token exchange, cached on success;
    4. the interactive device-code flow, cached on success.

    A corrupt cache is fatal: the device flow is never used to paper over it.

    Example:
        >>> manager = TokenLifecycleManager(TokenCache(), default_store().load)
        >>> token = manager.get_access_token()
    """

    def __init__(
        self,
        cache: TokenCache,
        credential_loader: Callable[[], Credential],
        oauth_factory: Callable[[Credential], MicrosoftOAuth] = MicrosoftOAuth,
        authenticator_factory: Callable[
            [MicrosoftOAuth], DeviceCodeAuthenticator
        ] = DeviceCodeAuthenticator,
        skew: timedelta = DEFAULT_EXPIRY_SKEW,
    ) -> None:
        """Initialize the manager.

        Args:
            cache: Token cache to read and overwrite.
            credential_loader: Resolves the client/tenant IDs; only called when
                no override token is given.
            oauth_factory: Builds the identity provider client.
            authenticator_factory: Builds the device-code authenticator.
            skew: Clock-skew tolerance applied to the cached expiry.
        """
        self.cache = cache
        self.credential_loader = credential_loader
        self.oauth_factory = oauth_factory
        self.authenticator_factory = authenticator_factory
        self.skew = skew

    def get_access_token(self, override_token: str | None = None) -> str:
        """Get an access token, authenticating interactively if needed.

        Args:
            override_token: Ready-made token that bypasses everything else.

        Raises:
            ConfigurationError: If client or tenant ID is missing.
            CacheCorruptionError: If the cache exists but cannot be read.
            AuthenticationError: If the device-code flow fails.
        """
        if override_token:
            logger.debug("Using override access token")
            return override_token

        return self.acquire().access_token

    def acquire(self) -> TokenRecord:
        """Run the cache -> refresh -> device flow sequence."""
        credential = self.credential_loader()
        oauth = self.oauth_factory(credential)

        try:
            record = self.cache.load()
        except TokenCacheNotFoundError:
            logger.info("No cached token; starting device code flow")
        else:
            if record.is_valid(skew=self.skew):
                logger.debug("Using cached access token")
                return record

            logger.info("Cached token expired, refreshing...")
            try:
                refreshed = oauth.refresh(record)
            except TokenRefreshError as e:
                logger.warning(f"Failed to refresh token: {e}. Re-authenticating...")
            else:
                self._persist(refreshed)
                return refreshed

        record = self.authenticator_factory(oauth).authenticate()
        self._persist(record)
        return record

    def _persist(self, record: TokenRecord) -> None:
        try:
            self.cache.save(record)
        except TokenCacheWriteError as e:
            warnings.warn(
                f"Failed to save token to cache: {e}", PersistenceWarning, stacklevel=3
            )

    def status(self) -> dict[str, Any]:
        """Describe the cached token without touching the network.

        Raises:
            CacheCorruptionError: If the cache exists but cannot be read.
        """
        try:
            record = self.cache.load()
        except TokenCacheNotFoundError:
            return {"status": "no_token", "path": str(self.cache.path)}

        return {
            "status": "valid" if record.is_valid(skew=self.skew) else "expired",
            "path": str(self.cache.path),
            "token_type": record.token_type,
            "expiry": record.expiry.isoformat() if record.expiry else None,
            "has_refresh_token": bool(record.refresh_token),
        }
