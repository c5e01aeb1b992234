"""Microsoft identity authentication: device-code flow with a cached token."""

from outlook_md.auth.device_flow import DeviceCodeAuthenticator
from outlook_md.auth.exceptions import (
    AuthenticationCancelledError,
    AuthenticationError,
    AuthError,
    CacheCorruptionError,
    DeviceCodeExpiredError,
    PersistenceWarning,
    TokenCacheNotFoundError,
    TokenCacheWriteError,
    TokenRefreshError,
)
from outlook_md.auth.manager import TokenLifecycleManager
from outlook_md.auth.models import DeviceAuthorizationGrant, TokenRecord
from outlook_md.auth.oauth import MicrosoftOAuth
from outlook_md.auth.token_cache import TokenCache

__all__ = [
    "DeviceCodeAuthenticator",
    "MicrosoftOAuth",
    "TokenCache",
    "TokenLifecycleManager",
    "TokenRecord",
    "DeviceAuthorizationGrant",
    "AuthError",
    "AuthenticationError",
    "AuthenticationCancelledError",
    "CacheCorruptionError",
    "DeviceCodeExpiredError",
    "PersistenceWarning",
    "TokenCacheNotFoundError",
    "TokenCacheWriteError",
    "TokenRefreshError",
]
