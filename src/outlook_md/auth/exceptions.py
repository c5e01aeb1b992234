"""Authentication exceptions."""

from __future__ import annotations

from outlook_md.exceptions import OutlookMDError


class AuthError(OutlookMDError):
    """Base exception for authentication errors."""


class TokenCacheNotFoundError(AuthError):
    """Raised when the token cache file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No token cache at {path}")


class CacheCorruptionError(AuthError):
    """Raised when the token cache exists but cannot be read or parsed.

    Device-code authentication is not attempted in this case;
    delete the file (`outlook-md auth logout`) to start over.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Token cache at {path} is unreadable: {reason}. "
            "Run 'outlook-md auth logout' to remove it."
        )


class TokenCacheWriteError(AuthError):
    """Raised when the token cache cannot be written."""


class AuthenticationError(AuthError):
    """Raised when interactive device-code authentication fails."""


class DeviceCodeExpiredError(AuthenticationError):
    """Raised when the device code expires before the user approves it."""

    def __init__(self, message: str = "Device code expired before authorization completed"):
        super().__init__(message)


class AuthenticationCancelledError(AuthenticationError):
    """Raised when device-code authentication is cancelled."""

    def __init__(self, message: str = "Authentication cancelled"):
        super().__init__(message)


class TokenRefreshError(AuthError):
    """Raised when a refresh-token exchange fails."""


class PersistenceWarning(UserWarning):
    """Issued when a freshly obtained token could not be cached."""
