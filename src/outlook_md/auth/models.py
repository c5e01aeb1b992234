"""Token and device-grant models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

# Tokens this close to expiry are treated as expired
DEFAULT_EXPIRY_SKEW = timedelta(seconds=10)


@dataclass
class TokenRecord:
    """An OAuth token set with an absolute expiry instant."""

    access_token: str
    token_type: str = "Bearer"
    refresh_token: str | None = None
    expiry: datetime | None = None

    def is_valid(
        self,
        now: datetime | None = None,
        skew: timedelta = DEFAULT_EXPIRY_SKEW,
    ) -> bool:
        """Check whether the access token can still be used.

        A record without an expiry is treated as non-expiring.
        """
        if not self.access_token:
            return False
        if self.expiry is None:
            return True
        now = now or datetime.now(timezone.utc)
        return self.expiry - skew > now

    @classmethod
    def from_oauth(
        cls, token: dict[str, Any], previous_refresh_token: str | None = None
    ) -> TokenRecord:
        """Build a record from an Authlib token dict.

        Args:
            token: Token response (Authlib adds "expires_at" from "expires_in").
            previous_refresh_token: Kept when the response carries no new one.
        """
        expires_at = token.get("expires_at")
        if expires_at is None and token.get("expires_in") is not None:
            expires_at = datetime.now(timezone.utc).timestamp() + int(token["expires_in"])

        return cls(
            access_token=token["access_token"],
            token_type=token.get("token_type") or "Bearer",
            refresh_token=token.get("refresh_token") or previous_refresh_token,
            expiry=(
                datetime.fromtimestamp(float(expires_at), tz=timezone.utc)
                if expires_at is not None
                else None
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the token cache file."""
        return {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "refresh_token": self.refresh_token,
            "expiry": self.expiry.isoformat() if self.expiry else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenRecord:
        """Deserialize a token cache document.

        Raises:
            ValueError: If required fields are missing or malformed.
        """
        access_token = data.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("missing access_token")

        expiry = data.get("expiry")
        if expiry is not None:
            if not isinstance(expiry, str):
                raise ValueError(f"invalid expiry: {expiry!r}")
            expiry = datetime.fromisoformat(expiry.replace("Z", "+00:00"))
            if expiry.tzinfo is None:
                expiry = expiry.replace(tzinfo=timezone.utc)

        refresh_token = data.get("refresh_token")
        if refresh_token is not None and not isinstance(refresh_token, str):
            raise ValueError("invalid refresh_token")

        return cls(
            access_token=access_token,
            token_type=data.get("token_type") or "Bearer",
            refresh_token=refresh_token or None,
            expiry=expiry,
        )


@dataclass(frozen=True)
class DeviceAuthorizationGrant:
    """One device-code authorization attempt. Never persisted."""

    verification_uri: str
    user_code: str
    device_code: str
    interval: float
    expires_at: float
    message: str | None = None

    @classmethod
    def from_response(cls, data: dict[str, Any], now: float) -> DeviceAuthorizationGrant:
        """Parse a device authorization response.

        Args:
            data: JSON body from the devicecode endpoint.
            now: Current time.monotonic() value the expiry is relative to.
        """
        return cls(
            verification_uri=data.get("verification_uri") or data["verification_url"],
            user_code=data["user_code"],
            device_code=data["device_code"],
            interval=float(data.get("interval", 5)),
            expires_at=now + float(data.get("expires_in", 900)),
            message=data.get("message"),
        )
