"""Microsoft identity platform OAuth using Authlib.

Public-client (no secret) access to the v2.0 endpoints of one tenant:
- device authorization requests
- device-code token exchange
- refresh-token exchange
"""

from __future__ import annotations

import logging
import time

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session

from outlook_md.auth.exceptions import AuthenticationError, TokenRefreshError
from outlook_md.auth.models import DeviceAuthorizationGrant, TokenRecord
from outlook_md.config import AUTHORITY_HOST
from outlook_md.credentials import Credential

logger = logging.getLogger(__name__)


SCOPES = {
    "calendar_read": "Calendars.Read",
    # Required for the token endpoint to issue a refresh token
    "offline_access": "offline_access",
}
DEFAULT_SCOPES = ["calendar_read", "offline_access"]

DEVICE_CODE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"

REQUEST_TIMEOUT = 30.0


class MicrosoftOAuth:
    """OAuth endpoints and token exchanges for one Azure AD tenant.

    Example:
        >>> oauth = MicrosoftOAuth(Credential(client_id="...", tenant_id="..."))
        >>> grant = oauth.request_device_authorization()
        >>> print(grant.verification_uri, grant.user_code)
        >>> record = oauth.exchange_device_code(grant)  # after user approval
    """

    def __init__(
        self,
        credential: Credential,
        scopes: list[str] | None = None,
        authority: str = AUTHORITY_HOST,
        session: OAuth2Session | None = None,
    ):
        """Initialize OAuth for a tenant.

        Args:
            credential: Application client ID and tenant ID.
            scopes: Scope names (see SCOPES) or raw scope strings.
            authority: Identity provider host.
            session: Preconfigured session (mainly for tests).
        """
        self.credential = credential
        self.scopes = self._resolve_scopes(scopes or DEFAULT_SCOPES)

        base = f"{authority.rstrip('/')}/{credential.tenant_id}/oauth2/v2.0"
        self.device_code_url = f"{base}/devicecode"
        self.token_url = f"{base}/token"

        self.session = session or OAuth2Session(
            client_id=credential.client_id,
            scope=" ".join(self.scopes),
            token_endpoint=self.token_url,
            token_endpoint_auth_method="none",
        )

    def _resolve_scopes(self, scopes: list[str]) -> list[str]:
        """Resolve scope names to scope strings."""
        return [SCOPES.get(scope, scope) for scope in scopes]

    def request_device_authorization(self) -> DeviceAuthorizationGrant:
        """Start a device-code authorization.

        Returns:
            The grant holding the user code and verification URI.

        Raises:
            AuthenticationError: If the authorization server rejects the request.
        """
        try:
            resp = self.session.post(
                self.device_code_url,
                data={
                    "client_id": self.credential.client_id,
                    "scope": " ".join(self.scopes),
                },
                withhold_token=True,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise AuthenticationError(f"Failed to initiate device code flow: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise AuthenticationError(
                f"Failed to initiate device code flow: invalid response "
                f"(HTTP {resp.status_code})"
            ) from e

        if resp.status_code >= 400 or "error" in data:
            error = data.get("error", f"HTTP {resp.status_code}")
            description = data.get("error_description", "")
            raise AuthenticationError(
                f"Failed to initiate device code flow: {error} {description}".strip()
            )

        try:
            grant = DeviceAuthorizationGrant.from_response(data, now=time.monotonic())
        except (KeyError, TypeError, ValueError) as e:
            raise AuthenticationError(
                f"Failed to initiate device code flow: malformed response ({e})"
            ) from e

        logger.info(f"Device code issued (expires in {data.get('expires_in')}s)")
        return grant

    def exchange_device_code(self, grant: DeviceAuthorizationGrant) -> TokenRecord:
        """Poll the token endpoint once.

        Returns:
            The token record once the user has approved.

        Raises:
            authlib.common.errors.AuthlibBaseError: OAuth error response, e.g.
                "authorization_pending" or "slow_down".
            AuthenticationError: On network failures or malformed responses.
        """
        try:
            token = self.session.fetch_token(
                self.token_url,
                grant_type=DEVICE_CODE_GRANT_TYPE,
                device_code=grant.device_code,
                timeout=REQUEST_TIMEOUT,
            )
        except AuthlibBaseError:
            raise
        except (requests.RequestException, ValueError) as e:
            raise AuthenticationError(f"Device code token request failed: {e}") from e

        try:
            return TokenRecord.from_oauth(token)
        except (KeyError, TypeError, ValueError) as e:
            raise AuthenticationError(f"Malformed token response: {e}") from e

    def refresh(self, record: TokenRecord) -> TokenRecord:
        """Exchange the record's refresh token for a new access token.

        Raises:
            TokenRefreshError: If there is no refresh token or the exchange fails.
        """
        if not record.refresh_token:
            raise TokenRefreshError("No refresh token available")

        try:
            token = self.session.refresh_token(
                self.token_url,
                refresh_token=record.refresh_token,
                timeout=REQUEST_TIMEOUT,
            )
        except AuthlibBaseError as e:
            raise TokenRefreshError(f"Failed to refresh token: {e}") from e
        except (requests.RequestException, ValueError) as e:
            raise TokenRefreshError(f"Failed to refresh token: {e}") from e

        try:
            refreshed = TokenRecord.from_oauth(token, previous_refresh_token=record.refresh_token)
        except (KeyError, TypeError, ValueError) as e:
            raise TokenRefreshError(f"Malformed refresh response: {e}") from e

        logger.info(f"Token refreshed (expiry: {refreshed.expiry})")
        return refreshed
