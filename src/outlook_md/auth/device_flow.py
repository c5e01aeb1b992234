"""OAuth 2.0 device authorization grant (RFC 8628)."""

from __future__ import annotations

import logging
import sys
import threading
import time
from collections.abc import Callable

from authlib.common.errors import AuthlibBaseError

from outlook_md.auth.exceptions import (
    AuthenticationCancelledError,
    AuthenticationError,
    DeviceCodeExpiredError,
)
from outlook_md.auth.models import DeviceAuthorizationGrant, TokenRecord
from outlook_md.auth.oauth import MicrosoftOAuth

logger = logging.getLogger(__name__)

# Added to the poll interval on each "slow_down" response
SLOW_DOWN_INCREMENT = 5.0


def print_instructions(grant: DeviceAuthorizationGrant) -> None:
    """Show device-code instructions on stderr (stdout is reserved for output)."""
    print("\nTo authenticate:", file=sys.stderr)
    print(f"1. Visit: {grant.verification_uri}", file=sys.stderr)
    print(f"2. Enter code: {grant.user_code}", file=sys.stderr)
    print("\nWaiting for authentication...\n", file=sys.stderr)


class DeviceCodeAuthenticator:
    """Runs one interactive device-code authorization.

    The user visits the verification URI on any device and enters the user
    code; meanwhile the token endpoint is polled at the server's interval
    until approval, expiry, or cancellation.

    Example:
        >>> authenticator = DeviceCodeAuthenticator(MicrosoftOAuth(credential))
        >>> record = authenticator.authenticate()
    """

    def __init__(
        self,
        oauth: MicrosoftOAuth,
        prompt: Callable[[DeviceAuthorizationGrant], None] = print_instructions,
        cancel_event: threading.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the authenticator.

        Args:
            oauth: Identity provider client.
            prompt: Called once with the grant to show instructions.
            cancel_event: Set from another thread to abort polling.
            clock: Monotonic clock, matching the grant's expires_at.
        """
        self.oauth = oauth
        self.prompt = prompt
        self.cancel_event = cancel_event or threading.Event()
        self.clock = clock

    def cancel(self) -> None:
        """Abort a pending authenticate() call."""
        self.cancel_event.set()

    def authenticate(self) -> TokenRecord:
        """Run the device-code flow to completion.

        Returns:
            The issued token record (not persisted here).

        Raises:
            DeviceCodeExpiredError: If the code expires before approval.
            AuthenticationCancelledError: If cancelled or interrupted.
            AuthenticationError: If the request is declined or fails.
        """
        grant = self.oauth.request_device_authorization()
        self.prompt(grant)

        record = self._poll(grant)
        print("✓ Authentication successful!\n", file=sys.stderr)
        return record

    def _poll(self, grant: DeviceAuthorizationGrant) -> TokenRecord:
        interval = grant.interval

        while True:
            try:
                cancelled = self.cancel_event.wait(interval)
            except KeyboardInterrupt as e:
                raise AuthenticationCancelledError() from e
            if cancelled:
                raise AuthenticationCancelledError()

            if self.clock() >= grant.expires_at:
                raise DeviceCodeExpiredError()

            try:
                return self.oauth.exchange_device_code(grant)
            except KeyboardInterrupt as e:
                raise AuthenticationCancelledError() from e
            except AuthlibBaseError as e:
                error = e.error
                if error == "authorization_pending":
                    continue
                if error == "slow_down":
                    interval += SLOW_DOWN_INCREMENT
                    logger.debug(f"Server asked to slow down; polling every {interval}s")
                    continue
                if error == "expired_token":
                    raise DeviceCodeExpiredError() from e
                if error in ("authorization_declined", "access_denied"):
                    raise AuthenticationError("Authorization was declined") from e
                raise AuthenticationError(f"Device code flow failed: {e}") from e
