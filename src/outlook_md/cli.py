"""CLI for outlook-md - calendar events as JSON.

Usage:
    outlook-md today [--tz TZ]                 # Today's events (00:00-24:00)
    outlook-md tomorrow [--tz TZ]              # Tomorrow's events
    outlook-md week [--tz TZ]                  # This week's events (Mon-Sun)
    outlook-md auth status                     # Show cached token status
    outlook-md auth login                      # Authenticate (device code flow)
    outlook-md auth logout                     # Delete cached token
    outlook-md credentials status              # Show client/tenant ID sources
    outlook-md credentials store <key> <value> # Save client-id/tenant-id to Keychain
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from outlook_md import __version__
from outlook_md.auth import (
    AuthenticationCancelledError,
    TokenCache,
    TokenLifecycleManager,
)
from outlook_md.calendar import GraphCalendarClient
from outlook_md.config import ENV_ACCESS_TOKEN, get_status
from outlook_md.credentials import (
    CLIENT_ID_KEY,
    TENANT_ID_KEY,
    default_store,
    store_keychain_value,
)
from outlook_md.exceptions import ConfigurationError, OutlookMDError
from outlook_md.output import SUPPORTED_FORMATS, build_output, dumps_output
from outlook_md.windows import WINDOWS, resolve_timezone, window_for

EXIT_CANCELLED = 130


def _build_manager() -> TokenLifecycleManager:
    """Token manager wired to the default cache and credential sources."""
    return TokenLifecycleManager(TokenCache(), default_store().load)


def fetch_events(
    command: str,
    timezone: str,
    output_format: str = "json",
    access_token: str | None = None,
) -> int:
    """Fetch events for a window and print them as JSON."""
    if output_format not in SUPPORTED_FORMATS:
        raise ConfigurationError(
            f"unsupported format: {output_format} (only 'json' is supported)"
        )

    tz_name, tz = resolve_timezone(timezone)
    window = window_for(command, tz)

    override = access_token or os.environ.get(ENV_ACCESS_TOKEN)
    token = _build_manager().get_access_token(override_token=override)

    with GraphCalendarClient(token) as client:
        events = client.get_calendar_view(window.start, window.end, tz_name)

    # Serialize fully before writing so output is all-or-nothing
    text = dumps_output(build_output(tz_name, window, events))
    sys.stdout.write(text + "\n")
    return 0


def auth_status() -> int:
    """Show cached token status."""
    info = _build_manager().status()

    if info["status"] == "no_token":
        print(f"No token found at {info['path']} - run 'outlook-md auth login'")
        return 1

    print(f"Status        : {info['status']}")
    print(f"Cache         : {info['path']}")
    print(f"Expires       : {info.get('expiry') or 'unknown'}")
    print(f"Refresh token : {'yes' if info['has_refresh_token'] else 'no'}")
    return 0


def auth_login() -> int:
    """Obtain a token via cache, refresh, or device code flow."""
    _build_manager().acquire()
    print("Authenticated; token cached.", file=sys.stderr)
    return auth_status()


def auth_logout() -> int:
    """Delete the cached token."""
    if TokenCache().clear():
        print("Token cache cleared")
    else:
        print("No cached token")
    return 0


def credentials_status() -> int:
    """Show which sources provide the client and tenant IDs."""
    status = get_status()
    print(f"State directory: {status['state_dir']}")
    print(f"  .env file:        {'[x]' if status['env_file'] else '[ ]'}")
    print(f"  token cache:      {'[x]' if status['token_cache'] else '[ ]'}")
    print()

    print("Credentials:")
    stores = default_store().stores

    all_found = True
    for key in (CLIENT_ID_KEY, TENANT_ID_KEY):
        sources = []
        for store in stores:
            try:
                if store.get(key):
                    sources.append(store.name)
            except ConfigurationError as e:
                sources.append(f"{store.name} (error: {e})")
        mark = "[x]" if sources else "[ ]"
        all_found &= bool(sources)
        print(f"  {mark} {key:<10} {', '.join(sources)}")

    return 0 if all_found else 1


def credentials_store(key: str, value: str) -> int:
    """Save a credential value to the macOS Keychain."""
    if sys.platform != "darwin":
        print("Keychain storage is only available on macOS; use environment variables")
        return 1

    if not store_keychain_value(key, value):
        print(f"Failed to store {key} in Keychain")
        return 1

    print(f"Stored {key} in Keychain")
    return 0


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # PersistenceWarning and friends go through the same handler
    logging.captureWarnings(True)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--tz",
        type=str,
        default="Local",
        help="Timezone for calendar view, e.g. America/New_York, UTC (default: Local)",
    )
    common.add_argument(
        "--format",
        type=str,
        default="json",
        help="Output format (default: json)",
    )
    common.add_argument(
        "--access-token",
        type=str,
        default=None,
        help=f"Use this access token instead of authenticating (also {ENV_ACCESS_TOKEN})",
    )

    parser = argparse.ArgumentParser(
        prog="outlook-md",
        description="Fetch Microsoft 365 calendar events as JSON",
    )
    parser.add_argument("--version", action="version", version=f"outlook-md {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("today", parents=[common], help="Today's events (00:00-24:00)")
    subparsers.add_parser("tomorrow", parents=[common], help="Tomorrow's events (00:00-24:00)")
    subparsers.add_parser("week", parents=[common], help="This week's events (Mon-Sun)")

    # auth subcommand
    auth_parser = subparsers.add_parser("auth", help="Token management")
    auth_subparsers = auth_parser.add_subparsers(dest="auth_command", help="Command")
    auth_subparsers.add_parser("status", help="Show cached token status")
    auth_subparsers.add_parser("login", help="Authenticate and cache a token")
    auth_subparsers.add_parser("logout", help="Delete the cached token")

    # credentials subcommand
    creds_parser = subparsers.add_parser("credentials", help="Client/tenant ID management")
    creds_subparsers = creds_parser.add_subparsers(dest="credentials_command", help="Command")
    creds_subparsers.add_parser("status", help="Show credential sources")
    store_parser = creds_subparsers.add_parser("store", help="Save a value to macOS Keychain")
    store_parser.add_argument("key", choices=[CLIENT_ID_KEY, TENANT_ID_KEY])
    store_parser.add_argument("value", help="Value to store")

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command in WINDOWS:
            return fetch_events(args.command, args.tz, args.format, args.access_token)

        if args.command == "auth":
            if args.auth_command == "status":
                return auth_status()
            elif args.auth_command == "login":
                return auth_login()
            elif args.auth_command == "logout":
                return auth_logout()
            else:
                auth_parser.print_help()
                return 0

        if args.command == "credentials":
            if args.credentials_command == "status":
                return credentials_status()
            elif args.credentials_command == "store":
                return credentials_store(args.key, args.value)
            else:
                creds_parser.print_help()
                return 0
    except AuthenticationCancelledError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CANCELLED
    except KeyboardInterrupt:
        print("Cancelled", file=sys.stderr)
        return EXIT_CANCELLED
    except OutlookMDError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
