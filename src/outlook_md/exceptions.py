"""Base exceptions shared across outlook-md."""

from __future__ import annotations


class OutlookMDError(Exception):
    """Base exception for all outlook-md errors."""


class ConfigurationError(OutlookMDError):
    """Raised when credential inputs or options are missing or invalid."""
