"""outlook-md - fetch Microsoft 365 calendar events as structured JSON."""

__version__ = "0.1.0"
