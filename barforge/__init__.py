"""Verify, unpack and check Waybar module packages: signatures, safe extraction, dependencies and script screening."""

__version__ = "0.5.1"