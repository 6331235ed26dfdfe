"""Validated Bluetooth serial commands for automation hosts."""

__version__ = "0.1.0"
