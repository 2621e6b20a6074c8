"""Dynamic DNS updater for Nitrado, Hetzner and Netcup."""

__version__ = "0.1.0"
