"""Concurrent word-list subdomain resolver."""

__version__ = "0.1.0"
