"""Tinue finder: forced-win search over archived Tak games."""

__version__ = "0.1.0"
