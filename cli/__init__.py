"""CLI package for toyotactl

Command-line login that caches the account's OAuth2 tokens in the
system keyring.
"""

from cli.main import main

__all__ = [
    "main",
]
