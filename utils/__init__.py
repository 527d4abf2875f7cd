"""Shared utilities package for toyotactl"""

from .storage import KeyringSecretStore, TokenStorage
from .debug_console import (
    DebugCapturingConsole,
    configure_logging,
    create_debug_console,
    setup_debug_logger,
)

__all__ = [
    "KeyringSecretStore",
    "TokenStorage",
    "DebugCapturingConsole",
    "configure_logging",
    "create_debug_console",
    "setup_debug_logger",
]
