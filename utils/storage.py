import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from forgerock.errors import ClaimError, StorageError
from forgerock.jwt_utils import MAX_EXPIRY, decode_jwt_payload
from forgerock.models import TokenPair

logger = logging.getLogger(__name__)

DEFAULT_SERVICE = "toyotactl"
DEFAULT_ENTRY = "OAuth2 Credentials"


class KeyringSecretStore:
    """Named secrets in the system keyring, all under one service name"""

    def __init__(self, service: Optional[str] = None):
        self.service = service or DEFAULT_SERVICE

    def get_secret(self, name: str) -> Optional[str]:
        """Read a secret, or None if it was never stored"""
        try:
            return keyring.get_password(self.service, name)
        except KeyringError as e:
            raise StorageError(f"Unable to read {name!r} from the keyring: {e}") from e

    def set_secret(self, name: str, value: str) -> None:
        try:
            keyring.set_password(self.service, name, value)
        except KeyringError as e:
            raise StorageError(f"Unable to write {name!r} to the keyring: {e}") from e

    def delete_secret(self, name: str) -> None:
        """Delete a secret; deleting a missing secret is not an error"""
        try:
            keyring.delete_password(self.service, name)
        except PasswordDeleteError:
            logger.debug(f"No {name!r} entry to delete")
        except KeyringError as e:
            raise StorageError(f"Unable to delete {name!r} from the keyring: {e}") from e


class TokenStorage:
    """OAuth2 token pair persisted as a single secret-store entry

    The access and refresh tokens are kept in one JSON record so they are
    always written together.
    """

    def __init__(self, secret_store=None, entry_name: Optional[str] = None):
        """Initialize token storage

        Args:
            secret_store: Object with get_secret/set_secret/delete_secret
                (default: the system keyring)
            entry_name: Name of the entry holding the token record
        """
        self.secret_store = secret_store if secret_store is not None else KeyringSecretStore()
        self.entry_name = entry_name or DEFAULT_ENTRY

    def load_tokens(self) -> Optional[TokenPair]:
        """Load the stored token pair

        Returns:
            The TokenPair, or None if nothing is stored

        Raises:
            StorageError: If the store fails or the record is unreadable
        """
        contents = self.secret_store.get_secret(self.entry_name)
        if contents is None:
            logger.debug("No stored credentials found")
            return None

        logger.debug("Loaded stored credentials")
        return TokenPair.from_json(contents)

    def save_tokens(self, tokens: TokenPair) -> None:
        """Replace the stored token pair"""
        self.secret_store.set_secret(self.entry_name, tokens.to_json())
        logger.debug("Saved credentials to secret store")

    def clear_tokens(self) -> None:
        """Remove stored tokens"""
        self.secret_store.delete_secret(self.entry_name)
        logger.info("Cleared stored credentials")

    def get_status(self) -> Dict[str, Any]:
        """Get token status without exposing secrets"""
        try:
            tokens = self.load_tokens()
        except StorageError as e:
            return {
                "has_tokens": False,
                "error": str(e),
                "subject": None,
                "access_token": _describe_token(None),
                "refresh_token": _describe_token(None),
            }

        if tokens is None:
            return {
                "has_tokens": False,
                "error": None,
                "subject": None,
                "access_token": _describe_token(None),
                "refresh_token": _describe_token(None),
            }

        access = _describe_token(tokens.access_token)
        return {
            "has_tokens": True,
            "error": None,
            "subject": access.get("subject"),
            "access_token": access,
            "refresh_token": _describe_token(tokens.refresh_token),
        }

    @property
    def location(self) -> str:
        """Human-readable location of the stored entry"""
        service = getattr(self.secret_store, "service", "secret store")
        return f"{service} / {self.entry_name}"


def _describe_token(token: Optional[str]) -> Dict[str, Any]:
    """Summarise a token's expiry for display"""
    if not token:
        return {"is_expired": True, "expires_at": None, "time_until_expiry": "No token", "subject": None}

    try:
        payload = decode_jwt_payload(token)
    except ClaimError:
        return {"is_expired": True, "expires_at": None, "time_until_expiry": "Malformed", "subject": None}

    expires_at = payload.get("exp")
    subject = payload.get("sub")
    if (
        isinstance(expires_at, bool)
        or not isinstance(expires_at, (int, float))
        or not 0 <= expires_at <= MAX_EXPIRY
    ):
        return {"is_expired": True, "expires_at": None, "time_until_expiry": "Unknown", "subject": subject}

    expires_str = datetime.fromtimestamp(expires_at, timezone.utc).isoformat()
    current_time = int(time.time())

    if current_time >= expires_at:
        time_since = current_time - int(expires_at)
        hours_since = time_since // 3600
        mins_since = (time_since % 3600) // 60

        if hours_since > 0:
            time_str = f"{hours_since}h {mins_since}m ago"
        else:
            time_str = f"{mins_since}m ago"

        return {"is_expired": True, "expires_at": expires_str, "time_until_expiry": time_str, "subject": subject}

    time_remaining = int(expires_at) - current_time
    hours = time_remaining // 3600
    minutes = (time_remaining % 3600) // 60
    days = hours // 24

    if days > 0:
        time_str = f"{days}d {hours % 24}h"
    elif hours > 0:
        time_str = f"{hours}h {minutes}m"
    else:
        time_str = f"{minutes}m"

    return {"is_expired": False, "expires_at": expires_str, "time_until_expiry": time_str, "subject": subject}
