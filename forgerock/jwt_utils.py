"""
JWT claim extraction for ForgeRock-issued tokens
"""
import base64
import binascii
import json
import time
from typing import Any, Dict, Optional

from .errors import ExpiredTokenError, MalformedTokenError
from .models import Claims

# 9999-12-31T23:59:59Z, the last instant datetime can represent
MAX_EXPIRY = 253402300799


def decode_jwt_payload(token: str) -> Dict[str, Any]:
    """
    Decode a JWT payload without verification.

    The signature is not checked: ForgeRock and the vendor API reject
    forged tokens themselves, we only read claims for local decisions.

    Args:
        token: JWT string (header.payload.signature)

    Returns:
        Decoded payload as a dictionary

    Raises:
        MalformedTokenError: If the token is not a decodable JWT
    """
    if not isinstance(token, str):
        raise MalformedTokenError("Token is not a string")

    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError(f"Invalid JWT format: expected 3 parts, got {len(parts)}")

    # JWT segments are base64url without padding
    payload = parts[1]
    if "=" in payload:
        raise MalformedTokenError("JWT payload segment must not carry base64 padding")
    padded = payload + "=" * (-len(payload) % 4)

    try:
        decoded_bytes = base64.b64decode(padded, altchars=b"-_", validate=True)
        decoded_str = decoded_bytes.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(f"JWT payload is not valid base64url/UTF-8: {e}") from e

    try:
        data = json.loads(decoded_str)
    except json.JSONDecodeError as e:
        raise MalformedTokenError(f"JWT payload is not JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedTokenError("JWT payload is not a JSON object")
    return data


def extract_claims(token: str, now: Optional[float] = None) -> Claims:
    """
    Extract subject and expiry from a JWT.

    Args:
        token: JWT access or refresh token
        now: Current Unix time (defaults to the wall clock)

    Returns:
        Claims for an unexpired token

    Raises:
        MalformedTokenError: If the token or its `sub`/`exp` claims are unreadable
        ExpiredTokenError: If `exp` is at or before `now`
    """
    payload = decode_jwt_payload(token)

    subject = payload.get("sub")
    if not isinstance(subject, str):
        raise MalformedTokenError("JWT payload has no string 'sub' claim")

    expiry = payload.get("exp")
    # bool is an int subclass, but never a valid expiry
    if isinstance(expiry, bool) or not isinstance(expiry, (int, float)):
        raise MalformedTokenError("JWT payload has no numeric 'exp' claim")
    # Chained comparison also rejects NaN and infinities
    if not 0 <= expiry <= MAX_EXPIRY:
        raise MalformedTokenError(f"JWT 'exp' claim is out of range: {expiry}")

    current = time.time() if now is None else now
    if expiry <= current:
        raise ExpiredTokenError(f"Token for {subject} expired at {int(expiry)}", claims=payload)

    return Claims(subject=subject, expires_at=int(expiry))


def is_token_expired(token: str, now: Optional[float] = None) -> bool:
    """
    Check whether a token has expired.

    Args:
        token: JWT string
        now: Current Unix time (defaults to the wall clock)

    Returns:
        True if expired, False if still valid

    Raises:
        MalformedTokenError: If the token cannot be read at all
    """
    try:
        extract_claims(token, now)
    except ExpiredTokenError:
        return True
    return False
