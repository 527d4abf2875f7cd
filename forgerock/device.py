"""Device fingerprint sent in response to ForgeRock's HiddenValueCallback"""

import json
import secrets
import string
from typing import Any, Dict

# Device identity reported by the OneApp Android client
DEVICE_PROFILE: Dict[str, Any] = {
    "appId": "com.toyota.oneapp",
    "deviceType": "android",
    "deviceName": "Pixel 7",
    "osVersion": "14",
    "emulator": False,
}

IDENTIFIER_LENGTH = 16
_IDENTIFIER_ALPHABET = string.ascii_letters + string.digits


def generate_identifier(length: int = IDENTIFIER_LENGTH) -> str:
    """Generate a random alphanumeric device identifier"""
    return "".join(secrets.choice(_IDENTIFIER_ALPHABET) for _ in range(length))


def generate_device_fingerprint() -> Dict[str, Any]:
    """Build a device fingerprint with a freshly generated identifier

    Returns:
        The fixed device profile plus a new random "identifier"
    """
    fingerprint = dict(DEVICE_PROFILE)
    fingerprint["identifier"] = generate_identifier()
    return fingerprint


def serialize_fingerprint(fingerprint: Dict[str, Any]) -> str:
    return json.dumps(fingerprint, separators=(",", ":"))
