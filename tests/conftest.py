import base64
import json
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

import pytest


ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def build_jwt(payload: dict) -> str:
    header = {"alg": "RS256", "typ": "JWT"}

    def b64url(data: dict) -> str:
        raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")

    return f"{b64url(header)}.{b64url(payload)}.signature"


def token_expiring_in(seconds: int, sub: str = "guid-123") -> str:
    return build_jwt({"sub": sub, "exp": int(time.time()) + seconds})


class MemorySecretStore:
    """In-memory stand-in for the keyring, counting reads and writes"""

    def __init__(self, secrets: Optional[Dict[str, str]] = None):
        self.service = "memory"
        self.secrets = dict(secrets or {})
        self.reads = 0
        self.writes = 0

    def get_secret(self, name: str) -> Optional[str]:
        self.reads += 1
        return self.secrets.get(name)

    def set_secret(self, name: str, value: str) -> None:
        self.writes += 1
        self.secrets[name] = value

    def delete_secret(self, name: str) -> None:
        self.secrets.pop(name, None)


class ScriptedPrompter:
    """Answers prompts from a script and records every label asked"""

    def __init__(self, answers: Optional[Dict[str, str]] = None):
        self.answers = answers or {}
        self.asked: List[str] = []

    def __call__(self, label: str) -> str:
        self.asked.append(label)
        for key, answer in self.answers.items():
            if key in label:
                return answer
        raise AssertionError(f"Unexpected prompt: {label}")


@pytest.fixture
def memory_store():
    return MemorySecretStore()


@pytest.fixture
def prompter():
    return ScriptedPrompter({
        "username": "driver@example.com\n",
        "password": "hunter2\n",
        "passcode": "123456\n",
    })
