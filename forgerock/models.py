"""Data models for the ForgeRock authentication flow"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import ProtocolError, StorageError


@dataclass
class ValuePair:
    """A name/value pair inside a callback

    Observed values are strings, numbers and arrays of strings.
    """
    name: str
    value: Any = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValuePair":
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise ProtocolError(f"Invalid callback value pair: {data!r}")
        return cls(name=data["name"], value=data.get("value", ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass
class Callback:
    """One typed challenge the client must answer

    Attributes:
        type: Callback type tag, e.g. "NameCallback"
        output: Server-provided context, read-only
        input: Fields the client fills in
        id: Identifier that disambiguates repeated callbacks of one type
    """
    type: str
    output: List[ValuePair] = field(default_factory=list)
    input: List[ValuePair] = field(default_factory=list)
    id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Callback":
        if not isinstance(data, dict) or not isinstance(data.get("type"), str):
            raise ProtocolError(f"Invalid callback: {data!r}")
        return cls(
            type=data["type"],
            output=[ValuePair.from_dict(pair) for pair in data.get("output") or []],
            input=[ValuePair.from_dict(pair) for pair in data.get("input") or []],
            id=data.get("_id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "output": [pair.to_dict() for pair in self.output],
            "input": [pair.to_dict() for pair in self.input],
        }
        if self.id is not None:
            data["_id"] = self.id
        return data

    def get_output(self, name: str) -> Optional[ValuePair]:
        """Find an output pair by name"""
        for pair in self.output:
            if pair.name == name:
                return pair
        return None


@dataclass
class AuthStep:
    """One round of the authentication dialogue

    While the dialogue continues the server sends an `authId` plus callbacks;
    the final response instead carries the session token as `tokenId`.
    """
    auth_id: Optional[str] = None
    callbacks: List[Callback] = field(default_factory=list)
    token_id: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return bool(self.token_id)

    @property
    def is_empty(self) -> bool:
        return not self.auth_id and not self.callbacks

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthStep":
        if not isinstance(data, dict):
            raise ProtocolError(f"Expected a JSON object, got {type(data).__name__}")
        callbacks = data.get("callbacks") or []
        if not isinstance(callbacks, list):
            raise ProtocolError("Authentication step 'callbacks' is not a list")
        return cls(
            auth_id=data.get("authId"),
            callbacks=[Callback.from_dict(callback) for callback in callbacks],
            token_id=data.get("tokenId"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Payload echoed back to the server, callbacks in their original order"""
        return {
            "authId": self.auth_id,
            "callbacks": [callback.to_dict() for callback in self.callbacks],
        }


@dataclass
class Credentials:
    """Username and password for one login attempt. Never persisted."""
    username: str
    password: str = field(repr=False)



def _is_token(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


@dataclass(frozen=True)
class TokenPair:
    """OAuth2 access and refresh tokens, stored together as one record"""
    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPair":
        access_token = data.get("access_token") if isinstance(data, dict) else None
        refresh_token = data.get("refresh_token") if isinstance(data, dict) else None
        if not _is_token(access_token) or not _is_token(refresh_token):
            raise ValueError("Token record requires non-empty string access_token and refresh_token")
        return cls(access_token=access_token, refresh_token=refresh_token)

    def to_dict(self) -> Dict[str, str]:
        return {"access_token": self.access_token, "refresh_token": self.refresh_token}

    @classmethod
    def from_json(cls, contents: str) -> "TokenPair":
        """Parse the stored credential record"""
        try:
            return cls.from_dict(json.loads(contents))
        except (json.JSONDecodeError, ValueError) as e:
            raise StorageError(f"Stored credentials are not a valid token record: {e}") from e

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class Claims:
    """Claims read from a token without verifying its signature

    Attributes:
        subject: The `sub` claim, used as the account GUID by the vendor API
        expires_at: The `exp` claim as a Unix timestamp in seconds
    """
    subject: str
    expires_at: int
