"""Exceptions raised while authenticating against ForgeRock"""

from typing import Any, Dict, Optional


class ForgeRockError(Exception):
    """Base class for every login failure"""


# Claim extraction

class ClaimError(ForgeRockError):
    """A token's claims could not be used"""


class MalformedTokenError(ClaimError):
    """Token is not a readable three-part JWT with `sub` and `exp`"""


class ExpiredTokenError(ClaimError):
    """Token decoded fine but its `exp` is in the past

    Attributes:
        claims: The decoded payload, for callers that still need it
    """

    def __init__(self, message: str, claims: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.claims = claims or {}


# Callback interpretation

class InterpretError(ForgeRockError):
    """A callback could not be answered"""

    def __init__(self, message: str, callback_type: Optional[str] = None):
        super().__init__(message)
        self.callback_type = callback_type


class UnhandledPromptError(InterpretError):
    """A known callback type carried a prompt we do not answer"""

    def __init__(self, callback_type: str, prompt: Any):
        super().__init__(f"Unhandled {callback_type} prompt: {prompt!r}", callback_type)
        self.prompt = prompt


class UnknownCallbackTypeError(InterpretError):
    """The server sent a callback type we do not support"""

    def __init__(self, callback_type: str):
        super().__init__(f"Unknown callback type: {callback_type!r}", callback_type)


class UnansweredCallbackError(InterpretError):
    """A callback was left without a usable answer"""


# Network flows

class AuthError(ForgeRockError):
    """The authentication or OAuth2 exchange failed

    Attributes:
        status_code: HTTP status of the failing response, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(AuthError):
    """The server returned a step we cannot continue from"""


class TooManyRoundsError(AuthError):
    """The callback dialogue did not finish within the round limit"""


class TransportError(AuthError):
    """An HTTP exchange failed or returned a non-success status"""


class AuthorizationFailedError(AuthError):
    """No authorization code could be obtained for the session token"""


class TokenExchangeFailedError(AuthError):
    """The token endpoint did not return a usable token pair"""


# Persistence

class StorageError(ForgeRockError):
    """The credential store could not be read or written"""
