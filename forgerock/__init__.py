"""
ForgeRock AM authentication for the Toyota OneApp identity provider
"""
from .constants import (
    AUTHENTICATE_ENDPOINT,
    AUTHORIZE_ENDPOINT,
    ACCESS_TOKEN_ENDPOINT,
    CLIENT_ID,
    REDIRECT_URI,
    SCOPE,
    MAX_AUTH_ROUNDS,
)
from .errors import (
    ForgeRockError,
    ClaimError,
    MalformedTokenError,
    ExpiredTokenError,
    InterpretError,
    UnhandledPromptError,
    UnknownCallbackTypeError,
    UnansweredCallbackError,
    AuthError,
    ProtocolError,
    TooManyRoundsError,
    TransportError,
    AuthorizationFailedError,
    TokenExchangeFailedError,
    StorageError,
)
from .models import (
    ValuePair,
    Callback,
    AuthStep,
    Credentials,
    TokenPair,
    Claims,
)
from .jwt_utils import (
    decode_jwt_payload,
    extract_claims,
    is_token_expired,
)
from .callbacks import (
    Prompter,
    CallbackInterpreter,
    interpret_callback,
    interpret_step,
)
from .authenticate import Authenticator, authenticate
from .authorization import request_authorization_code
from .token_exchange import exchange_code_for_tokens, refresh_tokens
from .token_manager import CredentialManager

__all__ = [
    # Constants
    "AUTHENTICATE_ENDPOINT",
    "AUTHORIZE_ENDPOINT",
    "ACCESS_TOKEN_ENDPOINT",
    "CLIENT_ID",
    "REDIRECT_URI",
    "SCOPE",
    "MAX_AUTH_ROUNDS",
    # Errors
    "ForgeRockError",
    "ClaimError",
    "MalformedTokenError",
    "ExpiredTokenError",
    "InterpretError",
    "UnhandledPromptError",
    "UnknownCallbackTypeError",
    "UnansweredCallbackError",
    "AuthError",
    "ProtocolError",
    "TooManyRoundsError",
    "TransportError",
    "AuthorizationFailedError",
    "TokenExchangeFailedError",
    "StorageError",
    # Models
    "ValuePair",
    "Callback",
    "AuthStep",
    "Credentials",
    "TokenPair",
    "Claims",
    # JWT Utilities
    "decode_jwt_payload",
    "extract_claims",
    "is_token_expired",
    # Callbacks
    "Prompter",
    "CallbackInterpreter",
    "interpret_callback",
    "interpret_step",
    # Flows
    "Authenticator",
    "authenticate",
    "request_authorization_code",
    "exchange_code_for_tokens",
    "refresh_tokens",
    # Lifecycle
    "CredentialManager",
]
