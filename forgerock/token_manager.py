"""Credential lifecycle: reuse, refresh or re-authenticate"""

import logging
from typing import Any, Dict, Optional

import httpx

from api.client import ApiClient
from .authenticate import Authenticator
from .authorization import request_authorization_code
from .callbacks import DEFAULT_LOCALE, Prompter
from .errors import ExpiredTokenError
from .jwt_utils import extract_claims
from .models import Credentials, TokenPair
from .token_exchange import exchange_code_for_tokens, refresh_tokens

logger = logging.getLogger(__name__)


class CredentialManager:
    """Hands out an authenticated session, touching the network only when needed

    Policy, in order:
    1. Stored access token still valid: use it.
    2. Access token expired but refresh token valid: refresh.
    3. Nothing stored, or refresh token expired: log in interactively.

    A malformed stored token is reported rather than silently replaced.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        prompter: Prompter,
        secret_prompter: Optional[Prompter] = None,
        storage=None,
        gateway_key: Optional[str] = None,
        locale: str = DEFAULT_LOCALE,
        authenticator: Optional[Authenticator] = None,
    ):
        """Initialize the credential manager

        Args:
            client: HTTP client shared by every request of a login
            prompter: Asks the user for visible input (username, passcodes)
            secret_prompter: Asks the user for hidden input (default: prompter)
            storage: TokenStorage instance (default: keyring-backed)
            gateway_key: API gateway key placed on the returned session
            locale: Locale reported during authentication
            authenticator: Authenticator to use (default: one built on client)
        """
        if storage is None:
            from utils.storage import TokenStorage
            storage = TokenStorage()

        self.client = client
        self.prompter = prompter
        self.secret_prompter = secret_prompter or prompter
        self.storage = storage
        self.gateway_key = gateway_key
        self.authenticator = authenticator or Authenticator(client, locale=locale)

    async def login(self) -> ApiClient:
        """Return a session built from a valid access token

        Raises:
            MalformedTokenError: If a stored token cannot be read
            StorageError: If the secret store fails
            InterpretError, AuthError: If a network flow fails
        """
        stored = self.storage.load_tokens()
        if stored is None:
            logger.info("No stored credentials, logging in")
            return await self._login_interactively()

        try:
            claims = extract_claims(stored.access_token)
        except ExpiredTokenError:
            logger.info("Stored access token has expired")
        else:
            logger.debug("Using stored access token")
            return ApiClient.from_claims(stored.access_token, claims, self.gateway_key)

        try:
            extract_claims(stored.refresh_token)
        except ExpiredTokenError:
            logger.info("Refresh token has expired too, logging in again")
            return await self._login_interactively()

        refreshed = await refresh_tokens(self.client, stored.refresh_token)
        return self._store_session(refreshed)

    async def _login_interactively(self) -> ApiClient:
        """Full flow: prompt, authenticate, authorize, exchange"""
        credentials = Credentials(
            username=self.prompter("your username").rstrip("\r\n"),
            password=self.secret_prompter("your password").rstrip("\r\n"),
        )

        session_token = await self.authenticator.authenticate(credentials, self.prompter)
        code = await request_authorization_code(self.client, session_token)
        tokens = await exchange_code_for_tokens(self.client, code)
        return self._store_session(tokens)

    def _store_session(self, tokens: TokenPair) -> ApiClient:
        """Validate a freshly issued pair, persist it and build the session"""
        # Nothing is written if the new access token is unusable
        claims = extract_claims(tokens.access_token)
        self.storage.save_tokens(tokens)
        logger.info(f"Stored new credentials for {claims.subject}")
        return ApiClient.from_claims(tokens.access_token, claims, self.gateway_key)

    def logout(self) -> None:
        """Forget stored credentials"""
        self.storage.clear_tokens()

    def get_status(self) -> Dict[str, Any]:
        """Stored token state, without secrets"""
        return self.storage.get_status()
