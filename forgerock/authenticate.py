"""ForgeRock callback-driven authentication

ForgeRock AM's authenticate route is a dialogue: every response carries a
set of callbacks the client must fill in and post back, until the server
answers with a session token (`tokenId`) instead.
"""

import json
import logging
from typing import Optional

import httpx

from .callbacks import DEFAULT_LOCALE, CallbackInterpreter, Prompter
from .constants import (
    ACCEPT_API_VERSION,
    AUTH_INDEX_TYPE,
    AUTH_INDEX_VALUE,
    AUTHENTICATE_ENDPOINT,
    MAX_AUTH_ROUNDS,
)
from .errors import ProtocolError, TooManyRoundsError, TransportError
from .models import AuthStep, Credentials

logger = logging.getLogger(__name__)


class Authenticator:
    """Drives the authenticate dialogue to a session token"""

    def __init__(
        self,
        client: httpx.AsyncClient,
        locale: str = DEFAULT_LOCALE,
        max_rounds: int = MAX_AUTH_ROUNDS,
        endpoint: str = AUTHENTICATE_ENDPOINT,
    ):
        """Initialize the authenticator

        Args:
            client: HTTP client used for every authenticate request
            locale: Locale reported to the server
            max_rounds: Maximum number of authenticate requests per attempt
            endpoint: Authenticate endpoint URL
        """
        self.client = client
        self.locale = locale
        self.max_rounds = max_rounds
        self.endpoint = endpoint

    async def authenticate(self, credentials: Credentials, prompter: Prompter) -> str:
        """Run the authentication dialogue

        The first request has an empty body; every later request echoes the
        previous step with its callbacks answered.

        Args:
            credentials: Username and password
            prompter: Used when the server asks for a one-time passcode

        Returns:
            The session token (ForgeRock `tokenId`)

        Raises:
            ProtocolError: If the server returns a step without callbacks or token
            TooManyRoundsError: If no token arrives within max_rounds requests
            TransportError: If a request fails or returns a non-success status
            InterpretError: If a callback cannot be answered
        """
        interpreter = CallbackInterpreter(credentials, prompter, self.locale)
        body = ""

        for round_number in range(1, self.max_rounds + 1):
            step = await self._submit(body, round_number)

            if step.is_final:
                logger.info(f"Authentication finished after {round_number} round(s)")
                return step.token_id

            if step.is_empty:
                raise ProtocolError(
                    f"Authentication round {round_number} returned neither callbacks nor a token"
                )

            # No request may follow the last round, so its callbacks go unanswered
            if round_number == self.max_rounds:
                break

            logger.debug(
                f"Round {round_number} callbacks: {[callback.type for callback in step.callbacks]}"
            )
            interpreter.interpret_step(step)
            body = json.dumps(step.to_dict())

        raise TooManyRoundsError(
            f"Authentication did not complete within {self.max_rounds} rounds"
        )

    async def _submit(self, body: str, round_number: int) -> AuthStep:
        """Post one authenticate request and parse the returned step"""
        try:
            response = await self.client.post(
                self.endpoint,
                params={
                    "authIndexType": AUTH_INDEX_TYPE,
                    "authIndexValue": AUTH_INDEX_VALUE,
                },
                headers={
                    "Content-Type": "application/json",
                    "Accept-API-Version": ACCEPT_API_VERSION,
                },
                content=body,
            )
        except httpx.RequestError as e:
            logger.error(f"Authentication request failed: {e}")
            raise TransportError(f"Authentication request failed: {e}") from e

        logger.debug(f"Authentication round {round_number} response status: {response.status_code}")

        # ForgeRock reports wrong passwords and expired dialogues as 401 with a JSON reason
        if not response.is_success:
            logger.error(f"Authentication failed with status {response.status_code}: {response.text}")
            raise TransportError(
                f"Authentication request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise ProtocolError(f"Authentication response is not JSON: {e}") from e

        return AuthStep.from_dict(payload)


async def authenticate(
    client: httpx.AsyncClient,
    credentials: Credentials,
    prompter: Prompter,
    locale: Optional[str] = None,
) -> str:
    """Authenticate with a one-off Authenticator

    Returns:
        The session token
    """
    authenticator = Authenticator(client, locale=locale or DEFAULT_LOCALE)
    return await authenticator.authenticate(credentials, prompter)
