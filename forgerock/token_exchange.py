"""
ForgeRock OAuth2 token exchange and refresh
"""
import json
import logging
from typing import Dict

import httpx

from .constants import ACCESS_TOKEN_ENDPOINT, CLIENT_ID, CODE_VERIFIER, REDIRECT_URI
from .errors import TokenExchangeFailedError
from .models import TokenPair

logger = logging.getLogger(__name__)


async def _request_tokens(client: httpx.AsyncClient, params: Dict[str, str], action: str) -> dict:
    """POST to the access token endpoint and return the parsed JSON body"""
    try:
        # The OneApp client sends its grant as query parameters, not a form body
        response = await client.post(ACCESS_TOKEN_ENDPOINT, params=params)
    except httpx.RequestError as e:
        logger.error(f"Token {action} request failed: {e}")
        raise TokenExchangeFailedError(f"Token {action} request failed: {e}") from e

    logger.debug(f"Token {action} response status: {response.status_code}")

    if not response.is_success:
        logger.error(f"Token {action} failed with status {response.status_code}: {response.text}")
        raise TokenExchangeFailedError(
            f"Token {action} failed with status {response.status_code}",
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse token {action} response: {e}")
        raise TokenExchangeFailedError(f"Token {action} response is not JSON") from e

    if not isinstance(payload, dict):
        raise TokenExchangeFailedError(f"Token {action} response is not a JSON object")
    return payload


async def exchange_code_for_tokens(client: httpx.AsyncClient, code: str) -> TokenPair:
    """
    Exchange an authorization code for access and refresh tokens.

    Args:
        client: HTTP client
        code: Authorization code from the authorize redirect

    Returns:
        The issued TokenPair

    Raises:
        TokenExchangeFailedError: On any failure
    """
    logger.info("Exchanging authorization code for tokens")
    payload = await _request_tokens(
        client,
        {
            "client_id": CLIENT_ID,
            "redirect_uri": REDIRECT_URI,
            "grant_type": "authorization_code",
            "code_verifier": CODE_VERIFIER,
            "code": code,
        },
        "exchange",
    )

    try:
        tokens = TokenPair.from_dict(payload)
    except ValueError as e:
        raise TokenExchangeFailedError(f"Token exchange response missing required tokens: {e}") from e

    logger.info("Successfully exchanged authorization code for tokens")
    return tokens


async def refresh_tokens(client: httpx.AsyncClient, refresh_token: str) -> TokenPair:
    """
    Obtain a new token pair using a refresh token.

    Args:
        client: HTTP client
        refresh_token: Current, unexpired refresh token

    Returns:
        The new TokenPair; the old refresh token is kept if none is returned

    Raises:
        TokenExchangeFailedError: On any failure
    """
    logger.info("Refreshing OAuth2 tokens")
    payload = await _request_tokens(
        client,
        {
            "client_id": CLIENT_ID,
            "redirect_uri": REDIRECT_URI,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        },
        "refresh",
    )

    # The server may not rotate the refresh token
    if payload.get("refresh_token") in (None, ""):
        payload = dict(payload, refresh_token=refresh_token)

    try:
        tokens = TokenPair.from_dict(payload)
    except ValueError as e:
        raise TokenExchangeFailedError(f"Token refresh response has invalid tokens: {e}") from e

    logger.info("Successfully refreshed OAuth2 tokens")
    return tokens
