"""OAuth2 authorization for a ForgeRock session token

"Authorize" here is the OAuth2 authorize endpoint, not the callback-driven
authentication that produced the session token.
"""

import logging
from urllib.parse import parse_qs, urlparse

import httpx

from .constants import (
    AUTHORIZE_ENDPOINT,
    CLIENT_ID,
    CODE_CHALLENGE,
    CODE_CHALLENGE_METHOD,
    REDIRECT_URI,
    SCOPE,
    SESSION_COOKIE,
)
from .errors import AuthorizationFailedError

logger = logging.getLogger(__name__)


def build_authorize_params() -> dict:
    """Standard OAuth2 authorize query parameters for the OneApp client"""
    return {
        "client_id": CLIENT_ID,
        "scope": SCOPE,
        "response_type": "code",
        "redirect_uri": REDIRECT_URI,
        "code_challenge": CODE_CHALLENGE,
        "code_challenge_method": CODE_CHALLENGE_METHOD,
    }


def extract_code_from_location(location: str) -> str:
    """Pull the authorization code out of a redirect location

    Args:
        location: Value of the Location header, e.g.
            com.toyota.oneapp:/oauth2Callback?code=...

    Returns:
        The authorization code

    Raises:
        AuthorizationFailedError: If the location carries no code
    """
    params = parse_qs(urlparse(location).query)
    codes = params.get("code")
    if not codes or not codes[0]:
        error = params.get("error", ["unknown"])[0]
        raise AuthorizationFailedError(f"Redirect location has no authorization code (error: {error})")
    return codes[0]


async def request_authorization_code(client: httpx.AsyncClient, session_token: str) -> str:
    """Exchange a session token for an OAuth2 authorization code

    The session token travels as the iPlanetDirectoryPro cookie. A
    successful request answers 302 Found with the code in the redirect.

    Args:
        client: HTTP client
        session_token: tokenId obtained from authentication

    Returns:
        Authorization code

    Raises:
        AuthorizationFailedError: On any response other than a usable redirect
    """
    logger.info("Requesting OAuth2 authorization code")

    try:
        response = await client.get(
            AUTHORIZE_ENDPOINT,
            params=build_authorize_params(),
            headers={"Cookie": f"{SESSION_COOKIE}={session_token}"},
            follow_redirects=False,
        )
    except httpx.RequestError as e:
        logger.error(f"Authorization request failed: {e}")
        raise AuthorizationFailedError(f"Authorization request failed: {e}") from e

    if response.status_code != httpx.codes.FOUND:
        logger.error(f"Authorization failed with status {response.status_code}: {response.text}")
        raise AuthorizationFailedError(
            f"Expected a redirect from authorize, got status {response.status_code}",
            status_code=response.status_code,
        )

    location = response.headers.get("Location")
    if not location:
        raise AuthorizationFailedError(
            "Authorization redirect has no Location header",
            status_code=response.status_code,
        )

    code = extract_code_from_location(location)
    logger.info("Obtained OAuth2 authorization code")
    return code
