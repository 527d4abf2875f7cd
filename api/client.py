"""Authenticated session handed out by a successful login"""

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class ApiClient:
    """Credentials needed to call the vendor API

    Attributes:
        access_token: OAuth2 bearer token
        guid: The access token's `sub`, used as the account GUID by the API
        expires_at: Access token expiry as a Unix timestamp
        gateway_key: API gateway key supplied through configuration
    """
    access_token: str = field(repr=False)
    guid: str
    expires_at: int
    gateway_key: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_claims(
        cls,
        access_token: str,
        claims,
        gateway_key: Optional[str] = None,
    ) -> "ApiClient":
        """Build a session from an access token and its decoded Claims"""
        return cls(
            access_token=access_token,
            guid=claims.subject,
            expires_at=claims.expires_at,
            gateway_key=gateway_key or None,
        )

    def auth_headers(self) -> Dict[str, str]:
        """Headers identifying this session to the vendor API"""
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "X-GUID": self.guid,
        }
        if self.gateway_key:
            headers["X-API-Key"] = self.gateway_key
        return headers
