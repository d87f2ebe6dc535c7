"""
Google OAuth 2.0 sign-in.

The browser is sent to Google's consent screen and comes back with an
authorization code. The code is exchanged for an access token, and the
token is handed to the backend's Google login. Google Identity Services
buttons post an ID token instead, which is checked against the tokeninfo
endpoint before it is forwarded.
"""
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_SCOPE = "openid email profile"


class GoogleAuthError(Exception):
    """Google sign-in could not be completed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GoogleOAuth:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.client_id)

    def _ensure_configured(self) -> None:
        if not self.configured:
            raise GoogleAuthError("Google sign-in is not configured")

    def authorization_url(self, state: str) -> str:
        self._ensure_configured()
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": GOOGLE_SCOPE,
            "state": state,
            "prompt": "select_account",
        }
        return str(httpx.URL(GOOGLE_AUTH_URL, params=params))

    async def exchange_code(self, code: str) -> str:
        """Trade an authorization code for an access token."""
        self._ensure_configured()
        data = {
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
        }
        payload = await self._call("POST", GOOGLE_TOKEN_URL, data=data)
        access_token = payload.get("access_token")
        if not access_token:
            raise GoogleAuthError("Failed to get access token")
        return access_token

    async def verify_id_token(self, credential: str) -> Dict[str, Any]:
        """Check an ID token with Google and return its claims."""
        self._ensure_configured()
        claims = await self._call("GET", GOOGLE_TOKENINFO_URL, params={"id_token": credential})
        if claims.get("aud") != self.client_id:
            logger.warning("Rejected Google ID token issued for %s", claims.get("aud"))
            raise GoogleAuthError("Google credential was issued for another application")
        return claims

    async def _call(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Google %s %s failed: %s", method, url, exc)
                raise GoogleAuthError("Google login failed") from exc
