"""
API Authentication Module
=========================

Exchanges OAuth2 client credentials for a short-lived bearer token.

Design Decisions:
-----------------
1. Authentication failure is fatal: the caller receives an
   AuthenticationError and no data is fetched
2. A single attempt is made; there is no retry or token refresh because a
   run is a single short batch
"""

from typing import Optional, Callable

import requests

from ..config import ApiConfig


TOKEN_PATH = "/oauth2/token"


class AuthenticationError(RuntimeError):
    """Raised when the credential exchange fails."""
    pass


class Authenticator:
    """Client-credentials authenticator.

    Usage:
        auth = Authenticator(client_id, client_secret)
        token = auth.get_token()
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        config: Optional[ApiConfig] = None,
        verbose: bool = True,
        progress_callback: Optional[Callable[[str], None]] = None
    ):
        """Initialize the authenticator.

        Args:
            client_id: API client ID (falls back to config)
            client_secret: API client secret (falls back to config)
            config: ApiConfig with base URL and timeout
            verbose: Whether to print progress messages
            progress_callback: Optional callback for progress updates
        """
        self.config = config or ApiConfig()
        self.client_id = client_id or self.config.client_id
        self.client_secret = client_secret or self.config.client_secret
        self.verbose = verbose
        self.progress_callback = progress_callback

    def _log(self, message: str) -> None:
        """Log a message to console and/or callback."""
        if self.verbose:
            print(message)
        if self.progress_callback:
            self.progress_callback(message)

    @property
    def token_url(self) -> str:
        return f"{self.config.base_url}{TOKEN_PATH}"

    def get_token(self) -> str:
        """Request a bearer token.

        Returns:
            The access token string

        Raises:
            AuthenticationError: If credentials are missing, the request
                fails, or the response carries no token
        """
        if not self.client_id or not self.client_secret:
            raise AuthenticationError(
                "API client ID and secret are required "
                "(set FALCON_CLIENT_ID and FALCON_CLIENT_SECRET)"
            )

        self._log(f"[*] Authenticating against {self.config.base_url}")

        try:
            response = requests.post(
                self.token_url,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
                headers={"Accept": "application/json"},
                timeout=self.config.timeout
            )
        except requests.exceptions.RequestException as e:
            raise AuthenticationError(f"Token request failed: {e}") from e

        if response.status_code not in (200, 201):
            raise AuthenticationError(
                f"Token request rejected with HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            token = response.json().get("access_token")
        except ValueError as e:
            raise AuthenticationError("Token response is not valid JSON") from e

        if not token:
            raise AuthenticationError("Token response did not include an access token")

        self._log("[+] Authenticated successfully")
        return token
