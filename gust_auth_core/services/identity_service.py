"""
Identity exchange against GitHub's OAuth web flow.

Turns an authorization code into a provider access token and the access
token into a PrincipalIdentity. No retries: a failed exchange restarts the
whole handshake.
"""

from typing import Any, Dict, Optional, Tuple
from urllib.parse import parse_qs

import requests

from ..config import OAuthConfig
from ..context.operation_context import operation
from ..exceptions import ExchangeFailedError, IdentityLookupFailedError
from ..schemas.principal_schema import PrincipalIdentity
from ..utils.logger import get_logger
from .oauth_state_service import OAuthStateManager


class IdentityExchangeService:
    """
    GitHub OAuth client.

    Owns the state manager so that issuing a state and consuming it on the
    callback always go through the same pending set.
    """

    def __init__(
        self,
        config: OAuthConfig,
        state_manager: Optional[OAuthStateManager] = None,
        http: Optional[requests.Session] = None,
    ):
        self.config = config
        self.state_manager = state_manager or OAuthStateManager(config.state_ttl_seconds)
        self.http = http or requests.Session()
        self.logger = get_logger()

    def authorization_url(self, redirect_uri: Optional[str] = None) -> Tuple[str, str]:
        """
        Build the provider authorize URL with a freshly issued state.

        Returns:
            Tuple of (url, state)
        """
        self.config.require_configured()
        state = self.state_manager.issue()
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": redirect_uri or self.config.redirect_uri,
            "state": state,
            "scope": self.config.scope,
        }
        url = requests.Request("GET", self.config.authorize_url, params=params).prepare().url
        return url, state

    @operation()
    def exchange_code(self, code: str, state: str, redirect_uri: Optional[str] = None) -> str:
        """
        Trade an authorization code for a provider access token.

        The state is consumed first, so it is spent even if the provider call
        fails afterwards.

        Raises:
            InvalidStateError: If the state is not pending
            ExchangeFailedError: On transport failure or when no token is returned
        """
        self.state_manager.consume(state)
        self.config.require_configured()

        form = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "code": code,
            "redirect_uri": redirect_uri or self.config.redirect_uri,
        }

        try:
            response = self.http.post(
                self.config.token_url,
                data=form,
                headers={"Accept": "application/json"},
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise ExchangeFailedError(f"Token request failed: {str(e)}", cause=e) from e

        payload = self._parse_token_response(response)
        access_token = payload.get("access_token")
        if not access_token:
            raise ExchangeFailedError(
                payload.get("error_description") or "No access token received",
                provider_error=payload.get("error"),
                http_status=response.status_code,
            )

        self.logger.info("OAuth code exchanged", extra={"http_status": response.status_code})
        return access_token

    @operation()
    def resolve_identity(self, access_token: str) -> PrincipalIdentity:
        """
        Fetch the identity behind a provider access token.

        Raises:
            IdentityLookupFailedError: On transport failure, non-200 status,
                malformed body, or a body without id/login
        """
        try:
            response = self.http.get(
                self.config.user_url,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise IdentityLookupFailedError(f"User request failed: {str(e)}", cause=e) from e

        if response.status_code != 200:
            raise IdentityLookupFailedError(
                f"Failed to get user info: HTTP {response.status_code}",
                http_status=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise IdentityLookupFailedError("Malformed user info response", cause=e) from e

        if not isinstance(body, dict):
            raise IdentityLookupFailedError("Malformed user info response")

        external_id = self._parse_external_id(body.get("id"))
        login = body.get("login")
        if external_id is None or not login:
            raise IdentityLookupFailedError("User info is missing id or login")

        return PrincipalIdentity(
            external_id=external_id,
            login=login,
            name=body.get("name"),
            email=body.get("email"),
            avatar_url=body.get("avatar_url"),
            access_token=access_token,
        )

    @staticmethod
    def _parse_external_id(value: Any) -> Optional[int]:
        """Provider ids arrive as numbers or digit strings; anything else is rejected."""
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            value = value.strip()
            if value.isascii() and value.isdigit():
                return int(value)
        return None

    def _parse_token_response(self, response: requests.Response) -> Dict[str, Any]:
        """Decode a token response that may be JSON or form-encoded."""
        content_type = response.headers.get("Content-Type", "")
        if "json" in content_type:
            try:
                body = response.json()
            except ValueError:
                return {}
            return body if isinstance(body, dict) else {}

        return {key: values[0] for key, values in parse_qs(response.text).items() if values}
