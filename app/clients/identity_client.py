from typing import Any

import httpx

from app.clients.base import ServiceClient
from app.core.config import settings


class IdentityClient(ServiceClient):
    """
    Requests access tokens from the identity provider's token endpoint.

    Uses the OAuth2 password grant with the service's fixed client credentials,
    sent form-encoded.
    """

    def __init__(
        self,
        token_url: str | None = None,
        client: httpx.Client | None = None,
        client_id: str | None = None,
        username: str | None = None,
        password: str | None = None,
    ):
        self.token_url: str = token_url or settings.IDENTITY_TOKEN_URL
        self.client_id: str = client_id or settings.IDENTITY_CLIENT_ID
        self.username: str = username or settings.IDENTITY_USERNAME
        self.password: str = password or settings.IDENTITY_PASSWORD
        super().__init__("", client)

    def request_token(self) -> dict[str, Any]:
        return self._post(
            self.token_url,
            data={
                "grant_type": "password",
                "client_id": self.client_id,
                "username": self.username,
                "password": self.password,
            },
        ).json()
