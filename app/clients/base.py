import httpx

from app.core.config import settings


class ServiceClient:
    """
    Thin synchronous wrapper around an httpx.Client bound to one downstream service.

    Pass ``client`` to reuse a configured transport (tests use httpx.MockTransport);
    otherwise one is created for ``base_url`` and owned by this wrapper.
    """

    def __init__(
        self,
        base_url: str,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ):
        self._owns_client: bool = client is None
        self._client: httpx.Client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS,
        )

    def _get(self, url: str) -> httpx.Response:
        response = self._client.get(url)
        _ = response.raise_for_status()
        return response

    def _post(self, url: str, **kwargs) -> httpx.Response:
        response = self._client.post(url, **kwargs)
        _ = response.raise_for_status()
        return response

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
