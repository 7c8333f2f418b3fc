from typing import Any

import httpx

from japan_transfer_mcp.data.config import JorudanConfig
from japan_transfer_mcp.errors import RemoteFetchError
from japan_transfer_mcp.models.places import SuggestResult
from japan_transfer_mcp.models.routes import RouteSearchPage


class JorudanClient:
    """Async HTTP client for the J-Route Planner suggest and route search pages.

    Usage:
        async with JorudanClient(config) as client:
            suggest = await client.fetch_suggest("東京")
    """

    def __init__(self, config: JorudanConfig):
        """Initialize the client.

        Args:
            config: Configuration with endpoint URLs, timeout and user agent.
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "JorudanClient":
        """Enter async context - create HTTP client."""
        headers = {"User-Agent": self._config.user_agent}
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=self._config.request_timeout_seconds,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_suggest(self, query: str, format: str = "json") -> SuggestResult:
        """Fetch place-name candidates for a query.

        Returns:
            SuggestResult with railway, bus and spot candidates.

        Raises:
            RuntimeError: If client not initialized.
            RemoteFetchError: If the HTTP request fails.
        """
        response = await self._get(
            self._config.suggest_url, {"query": query, "format": format}
        )
        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteFetchError(f"Suggest endpoint returned invalid JSON: {e}") from e

        return SuggestResult.model_validate(payload)

    async def fetch_route_search(self, params: dict[str, Any]) -> RouteSearchPage:
        """Fetch the route search result page.

        Args:
            params: Site query parameters (see build_route_search_params).

        Returns:
            RouteSearchPage with the resolved URL and the raw HTML.

        Raises:
            RuntimeError: If client not initialized.
            RemoteFetchError: If the HTTP request fails.
        """
        response = await self._get(self._config.route_search_url, params)
        return RouteSearchPage(url=str(response.url), data=response.text)

    async def _get(self, url: str, params: dict[str, Any]) -> httpx.Response:
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RemoteFetchError(f"Request to {url} failed: {e}") from e
        return response
