"""Token server API client."""

from typing import Any

import httpx

from token_server.store import MetaData


class TokenClientError(Exception):
    """Error reported by the token server."""

    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(message)


class TokenClient:
    """Async client for the token server HTTP API."""

    def __init__(self, base_url: str = "http://127.0.0.1:3666"):
        self._base_url = base_url.rstrip("/")

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send a request to the token server and return the raw response."""
        async with httpx.AsyncClient() as client:
            return await client.request(method, f"{self._base_url}{path}", **kwargs)

    async def health(self) -> bool:
        response = await self._request("GET", "/health")
        return response.status_code == 200

    async def create_token(self, meta: MetaData) -> str:
        """Store metadata and return the token issued for it."""
        response = await self._request("POST", "/token", json={"meta": meta})
        response.raise_for_status()
        return response.text

    async def update_token(self, token: str, meta: MetaData | None = None) -> dict[str, Any]:
        """Exchange a token for a new one, merging in updated metadata.

        Raises:
            TokenClientError: If the token is unknown or expired.
        """
        response = await self._request("PUT", "/token", json={"token": token, "meta": meta})
        if response.status_code == 404:
            body = response.json()
            raise TokenClientError(body.get("error", "InvalidToken"), body.get("code", "INVALID_TOKEN"))
        response.raise_for_status()
        return response.json()

    async def remove_token(self, token: str) -> None:
        response = await self._request("DELETE", "/token", json={"token": token})
        response.raise_for_status()

    async def dump(self) -> None:
        """Ask the server to log all live tokens."""
        response = await self._request("HEAD", "/dump")
        response.raise_for_status()

    async def shutdown(self) -> None:
        response = await self._request("GET", "/shutdown")
        response.raise_for_status()
