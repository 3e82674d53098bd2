"""TACO (Brazilian food composition table) data client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

DEFAULT_TACO_URL = (
    "https://raw.githubusercontent.com/marcelosanto/tabela_taco/main/"
    "tabela_alimentos.json"
)


class TacoClient(Protocol):
    """Interface for downloading the raw TACO food table."""

    async def fetch_foods(self) -> list[dict[str, object]]:
        """Return every raw food row."""


@dataclass
class HttpxTacoClient(TacoClient):
    """HTTPX-backed TACO client."""

    data_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, data_url: str = DEFAULT_TACO_URL) -> "HttpxTacoClient":
        """Create a TACO client with a managed httpx session."""
        return cls(data_url=data_url, http_client=httpx.AsyncClient())

    async def fetch_foods(self) -> list[dict[str, object]]:
        """Download the TACO JSON table."""
        response = await self.http_client.get(self.data_url, timeout=30)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError("TACO payload must be a list of foods")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
