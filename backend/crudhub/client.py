"""
CrudHub Backend — Resource Client
===================================

What:  Thin async HTTP wrappers mirroring the five CRUD operations of one
       resource, for front-ends, scripts and other services.
How:   httpx.AsyncClient; JSON in, JSON out. A 404 becomes NotFoundError, any
       other error status raises httpx.HTTPStatusError.

Example:
    async with ResourceClient("games") as games:
        created = await games.create_item({"name": "Chess"})
        await games.delete_item(created["_id"])
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from crudhub.exceptions import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:5000/api/"

Item = Dict[str, Any]


class ResourceClient:
    """
    Client for one resource mounted at <base_url><resource>.

    Pass `client` to reuse an existing httpx.AsyncClient (its base_url must
    point at the API prefix); otherwise one is created and owned here.
    """

    def __init__(
        self,
        resource: str,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.resource = resource
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url if base_url.endswith("/") else base_url + "/",
            timeout=timeout,
        )

    async def __aenter__(self) -> "ResourceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_items(self) -> List[Item]:
        return await self._request("GET", self.resource)

    async def get_item(self, item_id: str) -> Item:
        return await self._request("GET", self._item_path(item_id), item_id=item_id)

    async def create_item(self, item: Item) -> Item:
        return await self._request("POST", self.resource, json=item)

    async def update_item(self, item_id: str, item: Item) -> Item:
        return await self._request("PUT", self._item_path(item_id), json=item, item_id=item_id)

    async def delete_item(self, item_id: str) -> Item:
        return await self._request("DELETE", self._item_path(item_id), item_id=item_id)

    def _item_path(self, item_id: str) -> str:
        return f"{self.resource}/{item_id}"

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        item_id: Optional[str] = None,
    ) -> Any:
        response = await self._client.request(method, path, json=json)
        if response.status_code == 404:
            raise NotFoundError(resource=self.resource, resource_id=item_id)
        if response.is_error:
            logger.warning(
                "%s %s failed with %d: %s",
                method,
                response.request.url,
                response.status_code,
                response.text,
            )
        response.raise_for_status()
        return response.json()
