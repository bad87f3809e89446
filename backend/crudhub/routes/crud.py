"""
CrudHub Backend — Generic CRUD Router Factory
===============================================

What:  create_crud_router(collection) returns an APIRouter with the five
       standard CRUD routes wired to that collection.
Why:   Every resource (teas, biscuits, games) reuses identical route logic.
       The resource name is chosen by whoever mounts the router under a prefix.
How:   Each handler performs exactly one Collection call and returns its result
       as JSON. Errors raised by the collection (NotFoundError,
       StoreUnavailableError, DatabaseError) reach the global handlers.

Routes (relative to the mount prefix, e.g. /api/teas):
    GET    ""           Index    → every item, insertion order
    GET    /{item_id}   Show     → one item
    POST   ""           Create   → the created item, with its new _id
    PUT    /{item_id}   Update   → the item after full replacement
    DELETE /{item_id}   Destroy  → the removed item

All successful responses are 200. Mutations uniformly return the single
affected item, never the whole collection.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Body

from crudhub.collections.base import Collection, Item
from crudhub.exceptions import ValidationError
from crudhub.schemas.api import ErrorResponse

logger = logging.getLogger(__name__)

_NOT_FOUND = {404: {"description": "Item not found", "model": ErrorResponse}}
_BAD_PAYLOAD = {400: {"description": "Body is not a JSON object", "model": ErrorResponse}}
_UNAVAILABLE = {503: {"description": "Storage backend unavailable", "model": ErrorResponse}}


def _require_object(payload: Any) -> Item:
    """
    The only payload rule: it must be a JSON object.

    Item content is never inspected; arrays, strings and numbers are rejected
    because they have nowhere to carry an `_id`.
    """
    if not isinstance(payload, dict):
        raise ValidationError(
            message="Item payload must be a JSON object",
            field="body",
            context={"received_type": type(payload).__name__},
        )
    return payload


def create_crud_router(collection: Collection) -> APIRouter:
    """
    Build the five CRUD routes for one collection.

    The returned router holds a reference to `collection` for the lifetime of
    the process and never branches on its concrete type.

    Example:
        app.include_router(create_crud_router(teas), prefix="/api/teas")
    """
    router = APIRouter(responses=_UNAVAILABLE)
    name = collection.name

    @router.get(
        "",
        summary=f"List {name}",
        operation_id=f"list_{name}",
    )
    async def index() -> List[Item]:
        return await collection.find_all()

    @router.get(
        "/{item_id}",
        responses=_NOT_FOUND,
        summary=f"Get one of {name}",
        operation_id=f"show_{name}",
    )
    async def show(item_id: str) -> Item:
        return await collection.find_one(item_id)

    @router.post(
        "",
        responses=_BAD_PAYLOAD,
        summary=f"Add to {name}",
        operation_id=f"create_{name}",
    )
    async def create(payload: Any = Body(...)) -> Item:
        created = await collection.insert(_require_object(payload))
        logger.info("Created %s item %s", name, created["_id"])
        return created

    @router.put(
        "/{item_id}",
        responses={**_NOT_FOUND, **_BAD_PAYLOAD},
        summary=f"Replace one of {name}",
        operation_id=f"update_{name}",
    )
    async def update(item_id: str, payload: Any = Body(...)) -> Item:
        updated = await collection.update(item_id, _require_object(payload))
        logger.info("Updated %s item %s", name, item_id)
        return updated

    @router.delete(
        "/{item_id}",
        responses=_NOT_FOUND,
        summary=f"Remove one of {name}",
        operation_id=f"destroy_{name}",
    )
    async def destroy(item_id: str) -> Item:
        removed = await collection.delete(item_id)
        logger.info("Deleted %s item %s", name, item_id)
        return removed

    return router
