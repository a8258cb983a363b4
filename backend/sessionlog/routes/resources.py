"""
SessionLog Backend — Resource Route Handlers
==============================================

What:  Builds the REST router of one Resource, Rails-style:

    GET     /api/<name>          ->  index
    POST    /api/<name>          ->  create
    GET     /api/<name>/{id}     ->  show
    PUT     /api/<name>/{id}     ->  upsert
    PATCH   /api/<name>/{id}     ->  patch
    DELETE  /api/<name>/{id}     ->  destroy

How:   Handlers are thin. They build a SqlAlchemyStore over the request's
       session, call the ResourceController, and pick the status code.
       Errors raised by the controller are answered by the handlers
       registered in main.py.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from sessionlog.database import get_db_session
from sessionlog.resources import Resource
from sessionlog.schemas.common import ErrorResponse
from sessionlog.services.resource_controller import ResourceController
from sessionlog.services.store import SqlAlchemyStore

logger = logging.getLogger(__name__)

_NOT_FOUND = {404: {"description": "Record not found (empty body)"}}
_SERVER_ERROR = {500: {"description": "Unhandled error", "model": ErrorResponse}}


def build_resource_router(resource: Resource) -> APIRouter:
    """
    Create the router exposing `resource` under /api/<resource.name>.

    Args:
        resource: The Resource whose model and schemas the routes use.

    Returns:
        An APIRouter ready for `app.include_router()`.
    """
    controller = ResourceController(resource)
    read_schema = resource.read_schema
    router = APIRouter(prefix=f"/api/{resource.name}", tags=[resource.name.capitalize()])

    async def get_store(db: AsyncSession = Depends(get_db_session)) -> SqlAlchemyStore:
        return SqlAlchemyStore(resource.model, db)

    @router.get(
        "",
        name=f"{resource.name}_index",
        response_model=List[read_schema],
        responses={**_SERVER_ERROR},
        summary=f"List all {resource.name}",
    )
    async def index(store: SqlAlchemyStore = Depends(get_store)):
        return await controller.index(store)

    @router.get(
        "/{record_id}",
        name=f"{resource.name}_show",
        response_model=read_schema,
        responses={**_NOT_FOUND, **_SERVER_ERROR},
        summary=f"Get one {resource.label}",
    )
    async def show(record_id: int, store: SqlAlchemyStore = Depends(get_store)):
        return await controller.show(store, record_id)

    @router.post(
        "",
        name=f"{resource.name}_create",
        status_code=status.HTTP_201_CREATED,
        response_model=read_schema,
        responses={**_SERVER_ERROR},
        summary=f"Create a {resource.label}",
    )
    async def create(
        body: Dict[str, Any] = Body(...),
        store: SqlAlchemyStore = Depends(get_store),
    ):
        return await controller.create(store, body)

    @router.put(
        "/{record_id}",
        name=f"{resource.name}_upsert",
        response_model=read_schema,
        responses={**_SERVER_ERROR},
        summary=f"Create or replace the {resource.label} at this id",
    )
    async def upsert(
        record_id: int,
        body: Dict[str, Any] = Body(...),
        store: SqlAlchemyStore = Depends(get_store),
    ):
        return await controller.upsert(store, record_id, body)

    @router.patch(
        "/{record_id}",
        name=f"{resource.name}_patch",
        response_model=read_schema,
        responses={**_NOT_FOUND, **_SERVER_ERROR},
        summary=f"Apply a JSON-Patch document to a {resource.label}",
        description=(
            "Body is an RFC 6902 array of operations (add, remove, replace, move, "
            "copy, test). Operations that would write `id` or `created_at` are "
            "ignored; `test` operations on them are still checked. If any "
            "operation fails or is not an object, the record is left unchanged "
            "and the response is a 500."
        ),
    )
    async def patch(
        record_id: int,
        operations: List[Any] = Body(...),
        store: SqlAlchemyStore = Depends(get_store),
    ):
        return await controller.patch(store, record_id, operations)

    @router.delete(
        "/{record_id}",
        name=f"{resource.name}_destroy",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses={**_NOT_FOUND, **_SERVER_ERROR},
        summary=f"Delete a {resource.label}",
    )
    async def destroy(record_id: int, store: SqlAlchemyStore = Depends(get_store)):
        await controller.destroy(store, record_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
