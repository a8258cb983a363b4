"""
SessionLog Backend — Resource Definitions
===========================================

What:  Explicit description of every REST resource the service exposes.
Why:   The controller, the store and the router are generic; a `Resource`
       value tells them which ORM model and which schemas to use. Nothing is
       looked up by name from an implicit registry.
Who:   Passed to `ResourceController`, `SqlAlchemyStore` and
       `build_resource_router()`; `RESOURCES` is iterated by main.py.

Adding a resource:
    1. Declare the ORM model under sessionlog/models/
    2. Declare `<Name>Write` / `<Name>Read` schemas under sessionlog/schemas/
    3. Add a `Resource(...)` here and append it to RESOURCES
    4. Add an Alembic migration
"""

from dataclasses import dataclass
from typing import Tuple, Type

from pydantic import BaseModel

from sessionlog.database import Base
from sessionlog.models.log import Log
from sessionlog.models.session import Session
from sessionlog.schemas.log import LogRead, LogWrite
from sessionlog.schemas.session import SessionRead, SessionWrite

# Fields callers may never set: the store assigns them once at insert
PROTECTED_FIELDS: Tuple[str, ...] = ("id", "created_at")


@dataclass(frozen=True)
class Resource:
    """
    One named resource collection.

    Attributes:
        name:             Plural URL segment (`/api/<name>`)
        label:            Singular noun used in log and error messages
        model:            SQLAlchemy model the store reads and writes
        write_schema:     Validates create/upsert bodies and patched documents
        read_schema:      Serializes stored records
        protected_fields: Stripped from every inbound body and patch
    """

    name: str
    label: str
    model: Type[Base]
    write_schema: Type[BaseModel]
    read_schema: Type[BaseModel]
    protected_fields: Tuple[str, ...] = PROTECTED_FIELDS


SESSIONS = Resource(
    name="sessions",
    label="session",
    model=Session,
    write_schema=SessionWrite,
    read_schema=SessionRead,
)

LOGS = Resource(
    name="logs",
    label="log",
    model=Log,
    write_schema=LogWrite,
    read_schema=LogRead,
)

RESOURCES: Tuple[Resource, ...] = (SESSIONS, LOGS)
