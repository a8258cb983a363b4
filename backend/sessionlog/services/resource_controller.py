"""
SessionLog Backend — Resource Controller
==========================================

What:  The six Rails-style operations over one resource collection:
       index, show, create, upsert, patch, destroy.
Why:   Every resource behaves the same way; only the model and the schemas
       differ, and those come from the `Resource` it is built with.
How:   Each call receives the request's PersistenceStore, does one
       independent operation, and returns read-schema objects. Failures are
       raised as application exceptions and answered by the global handlers:

           NotFoundError        → 404, empty body, nothing written
           ValidationError      → 500 with the failing operation / fields
           PersistenceError     → 500 with the store error

Patch Workflow:
    1. Drop operations that would write protected fields (id, created_at);
       `test` and copy-from reads of them are kept
    2. Load the record (404 if absent)
    3. Apply the operations to its JSON document (PatchResult)
    4. Re-validate the patched document with the write schema
    5. Copy the validated fields onto the record and save it in one write

    Steps 3 and 4 run before any attribute of the record is touched, so a
    rejected patch leaves the stored record exactly as it was.

Concurrency:
    Patch is find → mutate → save with no version check. Two concurrent
    patches of the same id can lose an update (last write wins).
"""

import logging
from typing import Any, Dict, List

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from sessionlog.exceptions import NotFoundError, ValidationError
from sessionlog.resources import Resource
from sessionlog.services.patching import (
    apply_patch,
    strip_protected,
    strip_protected_operations,
)
from sessionlog.services.store import PersistenceStore

logger = logging.getLogger(__name__)


class ResourceController:
    """
    Stateless request handler for one Resource.

    One instance per resource is built at app startup; it holds no
    per-request state, so concurrent requests share it safely.
    """

    def __init__(self, resource: Resource):
        self.resource = resource

    # ── Helpers ───────────────────────────────────────────────────────────

    def _serialize(self, record: Any) -> BaseModel:
        return self.resource.read_schema.model_validate(record)

    def _validate(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Run the write schema; schema errors become ValidationError."""
        try:
            return self.resource.write_schema.model_validate(fields).model_dump()
        except SchemaValidationError as e:
            raise ValidationError(
                message=f"Invalid {self.resource.label}: {e.error_count()} field error(s)",
                context={
                    "errors": e.errors(include_url=False, include_context=False),
                },
            ) from e

    async def _find_or_404(self, store: PersistenceStore, record_id: int) -> Any:
        record = await store.find_by_id(record_id)
        if record is None:
            raise NotFoundError(resource=self.resource.label, resource_id=record_id)
        return record

    # ── Operations ────────────────────────────────────────────────────────

    async def index(self, store: PersistenceStore) -> List[BaseModel]:
        """All records of the collection (possibly empty)."""
        records = await store.find_all()
        return [self._serialize(record) for record in records]

    async def show(self, store: PersistenceStore, record_id: int) -> BaseModel:
        """The record with `record_id`; NotFoundError if absent."""
        record = await self._find_or_404(store, record_id)
        return self._serialize(record)

    async def create(self, store: PersistenceStore, body: Dict[str, Any]) -> BaseModel:
        """Validate `body` and insert it; the store assigns the identity."""
        fields = self._validate(strip_protected(body, self.resource.protected_fields))
        record = await store.create(fields)
        logger.info("Created %s %s", self.resource.label, record.id)
        return self._serialize(record)

    async def upsert(
        self, store: PersistenceStore, record_id: int, body: Dict[str, Any]
    ) -> BaseModel:
        """
        Create the record at `record_id` or replace its writable fields.

        A body `id` never reaches the store: the path id is the only
        identity.
        """
        fields = self._validate(strip_protected(body, self.resource.protected_fields))
        record = await store.upsert(record_id, fields)
        logger.info("Upserted %s %s", self.resource.label, record_id)
        return self._serialize(record)

    async def patch(
        self, store: PersistenceStore, record_id: int, operations: List[Any]
    ) -> BaseModel:
        """
        Apply JSON-Patch `operations` to the record and persist the result.

        Raises:
            NotFoundError:    no record at `record_id`
            ValidationError:  an operation failed or the result violates the
                              write schema (nothing is written)
        """
        protected = self.resource.protected_fields
        operations = strip_protected_operations(operations, protected)

        record = await self._find_or_404(store, record_id)
        document = self._serialize(record).model_dump(mode="json")

        result = apply_patch(document, operations)
        if not result.ok:
            logger.warning(
                "Rejected patch of %s %s: %s",
                self.resource.label,
                record_id,
                result.error,
            )
            raise ValidationError(
                message=result.error,
                context={
                    "operation_index": result.operation_index,
                    "operation": result.operation,
                },
            )

        fields = self._validate(strip_protected(result.document, protected))
        for key, value in fields.items():
            setattr(record, key, value)

        record = await store.save(record)
        logger.info(
            "Patched %s %s (%d operation(s))",
            self.resource.label,
            record_id,
            len(operations),
        )
        return self._serialize(record)

    async def destroy(self, store: PersistenceStore, record_id: int) -> None:
        """Delete the record; NotFoundError if it doesn't exist."""
        await self._find_or_404(store, record_id)
        await store.delete_by_id(record_id)
        logger.info("Deleted %s %s", self.resource.label, record_id)
