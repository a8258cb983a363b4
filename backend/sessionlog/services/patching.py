"""
SessionLog Backend — JSON-Patch Application
=============================================

What:  Applies an RFC 6902 patch (add/remove/replace/move/copy/test) to a
       record's JSON document and strips protected fields from inbound data.
How:   Operations are applied one at a time with the `jsonpatch` library on a
       copy of the document, so each operation is checked against the state
       left by the previous one. The first failure stops the run and the
       original document is never touched.

Result instead of exception:
    `apply_patch()` returns a `PatchResult` carrying either the patched
    document or the error. The controller branches on it before anything
    reaches the store.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set

import jsonpatch
import jsonpointer

_WRITING_OPS = ("add", "replace", "remove", "move", "copy")


@dataclass(frozen=True)
class PatchResult:
    """
    Outcome of `apply_patch()`.

    Exactly one of `document` / `error` is set. On failure
    `operation_index` and `operation` identify the offending operation.
    """

    document: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    operation_index: Optional[int] = None
    operation: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _first_token(pointer: Any) -> Optional[str]:
    """Top-level member a JSON pointer refers to ("/name/0" → "name")."""
    if not isinstance(pointer, str) or not pointer.startswith("/"):
        return None
    token = pointer[1:].split("/", 1)[0]
    return token.replace("~1", "/").replace("~0", "~")


def strip_protected(body: Dict[str, Any], protected: Iterable[str]) -> Dict[str, Any]:
    """Copy of `body` without the protected keys."""
    protected = set(protected)
    return {key: value for key, value in body.items() if key not in protected}


def strip_protected_operations(
    operations: List[Any], protected: Iterable[str]
) -> List[Any]:
    """
    Drop every operation that would write a protected member.

    Writes are add/replace/remove/move/copy into a protected `path`, and a
    move out of a protected `from`. `test` and copies that only read a
    protected member are kept and checked against the real document.
    Non-dict entries are kept so `apply_patch()` reports them as malformed.
    """
    protected = set(protected)
    kept = []
    for operation in operations:
        if isinstance(operation, dict) and _writes_protected(operation, protected):
            continue
        kept.append(operation)
    return kept


def _writes_protected(operation: Dict[str, Any], protected: Set[str]) -> bool:
    op = operation.get("op")
    if op in _WRITING_OPS and _first_token(operation.get("path")) in protected:
        return True
    return op == "move" and _first_token(operation.get("from")) in protected


def _describe(operation: Any) -> str:
    if isinstance(operation, dict):
        return f"{operation.get('op', '?')} {operation.get('path', '?')}"
    return repr(operation)


def apply_patch(document: Dict[str, Any], operations: List[Any]) -> PatchResult:
    """
    Apply `operations` in order to a copy of `document`.

    Args:
        document:   JSON-compatible dict (e.g. a read schema dumped in json mode)
        operations: JSON-Patch operations

    Returns:
        PatchResult with the new document, or with the first error.
    """
    current = copy.deepcopy(document)
    for index, operation in enumerate(operations):
        if not isinstance(operation, dict):
            return PatchResult(
                error=f"Patch operation {index} is not an object",
                operation_index=index,
                operation=operation,
            )
        try:
            current = jsonpatch.JsonPatch([operation]).apply(current, in_place=False)
        except (jsonpatch.JsonPatchException, jsonpointer.JsonPointerException) as e:
            return PatchResult(
                error=f"Patch operation {index} ({_describe(operation)}) failed: {e}",
                operation_index=index,
                operation=operation,
            )
    if not isinstance(current, dict):
        return PatchResult(
            error="Patch must leave the document a JSON object",
            operation_index=len(operations) - 1,
            operation=operations[-1] if operations else None,
        )
    return PatchResult(document=current)
