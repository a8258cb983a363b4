"""
SessionLog Backend — JSON-Patch Unit Tests
============================================

What:  Tests for apply_patch() and the protected-field helpers.
How:   Pure functions, no database.

What we test:
    ✅ Each RFC 6902 operation type applies in order
    ✅ A failing operation yields an error result and leaves the input intact
    ✅ Malformed operations are reported with their index
    ✅ Operations on id / created_at are dropped before application
"""

from sessionlog.resources import PROTECTED_FIELDS
from sessionlog.services.patching import (
    apply_patch,
    strip_protected,
    strip_protected_operations,
)


def _doc():
    return {"id": 1, "name": "a", "description": None, "active": True}


class TestApplyPatch:
    """Successful application of each operation type."""

    def test_replace(self):
        result = apply_patch(_doc(), [{"op": "replace", "path": "/name", "value": "b"}])
        assert result.ok
        assert result.document["name"] == "b"

    def test_operations_apply_in_order(self):
        """A later operation sees the state left by the earlier one."""
        result = apply_patch(
            _doc(),
            [
                {"op": "replace", "path": "/name", "value": "b"},
                {"op": "test", "path": "/name", "value": "b"},
                {"op": "copy", "from": "/name", "path": "/description"},
            ],
        )
        assert result.ok
        assert result.document["description"] == "b"

    def test_add_remove_and_move(self):
        result = apply_patch(
            _doc(),
            [
                {"op": "add", "path": "/description", "value": "x"},
                {"op": "remove", "path": "/active"},
                {"op": "move", "from": "/description", "path": "/name"},
            ],
        )
        assert result.ok
        assert result.document == {"id": 1, "name": "x"}

    def test_empty_patch_returns_equal_document(self):
        result = apply_patch(_doc(), [])
        assert result.ok
        assert result.document == _doc()


class TestApplyPatchFailures:
    """Failed application never raises and never mutates the input."""

    def test_failing_test_operation(self):
        document = _doc()
        result = apply_patch(document, [{"op": "test", "path": "/name", "value": "z"}])

        assert not result.ok
        assert result.document is None
        assert result.operation_index == 0
        assert "test /name" in result.error
        assert document["name"] == "a"

    def test_earlier_operations_are_not_kept(self):
        """The first failure discards everything applied before it."""
        document = _doc()
        result = apply_patch(
            document,
            [
                {"op": "replace", "path": "/name", "value": "b"},
                {"op": "remove", "path": "/missing"},
            ],
        )
        assert not result.ok
        assert result.operation_index == 1
        assert document["name"] == "a"

    def test_unknown_op(self):
        result = apply_patch(_doc(), [{"op": "frobnicate", "path": "/name"}])
        assert not result.ok
        assert result.operation == {"op": "frobnicate", "path": "/name"}

    def test_non_object_operation(self):
        result = apply_patch(_doc(), ["replace /name"])
        assert not result.ok
        assert result.operation_index == 0
        assert "not an object" in result.error

    def test_replacing_root_with_scalar(self):
        result = apply_patch(_doc(), [{"op": "replace", "path": "", "value": 3}])
        assert not result.ok


class TestProtectedFields:
    """id and created_at can't be written by callers."""

    def test_strip_protected_body(self):
        body = {"id": 9, "created_at": "2020-01-01T00:00:00", "name": "a"}
        assert strip_protected(body, PROTECTED_FIELDS) == {"name": "a"}

    def test_writes_to_protected_members_are_dropped(self):
        operations = [
            {"op": "replace", "path": "/id", "value": 9},
            {"op": "remove", "path": "/created_at"},
            {"op": "copy", "from": "/name", "path": "/id"},
            {"op": "move", "from": "/created_at", "path": "/description"},
            {"op": "replace", "path": "/name", "value": "b"},
        ]
        assert strip_protected_operations(operations, PROTECTED_FIELDS) == [
            {"op": "replace", "path": "/name", "value": "b"},
        ]

    def test_reads_of_protected_members_are_kept(self):
        """test and copy-from only read; they must still be checked."""
        operations = [
            {"op": "test", "path": "/id", "value": 2},
            {"op": "copy", "from": "/created_at", "path": "/description"},
        ]
        assert strip_protected_operations(operations, PROTECTED_FIELDS) == operations

    def test_failing_test_on_id_fails_the_patch(self):
        operations = strip_protected_operations(
            [
                {"op": "test", "path": "/id", "value": 2},
                {"op": "replace", "path": "/name", "value": "b"},
            ],
            PROTECTED_FIELDS,
        )
        result = apply_patch(_doc(), operations)

        assert not result.ok
        assert result.operation_index == 0

    def test_nested_pointer_into_protected_member(self):
        operations = [{"op": "add", "path": "/id/0", "value": 1}]
        assert strip_protected_operations(operations, PROTECTED_FIELDS) == []

    def test_similar_names_are_kept(self):
        """Only exact top-level members are protected."""
        operations = [{"op": "add", "path": "/identity", "value": "x"}]
        assert strip_protected_operations(operations, PROTECTED_FIELDS) == operations

    def test_non_dict_entries_pass_through(self):
        assert strip_protected_operations([42], PROTECTED_FIELDS) == [42]
