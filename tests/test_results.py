"""Tests del envelope de resultado."""

import pytest

from core.domain.models import Product
from core.domain.results import (
    REMOTE_FAILED,
    FailureKind,
    ResultEnvelope,
    exhausted_message,
    flatten_messages,
)


class TestFlattenMessages:
    def test_grouped_text_entries_are_flattened_in_order(self) -> None:
        raw = [{"text": ["a", "b"]}, {"Text": ["c"]}]

        assert flatten_messages(raw) == ["a", "b", "c"]

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, []),
            ("single", ["single"]),
            ("   ", []),
            (["x", "y"], ["x", "y"]),
            ({"other": ["ignored"]}, []),
            ([{"text": None}], []),
        ],
    )
    def test_loose_variants(self, raw, expected) -> None:
        assert flatten_messages(raw) == expected


class TestResultEnvelope:
    def test_failure_never_carries_data(self) -> None:
        envelope = ResultEnvelope[list[Product]].model_validate(
            {"success": False, "data": [{"ProductCode": "P1"}]}
        )

        assert envelope.data is None

    def test_failure_without_messages_gets_generic_message(self) -> None:
        envelope = ResultEnvelope[list[Product]].model_validate({"success": False})

        assert envelope.messages == [REMOTE_FAILED]
        assert envelope.failure is FailureKind.REMOTE

    def test_fail_factory(self) -> None:
        envelope = ResultEnvelope[list[Product]].fail(exhausted_message("products"), FailureKind.EXHAUSTED)

        assert envelope.success is False
        assert envelope.messages == ["all endpoints failed for products"]
        assert envelope.failure is FailureKind.EXHAUSTED

    def test_ok_factory_clears_failure(self) -> None:
        envelope = ResultEnvelope[list[str]].ok(["a"])

        assert envelope.success is True
        assert envelope.data == ["a"]
        assert envelope.failure is None
        assert envelope.first_message is None

    def test_messages_and_message_keys_are_merged(self) -> None:
        envelope = ResultEnvelope[int].model_validate(
            {"success": True, "data": 1, "message": [{"text": ["one"]}], "messages": ["two"]}
        )

        assert envelope.messages == ["one", "two"]
