"""Tests for the envelope codec and the Result helpers."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.result import (
    NO_UPDATE,
    DecodeError,
    Failure,
    Success,
    default,
    is_no_update,
    is_success,
    map_result,
)
from sdk.envelope import build_request_object, decode_envelope, decode_result, parse_body
from sdk.models import User


# ── build_request_object ─────────────────────────────────────────────────────


class TestBuildRequestObject:
    """Optional fields are omitted when unset, never sent as null."""

    def test_required_only(self) -> None:
        assert build_request_object([("chat_id", 42), ("text", "hi")]) == {"chat_id": 42, "text": "hi"}

    def test_absent_optional_is_omitted(self) -> None:
        payload = build_request_object([("chat_id", 42)], [("reply_to_message_id", None)])
        assert payload == {"chat_id": 42}
        assert "reply_to_message_id" not in payload

    def test_present_optional_is_emitted(self) -> None:
        payload = build_request_object([("chat_id", 42)], [("reply_to_message_id", 5)])
        assert payload == {"chat_id": 42, "reply_to_message_id": 5}

    def test_order_required_then_optional(self) -> None:
        payload = build_request_object(
            [("b", 1), ("a", 2)],
            [("z", 3), ("skipped", None), ("y", 4)],
        )
        assert list(payload) == ["b", "a", "z", "y"]

    def test_falsy_values_are_kept(self) -> None:
        """Only None means "absent"; 0, False and "" are real values."""
        payload = build_request_object([], [("offset", 0), ("is_personal", False), ("next_offset", "")])
        assert payload == {"offset": 0, "is_personal": False, "next_offset": ""}

    def test_required_none_is_kept(self) -> None:
        assert build_request_object([("x", None)]) == {"x": None}

    def test_empty(self) -> None:
        assert build_request_object([], []) == {}


# ── decode_envelope ──────────────────────────────────────────────────────────


class TestDecodeEnvelope:
    """Validate unwrapping of {ok, result|description}."""

    @pytest.mark.parametrize("result", [True, 0, "text", [1, 2], {"id": 1, "nested": {"x": None}}, None])
    def test_ok_true_returns_result_unchanged(self, result) -> None:
        assert decode_envelope({"ok": True, "result": result}) == Success(result)

    def test_ok_false_returns_description(self) -> None:
        assert decode_envelope({"ok": False, "description": "Unauthorized"}) == Failure("Unauthorized")

    def test_missing_ok_is_failure(self) -> None:
        assert decode_envelope({"description": "weird"}) == Failure("weird")

    def test_non_boolean_ok_is_failure(self) -> None:
        assert isinstance(decode_envelope({"ok": "true", "result": 1}), Failure)

    def test_malformed_description_defaults_to_empty(self) -> None:
        assert decode_envelope({"ok": False, "description": 404}) == Failure("")
        assert decode_envelope({"ok": False}) == Failure("")

    def test_ok_without_result_is_decode_error(self) -> None:
        assert isinstance(decode_envelope({"ok": True}), DecodeError)

    def test_non_object_is_decode_error(self) -> None:
        result = decode_envelope([1, 2, 3])
        assert isinstance(result, DecodeError)
        assert "list" in result.description


# ── decode_result / parse_body ───────────────────────────────────────────────


class TestDecodeResult:
    """Validate data-layer decoding on top of the envelope."""

    def test_success_is_decoded(self) -> None:
        result = decode_result({"ok": True, "result": {"id": 1, "first_name": "Bot"}}, User.model_validate)
        assert isinstance(result, Success)
        assert result.value.id == 1

    def test_failure_passes_through(self) -> None:
        result = decode_result({"ok": False, "description": "Forbidden"}, User.model_validate)
        assert result == Failure("Forbidden")

    def test_validation_error_becomes_decode_error(self) -> None:
        result = decode_result({"ok": True, "result": {"id": "not-an-int"}}, User.model_validate)
        assert isinstance(result, DecodeError)
        assert isinstance(result, Failure)
        assert result.description.startswith("Could not decode result")

    def test_key_error_becomes_decode_error(self) -> None:
        result = decode_result({"ok": True, "result": {}}, lambda raw: raw["missing"])
        assert isinstance(result, DecodeError)

    def test_parse_body_valid(self) -> None:
        assert parse_body(b'{"ok": true, "result": 1}') == Success({"ok": True, "result": 1})

    def test_parse_body_malformed(self) -> None:
        result = parse_body(b"<html>Bad Gateway</html>")
        assert isinstance(result, DecodeError)
        assert "Malformed" in result.description


# ── Result helpers ───────────────────────────────────────────────────────────


class TestResultHelpers:
    """Validate small helpers on Result values."""

    def test_is_success(self) -> None:
        assert is_success(Success(1))
        assert not is_success(Failure("x"))

    def test_default(self) -> None:
        assert default(Success(3), 0) == 3
        assert default(Failure("x"), 0) == 0

    def test_map_result(self) -> None:
        assert map_result(lambda v: v + 1, Success(1)) == Success(2)
        failure = Failure("nope")
        assert map_result(lambda v: v + 1, failure) is failure

    def test_no_update_sentinel(self) -> None:
        assert NO_UPDATE == "Could not get head"
        assert is_no_update(Failure(NO_UPDATE))
        assert not is_no_update(Failure("Unauthorized"))
        assert not is_no_update(Success(None))

    def test_decode_error_is_distinct_from_plain_failure(self) -> None:
        assert DecodeError("x") != Failure("x")
        assert isinstance(DecodeError("x"), Failure)
