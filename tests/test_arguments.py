"""Tool-call argument normalization tests."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from flarechat.arguments import (
    normalize_arguments,
    parse_arguments,
    to_tool_request_parts,
)
from flarechat.errors import DecodeError
from flarechat.providers.models import WireToolCall
from flarechat.types import ToolRequestPart

pytestmark = pytest.mark.unit

_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.floats(allow_nan=False),
    st.text(max_size=10),
)
# Simple-format values: anything except an object with a "value" member.
_simple_values = st.one_of(
    _scalars,
    st.lists(_scalars, max_size=3),
    st.dictionaries(
        st.text(max_size=5).filter(lambda k: k != "value"), _scalars, max_size=3
    ),
)


@settings(max_examples=50)
@given(st.dictionaries(st.text(max_size=8), _simple_values, max_size=6))
def test_normalizing_a_simple_map_is_identity(raw: dict) -> None:
    assert normalize_arguments(raw) == raw


@settings(max_examples=50)
@given(st.dictionaries(st.text(max_size=8), _scalars, max_size=6))
def test_normalizing_a_verbose_map_unwraps_every_value(plain: dict) -> None:
    verbose = {k: {"type": "any", "value": v} for k, v in plain.items()}
    assert normalize_arguments(verbose) == plain
    assert normalize_arguments(normalize_arguments(verbose)) == plain


def test_verbose_number_is_unwrapped() -> None:
    assert normalize_arguments({"x": {"type": "number", "value": 3.5}}) == {"x": 3.5}


def test_mixed_simple_and_verbose_keys() -> None:
    raw = {"x": 3.5, "y": {"type": "string", "value": "a"}}
    assert normalize_arguments(raw) == {"x": 3.5, "y": "a"}


def test_object_without_value_member_is_kept_as_is() -> None:
    raw = {"filter": {"type": "string", "pattern": "a*"}}
    assert normalize_arguments(raw) == raw


def test_value_member_holding_an_object_is_unwrapped() -> None:
    raw = {"point": {"type": "object", "value": {"x": 1, "y": 2}}}
    assert normalize_arguments(raw) == {"point": {"x": 1, "y": 2}}


def test_parse_arguments_decodes_json_string() -> None:
    args = '{"Over": {"type": "number", "value": 3.5}, "Value": {"type": "integer", "value": 2}}'
    assert parse_arguments(args, name="gablorken") == {"Over": 3.5, "Value": 2}


def test_parse_arguments_treats_missing_as_empty_object() -> None:
    assert parse_arguments(None, name="noop") == {}


@pytest.mark.parametrize("blank", ["", "   "])
def test_blank_arguments_string_fails_closed(blank: str) -> None:
    with pytest.raises(DecodeError, match="failed to unmarshal tool arguments") as exc:
        parse_arguments(blank, name="get_weather")
    assert exc.value.tool_name == "get_weather"


def test_parse_arguments_accepts_decoded_object() -> None:
    """Legacy-format replies carry arguments as an already-decoded object."""
    assert parse_arguments({"unit": {"value": "celsius"}}, name="w") == {"unit": "celsius"}


def test_truncated_arguments_fail_closed() -> None:
    with pytest.raises(DecodeError, match="failed to unmarshal tool arguments") as exc:
        parse_arguments('{"x": ', name="get_weather")
    assert exc.value.tool_name == "get_weather"
    assert "get_weather" in str(exc.value)


@pytest.mark.parametrize("payload", ["[1, 2]", '"text"', "42", "null"])
def test_non_object_arguments_are_rejected(payload: str) -> None:
    with pytest.raises(DecodeError, match="must be a JSON object"):
        parse_arguments(payload, name="get_weather")


def test_empty_call_list_yields_empty_parts() -> None:
    assert to_tool_request_parts([]) == []


def test_parts_preserve_provider_order_and_ids() -> None:
    calls = [
        WireToolCall(id="call_simple_123", name="get_weather", arguments='{"location": "Eindhoven, NL", "unit": "celsius"}'),
        WireToolCall(id="call_verbose_456", name="gablorken", arguments='{"Over": {"type": "number", "value": 3.5}}'),
    ]

    parts = to_tool_request_parts(calls)

    assert parts == [
        ToolRequestPart(
            ref="call_simple_123",
            name="get_weather",
            input={"location": "Eindhoven, NL", "unit": "celsius"},
        ),
        ToolRequestPart(ref="call_verbose_456", name="gablorken", input={"Over": 3.5}),
    ]


def test_one_bad_call_aborts_the_whole_batch() -> None:
    calls = [
        WireToolCall(id="a", name="ok_tool", arguments="{}"),
        WireToolCall(id="b", name="bad_tool", arguments='{"location": "Eindhoven, NL",'),
    ]

    with pytest.raises(DecodeError) as exc:
        to_tool_request_parts(calls)
    assert exc.value.tool_name == "bad_tool"


def test_missing_call_id_is_synthesized() -> None:
    parts = to_tool_request_parts([WireToolCall(name="lookup", arguments="{}")])

    assert parts[0].ref.startswith("call_")
    assert len(parts[0].ref) > len("call_")
