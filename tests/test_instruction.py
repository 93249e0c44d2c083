"""Tests for Instruction."""

from __future__ import annotations

import dataclasses

import pytest

from httpscript.instruction import Instruction, normalize_headers


class TestInstruction:
    """Tests for Instruction construction."""

    def test_defaults(self) -> None:
        """Test default values."""
        inst = Instruction()
        assert inst.status_code == 200
        assert inst.header_delay == 0.0
        assert inst.body_delay == 0.0
        assert inst.body_service_time == 0.0
        assert inst.body is None
        assert dict(inst.headers) == {}

    def test_nil_and_empty_body_differ(self) -> None:
        """Test that an absent body is distinct from an empty one."""
        assert Instruction().has_body is False
        assert Instruction(body=b"").has_body is True

    def test_str_body_is_encoded(self) -> None:
        """Test that text bodies become UTF-8 bytes."""
        assert Instruction(body="héllo").body == "héllo".encode()

    def test_bytearray_body_is_frozen(self) -> None:
        """Test that mutable bodies are copied into bytes."""
        raw = bytearray(b"abc")
        inst = Instruction(body=raw)
        raw[0] = ord("z")
        assert inst.body == b"abc"

    def test_frozen(self) -> None:
        """Test that fields cannot be reassigned."""
        inst = Instruction(status_code=200)
        with pytest.raises(dataclasses.FrozenInstanceError):
            inst.status_code = 500  # type: ignore[misc]

    def test_headers_read_only(self) -> None:
        """Test that the header mapping cannot be mutated."""
        inst = Instruction(headers={"Foo": "Bar"})
        with pytest.raises(TypeError):
            inst.headers["Foo"] = ("Baz",)  # type: ignore[index]

    def test_caller_dict_not_shared(self) -> None:
        """Test that later changes to the caller's dict do not leak in."""
        headers = {"Foo": ["Bar"]}
        inst = Instruction(headers=headers)
        headers["Foo"].append("Baz")
        headers["New"] = ["x"]
        assert dict(inst.headers) == {"Foo": ("Bar",)}

    def test_repr_summarizes_body(self) -> None:
        """Test that repr shows the body length rather than its bytes."""
        assert "<5 bytes>" in repr(Instruction(body=b"hello"))
        assert "body=None" in repr(Instruction())

    def test_hashable(self) -> None:
        """Test that equal instructions hash alike and work in sets."""
        a = Instruction(headers={"Foo": "Bar", "X": ["1", "2"]}, body=b"hi")
        b = Instruction(headers={"X": ("1", "2"), "Foo": "Bar"}, body="hi")

        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b, Instruction()}) == 2
        assert hash(Instruction()) == hash(Instruction())


class TestNormalizeHeaders:
    """Tests for header normalization."""

    def test_single_value_becomes_tuple(self) -> None:
        """Test wrapping of scalar values."""
        assert dict(normalize_headers({"Foo": "Bar"})) == {"Foo": ("Bar",)}

    def test_sequence_order_preserved(self) -> None:
        """Test that multiple values keep their order."""
        headers = normalize_headers({"Set-Cookie": ["b=2", "a=1"]})
        assert headers["Set-Cookie"] == ("b=2", "a=1")

    def test_non_string_values(self) -> None:
        """Test conversion of ints and bytes."""
        headers = normalize_headers({"Content-Length": 1111, "X-Raw": b"raw"})
        assert headers["Content-Length"] == ("1111",)
        assert headers["X-Raw"] == ("raw",)

    def test_name_order_preserved(self) -> None:
        """Test that header names keep insertion order."""
        headers = normalize_headers({"B": "1", "A": "2", "C": "3"})
        assert list(headers) == ["B", "A", "C"]

    def test_none(self) -> None:
        """Test that None means no headers."""
        assert dict(normalize_headers(None)) == {}
