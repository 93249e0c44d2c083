"""Tests for script file handling."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from httpscript import config
from httpscript.errors import ScriptConfigError
from httpscript.instruction import Instruction


class TestFromDict:
    """Tests for building instructions from dictionaries."""

    def test_full_entry(self) -> None:
        """Test an entry using every key."""
        (inst,) = config.from_dict({
            "instructions": [{
                "status_code": 404,
                "header_delay": 0.25,
                "headers": {"Content-Type": "text/plain", "Set-Cookie": ["a=1", "b=2"]},
                "body_delay": 1,
                "body_service_time": 0.5,
                "body": "missing",
            }]
        })

        assert inst == Instruction(
            status_code=404,
            header_delay=0.25,
            headers={"Content-Type": "text/plain", "Set-Cookie": ["a=1", "b=2"]},
            body_delay=1.0,
            body_service_time=0.5,
            body=b"missing",
        )

    def test_bare_list(self) -> None:
        """Test that a top-level list is accepted."""
        script = config.from_dict([{"status_code": 200}, {"status_code": 500}])
        assert [inst.status_code for inst in script] == [200, 500]

    def test_defaults(self) -> None:
        """Test that an empty entry uses the Instruction defaults."""
        assert config.from_dict([{}]) == (Instruction(),)

    def test_null_vs_empty_body(self) -> None:
        """Test that null and empty string bodies stay distinct."""
        nil, empty = config.from_dict([{"body": None}, {"body": ""}])
        assert nil.body is None
        assert empty.body == b""

    def test_empty_script(self) -> None:
        """Test a mapping without instructions."""
        assert config.from_dict({}) == ()

    @pytest.mark.parametrize(
        "entry, message",
        [
            ("nope", "must be a mapping"),
            ({"status": 200}, "unknown key"),
            ({"status_code": "200"}, "status_code must be an integer"),
            ({"status_code": True}, "status_code must be an integer"),
            ({"header_delay": "1s"}, "header_delay must be a number"),
            ({"headers": ["Foo: Bar"]}, "headers must be a mapping"),
            ({"body": 42}, "body must be a string or null"),
        ],
    )
    def test_malformed_entry(self, entry: object, message: str) -> None:
        """Test that malformed entries are rejected with a clear message."""
        with pytest.raises(ScriptConfigError, match=message):
            config.from_dict([entry])

    def test_error_names_position(self) -> None:
        """Test that errors point at the offending instruction."""
        with pytest.raises(ScriptConfigError, match=r"instructions\[1\]"):
            config.from_dict([{}, {"status_code": "bad"}])

    def test_not_a_script(self) -> None:
        """Test that a scalar document is rejected."""
        with pytest.raises(ScriptConfigError):
            config.from_dict("hello")


class TestToDict:
    """Tests for converting instructions to dictionaries."""

    def test_round_trip(self) -> None:
        """Test that to_dict output loads back to the same script."""
        script = (
            Instruction(status_code=200, headers={"Foo": ["a", "b"]}, body=b"hi"),
            Instruction(status_code=204, header_delay=0.1),
        )
        assert config.from_dict(config.to_dict(script)) == script

    def test_nil_body_is_null(self) -> None:
        """Test that an absent body is written as null."""
        data = config.to_dict([Instruction()])
        assert data["instructions"][0]["body"] is None


class TestValidateConfig:
    """Tests for script validation."""

    def test_clean_script(self) -> None:
        """Test that a sensible script has no issues."""
        assert config.validate_config([{"status_code": 200, "body": "ok"}]) == []

    def test_empty_script(self) -> None:
        """Test that an empty script is flagged."""
        issues = config.validate_config({"instructions": []})
        assert any("empty" in issue for issue in issues)

    def test_unusual_values(self) -> None:
        """Test warnings for odd but parseable values."""
        issues = config.validate_config([
            {"status_code": 42},
            {"header_delay": -1},
            {"body_service_time": 2.0},
        ])
        assert any("unusual status code 42" in issue for issue in issues)
        assert any("negative header_delay" in issue for issue in issues)
        assert any("no body to pace" in issue for issue in issues)

    def test_malformed_entries_reported(self) -> None:
        """Test that parse errors become issues instead of exceptions."""
        issues = config.validate_config([{"status_code": "x"}, {"bogus": 1}])
        assert len(issues) == 2

    def test_not_a_script(self) -> None:
        """Test that a wrong document type is reported."""
        assert len(config.validate_config(42)) == 1


class TestFiles:
    """Tests for saving and loading script files."""

    def test_json(self, tmp_path: Path) -> None:
        """Test saving and loading JSON."""
        path = tmp_path / "script.json"
        script = (Instruction(status_code=201, body=b"created"),)

        config.save(script, path)

        assert json.loads(path.read_text())["instructions"][0]["status_code"] == 201
        assert config.load(path) == script
        assert config.load_json(path) == script

    def test_yaml(self, tmp_path: Path) -> None:
        """Test saving and loading YAML."""
        pytest.importorskip("yaml")
        path = tmp_path / "script.yaml"
        script = (
            Instruction(status_code=200, headers={"Foo": "Bar"}, body_service_time=0.5, body=b"x"),
        )

        config.save(script, path)

        assert "status_code: 200" in path.read_text()
        assert config.load(path) == script
        assert config.load_yaml(path) == script

    def test_handwritten_yaml(self, tmp_path: Path) -> None:
        """Test a YAML script written by hand."""
        pytest.importorskip("yaml")
        path = tmp_path / "script.yml"
        path.write_text(
            "- status_code: 200\n"
            "  header_delay: 0.005\n"
            "  headers:\n"
            "    Content-Type: text/plain\n"
            "  body: hello\n"
            "- status_code: 500\n"
        )

        first, second = config.load(path)

        assert first.body == b"hello"
        assert first.headers["Content-Type"] == ("text/plain",)
        assert second.body is None

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test loading a file that does not exist."""
        with pytest.raises(FileNotFoundError, match="Script file not found"):
            config.load(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test loading a file that is not JSON."""
        path = tmp_path / "script.json"
        path.write_text("{not json")

        with pytest.raises(ScriptConfigError, match="Could not parse"):
            config.load(path)

    def test_yaml_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the error when PyYAML is not installed."""
        monkeypatch.setattr(config, "HAS_YAML", False)
        path = tmp_path / "script.yaml"
        path.write_text("[]")

        with pytest.raises(ImportError, match="PyYAML is required"):
            config.load(path)
