"""Script file utilities for httpscript.

Load, save, and validate scripts stored as JSON or YAML.

A script file holds a list of instructions, either at the top level or
under an ``instructions`` key::

    instructions:
      - status_code: 200
        header_delay: 0.005
        headers: {Content-Type: text/plain}
        body: hello
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

try:
    import yaml

    HAS_YAML = True
except ImportError:
    HAS_YAML = False
    yaml = None

from httpscript.errors import ScriptConfigError
from httpscript.instruction import Instruction

TIMING_FIELDS = ("header_delay", "body_delay", "body_service_time")
INSTRUCTION_FIELDS = frozenset(TIMING_FIELDS + ("headers", "status_code", "body"))


def instruction_to_dict(inst: Instruction) -> dict[str, Any]:
    """Convert an Instruction to a dictionary.

    Args:
        inst: The instruction to convert

    Returns:
        Dictionary using the script file keys. The body is decoded as
        UTF-8, with undecodable bytes escaped.
    """
    return {
        "status_code": inst.status_code,
        "header_delay": inst.header_delay,
        "headers": {name: list(values) for name, values in inst.headers.items()},
        "body_delay": inst.body_delay,
        "body_service_time": inst.body_service_time,
        "body": None
        if inst.body is None
        else inst.body.decode("utf-8", errors="surrogateescape"),
    }


def instruction_from_dict(entry: Any, index: int = 0) -> Instruction:
    """Create an Instruction from a dictionary.

    Args:
        entry: Dictionary using the script file keys
        index: Position of the entry in the script, for error messages

    Returns:
        The instruction

    Raises:
        ScriptConfigError: If the entry is malformed
    """
    where = f"instructions[{index}]"
    if not isinstance(entry, dict):
        raise ScriptConfigError(
            f"{where} must be a mapping, got {type(entry).__name__}",
            suggestion="Each instruction looks like: {status_code: 200, body: hello}",
        )

    unknown = sorted(set(entry) - INSTRUCTION_FIELDS)
    if unknown:
        raise ScriptConfigError(
            f"{where} has unknown key(s): {', '.join(unknown)}",
            suggestion=f"Valid keys are: {', '.join(sorted(INSTRUCTION_FIELDS))}",
        )

    status_code = entry.get("status_code", 200)
    if isinstance(status_code, bool) or not isinstance(status_code, int):
        raise ScriptConfigError(f"{where}.status_code must be an integer: {status_code!r}")

    timings = {}
    for name in TIMING_FIELDS:
        value = entry.get(name, 0.0)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ScriptConfigError(
                f"{where}.{name} must be a number of seconds: {value!r}"
            )
        timings[name] = float(value)

    headers = entry.get("headers") or {}
    if not isinstance(headers, dict):
        raise ScriptConfigError(f"{where}.headers must be a mapping")

    body = entry.get("body")
    if body is not None and not isinstance(body, str):
        raise ScriptConfigError(
            f"{where}.body must be a string or null, got {type(body).__name__}"
        )

    return Instruction(
        status_code=status_code,
        headers=headers,
        body=None if body is None else body.encode("utf-8", errors="surrogateescape"),
        **timings,
    )


def to_dict(instructions: Iterable[Instruction]) -> dict[str, Any]:
    """Convert a script to a dictionary.

    Args:
        instructions: The script

    Returns:
        Configuration dictionary
    """
    return {"instructions": [instruction_to_dict(inst) for inst in instructions]}


def _entries(config: Any) -> list[Any]:
    if isinstance(config, list):
        return config
    if isinstance(config, dict) and isinstance(config.get("instructions", []), list):
        return config.get("instructions", [])
    raise ScriptConfigError(
        "A script must be a list of instructions or a mapping with an 'instructions' list",
    )


def from_dict(config: Any) -> tuple[Instruction, ...]:
    """Create a script from a dictionary.

    Args:
        config: Configuration dictionary, or a bare list of instructions

    Returns:
        The instructions, in order

    Raises:
        ScriptConfigError: If the configuration is malformed
    """
    return tuple(
        instruction_from_dict(entry, index) for index, entry in enumerate(_entries(config))
    )


def validate_config(config: Any) -> list[str]:
    """Validate script configuration and return list of issues.

    Unlike `from_dict`, this never raises. It also flags values that parse
    but are unlikely to be intended.

    Args:
        config: Configuration dictionary, or a bare list of instructions

    Returns:
        List of validation issues
    """
    try:
        entries = _entries(config)
    except ScriptConfigError as e:
        return [e.message]

    issues = []
    if not entries:
        issues.append("Script is empty - every request will get 400 Out of instructions")

    for index, entry in enumerate(entries):
        try:
            inst = instruction_from_dict(entry, index)
        except ScriptConfigError as e:
            issues.append(e.message)
            continue

        if not 100 <= inst.status_code <= 599:
            issues.append(f"instructions[{index}]: unusual status code {inst.status_code}")
        for name in TIMING_FIELDS:
            if getattr(inst, name) < 0:
                issues.append(f"instructions[{index}]: negative {name} ({getattr(inst, name)})")
        if inst.body_service_time > 0 and not inst.body:
            issues.append(
                f"instructions[{index}]: body_service_time set but there is no body to pace"
            )

    return issues


def save_json(instructions: Iterable[Instruction], path: str | Path) -> None:
    """Save a script to a JSON file.

    Args:
        instructions: Script to save
        path: File path
    """
    path = Path(path)
    config = to_dict(instructions)

    with open(path, "w") as f:
        json.dump(config, f, indent=2)


def load_json(path: str | Path) -> tuple[Instruction, ...]:
    """Load a script from a JSON file.

    Args:
        path: File path

    Returns:
        The instructions, in order
    """
    path = Path(path)

    with open(path) as f:
        config = json.load(f)

    return from_dict(config)


def _require_yaml() -> None:
    if not HAS_YAML:
        raise ImportError("PyYAML is required for YAML support. Install with: pip install pyyaml")


def save_yaml(instructions: Iterable[Instruction], path: str | Path) -> None:
    """Save a script to a YAML file.

    Args:
        instructions: Script to save
        path: File path
    """
    _require_yaml()

    path = Path(path)
    config = to_dict(instructions)

    with open(path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def load_yaml(path: str | Path) -> tuple[Instruction, ...]:
    """Load a script from a YAML file.

    Args:
        path: File path

    Returns:
        The instructions, in order
    """
    _require_yaml()

    path = Path(path)

    with open(path) as f:
        config = yaml.safe_load(f)

    return from_dict(config)


def read_raw(path: str | Path) -> Any:
    """Parse a script file without building instructions.

    Args:
        path: File path (.json or .yaml/.yml)

    Returns:
        The parsed document

    Raises:
        FileNotFoundError: If the file does not exist
        ScriptConfigError: If the file is not valid JSON or YAML
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Script file not found: {path}")

    if path.suffix in (".yaml", ".yml"):
        _require_yaml()
        parse, parse_errors = yaml.safe_load, (yaml.YAMLError,)
    else:
        parse, parse_errors = json.load, (ValueError,)

    with open(path) as f:
        try:
            return parse(f)
        except parse_errors as e:
            raise ScriptConfigError(
                f"Could not parse {path}: {e}",
                suggestion="Script files must be valid JSON (.json) or YAML (.yaml/.yml).",
            ) from e


def save(instructions: Iterable[Instruction], path: str | Path) -> None:
    """Save a script (auto-detects format from extension).

    Args:
        instructions: Script to save
        path: File path (.json or .yaml/.yml)

    Example:
        >>> save([Instruction(status_code=200, body=b"ok")], "script.yaml")
    """
    path = Path(path)

    if path.suffix in (".yaml", ".yml"):
        save_yaml(instructions, path)
    else:
        save_json(instructions, path)


def load(path: str | Path) -> tuple[Instruction, ...]:
    """Load a script (auto-detects format from extension).

    Args:
        path: File path (.json or .yaml/.yml)

    Returns:
        The instructions, in order

    Example:
        >>> handler = Handler(load("script.yaml"))
    """
    return from_dict(read_raw(path))
