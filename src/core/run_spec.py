"""Typed run-spec parsing for declarative tickstats pipelines.

This module loads and validates YAML run-spec files used by CLI workflows.
It provides one strict schema so CLI and SDK execution paths consume the
same pipeline description.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Sequence, cast

import yaml

from core.errors import TickStatsRunSpecError

RunSpecCommand = Literal["run", "versions", "show"]
SUPPORTED_RUN_SPEC_COMMANDS: tuple[RunSpecCommand, ...] = ("run", "versions", "show")


@dataclass(frozen=True)
class RunSpecDefaults:
    """Default values applied to run-spec steps."""

    data_root: str | None = None
    dataset_name: str | None = None


@dataclass(frozen=True)
class RunSpecStep:
    """One runnable pipeline step from a run-spec file."""

    command: RunSpecCommand
    args: Mapping[str, object]


@dataclass(frozen=True)
class RunSpec:
    """Validated run-spec root object."""

    version: int
    defaults: RunSpecDefaults
    steps: tuple[RunSpecStep, ...]


def load_run_spec(spec_path: str) -> RunSpec:
    """Load and validate a YAML run-spec from disk.

    Args:
        spec_path: File path to YAML run-spec.

    Returns:
        Fully validated run-spec object.

    Raises:
        TickStatsRunSpecError: If file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(spec_path)
    root_mapping = _expect_mapping(payload, "run spec root")
    version = _parse_version(root_mapping)
    defaults = _parse_defaults(root_mapping)
    steps = _parse_steps(root_mapping)
    _validate_keys(root_mapping, {"version", "defaults", "steps"}, "Run spec")
    return RunSpec(version=version, defaults=defaults, steps=steps)


def _load_yaml_payload(spec_path: str) -> object:
    spec_file = Path(spec_path).expanduser().resolve()
    if not spec_file.exists():
        raise TickStatsRunSpecError(
            f"Run spec file does not exist at {spec_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(spec_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise TickStatsRunSpecError(
            f"Failed to read run spec at {spec_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise TickStatsRunSpecError(
            f"Failed to parse YAML run spec at {spec_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise TickStatsRunSpecError(
            f"Run spec at {spec_file} is empty. Define 'version' and 'steps'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise TickStatsRunSpecError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise TickStatsRunSpecError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise TickStatsRunSpecError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise TickStatsRunSpecError("Run spec field 'version' must be an integer. Set version: 1.")
    if raw_version != 1:
        raise TickStatsRunSpecError(f"Unsupported run spec version {raw_version}. Use version: 1.")
    return raw_version


def _parse_defaults(root_mapping: Mapping[str, object]) -> RunSpecDefaults:
    raw_defaults = root_mapping.get("defaults")
    if raw_defaults is None:
        return RunSpecDefaults()
    defaults_mapping = _expect_mapping(raw_defaults, "run spec defaults")
    _validate_keys(defaults_mapping, {"data_root", "dataset"}, "Run spec defaults")
    return RunSpecDefaults(
        data_root=_optional_string(defaults_mapping, "data_root"),
        dataset_name=_optional_string(defaults_mapping, "dataset"),
    )


def _parse_steps(root_mapping: Mapping[str, object]) -> tuple[RunSpecStep, ...]:
    raw_steps = root_mapping.get("steps")
    if raw_steps is None:
        raise TickStatsRunSpecError(
            "Run spec missing required field 'steps'. Add a non-empty list of commands."
        )
    step_rows = _expect_sequence(raw_steps, "run spec steps")
    if len(step_rows) == 0:
        raise TickStatsRunSpecError("Run spec field 'steps' must include at least one step.")
    return tuple(_parse_step(step_value, index) for index, step_value in enumerate(step_rows))


def _parse_step(step_value: object, step_index: int) -> RunSpecStep:
    context = f"run spec step #{step_index + 1}"
    step_mapping = _expect_mapping(step_value, context)
    raw_command = step_mapping.get("command")
    if not isinstance(raw_command, str):
        raise TickStatsRunSpecError(f"Invalid {context}: field 'command' must be a string.")
    if raw_command not in SUPPORTED_RUN_SPEC_COMMANDS:
        supported_rows = ", ".join(SUPPORTED_RUN_SPEC_COMMANDS)
        raise TickStatsRunSpecError(
            f"Unsupported command '{raw_command}' in {context}. Use one of: {supported_rows}."
        )
    return RunSpecStep(
        command=cast(RunSpecCommand, raw_command),
        args=_parse_step_args(step_mapping, context),
    )


def _parse_step_args(step_mapping: Mapping[str, object], context: str) -> Mapping[str, object]:
    if "args" in step_mapping:
        if len(step_mapping.keys() - {"command", "args"}) > 0:
            raise TickStatsRunSpecError(
                f"Invalid {context}: when using 'args', do not mix inline keys."
            )
        return _expect_mapping(step_mapping["args"], f"{context} args")
    return {key: value for key, value in step_mapping.items() if key != "command"}


def _optional_string(mapping: Mapping[str, object], field_name: str) -> str | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, str):
        normalized_value = raw_value.strip()
        return normalized_value if normalized_value else None
    raise TickStatsRunSpecError(f"Run spec field '{field_name}' must be a string when provided.")


def _validate_keys(mapping: Mapping[str, object], allowed_keys: set[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed_keys)
    if unknown_keys:
        raise TickStatsRunSpecError(f"{context} contains unknown fields: {', '.join(unknown_keys)}.")
