"""Scenario definition validation: YAML parsing plus Pydantic validation.

Errors from both stages are enriched with source positions and
collected so that a file reports every problem at once.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from benchmarker.loader.yaml_parser import (
    YAMLParseError,
    parse_yaml_file,
    parse_yaml_with_lines,
)
from benchmarker.models.scenario import ReviewerDefinition, ScenarioDefinition

_SCENARIO_FIELDS: list[str] = list(ScenarioDefinition.model_fields)
_REVIEWER_FIELDS: list[str] = list(ReviewerDefinition.model_fields)


@dataclass
class ValidationErrorDetail:
    """A single validation problem with its source position.

    Attributes:
        field: Dotted path of the offending field (e.g. 'reviewers.0.weight').
        message: Human-readable description.
        type: Pydantic error type, or 'yaml_syntax_error' / 'empty_file'.
        line: 1-indexed line in the source, if known.
        col: 1-indexed column in the source, if known.
        suggestion: "Did you mean ...?" hint for mistyped field names.
    """

    field: str
    message: str
    type: str
    line: int | None = None
    col: int | None = None
    suggestion: str | None = None


def _position_for(
    path: str,
    positions: dict[str, tuple[int, int]],
) -> tuple[int | None, int | None]:
    """Find the position of path, falling back to its closest known parent."""
    parts = path.split(".")
    while parts:
        candidate = ".".join(parts)
        if candidate in positions:
            return positions[candidate]
        parts.pop()
    return None, None


def _suggest(loc: tuple[Any, ...]) -> str | None:
    """Suggest a valid field name for an unknown key at loc."""
    if not loc:
        return None
    known = _REVIEWER_FIELDS if len(loc) > 1 and loc[0] == "reviewers" else _SCENARIO_FIELDS
    matches = difflib.get_close_matches(str(loc[-1]), known, n=1, cutoff=0.6)
    return f"Did you mean '{matches[0]}'?" if matches else None


def validate_definition(
    raw_data: dict[str, Any],
    positions: dict[str, tuple[int, int]],
) -> tuple[ScenarioDefinition | None, list[ValidationErrorDetail]]:
    """Validate parsed YAML data against ScenarioDefinition.

    Returns:
        (definition, []) on success, or (None, errors) on failure.
    """
    try:
        return ScenarioDefinition.model_validate(raw_data), []
    except PydanticValidationError as exc:
        errors: list[ValidationErrorDetail] = []
        for err in exc.errors():
            loc = tuple(err.get("loc", ()))
            path = ".".join(str(part) for part in loc)
            error_type = err.get("type", "unknown")
            line, col = _position_for(path, positions)
            errors.append(
                ValidationErrorDetail(
                    field=path,
                    message=err.get("msg", "Validation error"),
                    type=error_type,
                    line=line,
                    col=col,
                    suggestion=_suggest(loc) if error_type == "extra_forbidden" else None,
                )
            )
        return None, errors


def _syntax_error(exc: YAMLParseError) -> ValidationErrorDetail:
    return ValidationErrorDetail(
        field="<yaml>",
        message=exc.message,
        type="yaml_syntax_error",
        line=exc.line,
        col=exc.column,
    )


def validate_scenario_string(
    source: str,
    filename: str = "<string>",
) -> tuple[ScenarioDefinition | None, list[ValidationErrorDetail]]:
    """Validate a scenario definition given as a YAML string."""
    try:
        raw_data, positions = parse_yaml_with_lines(source, filename=filename)
    except YAMLParseError as exc:
        return None, [_syntax_error(exc)]

    if raw_data is None:
        return None, [
            ValidationErrorDetail(
                field="<yaml>",
                message="Input is empty or is not a mapping",
                type="empty_input",
            )
        ]
    return validate_definition(raw_data, positions)


def validate_scenario_file(
    filepath: Path,
) -> tuple[ScenarioDefinition | None, list[ValidationErrorDetail]]:
    """Validate a scenario definition YAML file."""
    try:
        raw_data, positions = parse_yaml_file(filepath)
    except YAMLParseError as exc:
        return None, [_syntax_error(exc)]

    if raw_data is None:
        return None, [
            ValidationErrorDetail(
                field="<yaml>",
                message="File is empty or is not a mapping",
                type="empty_file",
            )
        ]
    return validate_definition(raw_data, positions)
