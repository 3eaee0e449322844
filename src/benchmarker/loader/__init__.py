"""Benchmarker YAML loader - scenario definition parsing and validation."""

from benchmarker.loader.validator import (
    ValidationErrorDetail,
    validate_scenario_file,
    validate_scenario_string,
)
from benchmarker.loader.yaml_parser import (
    YAMLParseError,
    parse_yaml_file,
    parse_yaml_with_lines,
)

__all__ = [
    "ValidationErrorDetail",
    "YAMLParseError",
    "parse_yaml_file",
    "parse_yaml_with_lines",
    "validate_scenario_file",
    "validate_scenario_string",
]
