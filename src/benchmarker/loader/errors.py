"""Formatting of scenario validation errors for humans and CI logs.

Human mode prints an annotated snippet of the offending source line;
CI mode prints one ``file:line:col -- field: message`` line per error.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from benchmarker.loader.validator import ValidationErrorDetail


# Pydantic error type -> error code
ERROR_CODES: dict[str, str] = {
    "extra_forbidden": "E001",
    "missing": "E002",
    "value_error": "E003",
    "less_than_equal": "E003",
    "greater_than_equal": "E003",
    "greater_than": "E003",
    "string_type": "E004",
    "int_type": "E004",
    "int_parsing": "E004",
    "float_type": "E004",
    "float_parsing": "E004",
    "list_type": "E004",
    "model_type": "E004",
    "literal_error": "E005",
    "yaml_syntax_error": "E006",
    "empty_file": "E007",
    "empty_input": "E007",
}

ERROR_DESCRIPTIONS: dict[str, str] = {
    "E001": "unknown field",
    "E002": "required field missing",
    "E003": "invalid value",
    "E004": "type mismatch",
    "E005": "invalid literal",
    "E006": "YAML syntax error",
    "E007": "empty input",
}


def error_code(error_type: str) -> str:
    """Map a Pydantic error type to an error code (E999 if unknown)."""
    return ERROR_CODES.get(error_type, "E999")


class ErrorFormatter:
    """Formats ValidationErrorDetail lists for display.

    Args:
        ci_mode: Use concise CI output. None auto-detects from the CI
            environment variable.
    """

    def __init__(self, ci_mode: bool | None = None) -> None:
        if ci_mode is None:
            ci_mode = os.environ.get("CI", "").lower() in ("true", "1", "yes")
        self.ci_mode = ci_mode

    def format_error(
        self,
        error: ValidationErrorDetail,
        source_lines: list[str],
        filename: str,
    ) -> str:
        if self.ci_mode:
            hint = f" ({error.suggestion})" if error.suggestion else ""
            return (
                f"{filename}:{error.line or 0}:{error.col or 0} -- "
                f"{error.field}: {error.message}{hint}"
            )

        code = error_code(error.type)
        lines = [f"error[{code}]: {ERROR_DESCRIPTIONS.get(code, 'validation error')}"]
        if error.line is None:
            lines += [f"  --> {filename}", "   |", f"   | {error.field}: {error.message}"]
        else:
            lines += [f"  --> {filename}:{error.line}:{error.col or 1}", "   |"]
            index = error.line - 1
            if 0 <= index < len(source_lines):
                text = source_lines[index].rstrip()
                gutter = str(error.line)
                key = error.field.rsplit(".", 1)[-1]
                start = text.find(key)
                lines.append(f" {gutter} | {text}")
                if start >= 0:
                    marker = " " * start + "^" * len(key)
                    lines.append(f" {' ' * len(gutter)} | {marker} {error.message}")
                else:
                    lines.append(f" {' ' * len(gutter)} | {error.message}")
            else:
                lines.append(f"   | {error.message}")
        lines.append("   |")
        if error.suggestion:
            lines.append(f"   = help: {error.suggestion}")
        return "\n".join(lines)

    def format_all(
        self,
        errors: list[ValidationErrorDetail],
        source: str,
        filename: str,
    ) -> str:
        """Format every error, separated by blank lines."""
        source_lines = source.splitlines()
        return "\n\n".join(
            self.format_error(error, source_lines, filename) for error in errors
        )
