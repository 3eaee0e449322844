"""Line-tracking YAML parsing for scenario definition files.

Records the 1-indexed (line, column) of every mapping key so that
validation errors can point at the offending line of the user's file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


class YAMLParseError(Exception):
    """Raised when a scenario file is not valid YAML.

    Attributes:
        message: Description of the syntax error.
        line: 1-indexed line of the error, if known.
        column: 1-indexed column of the error, if known.
        filename: Name of the file being parsed, or '<string>'.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        filename: str = "<string>",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename


class _PositionLoader(yaml.SafeLoader):
    """SafeLoader that fills ``positions`` with dotted key paths.

    Sequence items contribute their index to the path, so the second
    reviewer's dimension is recorded as ``reviewers.1.dimension``.
    """

    def __init__(self, stream: str) -> None:
        super().__init__(stream)
        self.positions: dict[str, tuple[int, int]] = {}
        self._path: list[str] = []

    def _with_segment(self, segment: str, node: yaml.Node) -> Any:
        self._path.append(segment)
        try:
            return self._construct(node)
        finally:
            self._path.pop()

    def _construct(self, node: yaml.Node) -> Any:
        if isinstance(node, yaml.MappingNode):
            self.flatten_mapping(node)
            mapping: dict[Any, Any] = {}
            for key_node, value_node in node.value:
                key = self.construct_object(key_node, deep=True)
                if isinstance(key, str):
                    dotted = ".".join([*self._path, key])
                    mark = key_node.start_mark
                    self.positions[dotted] = (mark.line + 1, mark.column + 1)
                    mapping[key] = self._with_segment(key, value_node)
                else:
                    mapping[key] = self.construct_object(value_node, deep=True)
            return mapping
        if isinstance(node, yaml.SequenceNode):
            return [
                self._with_segment(str(index), child)
                for index, child in enumerate(node.value)
            ]
        return self.construct_object(node, deep=True)

    def load_document(self) -> Any:
        node = self.get_single_node()
        if node is None:
            return None
        return self._construct(node)


def parse_yaml_with_lines(
    source: str,
    filename: str = "<string>",
) -> tuple[dict | None, dict[str, tuple[int, int]]]:
    """Parse YAML source and return (data, positions).

    Returns (None, {}) when the document is empty or not a mapping.

    Raises:
        YAMLParseError: If the source contains YAML syntax errors.
    """
    loader = _PositionLoader(source)
    try:
        data = loader.load_document()
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        raise YAMLParseError(
            message=str(exc),
            line=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
            filename=filename,
        ) from exc
    finally:
        loader.dispose()

    if not isinstance(data, dict):
        return None, {}
    return data, loader.positions


def parse_yaml_file(filepath: Path) -> tuple[dict | None, dict[str, tuple[int, int]]]:
    """Parse a YAML file and return (data, positions).

    Raises:
        YAMLParseError: If the file contains YAML syntax errors.
        FileNotFoundError: If the file does not exist.
    """
    return parse_yaml_with_lines(
        filepath.read_text(encoding="utf-8"),
        filename=str(filepath),
    )
