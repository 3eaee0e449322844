"""Tests for ${VAR} substitution in raw config trees."""

from __future__ import annotations

import pytest

from benchmarker.errors import ConfigurationError
from benchmarker.loader.env_interpolation import env_references, interpolate


class TestInterpolate:
    def test_substitutes_nested_strings(self):
        data = {
            "system_version": "https://${HOST}:${PORT}",
            "system_versions": ["https://${HOST}:9000", "http://localhost"],
            "http_timeout_seconds": 30,
            "gateway": {"api_key": "${KEY}", "url": None},
        }
        env = {"HOST": "sv.example", "PORT": "8443", "KEY": "k-1"}

        assert interpolate(data, env) == {
            "system_version": "https://sv.example:8443",
            "system_versions": ["https://sv.example:9000", "http://localhost"],
            "http_timeout_seconds": 30,
            "gateway": {"api_key": "k-1", "url": None},
        }

    def test_does_not_mutate_input(self):
        data = {"user_id": "${USER_ID}"}
        interpolate(data, {"USER_ID": "u1"})
        assert data == {"user_id": "${USER_ID}"}

    def test_missing_variables_raise_with_every_name(self):
        data = {"a": "${ONE}", "b": ["${TWO}", "${ONE}"], "c": "${SET}"}
        with pytest.raises(ConfigurationError) as exc_info:
            interpolate(data, {"SET": "x"}, source="benchmarker.yaml")
        assert exc_info.value.message == (
            "benchmarker.yaml references unset environment variables: ONE, TWO"
        )

    def test_empty_value_counts_as_set(self):
        assert interpolate("${EMPTY}", {"EMPTY": ""}) == ""

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("BENCH_INTERP_TOKEN", "abc")
        assert interpolate(["${BENCH_INTERP_TOKEN}"]) == ["abc"]

    def test_references_in_first_seen_order(self):
        assert env_references({"x": "${B} ${A}", "y": ["${B}", 3]}) == ["B", "A"]
