"""Flat environment variable names for nested settings.

``WORKFLOW__PATH`` style names are handled by pydantic-settings itself; this
source adds the shorter names (``WORKFLOW_PATH``, ``LOG_LEVEL``) used in CI
job definitions.
"""
from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Any


def _set_nested(data: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    node = data
    for part in path[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[path[-1]] = value


def _apply_alias_mappings(
    env: Mapping[str, str],
    data: dict[str, Any],
    mappings: Iterable[tuple[str, tuple[str, ...]]],
) -> None:
    for env_name, path in mappings:
        value = env.get(env_name)
        if value:
            _set_nested(data, path, value)


_CANONICAL_MAPPINGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    # Workflow
    ("WORKFLOW_PATH", ("workflow", "path")),
    ("WORKFLOW_JOB", ("workflow", "job")),
    # Checklist
    ("CHECKLIST_PATH", ("checklist", "path")),
    # Observability
    ("LOG_LEVEL", ("observability", "log_level")),
    ("LOG_FORMAT", ("observability", "log_format")),
    ("LOG_JSON", ("observability", "json_logs")),
)


def get_flat_env_settings_source() -> dict[str, Any]:
    data: dict[str, Any] = {}
    _apply_alias_mappings(os.environ, data, _CANONICAL_MAPPINGS)
    return data
