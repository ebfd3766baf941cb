from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml

from workflow_conformance.domain.document import ConfigDocument, freeze, type_name
from workflow_conformance.domain.errors import UnexpectedRootType, WorkflowSyntaxError

log = structlog.get_logger(__name__)


def _restore_on_key(raw: dict[Any, Any]) -> dict[Any, Any]:
    # YAML 1.1 resolves an unquoted `on:` key to boolean True.
    if True in raw and "on" not in raw:
        return {("on" if key is True else key): value for key, value in raw.items()}
    return raw


def _syntax_error(exc: yaml.YAMLError, path: str | Path | None) -> WorkflowSyntaxError:
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None)
    message = f"Invalid YAML: {problem}" if problem else f"Invalid YAML: {exc}"
    if mark is None:
        return WorkflowSyntaxError(message, path=path)
    return WorkflowSyntaxError(message, path=path, line=mark.line + 1, column=mark.column + 1)


def parse(raw_text: str, *, path: str | Path | None = None) -> ConfigDocument:
    """Parse workflow text into a read-only document.

    `path` is only used to give error messages a location.
    """
    try:
        raw = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise _syntax_error(exc, path) from exc

    if not isinstance(raw, dict):
        raise UnexpectedRootType(type_name(raw), path=path)

    document: ConfigDocument = freeze(_restore_on_key(raw))
    log.debug("workflow.parsed", path=str(path) if path else None, keys=len(document))
    return document
