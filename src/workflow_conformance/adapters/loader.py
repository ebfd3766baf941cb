from __future__ import annotations

from pathlib import Path

import structlog

from workflow_conformance.domain.errors import Empty, NotFound, ReadFailure

log = structlog.get_logger(__name__)


def load(path: str | Path) -> str:
    """Read the workflow file as UTF-8 text.

    Raises NotFound, ReadFailure or Empty; nothing else is touched.
    """
    target = Path(path)
    if not target.exists():
        raise NotFound("Workflow file not found", path=target)
    if not target.is_file():
        raise NotFound("Workflow path is not a regular file", path=target)

    try:
        raw = target.read_bytes()
    except OSError as exc:
        raise ReadFailure(f"Unable to read workflow file: {exc}", path=target) from exc

    if not raw:
        raise Empty("Workflow file is empty", path=target)

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ReadFailure(f"Workflow file is not valid UTF-8: {exc}", path=target) from exc

    if not text.strip():
        raise Empty("Workflow file contains only whitespace", path=target)

    log.debug("workflow.loaded", path=str(target), size=len(raw))
    return text
