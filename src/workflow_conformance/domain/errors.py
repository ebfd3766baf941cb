from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from workflow_conformance.domain.results import CheckResult


class WorkflowLoadError(Exception):
    """Fatal error raised before any check runs (the file could not be loaded or parsed)."""

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        self.path = str(path) if path is not None else None
        self.message = message
        super().__init__(f"{self.path}: {message}" if self.path else message)


class NotFound(WorkflowLoadError):
    """The workflow file does not exist."""


class ReadFailure(WorkflowLoadError):
    """The workflow file exists but could not be read (permissions, I/O, encoding)."""


class Empty(WorkflowLoadError):
    """The workflow file has no content."""


class WorkflowSyntaxError(WorkflowLoadError):
    """The text is not valid YAML. `line` and `column` are 1-based when known."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.line = line
        self.column = column
        if line is not None:
            position = f"line {line}" if column is None else f"line {line}, column {column}"
            message = f"{message} ({position})"
        super().__init__(message, path=path)


class UnexpectedRootType(WorkflowLoadError):
    """The document parsed, but its root is not a mapping."""

    def __init__(
        self, found_type: str, *, path: str | Path | None = None
    ) -> None:
        self.found_type = found_type
        super().__init__(f"YAML root must be a mapping/object, found {found_type}", path=path)


class CheckFailed(Exception):
    """Raised by a predicate to signal that its check did not hold."""

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(description)


class ConformanceError(AssertionError):
    def __init__(self, failures: Iterable[CheckResult]):
        self.failures = list(failures)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = ["Workflow does not conform:"]
        for result in self.failures:
            lines.append(f"- {result.check_id}: {result.detail}")
        return "\n".join(lines)
