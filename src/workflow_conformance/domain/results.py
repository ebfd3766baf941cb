from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

Severity = Literal["error", "info"]


@dataclass(frozen=True)
class CheckResult:
    check_id: str
    description: str
    passed: bool
    detail: str
    severity: Severity = "error"

    @property
    def is_failure(self) -> bool:
        # Informational results are reported but never fail a run.
        return not self.passed and self.severity == "error"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.check_id,
            "description": self.description,
            "passed": self.passed,
            "severity": self.severity,
            "detail": self.detail,
        }
