from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from workflow_conformance.domain.results import CheckResult


@dataclass(frozen=True)
class Report:
    results: tuple[CheckResult, ...]
    source: str | None = None
    checklist: str | None = None
    failures: tuple[CheckResult, ...] = field(init=False)
    notes: tuple[CheckResult, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "failures", tuple(r for r in self.results if r.is_failure))
        object.__setattr__(
            self,
            "notes",
            tuple(r for r in self.results if not r.passed and r.severity == "info"),
        )

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def render_text(self, *, verbose: bool = False) -> str:
        lines: list[str] = []
        header = "Workflow conformance"
        if self.source:
            header += f": {self.source}"
        lines.append(header)

        for result in self.results:
            if result.passed:
                mark = "✓"
            elif result.severity == "info":
                mark = "i"
            else:
                mark = "✗"
            lines.append(f"  {mark} {result.check_id}: {result.description}")
            if not result.passed or verbose:
                lines.append(f"      {result.detail}")

        lines.append("")
        summary = f"{self.passed_count} passed, {self.failed_count} failed"
        if self.notes:
            summary += f", {len(self.notes)} note(s)"
        lines.append(summary)
        lines.append("OK" if self.ok else "FAILED")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "checklist": self.checklist,
            "ok": self.ok,
            "passed": self.passed_count,
            "failed": self.failed_count,
            "results": [r.to_dict() for r in self.results],
        }


def build_report(
    results: Iterable[CheckResult],
    *,
    source: str | None = None,
    checklist: str | None = None,
) -> Report:
    return Report(results=tuple(results), source=source, checklist=checklist)
