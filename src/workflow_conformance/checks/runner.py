from __future__ import annotations

import structlog

from workflow_conformance.checks.checklist import Check, Checklist
from workflow_conformance.domain.document import ConfigDocument
from workflow_conformance.domain.errors import CheckFailed
from workflow_conformance.domain.results import CheckResult

log = structlog.get_logger(__name__)


def evaluate(check: Check, document: ConfigDocument) -> CheckResult:
    try:
        detail = check.evaluate(document)
    except CheckFailed as exc:
        if check.severity == "error":
            log.info("check.failed", check_id=check.id, detail=exc.description)
        return CheckResult(
            check_id=check.id,
            description=check.summary(),
            passed=False,
            detail=exc.description,
            severity=check.severity,
        )
    return CheckResult(
        check_id=check.id,
        description=check.summary(),
        passed=True,
        detail=detail,
        severity=check.severity,
    )


def run_checklist(document: ConfigDocument, checklist: Checklist) -> list[CheckResult]:
    """Evaluate every check in declaration order. A failing check never stops the run."""
    results = [evaluate(check, document) for check in checklist.checks]
    log.debug(
        "checklist.completed",
        checklist=checklist.name,
        total=len(results),
        failed=sum(1 for r in results if r.is_failure),
    )
    return results
