from __future__ import annotations

from pathlib import Path

from workflow_conformance.adapters.loader import load
from workflow_conformance.adapters.parser import parse
from workflow_conformance.checks.checklist import Checklist
from workflow_conformance.checks.foundry import foundry_checklist
from workflow_conformance.checks.report import Report, build_report
from workflow_conformance.checks.runner import run_checklist
from workflow_conformance.config.settings import DEFAULT_WORKFLOW_PATH
from workflow_conformance.domain.errors import ConformanceError
from workflow_conformance.observability.logger import configure_library_logging


def check_workflow(
    path: str | Path = DEFAULT_WORKFLOW_PATH,
    checklist: Checklist | None = None,
) -> Report:
    """Load, parse and check one workflow file.

    Load and parse errors propagate; check failures are only recorded in the report.
    """
    configure_library_logging()
    text = load(path)
    document = parse(text, path=path)
    selected = checklist if checklist is not None else foundry_checklist()
    results = run_checklist(document, selected)
    return build_report(results, source=str(path), checklist=selected.name)


def assert_conformant(
    path: str | Path = DEFAULT_WORKFLOW_PATH,
    checklist: Checklist | None = None,
) -> Report:
    report = check_workflow(path, checklist)
    if not report.ok:
        raise ConformanceError(report.failures)
    return report
