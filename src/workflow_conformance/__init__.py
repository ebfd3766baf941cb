from __future__ import annotations

from workflow_conformance._version import __version__
from workflow_conformance.adapters.loader import load
from workflow_conformance.adapters.parser import parse
from workflow_conformance.api import assert_conformant, check_workflow
from workflow_conformance.checks.checklist import Checklist, load_checklist
from workflow_conformance.checks.foundry import foundry_checklist
from workflow_conformance.checks.report import Report, build_report
from workflow_conformance.checks.runner import run_checklist
from workflow_conformance.domain.document import MISSING, find_index, resolve
from workflow_conformance.domain.errors import (
    CheckFailed,
    ConformanceError,
    Empty,
    NotFound,
    ReadFailure,
    UnexpectedRootType,
    WorkflowLoadError,
    WorkflowSyntaxError,
)
from workflow_conformance.domain.results import CheckResult

__all__ = [
    "MISSING",
    "CheckFailed",
    "CheckResult",
    "Checklist",
    "ConformanceError",
    "Empty",
    "NotFound",
    "ReadFailure",
    "Report",
    "UnexpectedRootType",
    "WorkflowLoadError",
    "WorkflowSyntaxError",
    "__version__",
    "assert_conformant",
    "build_report",
    "check_workflow",
    "find_index",
    "foundry_checklist",
    "load",
    "load_checklist",
    "parse",
    "resolve",
    "run_checklist",
]
