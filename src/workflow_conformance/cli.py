"""CLI commands for workflow-conformance.

This module provides command-line utilities for:
- Checking a workflow file against the built-in or a custom checklist
- Listing the checks that would run
- Validating configuration
"""
from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from typing import Any

import structlog

from workflow_conformance.api import check_workflow
from workflow_conformance.checks.checklist import Checklist, load_checklist
from workflow_conformance.checks.foundry import foundry_checklist
from workflow_conformance.config.load import load_settings
from workflow_conformance.config.settings import Settings
from workflow_conformance.config.validate import ConfigValidationError
from workflow_conformance.domain.errors import WorkflowLoadError
from workflow_conformance.observability.logger import configure_logging

log = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_CHECKS_FAILED = 1
EXIT_FATAL = 2


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "workflow": {
            "path": getattr(args, "workflow", None),
            "job": getattr(args, "job", None),
        },
        "checklist": {"path": getattr(args, "checklist", None)},
    }


def _load(args: argparse.Namespace) -> tuple[Settings, Checklist]:
    settings = load_settings(overrides=_overrides(args))
    configure_logging(
        log_level=settings.observability.log_level,
        json_logs=settings.observability.json_logs,
        log_format=settings.observability.log_format,
    )
    if settings.checklist.path is not None:
        checklist = load_checklist(settings.checklist.path)
    else:
        checklist = foundry_checklist(settings.workflow.job)
    return settings, checklist


def cmd_check(args: argparse.Namespace) -> int:
    """Check the workflow file and print a report.

    Exit codes:
        0: All checks passed
        1: At least one check failed
        2: Configuration, checklist, or workflow file could not be loaded
    """
    try:
        settings, checklist = _load(args)
    except ConfigValidationError as e:
        print(f"✗ Configuration is invalid: {e}", file=sys.stderr)
        return EXIT_FATAL

    try:
        report = check_workflow(settings.workflow.path, checklist)
    except WorkflowLoadError as e:
        log.error("workflow.load_failed", path=e.path, error=e.message)
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_FATAL

    if getattr(args, "format", "text") == "json":
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(report.render_text(verbose=bool(getattr(args, "verbose", False))))
    return EXIT_OK if report.ok else EXIT_CHECKS_FAILED


def cmd_list_checks(args: argparse.Namespace) -> int:
    """Print the id and description of every check in the active checklist."""
    try:
        _, checklist = _load(args)
    except ConfigValidationError as e:
        print(f"✗ Configuration is invalid: {e}", file=sys.stderr)
        return EXIT_FATAL

    print(f"Checklist: {checklist.name} ({len(checklist.checks)} checks)")
    for check in checklist.checks:
        suffix = " [info]" if check.severity == "info" else ""
        print(f"  {check.id}: {check.summary()}{suffix}")
    return EXIT_OK


def cmd_validate_config(args: argparse.Namespace) -> int:
    """Validate configuration and exit with appropriate code.

    Exit codes:
        0: Configuration is valid
        2: Configuration is invalid (same code as the other commands)
    """
    try:
        settings = load_settings()
        print("✓ Configuration is valid")
        print(f"  - Workflow path: {settings.workflow.path}")
        print(f"  - Job: {settings.workflow.job}")
        print(f"  - Checklist: {settings.checklist.path or 'built-in (foundry)'}")
        print(f"  - Log level: {settings.observability.log_level}")
        return EXIT_OK
    except ConfigValidationError as e:
        print(f"✗ Configuration is invalid: {e}", file=sys.stderr)
        return EXIT_FATAL


def _add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--checklist",
        default=None,
        help="YAML checklist file (default: built-in Foundry checklist)",
    )
    parser.add_argument(
        "--job",
        default=None,
        help="Job whose steps the built-in checklist inspects (default: check)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-conformance",
        description="Check a CI workflow file against a conformance checklist",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check
    check_parser = subparsers.add_parser(
        "check",
        help="Check the workflow file and report every result",
    )
    check_parser.add_argument(
        "--workflow",
        default=None,
        help="Workflow file (default: .github/workflows/test.yml)",
    )
    _add_selection_arguments(check_parser)
    check_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Report format (default: text)",
    )
    check_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show details for passing checks too",
    )
    check_parser.set_defaults(func=cmd_check)

    # list-checks
    list_parser = subparsers.add_parser(
        "list-checks",
        help="List the checks in the active checklist",
    )
    _add_selection_arguments(list_parser)
    list_parser.set_defaults(func=cmd_list_checks)

    # validate-config
    validate_parser = subparsers.add_parser(
        "validate-config",
        help="Validate configuration and exit",
    )
    validate_parser.set_defaults(func=cmd_validate_config)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    return int(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
