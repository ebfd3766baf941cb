from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

import workflow_conformance
from workflow_conformance import (
    ConformanceError,
    NotFound,
    WorkflowSyntaxError,
    assert_conformant,
    check_workflow,
)

SRC = Path(__file__).resolve().parents[2] / "src"


def test_default_path_is_checked_from_cwd(
    write_workflow: Callable[..., Path], tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_workflow()
    monkeypatch.chdir(tmp_path)

    report = check_workflow()

    assert report.ok
    assert report.source == ".github/workflows/test.yml"
    assert report.checklist == "foundry"
    assert report.passed_count == 16


def test_every_problem_is_reported_in_one_run(
    write_workflow: Callable[..., Path], workflow_data: dict[str, Any]
) -> None:
    workflow_data["name"] = "ci"
    del workflow_data["permissions"]
    steps = workflow_data["jobs"]["check"]["steps"]
    steps[2], steps[3] = steps[3], steps[2]

    report = check_workflow(write_workflow(workflow_data))

    failed = {result.check_id for result in report.failures}
    assert failed == {
        "root.name",
        "root.permissions.contents",
        "root.required_keys",
        "order.build_before_test",
    }
    assert report.exit_code == 1


def test_assert_conformant_returns_report(write_workflow: Callable[..., Path]) -> None:
    report = assert_conformant(write_workflow())
    assert report.ok


def test_assert_conformant_raises_with_failure_details(
    write_workflow: Callable[..., Path], workflow_data: dict[str, Any]
) -> None:
    workflow_data["env"]["FOUNDRY_PROFILE"] = "default"

    with pytest.raises(ConformanceError) as exc:
        assert_conformant(write_workflow(workflow_data))

    assert [r.check_id for r in exc.value.failures] == ["env.foundry_profile"]
    assert str(exc.value).splitlines() == [
        "Workflow does not conform:",
        '- env.foundry_profile: env.FOUNDRY_PROFILE: expected "ci", found "default"',
    ]


def test_load_errors_propagate(tmp_path: Path, write_workflow: Callable[..., Path]) -> None:
    with pytest.raises(NotFound):
        check_workflow(tmp_path / "absent.yml")

    with pytest.raises(WorkflowSyntaxError) as exc:
        check_workflow(write_workflow("name: test\n  bad: indent\n"))
    assert exc.value.line == 2


def test_public_api_is_exported() -> None:
    for name in workflow_conformance.__all__:
        assert hasattr(workflow_conformance, name), name


def test_module_entry_point(write_workflow: Callable[..., Path], workflow_data: dict[str, Any]) -> None:
    env = {**os.environ, "PYTHONPATH": str(SRC), "PYTHONIOENCODING": "utf-8"}
    good = write_workflow()
    workflow_data["jobs"]["check"]["strategy"]["fail-fast"] = False
    bad = write_workflow(workflow_data, name="bad.yml")

    ok = subprocess.run(
        [sys.executable, "-m", "workflow_conformance", "check", "--workflow", str(good)],
        capture_output=True,
        encoding="utf-8",
        env=env,
        check=False,
    )
    failed = subprocess.run(
        [sys.executable, "-m", "workflow_conformance", "check", "--workflow", str(bad)],
        capture_output=True,
        encoding="utf-8",
        env=env,
        check=False,
    )

    assert ok.returncode == 0, ok.stderr
    assert ok.stdout.rstrip().endswith("OK")
    assert failed.returncode == 1, failed.stderr
    assert "✗ job.fail_fast" in failed.stdout
