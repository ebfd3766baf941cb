from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from workflow_conformance.adapters.parser import parse
from workflow_conformance.checks.checklist import Checklist, load_checklist
from workflow_conformance.checks.predicates import EqualsCheck, OrderCheck, StepCheck
from workflow_conformance.checks.runner import run_checklist
from workflow_conformance.config.validate import ConfigValidationError

CUSTOM = """\
name: node
checks:
  - id: runner
    kind: equals
    path: jobs.build.runs-on
    value: ubuntu-latest
  - id: setup-node
    kind: step
    steps_path: jobs.build.steps
    select: {uses_prefix: "actions/setup-node@"}
    expect:
      uses: actions/setup-node@v4
      with: {node-version: 20}
  - id: order
    kind: order
    steps_path: jobs.build.steps
    before: {uses_prefix: "actions/checkout@"}
    after: {uses_prefix: "actions/setup-node@"}
  - id: extras
    kind: extra_keys
    allowed: [name, "on", jobs]
"""

WORKFLOW = """\
name: ci
on: [push]
jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
      - uses: actions/setup-node@v4
        with:
          node-version: 20
"""


def test_load_checklist_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "node.yml"
    path.write_text(CUSTOM, encoding="utf-8")

    checklist = load_checklist(path)
    assert checklist.name == "node"
    assert checklist.ids() == ["runner", "setup-node", "order", "extras"]
    assert isinstance(checklist.checks[0], EqualsCheck)
    assert isinstance(checklist.checks[1], StepCheck)
    assert isinstance(checklist.checks[2], OrderCheck)
    assert checklist.checks[3].severity == "info"

    results = run_checklist(parse(WORKFLOW), checklist)
    assert all(r.passed for r in results), results


def test_bare_list_checklist_takes_name_from_file(tmp_path: Path) -> None:
    path = tmp_path / "minimal.yml"
    path.write_text("- {id: n, kind: exists, path: name}\n", encoding="utf-8")
    checklist = load_checklist(path)
    assert checklist.name == "minimal"
    assert checklist.ids() == ["n"]


def test_unknown_kind_is_reported_with_location(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("checks:\n  - {id: a, kind: schema, path: name}\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError) as exc:
        load_checklist(path)
    assert exc.value.issues
    assert exc.value.issues[0].path.startswith("checks.0")


def test_missing_required_field(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("checks:\n  - {id: a, kind: equals, path: name}\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError) as exc:
        load_checklist(path)
    assert any(issue.path.endswith("value") for issue in exc.value.issues)


def test_duplicate_ids_are_rejected() -> None:
    with pytest.raises(ValidationError, match="duplicate check id"):
        Checklist(
            checks=[
                EqualsCheck(id="a", path="name", value="x"),
                EqualsCheck(id="a", path="name", value="y"),
            ]
        )


def test_empty_checklist_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Checklist(checks=[])


def test_non_mapping_checklist_file(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("just text\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError, match="Checklist must be a mapping or a list"):
        load_checklist(path)


def test_invalid_yaml_checklist(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("checks: [\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError, match="Invalid YAML"):
        load_checklist(path)


def test_missing_checklist_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigValidationError, match="Unable to read checklist"):
        load_checklist(tmp_path / "missing.yml")


def test_empty_steps_path_segment_is_rejected_at_load(tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text(
        "\n".join(
            [
                "- id: order",
                "  kind: order",
                "  steps_path: jobs..steps",
                "  before: {name: a}",
                "  after: {name: b}",
                "- {id: n, kind: exists, path: name}",
                "",
            ]
        ),
        encoding="utf-8",
    )
    with pytest.raises(ConfigValidationError) as exc:
        load_checklist(path)
    assert exc.value.issues[0].path == "checks.0.order.steps_path"
    assert "empty segment" in exc.value.issues[0].message
