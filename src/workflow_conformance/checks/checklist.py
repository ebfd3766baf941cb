from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import Field, ValidationError, model_validator

from workflow_conformance.checks.predicates import (
    ContainsCheck,
    EqualsCheck,
    ExistsCheck,
    ExtraKeysCheck,
    FrozenModel,
    MatchesCheck,
    OrderCheck,
    RequiredKeysCheck,
    StepCheck,
)
from workflow_conformance.config.validate import (
    ConfigValidationError,
    ConfigValidationIssue,
    issues_from_pydantic_error,
)

Check = Annotated[
    ExistsCheck
    | EqualsCheck
    | ContainsCheck
    | MatchesCheck
    | StepCheck
    | OrderCheck
    | RequiredKeysCheck
    | ExtraKeysCheck,
    Field(discriminator="kind"),
]


class Checklist(FrozenModel):
    name: str = "custom"
    checks: list[Check] = Field(min_length=1)

    @model_validator(mode="after")
    def _unique_ids(self) -> Checklist:
        seen: set[str] = set()
        dupes: list[str] = []
        for check in self.checks:
            if check.id in seen and check.id not in dupes:
                dupes.append(check.id)
            seen.add(check.id)
        if dupes:
            raise ValueError(f"duplicate check id(s): {', '.join(dupes)}")
        return self

    def ids(self) -> list[str]:
        return [check.id for check in self.checks]


def load_checklist(path: str | Path) -> Checklist:
    """Load a checklist definition from YAML.

    The file is either a mapping with ``checks`` (and optional ``name``) or a
    bare list of checks.
    """
    source = Path(path)
    try:
        raw: Any = yaml.safe_load(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigValidationError(
            [ConfigValidationIssue(path=str(source), message=f"Unable to read checklist: {exc}")]
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigValidationError(
            [ConfigValidationIssue(path=str(source), message=f"Invalid YAML: {exc}")]
        ) from exc

    if isinstance(raw, list):
        raw = {"name": source.stem, "checks": raw}
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            [ConfigValidationIssue(path=str(source), message="Checklist must be a mapping or a list")]
        )
    raw.setdefault("name", source.stem)

    try:
        return Checklist.model_validate(raw)
    except ValidationError as exc:
        raise ConfigValidationError(issues_from_pydantic_error(exc)) from exc
