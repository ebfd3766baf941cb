"""Declarative check descriptors.

Every descriptor is a frozen pydantic model discriminated by ``kind``, so a
checklist can be written in Python or loaded from YAML and validated the same
way. ``evaluate`` returns a short description of what was found on success and
raises ``CheckFailed`` otherwise; it never mutates the document and never lets
a missing path escape as ``KeyError``/``TypeError``.
"""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from workflow_conformance.domain.document import (
    MISSING,
    ConfigDocument,
    Lookup,
    find_index,
    format_path,
    is_mapping,
    is_sequence,
    lookup,
    split_path,
    type_name,
)
from workflow_conformance.domain.errors import CheckFailed
from workflow_conformance.domain.results import Severity


def show(value: Any) -> str:
    """Render a value the way it would read in YAML."""
    if value is MISSING:
        return "<missing>"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if is_mapping(value):
        return "{" + ", ".join(f"{key}: {show(item)}" for key, item in value.items()) + "}"
    if is_sequence(value):
        return "[" + ", ".join(show(item) for item in value) + "]"
    return str(value)


def same_value(found: Any, expected: Any) -> bool:
    """Compare a document value with a literal, recursing into mappings and sequences.

    Frozen documents hold tuples and ``MappingProxyType`` while literals hold
    lists and dicts, so containers compare by content, not by type.
    """
    if is_mapping(found) or is_mapping(expected):
        if not (is_mapping(found) and is_mapping(expected)):
            return False
        if set(found) != set(expected):
            return False
        return all(same_value(found[key], expected[key]) for key in found)
    if is_sequence(found) or is_sequence(expected):
        if not (is_sequence(found) and is_sequence(expected)):
            return False
        if len(found) != len(expected):
            return False
        return all(same_value(a, b) for a, b in zip(found, expected))
    # `True == 1` in Python; YAML scalars of different types must not compare equal.
    if isinstance(found, bool) or isinstance(expected, bool):
        return isinstance(found, bool) and isinstance(expected, bool) and found == expected
    if isinstance(found, str) != isinstance(expected, str):
        return False
    return bool(found == expected)


def _compile_patterns(patterns: Sequence[str]) -> list[str]:
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
    return list(patterns)


def _require(found: Lookup) -> Any:
    if not found.found:
        raise CheckFailed(found.describe_missing())
    return found.value


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class _Check(FrozenModel):
    id: str = Field(min_length=1)
    description: str | None = None
    severity: Severity = "error"

    def summary(self) -> str:
        return self.description or self._default_summary()

    def _default_summary(self) -> str:
        raise NotImplementedError

    def evaluate(self, document: ConfigDocument) -> str:
        raise NotImplementedError


class _PathCheck(_Check):
    path: str

    @field_validator("path")
    @classmethod
    def _validate_path(cls, value: str) -> str:
        split_path(value)
        return value


class ExistsCheck(_PathCheck):
    kind: Literal["exists"] = "exists"

    def _default_summary(self) -> str:
        return f"{format_path(split_path(self.path))} is present"

    def evaluate(self, document: ConfigDocument) -> str:
        value = _require(lookup(document, self.path))
        return f"{self.path} = {show(value)}"


class EqualsCheck(_PathCheck):
    kind: Literal["equals"] = "equals"
    value: Any

    def _default_summary(self) -> str:
        return f"{self.path} equals {show(self.value)}"

    def evaluate(self, document: ConfigDocument) -> str:
        found = _require(lookup(document, self.path))
        if not same_value(found, self.value):
            raise CheckFailed(
                f"{self.path}: expected {show(self.value)}, found {show(found)}"
            )
        return f"{self.path} = {show(found)}"


class ContainsCheck(_PathCheck):
    kind: Literal["contains"] = "contains"
    item: Any

    def _default_summary(self) -> str:
        return f"{self.path} contains {show(self.item)}"

    def evaluate(self, document: ConfigDocument) -> str:
        found = _require(lookup(document, self.path))
        if not is_sequence(found):
            raise CheckFailed(f"{self.path}: expected a sequence, found {type_name(found)}")
        if not any(same_value(element, self.item) for element in found):
            raise CheckFailed(f"{self.path}: {show(self.item)} not in {show(found)}")
        return f"{self.path} = {show(found)}"


class MatchesCheck(_PathCheck):
    kind: Literal["matches"] = "matches"
    patterns: list[str] = Field(min_length=1)

    @field_validator("patterns")
    @classmethod
    def _validate_patterns(cls, value: list[str]) -> list[str]:
        return _compile_patterns(value)

    def _default_summary(self) -> str:
        return f"{self.path} matches " + " and ".join(f"/{p}/" for p in self.patterns)

    def evaluate(self, document: ConfigDocument) -> str:
        found = _require(lookup(document, self.path))
        if not isinstance(found, str):
            raise CheckFailed(f"{self.path}: expected a string, found {type_name(found)}")
        missing = [p for p in self.patterns if re.search(p, found) is None]
        if missing:
            raise CheckFailed(
                f"{self.path}: no match for " + ", ".join(f"/{p}/" for p in missing)
            )
        return f"{self.path} matches {len(self.patterns)} pattern(s)"


class StepSelector(FrozenModel):
    """Identifies a step. All given criteria must hold; the first matching step wins."""

    uses_prefix: str | None = None
    uses: str | None = None
    name: str | None = None
    id: str | None = None

    @model_validator(mode="after")
    def _require_criterion(self) -> StepSelector:
        if not any(v is not None for v in (self.uses_prefix, self.uses, self.name, self.id)):
            raise ValueError("step selector needs at least one of uses_prefix, uses, name, id")
        return self

    def matches(self, step: Any) -> bool:
        if not is_mapping(step):
            return False
        uses = step.get("uses")
        if self.uses_prefix is not None:
            if not isinstance(uses, str) or not uses.startswith(self.uses_prefix):
                return False
        if self.uses is not None and not (isinstance(uses, str) and uses == self.uses):
            return False
        if self.name is not None and not same_value(step.get("name", MISSING), self.name):
            return False
        if self.id is not None and not same_value(step.get("id", MISSING), self.id):
            return False
        return True

    def __str__(self) -> str:
        parts = []
        if self.uses_prefix is not None:
            parts.append(f'uses starting with "{self.uses_prefix}"')
        if self.uses is not None:
            parts.append(f'uses "{self.uses}"')
        if self.name is not None:
            parts.append(f'name "{self.name}"')
        if self.id is not None:
            parts.append(f'id "{self.id}"')
        return "step with " + " and ".join(parts)


class StepExpectation(FrozenModel):
    uses: str | None = None
    name: str | None = None
    id: str | None = None
    with_: dict[str, Any] = Field(default_factory=dict, alias="with")
    run_patterns: list[str] = Field(default_factory=list)

    @field_validator("run_patterns")
    @classmethod
    def _validate_patterns(cls, value: list[str]) -> list[str]:
        return _compile_patterns(value)

    def problems(self, step: Mapping[str, Any]) -> list[str]:
        found: list[str] = []
        for key in ("uses", "name", "id"):
            expected = getattr(self, key)
            if expected is None:
                continue
            actual = step.get(key, MISSING)
            if not same_value(actual, expected):
                found.append(f"{key}: expected {show(expected)}, found {show(actual)}")

        if self.with_:
            options = step.get("with", MISSING)
            if not is_mapping(options):
                found.append(f"with: expected a mapping, found {type_name(options)}")
            else:
                for key, expected in self.with_.items():
                    actual = options.get(key, MISSING)
                    if not same_value(actual, expected):
                        found.append(
                            f"with.{key}: expected {show(expected)}, found {show(actual)}"
                        )

        if self.run_patterns:
            run = step.get("run", MISSING)
            if not isinstance(run, str):
                found.append(f"run: expected a string, found {type_name(run)}")
            else:
                for pattern in self.run_patterns:
                    if re.search(pattern, run) is None:
                        found.append(f"run: no match for /{pattern}/")
        return found


def _steps(document: ConfigDocument, steps_path: str) -> Sequence[Any]:
    steps = _require(lookup(document, steps_path))
    if not is_sequence(steps):
        raise CheckFailed(f"{steps_path}: expected a sequence, found {type_name(steps)}")
    return steps


class _StepsCheck(_Check):
    steps_path: str

    @field_validator("steps_path")
    @classmethod
    def _validate_steps_path(cls, value: str) -> str:
        if not split_path(value):
            raise ValueError("steps_path must not be empty")
        return value


class StepCheck(_StepsCheck):
    kind: Literal["step"] = "step"
    select: StepSelector
    expect: StepExpectation = Field(default_factory=StepExpectation)

    def _default_summary(self) -> str:
        return f"{self.steps_path} has a {self.select}"

    def evaluate(self, document: ConfigDocument) -> str:
        steps = _steps(document, self.steps_path)
        index = find_index(steps, self.select.matches)
        if index is None:
            raise CheckFailed(f"{self.steps_path}: no {self.select} found")
        problems = self.expect.problems(steps[index])
        if problems:
            raise CheckFailed(f"{self.steps_path}[{index}]: " + "; ".join(problems))
        return f"found at {self.steps_path}[{index}]"


class OrderCheck(_StepsCheck):
    kind: Literal["order"] = "order"
    before: StepSelector
    after: StepSelector

    def _default_summary(self) -> str:
        return f"{self.before} runs before {self.after}"

    def evaluate(self, document: ConfigDocument) -> str:
        steps = _steps(document, self.steps_path)
        first = find_index(steps, self.before.matches)
        second = find_index(steps, self.after.matches)
        if first is None or second is None:
            absent = [str(sel) for sel, idx in ((self.before, first), (self.after, second)) if idx is None]
            raise CheckFailed(f"{self.steps_path}: no " + " and no ".join(absent) + " found")
        if not first < second:
            raise CheckFailed(
                f"{self.steps_path}: {self.before} is at index {first}, "
                f"not before {self.after} at index {second}"
            )
        return f"{self.steps_path}[{first}] before {self.steps_path}[{second}]"


def _mapping_at(document: ConfigDocument, path: str) -> Mapping[Any, Any]:
    node = document if not path else _require(lookup(document, path))
    if not is_mapping(node):
        raise CheckFailed(f"{format_path(split_path(path))}: expected a mapping, found {type_name(node)}")
    return node


class RequiredKeysCheck(_PathCheck):
    kind: Literal["required_keys"] = "required_keys"
    path: str = ""
    keys: list[str] = Field(min_length=1)

    def _default_summary(self) -> str:
        return f"{format_path(split_path(self.path))} has keys " + ", ".join(self.keys)

    def evaluate(self, document: ConfigDocument) -> str:
        node = _mapping_at(document, self.path)
        missing = [key for key in self.keys if key not in node]
        if missing:
            raise CheckFailed(
                f"{format_path(split_path(self.path))}: missing key(s) " + ", ".join(missing)
            )
        return f"all {len(self.keys)} key(s) present"


class ExtraKeysCheck(_PathCheck):
    """Lists keys outside ``allowed``. Reported at ``info`` severity by default."""

    kind: Literal["extra_keys"] = "extra_keys"
    path: str = ""
    allowed: list[str]
    severity: Severity = "info"

    def _default_summary(self) -> str:
        return f"{format_path(split_path(self.path))} has no keys beyond " + ", ".join(self.allowed)

    def evaluate(self, document: ConfigDocument) -> str:
        node = _mapping_at(document, self.path)
        extras = [str(key) for key in node if key not in self.allowed]
        if extras:
            raise CheckFailed(
                f"{format_path(split_path(self.path))}: additional key(s) " + ", ".join(extras)
            )
        return "no additional keys"
