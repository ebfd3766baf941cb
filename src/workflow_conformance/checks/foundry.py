"""Built-in checklist for a Foundry project's ``.github/workflows/test.yml``."""
from __future__ import annotations

from workflow_conformance.checks.checklist import Checklist
from workflow_conformance.checks.predicates import (
    ContainsCheck,
    EqualsCheck,
    ExistsCheck,
    ExtraKeysCheck,
    OrderCheck,
    RequiredKeysCheck,
    StepCheck,
    StepExpectation,
    StepSelector,
)
from workflow_conformance.config.settings import DEFAULT_JOB

REQUIRED_ROOT_KEYS = ("permissions", "name", "on", "env", "jobs")

CHECKOUT_ACTION = "actions/checkout@v4"
TOOLCHAIN_ACTION = "foundry-rs/foundry-toolchain@v1"
BUILD_STEP_NAME = "Run Forge build"
TEST_STEP_NAME = "Run Forge tests"


def foundry_checklist(job: str = DEFAULT_JOB) -> Checklist:
    job_path = f"jobs.{job}"
    steps_path = f"{job_path}.steps"

    checks = [
        EqualsCheck(id="root.name", path="name", value="test"),
        EqualsCheck(id="root.permissions.contents", path="permissions.contents", value="read"),
        ContainsCheck(id="triggers.push.branches", path="on.push.branches", item="main"),
        ExistsCheck(
            id="triggers.pull_request",
            path="on.pull_request",
            description="on.pull_request trigger is configured (any value, including null)",
        ),
        EqualsCheck(id="env.foundry_profile", path="env.FOUNDRY_PROFILE", value="ci"),
        EqualsCheck(id="job.name", path=f"{job_path}.name", value="Foundry project"),
        EqualsCheck(id="job.runs_on", path=f"{job_path}.runs-on", value="ubuntu-latest"),
        EqualsCheck(id="job.fail_fast", path=f"{job_path}.strategy.fail-fast", value=True),
        StepCheck(
            id="steps.checkout",
            description="checkout v4 with recursive submodules",
            steps_path=steps_path,
            select=StepSelector(uses_prefix="actions/checkout@"),
            expect=StepExpectation(uses=CHECKOUT_ACTION, with_={"submodules": "recursive"}),
        ),
        StepCheck(
            id="steps.toolchain",
            description="Foundry toolchain v1 installed with the nightly version",
            steps_path=steps_path,
            select=StepSelector(uses_prefix="foundry-rs/foundry-toolchain@"),
            expect=StepExpectation(uses=TOOLCHAIN_ACTION, with_={"version": "nightly"}),
        ),
        StepCheck(
            id="steps.build",
            description="build step runs forge --version and forge build",
            steps_path=steps_path,
            select=StepSelector(name=BUILD_STEP_NAME),
            expect=StepExpectation(
                id="build",
                run_patterns=[r"forge\s+--version", r"forge\s+build"],
            ),
        ),
        StepCheck(
            id="steps.test",
            description="test step runs forge test with -vvv verbosity",
            steps_path=steps_path,
            select=StepSelector(name=TEST_STEP_NAME),
            expect=StepExpectation(id="test", run_patterns=[r"forge\s+test\s+-vvv"]),
        ),
        OrderCheck(
            id="order.checkout_before_toolchain",
            description="checkout step appears before Foundry installation",
            steps_path=steps_path,
            before=StepSelector(uses=CHECKOUT_ACTION),
            after=StepSelector(uses=TOOLCHAIN_ACTION),
        ),
        OrderCheck(
            id="order.build_before_test",
            description="build step occurs before test step",
            steps_path=steps_path,
            before=StepSelector(name=BUILD_STEP_NAME),
            after=StepSelector(name=TEST_STEP_NAME),
        ),
        RequiredKeysCheck(id="root.required_keys", keys=list(REQUIRED_ROOT_KEYS)),
        ExtraKeysCheck(id="root.extra_keys", allowed=list(REQUIRED_ROOT_KEYS)),
    ]
    return Checklist(name="foundry", checks=checks)
