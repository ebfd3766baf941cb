from __future__ import annotations

import logging
import os
import socket
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog
import yaml

VALID_WORKFLOW = """\
name: test

on:
  push:
    branches:
      - main
  pull_request:

permissions:
  contents: read

env:
  FOUNDRY_PROFILE: ci

jobs:
  check:
    strategy:
      fail-fast: true

    name: Foundry project
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
        with:
          submodules: recursive

      - name: Install Foundry
        uses: foundry-rs/foundry-toolchain@v1
        with:
          version: nightly

      - name: Run Forge build
        run: |
          forge --version
          forge build --sizes
        id: build

      - name: Run Forge tests
        run: |
          forge test -vvv
        id: test
"""

_ENV_KEYS = (
    "CONFIG_PATH",
    "WORKFLOW_PATH",
    "WORKFLOW_JOB",
    "CHECKLIST_PATH",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_JSON",
    # Nested form (supported by pydantic-settings)
    "WORKFLOW__PATH",
    "WORKFLOW__JOB",
    "CHECKLIST__PATH",
    "OBSERVABILITY__LOG_LEVEL",
)


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_path = repo_root / "src"
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so that values written later (e.g. by load_dotenv) are undone too.
    for key in _ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_logging() -> Any:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """The checker never talks to the network; fail loudly if anything tries."""
    if (os.environ.get("ALLOW_NETWORK_TESTS") or "").strip().lower() in {"1", "true", "yes"}:
        return

    def _blocked(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError(
            "Network access is disabled in tests (set ALLOW_NETWORK_TESTS=1 to override)."
        )

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked, raising=True)


@pytest.fixture
def valid_workflow_text() -> str:
    return VALID_WORKFLOW


@pytest.fixture
def workflow_data() -> dict[str, Any]:
    """A fresh, mutable copy of the valid workflow."""
    data = yaml.safe_load(VALID_WORKFLOW)
    data["on"] = data.pop(True)
    return data


@pytest.fixture
def write_workflow(tmp_path: Path) -> Callable[..., Path]:
    def _write(content: str | dict[str, Any] = VALID_WORKFLOW, name: str = "test.yml") -> Path:
        target = tmp_path / ".github" / "workflows" / name
        target.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else yaml.safe_dump(content, sort_keys=False)
        target.write_text(text, encoding="utf-8")
        return target

    return _write
