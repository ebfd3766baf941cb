from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_conformance.config.env_aliases import get_flat_env_settings_source

DEFAULT_WORKFLOW_PATH = Path(".github/workflows/test.yml")
DEFAULT_JOB = "check"


class _BaseSection(BaseModel):
    model_config = {"extra": "forbid"}


class WorkflowSettings(_BaseSection):
    path: Path = DEFAULT_WORKFLOW_PATH
    # Job whose steps the built-in checklist inspects.
    job: str = Field(default=DEFAULT_JOB, min_length=1)

    @field_validator("job")
    @classmethod
    def _job_is_single_segment(cls, value: str) -> str:
        if "." in value:
            raise ValueError("workflow.job must be a job key, not a dotted path")
        return value


class ChecklistSettings(_BaseSection):
    # None = built-in Foundry checklist.
    path: Path | None = None

    @field_validator("path")
    @classmethod
    def _expand_path(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None


class ObservabilitySettings(_BaseSection):
    log_level: str = "WARNING"
    log_format: str | None = None  # json|human (overrides LOG_FORMAT/env when set)
    json_logs: bool = False

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower()
        if normalized in {"json", "human"}:
            return normalized
        raise ValueError("observability.log_format must be 'json' or 'human'")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        # `.env` is loaded into os.environ by config.load; the flat names it holds
        # are not model fields.
        env_file=None,
        extra="forbid",
    )

    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)
    checklist: ChecklistSettings = Field(default_factory=ChecklistSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Settings:
        """
        Construct Settings from a mapping without reading environment variables.

        Used by tests and to apply command-line overrides on top of loaded settings.
        """
        class _InitOnlySettings(Settings):
            @classmethod
            def settings_customise_sources(
                cls,
                settings_cls,
                init_settings,
                env_settings,
                dotenv_settings,
                file_secret_settings,
            ):
                return (init_settings,)

        return _InitOnlySettings(**dict(data))

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            env_settings,
            get_flat_env_settings_source,
            init_settings,
            file_secret_settings,
        )
