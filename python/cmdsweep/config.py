"""Runtime configuration.

Values come from ``CMDSWEEP_*`` environment variables or a local ``.env``
file; CLI options override them.
"""

from __future__ import annotations

import os
from typing import Mapping

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cmdsweep.execution.poller import PollPolicy


class Settings(BaseSettings):
    """Central configuration for command expansion and execution."""

    model_config = SettingsConfigDict(
        env_prefix="CMDSWEEP_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    concurrency: int = Field(
        default=1,
        ge=1,
        le=256,
        description="Number of commands run at the same time.",
    )
    poll_interval: float = Field(
        default=1.0,
        ge=0,
        description="Minimum seconds between two status checks of one resource.",
    )
    poll_max_attempts: int | None = Field(
        default=None,
        ge=1,
        description="Status checks per resource before giving up (unbounded if unset).",
    )
    poll_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for a resource to settle (unbounded if unset).",
    )
    command_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds a single command may run before it is killed.",
    )
    format_args: list[str] = Field(
        default_factory=lambda: ["--format", "json"],
        description="Arguments appended to every command to request JSON output.",
    )
    required_env: list[str] = Field(
        default_factory=lambda: ["OS_USERNAME"],
        description="Environment variables that must be set (cloud credentials).",
    )
    log_level: str = Field(default="INFO", description="Logging level for the CLI.")

    def poll_policy(self) -> PollPolicy:
        return PollPolicy(
            interval=self.poll_interval,
            max_attempts=self.poll_max_attempts,
            timeout=self.poll_timeout,
        )


def check_environment(
    required: list[str],
    environ: Mapping[str, str] | None = None,
) -> list[str]:
    """Return the names in *required* that are missing from the environment."""
    environ = os.environ if environ is None else environ
    return [name for name in required if not environ.get(name)]
