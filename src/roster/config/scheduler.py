"""Scheduler defaults for recurring passes."""

from __future__ import annotations

from dataclasses import dataclass

from .env import positive_int_env

DEFAULT_INTERVAL_SECONDS = 900
DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    max_workers: int = DEFAULT_MAX_WORKERS


def get_scheduler_config() -> SchedulerConfig:
    return SchedulerConfig(
        interval_seconds=positive_int_env(
            "ROSTER_SCHEDULER_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS
        ),
        max_workers=positive_int_env("ROSTER_SCHEDULER_MAX_WORKERS", DEFAULT_MAX_WORKERS),
    )
