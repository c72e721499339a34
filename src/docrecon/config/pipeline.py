"""Reconciliation pipeline settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigurationError

DEFAULT_AUTO_RESOLVE_THRESHOLD = 0.9
DEFAULT_SCAN_INTERVAL_SECONDS = 300.0
DEFAULT_MAX_SCAN_WORKERS = 4


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Inputs for one reconciliation run (or for every run of the daemon)."""

    repository_paths: tuple[Path, ...] = field(default_factory=tuple)
    auto_resolve_threshold: float = DEFAULT_AUTO_RESOLVE_THRESHOLD
    scan_interval: float | None = None
    max_scan_workers: int = DEFAULT_MAX_SCAN_WORKERS

    def validate(self) -> PipelineConfig:
        """Raise ``ConfigurationError`` for settings the pipeline cannot start with."""

        if not self.repository_paths:
            raise ConfigurationError("No repositories specified. Use --repo <path>")
        if not 0.0 <= self.auto_resolve_threshold <= 1.0:
            raise ConfigurationError(
                f"Auto-resolve threshold must be within [0, 1], got {self.auto_resolve_threshold}"
            )
        if self.scan_interval is not None and self.scan_interval <= 0:
            raise ConfigurationError("Scan interval must be positive")
        if self.max_scan_workers < 1:
            raise ConfigurationError("At least one scan worker is required")
        return self


def get_pipeline_config(
    repositories: list[str] | tuple[str, ...] | None = None,
    *,
    threshold: float = DEFAULT_AUTO_RESOLVE_THRESHOLD,
    interval: float | None = None,
    workers: int = DEFAULT_MAX_SCAN_WORKERS,
) -> PipelineConfig:
    return PipelineConfig(
        repository_paths=tuple(Path(repository) for repository in repositories or ()),
        auto_resolve_threshold=threshold,
        scan_interval=interval,
        max_scan_workers=workers,
    ).validate()
