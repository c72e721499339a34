from __future__ import annotations

from pathlib import Path

import pytest

from docrecon.config import ConfigurationError, PipelineConfig, get_pipeline_config


def test_defaults() -> None:
    config = get_pipeline_config(["a", "b"])

    assert config.repository_paths == (Path("a"), Path("b"))
    assert config.auto_resolve_threshold == 0.9
    assert config.scan_interval is None
    assert config.max_scan_workers == 4


def test_no_repositories_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="No repositories specified"):
        get_pipeline_config([])


@pytest.mark.parametrize(
    "overrides",
    [
        {"auto_resolve_threshold": 1.5},
        {"auto_resolve_threshold": -0.1},
        {"scan_interval": 0.0},
        {"max_scan_workers": 0},
    ],
)
def test_invalid_settings(overrides: dict[str, float]) -> None:
    config = PipelineConfig(repository_paths=(Path("."),), **overrides)  # type: ignore[arg-type]

    with pytest.raises(ConfigurationError):
        config.validate()
