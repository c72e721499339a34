from __future__ import annotations

import pytest

from docrecon.config import (
    MissingConfigurationError,
    get_graph_store_config,
    graph_store_requested,
)


@pytest.fixture(autouse=True)
def clear_graph_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ARANGO_URL", "ARANGO_DATABASE", "ARANGO_USERNAME", "ARANGO_PASSWORD"):
        monkeypatch.delenv(name, raising=False)


def test_graph_store_requested_by_flag_or_env(monkeypatch: pytest.MonkeyPatch) -> None:
    assert not graph_store_requested()
    assert graph_store_requested("http://localhost:8529")

    monkeypatch.setenv("ARANGO_URL", "http://db:8529")
    assert graph_store_requested()


def test_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARANGO_URL", "http://db:8529")
    monkeypatch.setenv("ARANGO_DATABASE", "docs")
    monkeypatch.setenv("ARANGO_USERNAME", "writer")
    monkeypatch.setenv("ARANGO_PASSWORD", "pw")

    config = get_graph_store_config()

    assert config.url == "http://db:8529"
    assert config.database == "docs"
    assert config.auth == ("writer", "pw")
    assert config.resilience.ratelimit is not None


def test_arguments_override_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARANGO_DATABASE", "from-env")

    config = get_graph_store_config(url="http://x", database="from-flag", password="")

    assert config.database == "from-flag"
    assert config.username == "root"
    assert config.password == ""


def test_missing_url() -> None:
    with pytest.raises(MissingConfigurationError, match="--arango-url"):
        get_graph_store_config()
