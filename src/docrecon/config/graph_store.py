"""Graph store (ArangoDB document API) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .errors import MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_GRAPH_STORE_DATABASE = "reconciliation"
DEFAULT_GRAPH_STORE_USERNAME = "root"
GRAPH_STORE_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class GraphStoreConfig:
    """Holds connection values for the HTTP graph store."""

    url: str
    database: str
    username: str
    password: str
    resilience: ResilienceConfig

    @property
    def auth(self) -> tuple[str, str]:
        return (self.username, self.password)


def graph_store_requested(url: str | None = None) -> bool:
    """Return whether a graph store URL was given explicitly or via ``ARANGO_URL``."""

    return bool(url or optional_env_var("ARANGO_URL"))


def get_graph_store_config(
    *,
    url: str | None = None,
    database: str | None = None,
    username: str | None = None,
    password: str | None = None,
    resilience: ResilienceConfig | None = None,
) -> GraphStoreConfig:
    """Build the graph store configuration; explicit arguments override the environment."""

    if url is None:
        try:
            url = require_env_vars(("ARANGO_URL",))["ARANGO_URL"]
        except MissingConfigurationError as exc:
            raise MissingConfigurationError(
                "Graph store URL missing: pass --arango-url or set ARANGO_URL"
            ) from exc

    base_url = url.rstrip("/")
    return GraphStoreConfig(
        url=base_url,
        database=database
        or optional_env_var("ARANGO_DATABASE", DEFAULT_GRAPH_STORE_DATABASE)
        or DEFAULT_GRAPH_STORE_DATABASE,
        username=username
        or optional_env_var("ARANGO_USERNAME", DEFAULT_GRAPH_STORE_USERNAME)
        or DEFAULT_GRAPH_STORE_USERNAME,
        password=password
        if password is not None
        else optional_env_var("ARANGO_PASSWORD", "") or "",
        resilience=resilience
        or ResilienceConfig(
            name="graph-store",
            base_url=base_url,
            timeout_seconds=GRAPH_STORE_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
        ),
    )
