"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .graph_store import GraphStoreConfig, get_graph_store_config, graph_store_requested
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .pipeline import PipelineConfig, get_pipeline_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "GraphStoreConfig",
    "MissingConfigurationError",
    "PipelineConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_graph_store_config",
    "get_pipeline_config",
    "get_storage_config",
    "graph_store_requested",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
