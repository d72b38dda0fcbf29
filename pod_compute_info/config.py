"""Application configuration management."""
import logging
import os
from typing import Optional


class ConfigError(Exception):
    """Raised when an environment variable holds an invalid value."""

    pass


def _get_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ConfigError(f"{name} must be at least 1, got {value}")
    return value


def _get_optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be greater than 0, got {value}")
    return value


def get_server_config() -> dict:
    """
    Get HTTP server configuration from environment variables.

    Returns:
        dict: Server configuration with host, port and log_level
    """
    port = _get_optional_int("PORT")
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"LOG_LEVEL must be a logging level name, got {log_level!r}")
    return {
        "host": os.getenv("HOST", "127.0.0.1"),
        "port": port if port is not None else 3000,
        "log_level": log_level,
    }


def get_kubernetes_config() -> dict:
    """
    Get Kubernetes client configuration from environment variables.

    The in-cluster service account is always tried first; these values
    only apply when falling back to a kubeconfig file.

    Returns:
        dict: Kubernetes configuration with config_file and context
    """
    return {
        "config_file": os.getenv("KUBECONFIG") or None,
        "context": os.getenv("KUBE_CONTEXT") or None,
    }


def get_collector_config() -> dict:
    """
    Get namespace collection configuration from environment variables.

    Returns:
        dict: Collector configuration with maintainer_label,
              max_concurrency and query_timeout. A value of None for
              max_concurrency or query_timeout means unbounded.
    """
    return {
        "maintainer_label": os.getenv("MAINTAINER_LABEL", "maintainer"),
        "max_concurrency": _get_optional_int("NAMESPACE_QUERY_CONCURRENCY"),
        "query_timeout": _get_optional_float("NAMESPACE_QUERY_TIMEOUT_SECONDS"),
    }
