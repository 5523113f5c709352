"""Configuration for the indexer client.

Defaults are loaded from environment variables; a YAML file can override them.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_BASE_URL = "https://api.indexer.omnipair.fi/api/v1"
DEFAULT_CONFIG_PATH = "config/indexer_settings.yaml"

# Time windows the indexer aggregates over
SUPPORTED_WINDOW_HOURS = (24, 168, 720)


@dataclass(frozen=True)
class IndexerSettings:
    """Indexer connection and caching settings.

    Attributes:
        base_url: Indexer REST API root (no trailing slash)
        cache_ttl_seconds: Default time-to-live for cached responses
        cache_max_entries: Upper bound on cached responses kept in memory
        request_timeout_seconds: Transport timeout for a single request
        journal_pool_limit: Max pools queried for wallet liquidity events
    """

    base_url: str = field(default_factory=lambda: os.getenv("INDEXER_BASE_URL", DEFAULT_BASE_URL))
    cache_ttl_seconds: float = field(
        default_factory=lambda: float(os.getenv("INDEXER_CACHE_TTL_SECONDS", "60"))
    )
    cache_max_entries: int = field(
        default_factory=lambda: int(os.getenv("INDEXER_CACHE_MAX_ENTRIES", "512"))
    )
    request_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("INDEXER_REQUEST_TIMEOUT_SECONDS", "15"))
    )
    journal_pool_limit: int = field(
        default_factory=lambda: int(os.getenv("INDEXER_JOURNAL_POOL_LIMIT", "8"))
    )

    def __post_init__(self) -> None:
        """Validate settings values."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got '{self.base_url}'")
        if self.cache_ttl_seconds < 0:
            raise ValueError(f"cache_ttl_seconds must be >= 0, got {self.cache_ttl_seconds}")
        if self.cache_max_entries < 1:
            raise ValueError(f"cache_max_entries must be >= 1, got {self.cache_max_entries}")
        if self.request_timeout_seconds <= 0:
            raise ValueError(
                f"request_timeout_seconds must be > 0, got {self.request_timeout_seconds}"
            )
        if self.journal_pool_limit < 0:
            raise ValueError(f"journal_pool_limit must be >= 0, got {self.journal_pool_limit}")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))


def load_settings(config_path: Optional[str] = None) -> IndexerSettings:
    """
    Load and validate indexer settings from a YAML file.

    Args:
        config_path: Path to configuration file. If None, loads from
                    config/indexer_settings.yaml

    Returns:
        Validated IndexerSettings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid or YAML is malformed
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(path, "r") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML format in {config_path}: {e}")

    if raw_config is None:
        raise ValueError(f"Empty configuration file: {config_path}")

    if "indexer" not in raw_config:
        raise ValueError(f"Missing 'indexer' section in {config_path}")

    section = raw_config["indexer"] or {}
    known = {f.name for f in fields(IndexerSettings)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown indexer settings in {config_path}: {sorted(unknown)}")

    try:
        return IndexerSettings(**section)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid configuration: {e}")


# Global settings instance (lazy initialization)
_settings: Optional[IndexerSettings] = None


def get_settings() -> IndexerSettings:
    """Get indexer settings (singleton)."""
    global _settings
    if _settings is None:
        _settings = IndexerSettings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (for testing)."""
    global _settings
    _settings = None
