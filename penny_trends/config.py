"""Configuration handling for the Penny Trends pipeline."""

import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

import yaml
from dotenv import load_dotenv

from penny_trends.lexicon import (
    DEFAULT_SUBREDDITS,
    FALSE_POSITIVES,
    INVALID_SYMBOLS,
    NEGATIVE_KEYWORDS,
    POSITIVE_KEYWORDS,
)


@dataclass(frozen=True)
class RateLimitConfig:
    """Retry, pacing and timeout settings for the Reddit read API."""

    max_attempts: int = 5
    initial_backoff_sec: float = 10.0
    backoff_factor: float = 2.0
    call_delay_sec: float = 2.0
    source_delay_sec: float = 30.0
    request_timeout_sec: float = 15.0
    min_remaining_calls: int = 5
    sleep_buffer_sec: float = 2.0


@dataclass(frozen=True)
class ScoringConfig:
    """Word lists and thresholds for extraction, sentiment and ranking."""

    positive_keywords: Tuple[str, ...] = POSITIVE_KEYWORDS
    negative_keywords: Tuple[str, ...] = NEGATIVE_KEYWORDS
    excluded_symbols: FrozenSet[str] = frozenset(FALSE_POSITIVES)
    invalid_symbols: FrozenSet[str] = frozenset(INVALID_SYMBOLS)
    min_symbol_length: int = 2
    max_symbol_length: int = 5
    min_post_score_for_comments: int = 10
    max_sampled_comments: int = 3
    max_comment_samples: int = 5
    post_weight_multiplier: int = 2
    top_n: int = 20
    listing_limit: int = 50
    validate_symbols: bool = False


@dataclass
class StorageConfig:
    """Snapshot store selection."""

    backend: str = "json"
    path: str = "data/snapshot.json"
    database_url: str = "sqlite:///data/penny_trends.db"
    key: str = "stocks"


@dataclass
class PollingConfig:
    """Client refresh timings (seconds) and snapshot endpoint."""

    endpoint_url: str = "http://localhost:8080/api/reddit"
    update_interval_sec: int = 15 * 60
    check_interval_sec: int = 5
    poll_interval_sec: int = 2 * 60
    request_timeout_sec: float = 15.0


@dataclass
class MonitoringConfig:
    """Monitoring configuration."""

    enable_prometheus: bool = False
    prometheus_port: int = 8000


@dataclass
class ApiConfig:
    """Snapshot read endpoint settings."""

    host: str = "0.0.0.0"
    port: int = 8080


def _build_section(cls, values: Dict[str, Any]):
    """Instantiate a config section from a YAML mapping, ignoring unknown keys."""
    known = {f.name for f in fields(cls)}
    kwargs = {key: value for key, value in values.items() if key in known}
    return cls(**kwargs)


def _build_scoring(values: Dict[str, Any]) -> ScoringConfig:
    values = dict(values)
    for key in ("positive_keywords", "negative_keywords"):
        if key in values:
            values[key] = tuple(word.lower() for word in values[key])

    excluded = {symbol.upper() for symbol in values.pop("excluded_symbols", FALSE_POSITIVES)}
    excluded.update(symbol.upper() for symbol in values.pop("extra_excluded_symbols", []) or [])
    values["excluded_symbols"] = frozenset(excluded)

    if "invalid_symbols" in values:
        values["invalid_symbols"] = frozenset(symbol.upper() for symbol in values["invalid_symbols"])

    return _build_section(ScoringConfig, values)


@dataclass
class Config:
    """Application configuration combining environment variables and YAML config."""

    # Reddit API credentials from environment
    client_id: str = ""
    client_secret: str = ""
    user_agent: str = "PennyTrends/0.1"

    # YAML config values with defaults
    subreddits: List[str] = field(default_factory=lambda: list(DEFAULT_SUBREDDITS))
    base_url: str = "https://www.reddit.com"
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

    @classmethod
    def from_files(cls, config_path: str, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from a YAML file and environment variables.

        Args:
            config_path: Path to YAML configuration file (missing file means defaults)
            env_path: Optional path to .env file (defaults to .env in current directory)

        Returns:
            Config instance with merged configuration
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        config = cls()
        config.client_id = os.getenv("REDDIT_CLIENT_ID", "")
        config.client_secret = os.getenv("REDDIT_CLIENT_SECRET", "")
        config.user_agent = os.getenv("REDDIT_USER_AGENT", config.user_agent)

        if not os.path.exists(config_path):
            return config

        with open(config_path, "r", encoding="utf-8") as file:
            yaml_config = yaml.safe_load(file) or {}

        sections = {
            "rate_limit": lambda v: _build_section(RateLimitConfig, v),
            "scoring": _build_scoring,
            "storage": lambda v: _build_section(StorageConfig, v),
            "polling": lambda v: _build_section(PollingConfig, v),
            "monitoring": lambda v: _build_section(MonitoringConfig, v),
            "api": lambda v: _build_section(ApiConfig, v),
        }

        for key, value in yaml_config.items():
            if key in sections:
                if isinstance(value, dict):
                    setattr(config, key, sections[key](value))
            elif hasattr(config, key):
                setattr(config, key, value)

        return config

    def validate(self) -> List[str]:
        """
        Validate configuration and return a list of validation errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.subreddits:
            errors.append("No subreddits specified in configuration")
        if self.rate_limit.max_attempts <= 0:
            errors.append("rate_limit.max_attempts must be greater than 0")
        if self.rate_limit.initial_backoff_sec < 0:
            errors.append("rate_limit.initial_backoff_sec must not be negative")
        if self.rate_limit.request_timeout_sec <= 0:
            errors.append("rate_limit.request_timeout_sec must be greater than 0")
        if self.scoring.top_n <= 0:
            errors.append("scoring.top_n must be greater than 0")
        if not 0 < self.scoring.min_symbol_length <= self.scoring.max_symbol_length:
            errors.append("scoring symbol length bounds are inconsistent")
        if self.storage.backend not in ("json", "sqlalchemy", "memory"):
            errors.append(f"Unknown storage backend: {self.storage.backend}")
        if self.polling.poll_interval_sec <= 0 or self.polling.check_interval_sec <= 0:
            errors.append("polling intervals must be greater than 0")

        # Credentials are optional for the public JSON endpoints but must come in pairs
        if bool(self.client_id) != bool(self.client_secret):
            errors.append("REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET must be set together")

        return errors
