"""Typed crawl configuration with JSON/YAML load/save helpers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml  # type: ignore

from .constants import (
    DEFAULT_BACKOFF_SECONDS,
    DEFAULT_CRAWL_TIMEOUT_SECONDS,
    DEFAULT_HTTP_HEADERS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_SAME_DOMAIN,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    DEFAULT_WORKERS,
    JSON_INDENT,
    SUPPORTED_CONFIG_SUFFIXES,
)
from .types import JSONDict, JSONValue

LOGGER = logging.getLogger(__name__)


def _as_float(value: Any, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid float for '{key}': {value!r}") from exc


def _as_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid int for '{key}': {value!r}") from exc


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"Invalid bool for '{key}': {value!r}")


@dataclass(slots=True)
class CrawlConfig:
    """Options for one crawl invocation.

    `max_depth` of 0 means unbounded; negative values are clamped to 0.
    `workers` below 1 fall back to the default pool size.
    """

    target: str
    same_domain: bool = DEFAULT_SAME_DOMAIN
    max_depth: int = DEFAULT_MAX_DEPTH
    workers: int = DEFAULT_WORKERS

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    crawl_timeout_seconds: float | None = DEFAULT_CRAWL_TIMEOUT_SECONDS

    user_agent: str = DEFAULT_USER_AGENT
    default_headers: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HTTP_HEADERS))

    metadata: dict[str, JSONValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.target = (self.target or "").strip()
        if not self.target:
            raise ValueError("CrawlConfig requires a target URL")

        if self.max_depth < 0:
            self.max_depth = 0
        if self.workers < 1:
            self.workers = DEFAULT_WORKERS
        if self.max_attempts < 1:
            self.max_attempts = 1

        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must be >= 0")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if self.crawl_timeout_seconds is not None and self.crawl_timeout_seconds <= 0:
            raise ValueError("crawl_timeout_seconds must be > 0 when set")

    def headers(self) -> dict[str, str]:
        """Return request headers with the configured User-Agent applied."""

        merged = dict(self.default_headers)
        merged.setdefault("User-Agent", self.user_agent)
        return merged

    def to_dict(self) -> JSONDict:
        """Serialize config for result exports and reproducibility."""

        return {
            "target": self.target,
            "same_domain": self.same_domain,
            "max_depth": self.max_depth,
            "workers": self.workers,
            "max_attempts": self.max_attempts,
            "backoff_seconds": self.backoff_seconds,
            "timeout_seconds": self.timeout_seconds,
            "crawl_timeout_seconds": self.crawl_timeout_seconds,
            "user_agent": self.user_agent,
            "default_headers": dict(self.default_headers),
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CrawlConfig":
        """Build config from a parsed dictionary."""

        if "target" not in payload:
            raise ValueError("Config missing required key: 'target'")

        return cls(
            target=str(payload["target"]),
            same_domain=_as_bool(payload.get("same_domain", DEFAULT_SAME_DOMAIN), "same_domain"),
            max_depth=_as_int(payload.get("max_depth", DEFAULT_MAX_DEPTH), "max_depth"),
            workers=_as_int(payload.get("workers", DEFAULT_WORKERS), "workers"),
            max_attempts=_as_int(payload.get("max_attempts", DEFAULT_MAX_ATTEMPTS), "max_attempts"),
            backoff_seconds=float(payload.get("backoff_seconds", DEFAULT_BACKOFF_SECONDS)),
            timeout_seconds=float(payload.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
            crawl_timeout_seconds=_as_float(
                payload.get("crawl_timeout_seconds", DEFAULT_CRAWL_TIMEOUT_SECONDS),
                "crawl_timeout_seconds",
            ),
            user_agent=str(payload.get("user_agent", DEFAULT_USER_AGENT)),
            default_headers={
                str(k): str(v)
                for k, v in dict(payload.get("default_headers", DEFAULT_HTTP_HEADERS)).items()
            },
            metadata=dict(payload.get("metadata", {})),
        )


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML config at {path} must be a mapping at top level")
    return data


def load_config_payload(path: str | Path) -> dict[str, Any]:
    """Read a JSON/YAML config file into a plain mapping without validating it."""

    config_path = Path(path)
    suffix = config_path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ValueError(
            f"Unsupported config suffix '{suffix}'. Supported: {SUPPORTED_CONFIG_SUFFIXES}"
        )

    if suffix == ".json":
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    else:
        payload = _load_yaml(config_path)

    if not isinstance(payload, dict):
        raise ValueError(f"Config at {config_path} must be a mapping")

    LOGGER.debug("Loaded config payload from %s", config_path)
    return payload


def load_config(path: str | Path) -> CrawlConfig:
    """Load CrawlConfig from JSON/YAML path."""

    return CrawlConfig.from_dict(load_config_payload(path))


def save_config(config: CrawlConfig, path: str | Path) -> None:
    """Save CrawlConfig as JSON or YAML based on file extension."""

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    suffix = out_path.suffix.lower()
    payload = config.to_dict()

    if suffix == ".json":
        out_path.write_text(
            json.dumps(payload, indent=JSON_INDENT, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        return

    if suffix in {".yaml", ".yml"}:
        out_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
        return

    raise ValueError(
        f"Unsupported config suffix '{suffix}'. Supported: {SUPPORTED_CONFIG_SUFFIXES}"
    )


__all__ = [
    "CrawlConfig",
    "load_config",
    "load_config_payload",
    "save_config",
]
