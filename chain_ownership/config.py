"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .models import Chain

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChainSubgraphs:
    """Subgraph endpoints for one chain. Empty string means not deployed."""

    collections: str = ""
    blocks: str = ""
    ens_owner: str = ""
    third_party_registry: str = ""


@dataclass(frozen=True)
class SubgraphsConfig:
    primary: ChainSubgraphs = field(default_factory=ChainSubgraphs)
    secondary: ChainSubgraphs = field(default_factory=ChainSubgraphs)

    def for_chain(self, chain: Chain) -> ChainSubgraphs:
        return self.primary if chain is Chain.PRIMARY else self.secondary


@dataclass(frozen=True)
class ResolutionConfig:
    # Window reaches 8s past the deployment time and 5min 7s before it.
    tolerance_seconds: int = 307
    lookahead_seconds: int = 8
    max_batch_size: int = 1000
    page_size: int = 1000


@dataclass(frozen=True)
class HttpConfig:
    timeout: int = 30


@dataclass(frozen=True)
class AppConfig:
    subgraphs: SubgraphsConfig = field(default_factory=SubgraphsConfig)
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    http: HttpConfig = field(default_factory=HttpConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_chain_subgraphs(raw: dict[str, Any]) -> ChainSubgraphs:
    return ChainSubgraphs(
        collections=raw.get("collections", ""),
        blocks=raw.get("blocks", ""),
        ens_owner=raw.get("ens_owner", ""),
        third_party_registry=raw.get("third_party_registry", ""),
    )


def _build_subgraphs(raw: dict[str, Any]) -> SubgraphsConfig:
    return SubgraphsConfig(
        primary=_build_chain_subgraphs(raw.get(Chain.PRIMARY.value) or {}),
        secondary=_build_chain_subgraphs(raw.get(Chain.SECONDARY.value) or {}),
    )


def _build_resolution(raw: dict[str, Any]) -> ResolutionConfig:
    return ResolutionConfig(
        tolerance_seconds=int(raw.get("tolerance_seconds", 307)),
        lookahead_seconds=int(raw.get("lookahead_seconds", 8)),
        max_batch_size=int(raw.get("max_batch_size", 1000)),
        page_size=int(raw.get("page_size", 1000)),
    )


def _build_http(raw: dict[str, Any]) -> HttpConfig:
    return HttpConfig(timeout=int(raw.get("timeout", 30)))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate client configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        subgraphs=_build_subgraphs(raw.get("subgraphs", {})),
        resolution=_build_resolution(raw.get("resolution", {})),
        http=_build_http(raw.get("http", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    for chain in Chain:
        subgraphs = cfg.subgraphs.for_chain(chain)
        if not subgraphs.blocks:
            raise ValueError(f"Chain '{chain.value}' has no blocks subgraph")
        if not subgraphs.collections:
            raise ValueError(f"Chain '{chain.value}' has no collections subgraph")

    if not cfg.subgraphs.primary.ens_owner:
        raise ValueError(f"Chain '{Chain.PRIMARY.value}' has no ens_owner subgraph")

    res = cfg.resolution
    if res.max_batch_size < 1:
        raise ValueError("max_batch_size must be positive")
    if res.page_size < 1:
        raise ValueError("page_size must be positive")
    if res.tolerance_seconds < 0 or res.lookahead_seconds < 0:
        raise ValueError("tolerance_seconds and lookahead_seconds must not be negative")
    if cfg.http.timeout < 1:
        raise ValueError("http timeout must be positive")
