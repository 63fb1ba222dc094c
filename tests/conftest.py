"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from chain_ownership.client import OwnershipClient, create_client
from chain_ownership.config import (
    AppConfig,
    ChainSubgraphs,
    HttpConfig,
    ResolutionConfig,
    SubgraphsConfig,
)
from chain_ownership.models import Chain, ResolvedBlock

L1_COLLECTIONS = "https://l1.example.com/collections"
L1_BLOCKS = "https://l1.example.com/blocks"
L1_ENS = "https://l1.example.com/ens"
L2_COLLECTIONS = "https://l2.example.com/collections"
L2_BLOCKS = "https://l2.example.com/blocks"
L2_THIRD_PARTY = "https://l2.example.com/third-party"


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_subgraphs() -> SubgraphsConfig:
    return SubgraphsConfig(
        primary=ChainSubgraphs(
            collections=L1_COLLECTIONS, blocks=L1_BLOCKS, ens_owner=L1_ENS
        ),
        secondary=ChainSubgraphs(
            collections=L2_COLLECTIONS,
            blocks=L2_BLOCKS,
            third_party_registry=L2_THIRD_PARTY,
        ),
    )


@pytest.fixture()
def sample_resolution_config() -> ResolutionConfig:
    # Plain five minute window, no lookahead: upper = T, lower = T - 300.
    return ResolutionConfig(
        tolerance_seconds=300, lookahead_seconds=0, max_batch_size=1000, page_size=1000
    )


@pytest.fixture()
def sample_app_config(
    sample_subgraphs: SubgraphsConfig, sample_resolution_config: ResolutionConfig
) -> AppConfig:
    return AppConfig(
        subgraphs=sample_subgraphs,
        resolution=sample_resolution_config,
        http=HttpConfig(timeout=10),
    )


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


def block_search_for(blocks: dict[int, ResolvedBlock | None]) -> AsyncMock:
    """Block search answering from a timestamp → block table (missing = None)."""
    search = AsyncMock()
    search.find_block_for_timestamp.side_effect = lambda ts: blocks.get(ts)
    return search


Handler = Callable[[str, str, dict[str, Any]], dict[str, Any]]


def transport_for(handler: Handler) -> AsyncMock:
    """Transport whose ``execute`` delegates to ``handler(url, query, variables)``."""
    transport = AsyncMock()
    transport.execute.side_effect = handler
    return transport


def nfts(field: str, values: list[str]) -> dict[str, Any]:
    return {"nfts": [{field: v} for v in values]}


@pytest.fixture()
def make_client(sample_app_config: AppConfig) -> Callable[..., OwnershipClient]:
    def factory(
        handler: Handler,
        l1_blocks: dict[int, ResolvedBlock | None] | None = None,
        l2_blocks: dict[int, ResolvedBlock | None] | None = None,
        config: AppConfig | None = None,
        **kwargs: Any,
    ) -> OwnershipClient:
        return create_client(
            config or sample_app_config,
            transport=transport_for(handler),
            block_searches={
                Chain.PRIMARY: block_search_for(l1_blocks or {}),
                Chain.SECONDARY: block_search_for(l2_blocks or {}),
            },
            **kwargs,
        )

    return factory


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    subgraphs:
      L1:
        collections: "https://l1.example.com/collections"
        blocks: "https://l1.example.com/blocks"
        ens_owner: "https://l1.example.com/ens"
      L2:
        collections: "https://l2.example.com/collections"
        blocks: "https://l2.example.com/blocks"
        third_party_registry: "https://l2.example.com/third-party"
    resolution:
      tolerance_seconds: 300
      lookahead_seconds: 0
      max_batch_size: 500
      page_size: 100
    http:
      timeout: 15
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
