"""Data models: all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Chain(str, Enum):
    """Ledger an asset can be recorded on."""

    PRIMARY = "L1"
    SECONDARY = "L2"


@dataclass(frozen=True)
class TimestampBounds:
    """Search window in unix seconds; ``lower <= upper`` always."""

    lower: int
    upper: int


@dataclass(frozen=True)
class ResolvedBlock:
    """Indexed block found for a timestamp."""

    timestamp: int
    block: int


@dataclass(frozen=True)
class OwnershipQuery:
    """One owner and the assets to check for it."""

    owner: str
    assets: tuple[str, ...] = ()


@dataclass(frozen=True)
class OwnershipResult:
    """Verdict for one owner.

    ``failing`` is ``None`` on success and a tuple whenever ``result`` is
    False. ``unresolved_chains`` names the chains whose indexer could not be
    queried at the requested time, so an empty-handed negative can be told
    apart from a confirmed one.
    """

    result: bool
    failing: tuple[str, ...] | None = None
    unresolved_chains: tuple[Chain, ...] = ()

    @property
    def indeterminate(self) -> bool:
        return not self.result and bool(self.unresolved_chains)


@dataclass(frozen=True)
class PartialOwnership:
    """Per-chain evidence before merge."""

    owner: str
    chain: Chain
    owned_assets: frozenset[str] = frozenset()
    block: int | None = None
    resolved: bool = True


@dataclass(frozen=True)
class OwnedAssets:
    """Assets confirmed for an owner by a batch check."""

    owner: str
    assets: tuple[str, ...] = ()


@dataclass(frozen=True)
class NameOwner:
    name: str
    owner: str


@dataclass(frozen=True)
class Collection:
    name: str
    urn: str


@dataclass(frozen=True)
class ThirdPartyIntegration:
    urn: str
    name: str
    description: str = ""
