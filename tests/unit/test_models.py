"""Unit tests for data models."""
from __future__ import annotations

import pytest

from chain_ownership.models import (
    Chain,
    OwnershipQuery,
    OwnershipResult,
    PartialOwnership,
    ResolvedBlock,
)


class TestOwnershipResult:
    def test_success_has_no_failing(self) -> None:
        r = OwnershipResult(result=True)
        assert r.failing is None
        assert r.unresolved_chains == ()
        assert not r.indeterminate

    def test_indeterminate_when_chain_unresolved(self) -> None:
        r = OwnershipResult(result=False, failing=("a",), unresolved_chains=(Chain.PRIMARY,))
        assert r.indeterminate

    def test_confirmed_negative_is_not_indeterminate(self) -> None:
        assert not OwnershipResult(result=False, failing=("a",)).indeterminate

    def test_frozen(self) -> None:
        r = OwnershipResult(result=True)
        with pytest.raises(AttributeError):
            r.result = False  # type: ignore[misc]


class TestChain:
    def test_values(self) -> None:
        assert Chain("L1") is Chain.PRIMARY
        assert Chain("L2") is Chain.SECONDARY


class TestOtherModels:
    def test_query_equality(self) -> None:
        assert OwnershipQuery("0x1", ("a",)) == OwnershipQuery("0x1", ("a",))

    def test_partial_defaults(self) -> None:
        p = PartialOwnership(owner="0x1", chain=Chain.SECONDARY)
        assert p.owned_assets == frozenset()
        assert p.block is None
        assert p.resolved

    def test_resolved_block_frozen(self) -> None:
        b = ResolvedBlock(timestamp=1, block=2)
        with pytest.raises(AttributeError):
            b.block = 3  # type: ignore[misc]
