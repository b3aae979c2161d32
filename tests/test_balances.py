"""Tests for balance aggregation and ranking."""

import pytest

from nft_snapshot.config.custodial_registry import CustodialRegistry
from nft_snapshot.core.models import UNOWNED
from nft_snapshot.extractor.balances import BalanceAggregator
from nft_snapshot.extractor.resolver import OwnerResolver

from conftest import FakeLedger, sale_contract


def test_tally_counts_every_item_once():
    ownership = {"n1": "A", "n2": "B", "n3": "A", "n4": None}

    balances = BalanceAggregator.tally(ownership)

    assert balances == {"A": 2, "B": 1, UNOWNED: 1}
    assert sum(balances.values()) == len(ownership)


def test_owners_resolving_to_same_real_owner_collapse():
    ledger = FakeLedger(
        accounts={"S1": sale_contract("S1"), "S2": sale_contract("S2")},
        owners={"S1": "O", "S2": "O"},
    )
    aggregator = BalanceAggregator(OwnerResolver(ledger, CustodialRegistry()))

    balances = aggregator.aggregate({"n1": "S1", "n2": "S2", "n3": "S1", "n4": "W"})

    assert balances == {"O": 3, "W": 1}


def test_unowned_items_are_not_resolved():
    ledger = FakeLedger()
    aggregator = BalanceAggregator(OwnerResolver(ledger, CustodialRegistry()))

    balances = aggregator.aggregate({"n1": None, "n2": "W"})

    assert balances == {UNOWNED: 1, "W": 1}
    assert ledger.classify_count(UNOWNED) == 0


def test_without_resolver_counts_are_kept():
    assert BalanceAggregator().aggregate({"n1": "A", "n2": "A"}) == {"A": 2}


def test_rank_is_descending_and_stable_for_ties():
    ranked = BalanceAggregator.rank({"A": 1, "B": 3, "C": 1, "D": 2})

    assert ranked == [("B", 3), ("D", 2), ("A", 1), ("C", 1)]


def test_to_frame_adds_rank_and_share():
    df = BalanceAggregator.to_frame([("B", 3), ("A", 1)])

    assert df.columns == ["rank", "owner", "count", "share"]
    assert df["rank"].to_list() == [1, 2]
    assert df["owner"].to_list() == ["B", "A"]
    assert df["share"].to_list() == pytest.approx([0.75, 0.25])


def test_to_frame_handles_empty_ranking():
    df = BalanceAggregator.to_frame([])

    assert df.height == 0
