"""Tests for target date parsing, snapshot export and the custodial registry."""

import json
from datetime import date, datetime, timezone

import polars as pl
import pytest

from nft_snapshot.config.custodial_registry import CustodialRegistry, MARKETPLACE_SALE
from nft_snapshot.core.exceptions import ConfigurationError, IncompleteLogCondition
from nft_snapshot.core.models import Snapshot
from nft_snapshot.utils.dates import parse_target_date, to_timestamp
from nft_snapshot.utils.export import snapshot_filename, write_json, write_parquet

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def sample_snapshot():
    return Snapshot(
        target_time=1705276800,
        target_date="2024-01-15",
        collection="EQB3s8aBeSg6mhhM8N9B2h1-4W2_1M5w4CUpYI3qD6d6F6xO",
        total_items=3,
        owners_count=2,
        balances={"W": 2, "V": 1},
        ranked=(("W", 2), ("V", 1)),
        degraded=True,
        conditions=(IncompleteLogCondition(subject="c", pages=100, ceiling=100),),
    )


def test_parse_target_date_accepts_past_dates():
    assert parse_target_date("2024-01-15", now=NOW) == date(2024, 1, 15)


@pytest.mark.parametrize("value", ["2024/01/15", "15-01-2024", "2024-1-5", "2024-02-30"])
def test_parse_target_date_rejects_bad_format(value):
    with pytest.raises(ValueError):
        parse_target_date(value, now=NOW)


def test_parse_target_date_rejects_future():
    with pytest.raises(ValueError, match="future"):
        parse_target_date("2025-06-02", now=NOW)


def test_to_timestamp_accepts_unix_and_naive_datetime():
    assert to_timestamp(1705276800)[0] == 1705276800
    assert to_timestamp(datetime(2024, 1, 15, 12, 0))[0] == 1705276800 + 12 * 3600


def test_snapshot_filename_uses_address_suffix_and_compact_date():
    name = snapshot_filename("EQB3s8aBeSg6mhhM8N9B2h1-4W2_1M5w4CUpYI3qD6d6F6xO", "2024-01-15")

    assert name == "owners_snapshot_D6d6F6xO_20240115.json"


def test_write_json(tmp_path):
    path = write_json(sample_snapshot(), save_dir=str(tmp_path))

    assert path.endswith("owners_snapshot_D6d6F6xO_20240115.json")
    with open(path) as f:
        data = json.load(f)
    assert data["balances"] == {"W": 2, "V": 1}
    assert data["sortedBalances"] == [["W", 2], ["V", 1]]
    assert data["degraded"] is True


def test_write_parquet(tmp_path):
    path = write_parquet(sample_snapshot(), output_path=tmp_path / "out" / "balances.parquet")

    df = pl.read_parquet(path)
    assert df["owner"].to_list() == ["W", "V"]
    assert df["rank"].to_list() == [1, 2]
    assert df["target_time"].unique().to_list() == [1705276800]


def test_registry_default_pattern_matches_sale_interfaces():
    registry = CustodialRegistry()

    assert registry.match({"nft_sale_getgems_v4", "wallet"}) is MARKETPLACE_SALE
    assert registry.match({"jetton_master"}) is None


def test_registry_loads_extra_patterns(tmp_path):
    path = tmp_path / "patterns.json"
    path.write_text(
        json.dumps(
            {
                "auction": {
                    "interfaces": ["nft_auction_v1"],
                    "method": "get_auction_data",
                    "owner_fields": ["nft_owner"],
                }
            }
        )
    )

    registry = CustodialRegistry(registry_path=str(path))

    pattern = registry.match({"nft_auction_v1"})
    assert pattern.method == "get_auction_data"
    assert pattern.owner_fields == ("nft_owner",)
    assert len(registry.get_patterns()) == 2


def test_registry_missing_file_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        CustodialRegistry(registry_path=str(tmp_path / "missing.json"))


def test_registry_malformed_pattern_is_configuration_error(tmp_path):
    path = tmp_path / "patterns.json"
    path.write_text(json.dumps({"broken": {"interfaces": ["x"]}}))

    with pytest.raises(ConfigurationError):
        CustodialRegistry(registry_path=str(path))
