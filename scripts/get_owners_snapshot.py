"""Take an NFT ownership snapshot of a TON collection at a past date."""

import argparse
import logging
import sys

from nft_snapshot import SnapshotOrchestrator, TonAPIClient, settings
from nft_snapshot.core.exceptions import SnapshotError
from nft_snapshot.utils import parse_target_date, setup_logging, write_json, write_parquet

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("contract_address", help="TON NFT collection address")
    parser.add_argument("target_date", help="Target date in YYYY-MM-DD format")
    parser.add_argument(
        "--output-dir",
        default=settings.snapshot.output_dir,
        help="Directory for the snapshot files",
    )
    parser.add_argument(
        "--parquet",
        action="store_true",
        help="Also write the ranked balances as Parquet",
    )
    parser.add_argument(
        "--skip-verification",
        action="store_true",
        help="Skip the per-NFT history check for NFTs without collection events",
    )
    parser.add_argument(
        "--no-resolve",
        action="store_true",
        help="Keep custodial contracts as owners instead of unwinding them",
    )
    parser.add_argument("--top", type=int, default=10, help="Number of owners to print")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        target_date = parse_target_date(args.target_date)
    except ValueError as e:
        logger.error(f"Error: {e}")
        return 1

    try:
        orchestrator = SnapshotOrchestrator(
            TonAPIClient(),
            verify_unseen_items=False if args.skip_verification else None,
            resolve_owners=not args.no_resolve,
        )
        snapshot = orchestrator.take(args.contract_address, target_date)
    except SnapshotError as e:
        logger.error(f"Error: {e}")
        return 1

    print("\n=== Ownership Snapshot Results ===")
    print(f"Date: {snapshot.target_date} ({snapshot.target_time})")
    print(f"Collection: {snapshot.collection}")
    print(f"Total NFTs: {snapshot.total_items}")
    print(f"Unique Owners: {snapshot.owners_count}")
    if snapshot.degraded:
        print("WARNING: event log incomplete, results may be inaccurate")
    print(f"\nTop {args.top} Owners:")
    for index, (owner, count) in enumerate(snapshot.top(args.top), start=1):
        print(f"{index}. {owner}: {count} NFTs")

    path = write_json(snapshot, save_dir=args.output_dir)
    print(f"\nResults saved to: {path}")
    if args.parquet:
        print(f"Balances saved to: {write_parquet(snapshot, save_dir=args.output_dir)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
