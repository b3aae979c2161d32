"""End-to-end snapshot pipeline."""

import logging
from typing import Optional

from ..config.custodial_registry import CustodialRegistry
from ..config.settings import settings
from ..core.exceptions import IncompleteLogCondition
from ..core.models import Snapshot
from ..extractor.balances import BalanceAggregator
from ..extractor.events import EventPaginator
from ..extractor.ownership import OwnershipReconstructor
from ..extractor.resolver import OwnerResolver
from ..source.ledger import LedgerSource
from ..utils.dates import TargetDate, to_timestamp


class SnapshotOrchestrator:
    """Sequences the components into one snapshot run.

    Example:
        orchestrator = SnapshotOrchestrator(TonAPIClient())
        snapshot = orchestrator.take("EQB3...", "2024-01-15")
    """

    def __init__(
        self,
        source: LedgerSource,
        registry: Optional[CustodialRegistry] = None,
        paginator: Optional[EventPaginator] = None,
        verify_unseen_items: Optional[bool] = None,
        resolve_owners: bool = True,
    ):
        self.source = source
        self.registry = registry or CustodialRegistry(
            registry_path=settings.snapshot.custodial_patterns_path
        )
        self.paginator = paginator or EventPaginator(source)
        self.verify_unseen_items = verify_unseen_items
        self.resolve_owners = resolve_owners
        self.logger = logging.getLogger(self.__class__.__name__)

    def take(self, collection: str, target_date: TargetDate) -> Snapshot:
        target, label = to_timestamp(target_date)
        self.logger.info("=== Starting NFT Ownership Snapshot ===")
        self.logger.info(f"Collection: {collection}")
        self.logger.info(f"Target Date: {label} (unix {target})")

        self.logger.info("Step 1/5: Fetching all NFTs in collection...")
        items = self.source.list_items(collection)

        self.logger.info("Step 2/5: Fetching recent collection events...")
        log = self.paginator.collection_events(collection, since=target)

        self.logger.info("Step 3/5: Reconstructing ownership at target date...")
        reconstructor = OwnershipReconstructor(self.paginator, self.verify_unseen_items)
        reconstruction = reconstructor.reconstruct(items, log.events, target)

        self.logger.info("Step 4/5: Aggregating balances by owner...")
        # Resolver state lives for this run only
        resolver = None
        if self.resolve_owners:
            resolver = OwnerResolver(self.source, self.registry)
            resolver.seed_direct_holders(
                item.owner for item in items if item.owner and item.owner_is_wallet
            )
        aggregator = BalanceAggregator(resolver)
        balances = aggregator.aggregate(reconstruction.ownership)
        self.logger.info(f"Found {len(balances)} unique owners")

        self.logger.info("Step 5/5: Sorting owners by balance...")
        ranked = aggregator.rank(balances)

        conditions = list(log.conditions) + list(reconstruction.conditions)
        if resolver is not None:
            conditions.extend(resolver.conditions)
        degraded = any(isinstance(c, IncompleteLogCondition) for c in conditions)
        if degraded:
            self.logger.warning(
                "Event log collection hit a safety ceiling; snapshot may be incomplete"
            )
        if conditions:
            self.logger.info(f"Snapshot completed with {len(conditions)} warnings")

        return Snapshot(
            target_time=target,
            target_date=label,
            collection=collection,
            total_items=len(reconstruction.ownership),
            owners_count=len(balances),
            balances=balances,
            ranked=tuple(ranked),
            degraded=degraded,
            conditions=tuple(conditions),
        )
