"""Resolution of custodial holders to their real owners."""

import logging
from typing import Dict, Iterable, List, Optional

from ..config.custodial_registry import CustodialRegistry
from ..config.settings import settings
from ..core.exceptions import SnapshotError, UnresolvedOwnerCondition
from ..source.ledger import LedgerSource


class OwnerResolver:
    """Follows custodial contracts (e.g. marketplace sale escrows) to the real owner.

    ``resolve`` never raises: anything it cannot classify or unwind is
    treated as its own owner and reported as an ``UnresolvedOwnerCondition``.
    Results are memoized for the lifetime of the instance, so one resolver
    belongs to exactly one snapshot run.
    """

    def __init__(
        self,
        source: LedgerSource,
        registry: Optional[CustodialRegistry] = None,
        max_hops: Optional[int] = None,
    ):
        self.source = source
        self.registry = registry or CustodialRegistry(
            registry_path=settings.snapshot.custodial_patterns_path
        )
        self.max_hops = settings.snapshot.max_resolution_hops if max_hops is None else max_hops
        self.logger = logging.getLogger(self.__class__.__name__)
        self._cache: Dict[str, str] = {}
        self.conditions: List[UnresolvedOwnerCondition] = []

    @property
    def cache(self) -> Dict[str, str]:
        return dict(self._cache)

    def seed_direct_holders(self, addresses: Iterable[str]) -> int:
        """Pre-cache addresses already known to be wallets."""
        seeded = 0
        for address in addresses:
            if address and address not in self._cache:
                self._cache[address] = address
                seeded += 1
        return seeded

    def resolve(self, address: str) -> str:
        if address in self._cache:
            return self._cache[address]

        chain: List[str] = []
        current = address
        while True:
            if current in self._cache:
                owner = self._cache[current]
                break
            if current in chain:
                self._unresolved(current, "cycle", len(chain))
                owner = current
                break
            if len(chain) >= self.max_hops:
                self._unresolved(current, "max_hops", len(chain))
                owner = current
                break

            next_owner = self._step(current, len(chain))
            chain.append(current)
            if next_owner is None:
                owner = current
                break
            current = next_owner

        for visited in chain:
            self._cache.setdefault(visited, owner)
        if owner != address:
            self.logger.debug(f"Resolved {address} -> {owner} in {len(chain)} hops")
        return owner

    def _step(self, address: str, hops: int) -> Optional[str]:
        """One hop: the custodial owner of ``address``, or None when it is final."""
        try:
            info = self.source.classify_address(address)
        except SnapshotError as e:
            self.logger.warning(f"Could not classify {address}: {e}")
            self._unresolved(address, "classification_failed", hops)
            return None

        if info.is_direct_holder:
            return None

        pattern = self.registry.match(info.capabilities)
        if pattern is None:
            self._unresolved(address, "unknown_contract", hops)
            return None

        try:
            owner = self.source.invoke_owner_lookup(address, pattern)
        except SnapshotError as e:
            self.logger.warning(f"Owner lookup {pattern.method} failed for {address}: {e}")
            self._unresolved(address, "owner_lookup_failed", hops)
            return None

        if not owner or owner == address:
            self._unresolved(address, "owner_lookup_empty", hops)
            return None
        self.logger.debug(f"{address} is a {pattern.name} held for {owner}")
        return owner

    def _unresolved(self, address: str, reason: str, hops: int):
        self.conditions.append(
            UnresolvedOwnerCondition(address=address, reason=reason, hops=hops)
        )
