"""Registry of known custodial contract patterns."""

import json
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class CustodialPattern:
    """A contract type that holds items on behalf of a real owner.

    An address matches the pattern when it declares any of ``interfaces``.
    The real owner is read from the get-method ``method``, taking the first
    non-empty field of ``owner_fields`` in its decoded result.
    """

    name: str
    interfaces: FrozenSet[str]
    method: str
    owner_fields: Tuple[str, ...] = ("owner",)

    def matches(self, capabilities: Iterable[str]) -> bool:
        return not self.interfaces.isdisjoint(capabilities)


MARKETPLACE_SALE = CustodialPattern(
    name="marketplace_sale",
    interfaces=frozenset({"nft_sale_v2", "nft_sale_getgems_v3", "nft_sale_getgems_v4"}),
    method="get_sale_data",
    owner_fields=("owner", "nft_owner", "owner_address"),
)


class CustodialRegistry:
    """Maps declared contract interfaces to custodial patterns."""

    def __init__(
        self,
        patterns: Optional[Iterable[CustodialPattern]] = None,
        registry_path: Optional[str] = None,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self._patterns: Dict[str, CustodialPattern] = {}
        for pattern in patterns if patterns is not None else [MARKETPLACE_SALE]:
            self.add_pattern(pattern)
        if registry_path:
            for pattern in self._load_registry(registry_path):
                self.add_pattern(pattern)

    def _load_registry(self, registry_path: str) -> List[CustodialPattern]:
        """Load extra patterns from a JSON file keyed by pattern name."""
        try:
            with open(registry_path, "r") as f:
                registry = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Custodial pattern file not found at {registry_path}"
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in custodial pattern file: {e}"
            ) from e

        patterns = []
        for name, entry in registry.items():
            try:
                patterns.append(
                    CustodialPattern(
                        name=name,
                        interfaces=frozenset(entry["interfaces"]),
                        method=entry["method"],
                        owner_fields=tuple(entry.get("owner_fields", ["owner"])),
                    )
                )
            except (KeyError, TypeError) as e:
                raise ConfigurationError(
                    f"Malformed custodial pattern '{name}': {e}"
                ) from e
        self.logger.info(f"Loaded {len(patterns)} custodial patterns from {registry_path}")
        return patterns

    def add_pattern(self, pattern: CustodialPattern):
        """Register a pattern, replacing any existing one with the same name."""
        self._patterns[pattern.name] = pattern

    def match(self, capabilities: Iterable[str]) -> Optional[CustodialPattern]:
        """Return the first registered pattern the capability set satisfies."""
        capabilities = frozenset(capabilities)
        for pattern in self._patterns.values():
            if pattern.matches(capabilities):
                return pattern
        return None

    def get_patterns(self) -> List[CustodialPattern]:
        return list(self._patterns.values())
