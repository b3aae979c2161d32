"""Custom exceptions and non-fatal conditions for nft_snapshot package."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SnapshotError(Exception):
    """Base exception for nft_snapshot package."""

    pass


class APIError(SnapshotError):
    """Exception raised when the ledger service cannot be read."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class TransportError(APIError):
    """Network failure or non-2xx HTTP status other than a rate limit."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        if status_code is None:
            message = f"Request to {url} failed: {reason}"
        else:
            message = f"Request to {url} failed with HTTP {status_code}: {reason}"
        super().__init__(message, url)
        self.status_code = status_code
        self.reason = reason


class LedgerError(APIError):
    """Ledger answered successfully but the body carries an error payload."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Ledger error from {url}: {message}", url)
        self.message = message


class ConfigurationError(SnapshotError):
    """Exception raised for configuration-related errors."""

    pass


class ConditionKind(Enum):
    """Kinds of non-fatal degradation a run can accumulate."""

    INCOMPLETE_LOG = "incomplete_log"
    UNRESOLVED_OWNER = "unresolved_owner"
    ITEM_VERIFICATION_FAILED = "item_verification_failed"


@dataclass(frozen=True)
class Condition:
    """A degradation recorded on the result instead of aborting the run."""

    @property
    def kind(self) -> ConditionKind:
        raise NotImplementedError

    def to_dict(self) -> dict:
        data = {"kind": self.kind.value}
        data.update(self.__dict__)
        return data


@dataclass(frozen=True)
class IncompleteLogCondition(Condition):
    """Pagination stopped early; the event log may be missing entries."""

    subject: str
    pages: int
    ceiling: int
    reason: str = "page_ceiling"

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.INCOMPLETE_LOG


@dataclass(frozen=True)
class UnresolvedOwnerCondition(Condition):
    """An address was kept as its own owner without full resolution."""

    address: str
    reason: str
    hops: int = 0

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.UNRESOLVED_OWNER


@dataclass(frozen=True)
class PerItemVerificationFailure(Condition):
    """The per-item history check for one item failed."""

    item_id: str
    error: str

    @property
    def kind(self) -> ConditionKind:
        return ConditionKind.ITEM_VERIFICATION_FAILED
