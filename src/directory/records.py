"""
Domain records shared by the store, the aggregator and the service.

These are plain dataclasses; the HTTP schemas in src/models/bank.py convert
to and from them.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List


@dataclass(frozen=True)
class BankRecord:
    """
    One stored bank entry, keyed by its SWIFT code.

    Attributes:
        swift_code: Primary key (8 or 11 characters)
        bank_name: Institution name
        address: Postal address as imported
        country_iso2: Two-letter country code
        country_name: Canonical uppercase country name for country_iso2
        is_headquarter: True when the code ends in XXX
    """
    swift_code: str
    bank_name: str
    address: str
    country_iso2: str
    country_name: str
    is_headquarter: bool


class AggregationStatus(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"


@dataclass(frozen=True)
class FetchFailure:
    """A candidate key that could not be turned into a record."""
    identifier: str
    cause: str

    def describe(self) -> str:
        return f"failed to fetch bank data for key {self.identifier}: {self.cause}"


@dataclass
class AggregationResult:
    """
    Merged outcome of a scatter-gather fetch.

    Every candidate key ends up in exactly one of `collected` or `failures`,
    so len(collected) + len(failures) == candidate_count.
    Collected records carry no defined order.
    """
    collected: List[BankRecord] = field(default_factory=list)
    failures: List[FetchFailure] = field(default_factory=list)
    candidate_count: int = 0

    @property
    def status(self) -> AggregationStatus:
        if self.failures:
            return AggregationStatus.PARTIAL
        return AggregationStatus.COMPLETE

    @property
    def is_partial(self) -> bool:
        return self.status is AggregationStatus.PARTIAL

    @property
    def failure_descriptions(self) -> List[str]:
        return [failure.describe() for failure in self.failures]
