"""
Directory Service - Business logic behind the SWIFT code endpoints.

This service orchestrates:
1. Point lookups, with branches attached when the code is a headquarters
2. Branch group resolution (resolve_group)
3. Country listing (resolve_country)
4. Single-record add/delete with existence checks

Routes stay thin: they validate input, call one method here, and map the
outcome (Complete -> 200, Partial -> 206) to HTTP.
"""
from dataclasses import dataclass
from typing import Optional

from src.core.config import get_settings
from src.core.exceptions import RecordAlreadyExistsError, RecordNotFoundError
from src.core.logging_config import get_logger
from src.directory.aggregator import ScatterGatherAggregator
from src.directory.context import RequestContext
from src.directory.identifier import classify
from src.directory.records import AggregationResult, BankRecord
from src.directory.resolver import branch_candidates, country_candidates
from src.directory.store import RecordStore

logger = get_logger(__name__)


@dataclass
class BankLookup:
    """A looked-up bank plus its branch aggregation when it is a headquarters."""
    bank: BankRecord
    branches: Optional[AggregationResult] = None

    @property
    def is_partial(self) -> bool:
        return self.branches is not None and self.branches.is_partial


class DirectoryService:
    """
    Facade over the record store and the scatter-gather aggregator.

    Example:
        >>> service = DirectoryService(InMemoryRecordStore(records))
        >>> result = service.resolve_group("ALBPPLPWXXX")
        >>> [r.swift_code for r in result.collected]
        ['ALBPPLPW001', 'ALBPPLPW002']
    """

    def __init__(
        self,
        store: RecordStore,
        aggregator: Optional[ScatterGatherAggregator] = None,
        timeout_seconds: Optional[float] = None,
    ):
        """
        Args:
            store: Record store
            aggregator: Aggregator to use (defaults to one over `store`)
            timeout_seconds: Deadline for contexts created by new_context()
        """
        self.store = store
        self.aggregator = aggregator or ScatterGatherAggregator(store)
        self.timeout_seconds = timeout_seconds
        deadline = f"{timeout_seconds}s" if timeout_seconds is not None else "none"
        logger.info(f"DirectoryService initialized: timeout={deadline}")

    def new_context(self) -> RequestContext:
        """Create the per-request context carrying the configured deadline."""
        return RequestContext.with_timeout(self.timeout_seconds)

    def get_bank(self, swift_code: str) -> BankRecord:
        """
        Point lookup.

        Raises:
            RecordNotFoundError: If no record is stored under swift_code
        """
        bank = self.store.get(swift_code)
        if bank is None:
            raise RecordNotFoundError(swift_code)
        return bank

    def lookup(self, swift_code: str, context: Optional[RequestContext] = None) -> BankLookup:
        """
        Look up a bank; headquarters also get their branches resolved.

        Raises:
            RecordNotFoundError: If no record is stored under swift_code
            AggregationCancelledError: If the context ends before the fan-out
        """
        bank = self.get_bank(swift_code)
        if not classify(swift_code).is_headquarters:
            return BankLookup(bank=bank)
        return BankLookup(bank=bank, branches=self.resolve_group(swift_code, context))

    def resolve_group(
        self,
        hq_identifier: str,
        context: Optional[RequestContext] = None,
    ) -> AggregationResult:
        """
        Fetch every branch sharing the headquarters' 8 character prefix.

        Raises:
            MalformedIdentifier: If hq_identifier is structurally invalid
            AggregationCancelledError: If the context ends before the fan-out
        """
        classify(hq_identifier)
        logger.info(f"Resolving branches for {hq_identifier}")
        result = self.aggregator.resolve(branch_candidates(hq_identifier), context)
        self._log_result(f"group {hq_identifier}", result)
        return result

    def resolve_country(
        self,
        country_code: str,
        context: Optional[RequestContext] = None,
    ) -> AggregationResult:
        """
        Fetch every bank registered under a country code.

        The code must already be uppercase.

        Raises:
            AggregationCancelledError: If the context ends before the fan-out
        """
        logger.info(f"Resolving banks for country {country_code}")
        result = self.aggregator.resolve(country_candidates(country_code), context)
        self._log_result(f"country {country_code}", result)
        return result

    def add_bank(self, record: BankRecord) -> None:
        """
        Store a new, already validated record.

        Raises:
            RecordAlreadyExistsError: If the SWIFT code is already stored
        """
        if self.store.exists(record.swift_code) > 0:
            raise RecordAlreadyExistsError(record.swift_code)
        self.store.put(record)
        logger.info(f"Added bank data for {record.swift_code}")

    def delete_bank(self, swift_code: str) -> None:
        """
        Remove a stored record.

        Raises:
            RecordNotFoundError: If the SWIFT code is not stored
        """
        if self.store.exists(swift_code) == 0:
            raise RecordNotFoundError(swift_code)
        self.store.delete(swift_code)
        logger.info(f"Deleted bank data for {swift_code}")

    def is_healthy(self) -> bool:
        try:
            return self.store.ping()
        except Exception as e:
            logger.error(f"Store ping failed: {e}")
            return False

    @staticmethod
    def _log_result(label: str, result: AggregationResult) -> None:
        if result.is_partial:
            logger.warning(
                f"Partial result for {label}: {len(result.failures)} of "
                f"{result.candidate_count} candidates failed"
            )
        else:
            logger.debug(f"Complete result for {label}: {len(result.collected)} records")


# Module-level instance (singleton pattern)
_directory_service: Optional[DirectoryService] = None


def get_directory_service() -> DirectoryService:
    """
    Get or create the shared directory service.

    Returns:
        DirectoryService over the configured record store
    """
    global _directory_service
    if _directory_service is None:
        from src.database.store_factory import get_record_store

        settings = get_settings()
        _directory_service = DirectoryService(
            store=get_record_store(),
            timeout_seconds=settings.aggregation_timeout_seconds,
        )
    return _directory_service


def reset_directory_service() -> None:
    """Forget the shared service (used on shutdown and in tests)."""
    global _directory_service
    _directory_service = None
