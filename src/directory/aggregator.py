"""
Scatter-Gather Aggregator - concurrent fetch of a candidate key set.

Flow for one request:
1. Resolve the query pattern against the store's key space (scan)
2. Launch one fetch per candidate key on a dedicated thread pool
3. Join on the futures; each one yields a record or a FetchFailure
4. Merge into an AggregationResult (Complete or Partial)

Fan-out width equals the candidate count. A large country or branch group
puts proportional concurrent load on the store.
"""
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, Optional, Sequence, Union

from src.core.exceptions import AggregationCancelledError
from src.core.logging_config import LoggerMixin
from src.directory.context import DEADLINE_EXCEEDED, RequestContext
from src.directory.records import AggregationResult, BankRecord, FetchFailure
from src.directory.resolver import CandidateQuery
from src.directory.store import RecordStore

# How often the join loop re-checks the cancel flag
DEFAULT_POLL_INTERVAL = 0.05

NOT_FOUND_CAUSE = "record not found at fetch time"

FetchOutcome = Union[BankRecord, FetchFailure]


class ScatterGatherAggregator(LoggerMixin):
    """
    Fetches many records concurrently and merges the outcome.

    Individual fetch failures (backend errors, keys deleted between scan and
    fetch, the deadline passing mid-flight) are recorded in the result and
    never abort the call. Only a context that is already done before the
    fan-out is dispatched raises AggregationCancelledError.

    Example:
        >>> aggregator = ScatterGatherAggregator(store)
        >>> result = aggregator.resolve(branch_candidates("ALBPPLPWXXX"))
        >>> result.status
        <AggregationStatus.COMPLETE: 'complete'>
    """

    def __init__(self, store: RecordStore, poll_interval: float = DEFAULT_POLL_INTERVAL):
        """
        Args:
            store: Record store used for scan and point lookups
            poll_interval: Seconds between cancel-flag checks while joining
        """
        self.store = store
        self.poll_interval = poll_interval

    def resolve(
        self,
        query: CandidateQuery,
        context: Optional[RequestContext] = None,
    ) -> AggregationResult:
        """
        Scan the store for a query's pattern and gather every candidate.

        Raises:
            AggregationCancelledError: If the context is done before dispatch
            StoreError: If the scan itself fails
        """
        context = context or RequestContext.background()
        self._ensure_live(context)

        candidates = query.resolve(self.store.scan(query.pattern))
        self.logger.debug(
            f"Pattern {query.pattern} resolved to {len(candidates)} candidates"
        )
        return self.gather(candidates, context)

    def gather(
        self,
        candidates: Sequence[str],
        context: Optional[RequestContext] = None,
    ) -> AggregationResult:
        """
        Fetch every candidate key concurrently.

        Args:
            candidates: Candidate key set (any order, no duplicates)
            context: Request context shared by all fetches

        Returns:
            AggregationResult with one entry per candidate

        Raises:
            AggregationCancelledError: If the context is done before dispatch
        """
        context = context or RequestContext.background()
        self._ensure_live(context)

        keys = list(candidates)
        result = AggregationResult(candidate_count=len(keys))
        if not keys:
            return result

        self.logger.info(f"Fetching {len(keys)} records concurrently")

        executor = ThreadPoolExecutor(
            max_workers=len(keys),
            thread_name_prefix="bank-fetch",
        )
        try:
            futures: Dict[Future, str] = {
                executor.submit(self._fetch, key, context): key
                for key in keys
            }
            pending = set(futures)

            while pending and not context.done():
                done, pending = wait(
                    pending,
                    timeout=self._wait_timeout(context),
                    return_when=FIRST_COMPLETED,
                )
                for future in done:
                    self._collect(result, future)

            # Context ended mid-flight: whatever has not finished fails now
            reason = context.error() or DEADLINE_EXCEEDED
            for future in pending:
                if future.done() and not future.cancelled():
                    self._collect(result, future)
                else:
                    future.cancel()
                    result.failures.append(FetchFailure(futures[future], reason))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if result.is_partial:
            self.logger.warning(
                f"Partial aggregation: {len(result.collected)}/{len(keys)} fetched, "
                f"{len(result.failures)} failed"
            )
        return result

    def _fetch(self, key: str, context: RequestContext) -> FetchOutcome:
        """Worker body: one point lookup, reported as record or failure."""
        if context.done():
            return FetchFailure(key, context.error())

        try:
            record = self.store.get(key)
        except Exception as e:
            self.logger.error(f"Fetch failed for {key}: {e}")
            return FetchFailure(key, str(e) or e.__class__.__name__)

        if record is None:
            return FetchFailure(key, NOT_FOUND_CAUSE)
        return record

    @staticmethod
    def _collect(result: AggregationResult, future: Future) -> None:
        outcome = future.result()
        if isinstance(outcome, FetchFailure):
            result.failures.append(outcome)
        else:
            result.collected.append(outcome)

    def _wait_timeout(self, context: RequestContext) -> float:
        remaining = context.remaining()
        if remaining is None:
            return self.poll_interval
        return min(self.poll_interval, remaining)

    @staticmethod
    def _ensure_live(context: RequestContext) -> None:
        if context.done():
            raise AggregationCancelledError(context.error())
