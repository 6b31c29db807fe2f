"""
Tests for the scatter-gather aggregator: merge semantics, partial results,
cancellation before dispatch and deadlines that pass mid-flight.
"""
import threading

import pytest

from src.core.exceptions import AggregationCancelledError
from src.database.memory_store import InMemoryRecordStore
from src.directory.aggregator import NOT_FOUND_CAUSE, ScatterGatherAggregator
from src.directory.context import CONTEXT_CANCELED, DEADLINE_EXCEEDED, RequestContext
from src.directory.records import AggregationStatus
from src.directory.resolver import branch_candidates, country_candidates

from tests.conftest import FlakyStore


def _codes(result):
    return sorted(record.swift_code for record in result.collected)


class TestComplete:
    def test_branch_group(self, memory_store):
        result = ScatterGatherAggregator(memory_store).resolve(branch_candidates("ALBPPLPWXXX"))

        assert result.status is AggregationStatus.COMPLETE
        assert _codes(result) == ["ALBPPLPW001", "ALBPPLPW002"]
        assert result.failures == []
        assert result.candidate_count == 2

    def test_country(self, memory_store):
        result = ScatterGatherAggregator(memory_store).resolve(country_candidates("DE"))

        assert _codes(result) == ["COBADEFF001", "COBADEFFXXX"]
        assert not result.is_partial

    def test_empty_candidate_set_is_complete(self, memory_store):
        result = ScatterGatherAggregator(memory_store).resolve(country_candidates("FR"))

        assert result.status is AggregationStatus.COMPLETE
        assert result.collected == []
        assert result.candidate_count == 0

    def test_fetches_run_concurrently(self, sample_records):
        keys = ["ALBPPLPW001", "ALBPPLPW002", "COBADEFF001"]
        barrier = threading.Barrier(len(keys), timeout=2)

        class BarrierStore(InMemoryRecordStore):
            def get(self, swift_code):
                barrier.wait()
                return super().get(swift_code)

        result = ScatterGatherAggregator(BarrierStore(sample_records)).gather(keys)

        assert result.status is AggregationStatus.COMPLETE
        assert _codes(result) == sorted(keys)


class TestPartial:
    def test_backend_error_for_one_key(self, sample_records):
        store = FlakyStore(sample_records, failing={"ALBPPLPW002"})

        result = ScatterGatherAggregator(store).resolve(branch_candidates("ALBPPLPWXXX"))

        assert result.status is AggregationStatus.PARTIAL
        assert _codes(result) == ["ALBPPLPW001"]
        assert [f.identifier for f in result.failures] == ["ALBPPLPW002"]
        assert "connection reset" in result.failures[0].cause
        assert result.failure_descriptions[0].startswith(
            "failed to fetch bank data for key ALBPPLPW002:"
        )

    def test_key_deleted_between_scan_and_fetch(self, memory_store):
        result = ScatterGatherAggregator(memory_store).gather(["ALBPPLPW001", "ALBPPLPW009"])

        assert result.is_partial
        assert _codes(result) == ["ALBPPLPW001"]
        assert result.failures[0].cause == NOT_FOUND_CAUSE

    def test_every_candidate_accounted_for(self, sample_records):
        store = FlakyStore(sample_records, failing={"ALBPPLPW001", "ALBPPLPW002"})

        result = ScatterGatherAggregator(store).resolve(country_candidates("PL"))

        assert len(result.collected) + len(result.failures) == result.candidate_count == 4


class TestCancellation:
    def test_canceled_before_dispatch_raises(self, sample_records):
        store = FlakyStore(sample_records)
        context = RequestContext()
        context.cancel()

        with pytest.raises(AggregationCancelledError) as exc:
            ScatterGatherAggregator(store).resolve(branch_candidates("ALBPPLPWXXX"), context)

        assert exc.value.reason == CONTEXT_CANCELED
        assert store.fetched == []

    def test_canceled_context_with_no_candidates_still_raises(self, memory_store):
        context = RequestContext()
        context.cancel()

        with pytest.raises(AggregationCancelledError):
            ScatterGatherAggregator(memory_store).gather([], context)

    def test_expired_before_dispatch_raises(self, memory_store):
        context = RequestContext.with_timeout(0)

        with pytest.raises(AggregationCancelledError) as exc:
            ScatterGatherAggregator(memory_store).gather(["ALBPPLPW001"], context)

        assert exc.value.reason == DEADLINE_EXCEEDED

    def test_deadline_passes_mid_flight(self, sample_records):
        store = FlakyStore(sample_records, blocking={"ALBPPLPW002"})
        context = RequestContext.with_timeout(0.3)

        try:
            result = ScatterGatherAggregator(store, poll_interval=0.01).resolve(
                branch_candidates("ALBPPLPWXXX"), context
            )
        finally:
            store.release.set()

        assert result.status is AggregationStatus.PARTIAL
        assert _codes(result) == ["ALBPPLPW001"]
        assert result.failures[0].identifier == "ALBPPLPW002"
        assert result.failures[0].cause == DEADLINE_EXCEEDED

    def test_cancel_mid_flight(self, sample_records):
        store = FlakyStore(sample_records, blocking={"COBADEFF001"})
        context = RequestContext()
        timer = threading.Timer(0.2, context.cancel)
        timer.start()

        try:
            result = ScatterGatherAggregator(store, poll_interval=0.01).resolve(
                country_candidates("DE"), context
            )
        finally:
            timer.cancel()
            store.release.set()

        assert result.is_partial
        assert _codes(result) == ["COBADEFFXXX"]
        assert result.failures[0].cause == CONTEXT_CANCELED
