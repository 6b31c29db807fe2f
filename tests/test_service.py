import dataclasses
import logging

import pytest

from src.core.exceptions import (
    AggregationCancelledError,
    MalformedIdentifier,
    RecordAlreadyExistsError,
    RecordNotFoundError,
)
from src.directory.records import AggregationStatus
from src.services.directory_service import DirectoryService

from tests.conftest import FlakyStore, make_record


class TestLookup:
    def test_headquarters_gets_branches(self, service):
        lookup = service.lookup("ALBPPLPWXXX")

        assert lookup.bank.is_headquarter
        assert sorted(r.swift_code for r in lookup.branches.collected) == [
            "ALBPPLPW001",
            "ALBPPLPW002",
        ]
        assert not lookup.is_partial

    def test_branch_has_no_aggregation(self, service):
        lookup = service.lookup("ALBPPLPW001")
        assert lookup.branches is None
        assert not lookup.is_partial

    def test_headquarters_without_branches(self, service):
        lookup = service.lookup("BREXPLPWXXX")
        assert lookup.branches.collected == []
        assert lookup.branches.status is AggregationStatus.COMPLETE

    def test_not_found(self, service):
        with pytest.raises(RecordNotFoundError):
            service.lookup("ALBPPLPW009")

    def test_partial_branches(self, sample_records):
        service = DirectoryService(FlakyStore(sample_records, failing={"ALBPPLPW001"}))
        lookup = service.lookup("ALBPPLPWXXX")
        assert lookup.is_partial

    def test_branch_stored_with_headquarter_flag(self, sample_records):
        mislabeled = dataclasses.replace(make_record("ALBPPLPW001"), is_headquarter=True)
        records = [mislabeled if r.swift_code == "ALBPPLPW001" else r for r in sample_records]
        service = DirectoryService(FlakyStore(records))

        lookup = service.lookup("ALBPPLPW001")

        assert lookup.branches is None
        assert lookup.bank.swift_code == "ALBPPLPW001"

    def test_expired_deadline_aborts_aggregation(self, memory_store):
        service = DirectoryService(memory_store, timeout_seconds=0)
        with pytest.raises(AggregationCancelledError):
            service.lookup("ALBPPLPWXXX", service.new_context())


class TestResolve:
    def test_resolve_group_rejects_malformed(self, service):
        with pytest.raises(MalformedIdentifier):
            service.resolve_group("ALBP")

    def test_resolve_country(self, service):
        result = service.resolve_country("PL")
        assert sorted(r.swift_code for r in result.collected) == [
            "ALBPPLPW001",
            "ALBPPLPW002",
            "ALBPPLPWXXX",
            "BREXPLPWXXX",
        ]

    def test_new_context_carries_timeout(self, service):
        assert service.new_context().remaining() <= 5


class TestWrites:
    def test_add_then_duplicate(self, service):
        record = make_record("ALBPPLPW003")
        service.add_bank(record)
        assert service.get_bank("ALBPPLPW003") == record

        with pytest.raises(RecordAlreadyExistsError):
            service.add_bank(record)

    def test_delete(self, service):
        service.delete_bank("ALBPPLPW001")
        with pytest.raises(RecordNotFoundError):
            service.get_bank("ALBPPLPW001")

    def test_delete_absent(self, service):
        with pytest.raises(RecordNotFoundError):
            service.delete_bank("ALBPPLPW009")


def test_is_healthy(sample_records):
    assert DirectoryService(FlakyStore(sample_records)).is_healthy()
    assert not DirectoryService(FlakyStore(sample_records, healthy=False)).is_healthy()


class TestInitLogging:
    def test_without_timeout(self, memory_store, caplog):
        with caplog.at_level(logging.INFO, logger="src.services.directory_service"):
            DirectoryService(memory_store, timeout_seconds=None)
        assert "timeout=none" in caplog.text
        assert "Nones" not in caplog.text

    def test_with_timeout(self, memory_store, caplog):
        with caplog.at_level(logging.INFO, logger="src.services.directory_service"):
            DirectoryService(memory_store, timeout_seconds=2.5)
        assert "timeout=2.5s" in caplog.text
