"""
Record store tests. Both backends must satisfy the same contract; the SQL
store runs against a temporary SQLite file.
"""
import pytest

from src.database.connection import DatabaseConnection
from src.database.init_db import init_bank_tables
from src.database.memory_store import InMemoryRecordStore
from src.database.sql_store import SQLRecordStore, pattern_to_like

from tests.conftest import make_record


@pytest.fixture
def sql_store(tmp_path, sample_records):
    db = DatabaseConnection(f"sqlite:///{tmp_path / 'swift_test.db'}")
    init_bank_tables(db)
    store = SQLRecordStore(db)
    store.put_many(sample_records)
    yield store
    store.close()


@pytest.fixture(params=["memory", "sql"])
def store(request, sample_records):
    if request.param == "memory":
        return InMemoryRecordStore(sample_records)
    return request.getfixturevalue("sql_store")


class TestStoreContract:
    def test_get(self, store, hq_record):
        assert store.get("ALBPPLPWXXX") == hq_record
        assert store.get("ALBPPLPW009") is None

    def test_scan_branch_pattern(self, store):
        assert sorted(store.scan("ALBPPLPW???")) == ["ALBPPLPW001", "ALBPPLPW002", "ALBPPLPWXXX"]

    def test_scan_country_pattern(self, store):
        assert sorted(store.scan("????DE?????")) == ["COBADEFF001", "COBADEFFXXX"]

    def test_scan_is_case_sensitive(self, store):
        assert store.scan("albpplpw???") == []

    def test_scan_requires_equal_length(self, store):
        store.put(make_record("ALBPPLPW"))
        assert "ALBPPLPW" not in store.scan("????PL?????")

    def test_put_exists_delete(self, store):
        record = make_record("ALBPPLPW003")
        assert store.exists("ALBPPLPW003") == 0

        store.put(record)
        assert store.exists("ALBPPLPW003") == 1
        assert store.get("ALBPPLPW003") == record

        store.delete("ALBPPLPW003")
        assert store.exists("ALBPPLPW003") == 0

    def test_delete_absent_key(self, store):
        store.delete("ALBPPLPW009")

    def test_put_many_returns_count(self, store):
        written = store.put_many([make_record("BREXPLPW001"), make_record("BREXPLPW002")])
        assert written == 2

    def test_ping(self, store):
        assert store.ping()


def test_pattern_to_like_escapes_like_metacharacters():
    assert pattern_to_like("AB%_\\?") == "AB\\%\\_\\\\_"
    assert pattern_to_like("????PL?????") == "____PL_____"


def test_memory_store_len(sample_records):
    assert len(InMemoryRecordStore(sample_records)) == len(sample_records)
