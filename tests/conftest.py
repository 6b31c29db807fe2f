"""
Shared fixtures: sample records, stores, the service and an HTTP client.
"""
import os
import threading
from typing import Iterable, Optional

# Settings are cached on first use; pin the backend before anything imports them
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("APP_ENV", "testing")

import pytest

from src.core.exceptions import StoreError
from src.database.memory_store import InMemoryRecordStore
from src.directory.records import BankRecord
from src.services.directory_service import DirectoryService


def make_record(
    swift_code: str,
    country_iso2: Optional[str] = None,
    country_name: Optional[str] = None,
    bank_name: str = "Test Bank",
    address: str = "Test Street 1",
) -> BankRecord:
    country_iso2 = country_iso2 or swift_code[4:6]
    return BankRecord(
        swift_code=swift_code,
        bank_name=bank_name,
        address=address,
        country_iso2=country_iso2,
        country_name=country_name or {"PL": "POLAND", "DE": "GERMANY"}.get(country_iso2, ""),
        is_headquarter=swift_code.endswith("XXX"),
    )


class FlakyStore(InMemoryRecordStore):
    """In-memory store whose point lookups fail or block for chosen keys."""

    def __init__(
        self,
        records: Iterable[BankRecord] = (),
        failing: Iterable[str] = (),
        blocking: Iterable[str] = (),
        healthy: bool = True,
    ):
        super().__init__(records)
        self.failing = set(failing)
        self.blocking = set(blocking)
        self.healthy = healthy
        self.release = threading.Event()
        self.fetched = []

    def get(self, swift_code: str) -> Optional[BankRecord]:
        self.fetched.append(swift_code)
        if swift_code in self.failing:
            raise StoreError(f"connection reset while reading {swift_code}")
        if swift_code in self.blocking:
            self.release.wait(timeout=5)
        return super().get(swift_code)

    def ping(self) -> bool:
        return self.healthy


@pytest.fixture
def hq_record() -> BankRecord:
    return make_record("ALBPPLPWXXX", bank_name="ALIOR BANK SPOLKA AKCYJNA")


@pytest.fixture
def sample_records(hq_record):
    return [
        hq_record,
        make_record("ALBPPLPW001", bank_name="ALIOR BANK SPOLKA AKCYJNA"),
        make_record("ALBPPLPW002", bank_name="ALIOR BANK SPOLKA AKCYJNA"),
        make_record("BREXPLPWXXX", bank_name="MBANK S.A."),
        make_record("COBADEFFXXX", bank_name="COMMERZBANK AG"),
        make_record("COBADEFF001", bank_name="COMMERZBANK AG"),
    ]


@pytest.fixture
def memory_store(sample_records) -> InMemoryRecordStore:
    return InMemoryRecordStore(sample_records)


@pytest.fixture
def service(memory_store) -> DirectoryService:
    return DirectoryService(memory_store, timeout_seconds=5)


@pytest.fixture
def api_prefix() -> str:
    from src.core.config import get_settings
    return get_settings().api_prefix + "/swift-codes"


@pytest.fixture
def client(service):
    """TestClient wired to the in-memory service; overrides are reset afterwards."""
    from fastapi.testclient import TestClient

    from src.api.dependencies import get_service
    from src.api.main import app

    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
