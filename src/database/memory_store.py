"""
In-memory Record Store.

Used with STORE_BACKEND=memory and by the test suite. A single lock guards
the dict; it is held only for the dictionary access itself.
"""
import threading
from typing import Dict, Iterable, List, Optional

from src.core.logging_config import get_logger
from src.directory.identifier import matches_pattern
from src.directory.records import BankRecord
from src.directory.store import RecordStore

logger = get_logger(__name__)


class InMemoryRecordStore(RecordStore):
    """
    Thread-safe dict-backed store.

    Example:
        >>> store = InMemoryRecordStore()
        >>> store.put(record)
        >>> store.scan("ALBPPLPW???")
        ['ALBPPLPW001', 'ALBPPLPWXXX']
    """

    def __init__(self, records: Optional[Iterable[BankRecord]] = None):
        self._records: Dict[str, BankRecord] = {}
        self._lock = threading.Lock()
        for record in records or ():
            self._records[record.swift_code] = record
        logger.info(f"InMemoryRecordStore initialized with {len(self._records)} records")

    def get(self, swift_code: str) -> Optional[BankRecord]:
        with self._lock:
            return self._records.get(swift_code)

    def scan(self, pattern: str) -> List[str]:
        with self._lock:
            keys = list(self._records)
        return [key for key in keys if matches_pattern(key, pattern)]

    def put(self, record: BankRecord) -> None:
        with self._lock:
            self._records[record.swift_code] = record

    def delete(self, swift_code: str) -> None:
        with self._lock:
            self._records.pop(swift_code, None)

    def exists(self, swift_code: str) -> int:
        with self._lock:
            return 1 if swift_code in self._records else 0

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
