"""
Record Store contract.

The directory core only reads through `get` and `scan`. `put`, `delete` and
`exists` serve the single-record CRUD endpoints and the data loader.
Implementations live in src/database/.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from src.directory.records import BankRecord


class RecordStore(ABC):
    """
    Key-value store of BankRecords keyed by SWIFT code.

    `get` must be safe to call from many threads at once; the aggregator
    issues one call per candidate key concurrently.
    """

    @abstractmethod
    def get(self, swift_code: str) -> Optional[BankRecord]:
        """Point lookup. Returns None when the key is absent."""

    @abstractmethod
    def scan(self, pattern: str) -> List[str]:
        """
        Return every stored key matching a fixed-length wildcard pattern.

        '?' matches any single character; other characters match exactly
        and case-sensitively.
        """

    @abstractmethod
    def put(self, record: BankRecord) -> None:
        """Store a record under its SWIFT code, replacing any previous one."""

    def put_many(self, records: Iterable[BankRecord]) -> int:
        """Store several records. Returns how many were written."""
        count = 0
        for record in records:
            self.put(record)
            count += 1
        return count

    @abstractmethod
    def delete(self, swift_code: str) -> None:
        """Remove a record. Deleting an absent key is not an error."""

    @abstractmethod
    def exists(self, swift_code: str) -> int:
        """Number of stored records with this key (0 or 1)."""

    @abstractmethod
    def ping(self) -> bool:
        """True when the backend is reachable."""

    def close(self) -> None:
        """Release backend resources."""
