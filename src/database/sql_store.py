"""
SQL Record Store - RecordStore backed by the bank_records table.

Pattern scans are translated to SQL LIKE ('?' -> '_') and then re-checked
in Python, because LIKE is case-insensitive on several backends while the
store contract is case-sensitive.
"""
from typing import Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from src.core.exceptions import StoreError
from src.core.logging_config import get_logger
from src.database.connection import DatabaseConnection, get_database
from src.database.models import BankRecordRow
from src.directory.identifier import WILDCARD, matches_pattern
from src.directory.records import BankRecord
from src.directory.store import RecordStore

logger = get_logger(__name__)

LIKE_ESCAPE = "\\"


def pattern_to_like(pattern: str) -> str:
    """Translate a '?' wildcard pattern into an escaped LIKE expression."""
    parts = []
    for char in pattern:
        if char == WILDCARD:
            parts.append("_")
        elif char in ("%", "_", LIKE_ESCAPE):
            parts.append(LIKE_ESCAPE + char)
        else:
            parts.append(char)
    return "".join(parts)


class SQLRecordStore(RecordStore):
    """
    Relational record store.

    Each call opens its own short-lived session, so `get` is safe to call
    from the aggregator's fetch threads concurrently.

    Example:
        >>> store = SQLRecordStore(DatabaseConnection("sqlite:///./swift.db"))
        >>> store.get("ALBPPLPWXXX")
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_database()

    def get(self, swift_code: str) -> Optional[BankRecord]:
        try:
            with self.db.get_session() as session:
                row = session.get(BankRecordRow, swift_code)
                return row.to_record() if row else None
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch data for key {swift_code}: {e}") from e

    def scan(self, pattern: str) -> List[str]:
        statement = select(BankRecordRow.swift_code).where(
            BankRecordRow.swift_code.like(pattern_to_like(pattern), escape=LIKE_ESCAPE)
        )
        try:
            with self.db.get_session() as session:
                keys = session.execute(statement).scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to scan keys for pattern {pattern}: {e}") from e

        return [key for key in keys if matches_pattern(key, pattern)]

    def put(self, record: BankRecord) -> None:
        self.put_many([record])

    def put_many(self, records: Iterable[BankRecord]) -> int:
        """Store several records in one transaction. Returns the count."""
        count = 0
        try:
            with self.db.get_session() as session:
                for record in records:
                    session.merge(BankRecordRow.from_record(record))
                    count += 1
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to store bank data: {e}") from e
        return count

    def delete(self, swift_code: str) -> None:
        try:
            with self.db.get_session() as session:
                session.query(BankRecordRow).filter(
                    BankRecordRow.swift_code == swift_code
                ).delete()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete data for SWIFT code {swift_code}: {e}") from e

    def exists(self, swift_code: str) -> int:
        statement = select(func.count()).select_from(BankRecordRow).where(
            BankRecordRow.swift_code == swift_code
        )
        try:
            with self.db.get_session() as session:
                return int(session.execute(statement).scalar_one())
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to check existence of key {swift_code}: {e}") from e

    def ping(self) -> bool:
        return self.db.check_connection()

    def close(self) -> None:
        self.db.close()
