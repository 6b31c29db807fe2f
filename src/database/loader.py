"""
Bank Data Loader - one-time import of SWIFT code data into the record store.

Supported sources:
1. CSV, ';'-delimited with a header row:
   countryISO2;swiftCode;bankName;address;countryName
2. JSON, a list of {"key": swiftCode, "fields": {...}} objects

Rows with a malformed SWIFT code, or a countryISO2 that disagrees with the
code, are skipped with a warning. The headquarters flag and country name are
derived from the code. Records are written in batches with progress logging.

Run with: python -m src.database.loader --source ./data/swift_codes.csv
"""
import argparse
import csv
import json
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from src.core.config import get_settings
from src.core.exceptions import MalformedIdentifier
from src.core.logging_config import get_logger, setup_logging
from src.core.validators import RecordRules, build_record_rules, sanitize_text
from src.directory.identifier import is_headquarters, parse
from src.directory.records import BankRecord
from src.directory.store import RecordStore

logger = get_logger(__name__)

BATCH_SIZE = 1000
CSV_DELIMITER = ";"
CSV_MIN_COLUMNS = 5

CONNECT_RETRIES = 10
CONNECT_DELAY_SECONDS = 2.0

TRUE_FLAGS = {"1", "true", "yes"}


@dataclass
class LoadResult:
    """Counts reported after an import."""
    loaded: int = 0
    skipped: int = 0
    skipped_keys: List[str] = field(default_factory=list)

    def skip(self, key: str) -> None:
        self.skipped += 1
        self.skipped_keys.append(key)


def _parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_FLAGS


class BankDataLoader:
    """
    Imports bank records from CSV or JSON files.

    Example:
        >>> loader = BankDataLoader(InMemoryRecordStore())
        >>> loader.load_file("data/swift_codes.csv").loaded
        1061
    """

    def __init__(self, store: RecordStore, rules: Optional[RecordRules] = None):
        """
        Args:
            store: Destination record store
            rules: Country table used to check and name each row
        """
        self.store = store
        self.rules = rules or build_record_rules()
        logger.info(f"BankDataLoader initialized: store={type(store).__name__}")

    def wait_for_store(
        self,
        retries: int = CONNECT_RETRIES,
        delay: float = CONNECT_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> bool:
        """
        Ping the store until it answers.

        Returns:
            True once reachable, False after `retries` failed attempts
        """
        for attempt in range(1, retries + 1):
            logger.info(f"Store connection attempt {attempt}/{retries}...")
            try:
                if self.store.ping():
                    logger.info("Connected to record store")
                    return True
            except Exception as e:
                logger.warning(f"Store ping raised: {e}")

            if attempt < retries:
                logger.warning(f"Store unreachable. Retrying in {delay}s...")
                sleep(delay)

        logger.error(f"Record store unreachable after {retries} attempts")
        return False

    def parse_csv(self, file_path: Union[Path, str]) -> Tuple[List[BankRecord], LoadResult]:
        """Parse a ';'-delimited CSV file into records."""
        result = LoadResult()
        records: List[BankRecord] = []

        # utf-8-sig strips a leading BOM
        with open(file_path, "r", encoding="utf-8-sig", errors="replace", newline="") as f:
            reader = csv.reader(f, delimiter=CSV_DELIMITER)
            next(reader, None)  # header

            for row in reader:
                if len(row) < CSV_MIN_COLUMNS:
                    result.skip(row[1] if len(row) > 1 else "")
                    continue

                country_iso2, swift_code, bank_name, address, country_name = row[:CSV_MIN_COLUMNS]
                record = self._build_record(
                    swift_code=swift_code.strip(),
                    bank_name=bank_name,
                    address=address,
                    country_iso2=country_iso2,
                    country_name=country_name,
                    is_headquarter=None,
                )
                if record is None:
                    result.skip(swift_code)
                else:
                    records.append(record)

        return records, result

    def parse_json(self, file_path: Union[Path, str]) -> Tuple[List[BankRecord], LoadResult]:
        """Parse a JSON list of {"key", "fields"} objects into records."""
        result = LoadResult()
        records: List[BankRecord] = []

        with open(file_path, "r", encoding="utf-8-sig") as f:
            entries = json.load(f)

        if not isinstance(entries, list):
            raise ValueError(f"Expected a JSON list in {file_path}")

        for entry in entries:
            key = str(entry.get("key", "")).strip()
            fields: Dict[str, Any] = entry.get("fields") or {}
            record = self._build_record(
                swift_code=key,
                bank_name=fields.get("bankName", ""),
                address=fields.get("address", ""),
                country_iso2=fields.get("countryISO2", ""),
                country_name=fields.get("countryName", ""),
                is_headquarter=fields.get("isHeadquarter"),
            )
            if record is None:
                result.skip(key)
            else:
                records.append(record)

        return records, result

    def load_file(
        self,
        file_path: Union[Path, str],
        batch_size: int = BATCH_SIZE,
    ) -> LoadResult:
        """
        Parse a source file and write its records to the store.

        Args:
            file_path: .csv or .json file
            batch_size: Records per store write

        Returns:
            LoadResult with loaded/skipped counts

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the extension is neither .csv nor .json
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Source file not found: {file_path}")

        suffix = file_path.suffix.lower()
        if suffix == ".csv":
            records, result = self.parse_csv(file_path)
        elif suffix == ".json":
            records, result = self.parse_json(file_path)
        else:
            raise ValueError(
                f"Unsupported file format '{suffix}'. Please provide a JSON or CSV file."
            )

        logger.info(f"Loading {len(records):,} records from {file_path.name}")

        for batch in self._batches(records, batch_size):
            result.loaded += self.store.put_many(batch)
            logger.info(f"  Progress: {result.loaded:,} records written...")

        logger.info(f"Loaded {result.loaded:,} records, skipped {result.skipped:,}")
        return result

    @staticmethod
    def _batches(records: List[BankRecord], batch_size: int) -> Iterator[List[BankRecord]]:
        for start in range(0, len(records), batch_size):
            yield records[start:start + batch_size]

    def _build_record(
        self,
        swift_code: str,
        bank_name: str,
        address: str,
        country_iso2: str,
        country_name: str,
        is_headquarter: Optional[Any],
    ) -> Optional[BankRecord]:
        """
        Normalize one source row.

        The headquarters flag and the country always follow the SWIFT code:
        a row whose countryISO2 names another country is skipped, a supplied
        isHeadquarter is ignored, and the country name is replaced by the
        canonical one.
        """
        try:
            parts = parse(swift_code)
        except MalformedIdentifier as e:
            logger.warning(f"Skipping row: {e.message}")
            return None

        country_iso2 = sanitize_text(country_iso2).upper() or parts.country_code
        if country_iso2 != parts.country_code:
            logger.warning(
                f"Skipping row {swift_code}: countryISO2 '{country_iso2}' does not "
                f"match the SWIFT code country '{parts.country_code}'"
            )
            return None

        canonical_name = self.rules.country_name(country_iso2)
        if not canonical_name:
            logger.warning(f"Skipping row {swift_code}: unknown country '{country_iso2}'")
            return None

        given_name = sanitize_text(country_name).upper()
        if given_name and given_name != canonical_name:
            logger.debug(
                f"Row {swift_code}: countryName '{given_name}' normalized to '{canonical_name}'"
            )

        headquarters = is_headquarters(swift_code)
        if is_headquarter is not None and _parse_flag(is_headquarter) != headquarters:
            logger.warning(
                f"Row {swift_code}: isHeadquarter '{is_headquarter}' ignored, "
                f"derived {headquarters} from the code"
            )

        return BankRecord(
            swift_code=swift_code,
            bank_name=sanitize_text(bank_name),
            address=sanitize_text(address),
            country_iso2=country_iso2,
            country_name=canonical_name,
            is_headquarter=headquarters,
        )


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    setup_logging(settings.log_level, app_name=settings.app_name)

    parser = argparse.ArgumentParser(description="Import SWIFT code data into the record store")
    parser.add_argument(
        "--source",
        default=settings.import_file_path,
        help="Path to the CSV or JSON file containing bank data",
    )
    parser.add_argument("--batch-size", type=int, default=BATCH_SIZE)
    parser.add_argument(
        "--drop-existing",
        action="store_true",
        help="Drop and recreate the bank table before importing (SQL store only)",
    )
    args = parser.parse_args(argv)

    from src.database.store_factory import get_record_store, reset_record_store
    from src.database.sql_store import SQLRecordStore
    from src.database.init_db import drop_bank_tables, init_bank_tables

    store = get_record_store()
    loader = BankDataLoader(store)

    try:
        if not loader.wait_for_store():
            return 1

        if isinstance(store, SQLRecordStore):
            if args.drop_existing:
                drop_bank_tables(store.db)
            init_bank_tables(store.db)
        elif args.drop_existing:
            logger.warning("--drop-existing ignored: the in-memory store starts empty")

        result = loader.load_file(args.source, batch_size=args.batch_size)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Import failed: {e}")
        return 1
    finally:
        reset_record_store()

    print(f"Loaded {result.loaded} records ({result.skipped} skipped)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
