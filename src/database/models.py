"""
Database Models - SQLAlchemy ORM model for stored bank records.

One row per SWIFT code. The country code column is indexed; branch and
country lookups still go through the key pattern scan.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import declarative_base

from src.directory.records import BankRecord

Base = declarative_base()


class BankRecordRow(Base):
    """
    Persisted form of a BankRecord.

    Rows are created by add/import and removed by delete; they are never
    updated in place by the directory.
    """
    __tablename__ = "bank_records"

    swift_code = Column(String(11), primary_key=True)
    bank_name = Column(String(255), nullable=False)
    address = Column(String(512), nullable=False)
    country_iso2 = Column(String(2), nullable=False, index=True)
    country_name = Column(String(128), nullable=False)
    is_headquarter = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @classmethod
    def from_record(cls, record: BankRecord) -> "BankRecordRow":
        return cls(
            swift_code=record.swift_code,
            bank_name=record.bank_name,
            address=record.address,
            country_iso2=record.country_iso2,
            country_name=record.country_name,
            is_headquarter=record.is_headquarter,
        )

    def to_record(self) -> BankRecord:
        return BankRecord(
            swift_code=self.swift_code,
            bank_name=self.bank_name,
            address=self.address,
            country_iso2=self.country_iso2,
            country_name=self.country_name,
            is_headquarter=bool(self.is_headquarter),
        )
