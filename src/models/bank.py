"""
Request and Response models for the SWIFT code API.

These Pydantic models define the contract between client and server.
Field aliases keep the camelCase JSON names (swiftCode, countryISO2, ...)
while Python code uses snake_case.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.directory.records import AggregationResult, BankRecord


class BankRecordSchema(BaseModel):
    """A bank entry as listed under a headquarters or a country."""
    model_config = ConfigDict(populate_by_name=True)

    address: str = Field(..., description="Bank address")
    bank_name: str = Field(..., alias="bankName", description="Bank name")
    country_iso2: str = Field(..., alias="countryISO2", description="ISO 3166-1 alpha-2 code")
    is_headquarter: bool = Field(..., alias="isHeadquarter", description="True for XXX codes")
    swift_code: str = Field(..., alias="swiftCode", description="11 character SWIFT code")

    @classmethod
    def from_record(cls, record: BankRecord) -> "BankRecordSchema":
        return cls(
            address=record.address,
            bank_name=record.bank_name,
            country_iso2=record.country_iso2,
            is_headquarter=record.is_headquarter,
            swift_code=record.swift_code,
        )


class BankDetailsSchema(BankRecordSchema):
    """A bank entry including its country name (single lookup and POST body)."""
    country_name: str = Field(..., alias="countryName", description="Country name")

    @classmethod
    def from_record(cls, record: BankRecord) -> "BankDetailsSchema":
        return cls(
            address=record.address,
            bank_name=record.bank_name,
            country_iso2=record.country_iso2,
            country_name=record.country_name,
            is_headquarter=record.is_headquarter,
            swift_code=record.swift_code,
        )


class BankCreateRequest(BankDetailsSchema):
    """
    Request model for POST /swift-codes/.

    Example:
        {
            "address": "HQ Street 1",
            "bankName": "Headquarters Bank",
            "countryISO2": "PL",
            "countryName": "POLAND",
            "isHeadquarter": true,
            "swiftCode": "ALBPPLPWXXX"
        }
    """
    swift_code: str = Field(
        ...,
        alias="swiftCode",
        min_length=11,
        max_length=11,
        examples=["ALBPPLPWXXX"],
    )


class HeadquartersResponse(BankDetailsSchema):
    """Headquarters lookup: the bank plus every branch that could be fetched."""
    branches: List[BankRecordSchema] = Field(default_factory=list)
    warnings: List[str] = Field(
        default_factory=list,
        description="Branches that could not be retrieved (partial content)"
    )

    @classmethod
    def from_lookup(cls, bank: BankRecord, result: AggregationResult) -> "HeadquartersResponse":
        details = BankDetailsSchema.from_record(bank)
        return cls(
            **details.model_dump(),
            branches=sorted(
                (BankRecordSchema.from_record(r) for r in result.collected),
                key=lambda branch: branch.swift_code,
            ),
            warnings=result.failure_descriptions,
        )


class CountryResponse(BaseModel):
    """Country listing: every bank registered under a country code."""
    model_config = ConfigDict(populate_by_name=True)

    country_iso2: str = Field(..., alias="countryISO2")
    country_name: str = Field(..., alias="countryName")
    swift_codes: List[BankRecordSchema] = Field(default_factory=list, alias="swiftCodes")
    warnings: List[str] = Field(
        default_factory=list,
        description="Banks that could not be retrieved (partial content)"
    )

    @classmethod
    def from_result(
        cls, country_iso2: str, country_name: str, result: AggregationResult
    ) -> "CountryResponse":
        return cls(
            country_iso2=country_iso2,
            country_name=country_name,
            swift_codes=sorted(
                (BankRecordSchema.from_record(r) for r in result.collected),
                key=lambda bank: bank.swift_code,
            ),
            warnings=result.failure_descriptions,
        )


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="healthy")
    version: str
    store: str = Field(default="ok", description="Record store reachability")
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
