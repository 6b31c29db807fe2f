"""
Input Validators - record and path parameter validation.

RecordRules is built once and handed to the HTTP layer through a FastAPI
dependency. It checks:
- SWIFT code syntax
- Country code syntax and ISO 3166-1 membership
- Consistency of a new record (country code, country name, HQ flag)
"""
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from src.core.exceptions import MalformedIdentifier, ValidationError
from src.core.logging_config import get_logger
from src.directory.countries import load_country_names
from src.directory.identifier import HEADQUARTERS_SUFFIX, classify
from src.directory.records import BankRecord

logger = get_logger(__name__)

SWIFT_CODE_PATTERN = re.compile(r"^[A-Z0-9]{8}([A-Z0-9]{3})?$")
COUNTRY_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")

# Stored records always carry the full 11 character form
RECORD_SWIFT_CODE_LENGTH = 11


def sanitize_text(value: Optional[str], max_length: int = 512) -> str:
    """
    Strip whitespace, drop null bytes and cap the length of a text field.
    """
    if not value:
        return ""
    cleaned = value.replace("\x00", "").strip()
    cleaned = re.sub(r"\s+", " ", cleaned)
    return cleaned[:max_length]


@dataclass(frozen=True)
class RecordRules:
    """
    Immutable validation rule set.

    Example:
        >>> rules = build_record_rules()
        >>> rules.validate_swift_code("ALBPPLPWXXX")
        'ALBPPLPWXXX'
    """
    country_names: Mapping[str, str] = field(default_factory=dict)

    def validate_swift_code(self, swift_code: str) -> str:
        """
        Check a SWIFT code path parameter.

        Raises:
            MalformedIdentifier: If the code is not 8/11 uppercase alphanumerics
        """
        if not swift_code or not SWIFT_CODE_PATTERN.match(swift_code):
            raise MalformedIdentifier(
                swift_code or "", "expected 8 or 11 uppercase letters and digits"
            )
        classify(swift_code)
        return swift_code

    def validate_country_code(self, country_code: str) -> str:
        """
        Check a country code path parameter (already uppercased by the caller).

        Raises:
            ValidationError: If not two letters or not an assigned ISO code
        """
        if not country_code or not COUNTRY_CODE_PATTERN.match(country_code):
            raise ValidationError(
                f"Invalid country code '{country_code}': expected two letters",
                field="countryISO2",
            )
        if country_code not in self.country_names:
            raise ValidationError(
                f"Unknown country code '{country_code}'",
                field="countryISO2",
            )
        return country_code

    def country_name(self, country_code: str) -> str:
        """Canonical uppercase country name, or "" when unknown."""
        return self.country_names.get(country_code, "")

    def validate_record(
        self,
        swift_code: str,
        bank_name: str,
        address: str,
        country_iso2: str,
        country_name: str,
        is_headquarter: bool,
    ) -> BankRecord:
        """
        Validate a new record and return its normalized form.

        Raises:
            MalformedIdentifier: If the SWIFT code is malformed or not 11 chars
            ValidationError: If a field is empty or fields disagree
        """
        bank_name = sanitize_text(bank_name)
        address = sanitize_text(address)
        for name, value in (("bankName", bank_name), ("address", address)):
            if not value:
                raise ValidationError(f"Field '{name}' is required", field=name)

        self.validate_swift_code(swift_code)
        if len(swift_code) != RECORD_SWIFT_CODE_LENGTH:
            raise MalformedIdentifier(swift_code, "stored SWIFT codes must be 11 characters")

        self.validate_country_code(country_iso2)
        expected_country = classify(swift_code).country_code
        if country_iso2 != expected_country:
            raise ValidationError(
                f"countryISO2 '{country_iso2}' does not match the country "
                f"derived from SWIFT code '{expected_country}'",
                field="countryISO2",
            )

        expected_name = self.country_name(country_iso2)
        normalized_name = sanitize_text(country_name).upper()
        if normalized_name != expected_name:
            raise ValidationError(
                f"countryName '{country_name}' does not match the country "
                f"derived from countryISO2 '{expected_name}'",
                field="countryName",
            )

        if is_headquarter != swift_code.endswith(HEADQUARTERS_SUFFIX):
            raise ValidationError(
                f"isHeadquarter value '{is_headquarter}' does not match "
                f"the swiftCode value '{swift_code}'",
                field="isHeadquarter",
            )

        return BankRecord(
            swift_code=swift_code,
            bank_name=bank_name,
            address=address,
            country_iso2=country_iso2,
            country_name=normalized_name,
            is_headquarter=is_headquarter,
        )


def build_record_rules(country_names: Optional[Mapping[str, str]] = None) -> RecordRules:
    """
    Build the rule set from a country table (defaults to pycountry's ISO 3166-1 data).

    Names are normalized to uppercase.
    """
    source = country_names if country_names is not None else load_country_names()
    normalized: Dict[str, str] = {code: name.upper() for code, name in source.items()}
    logger.debug(f"RecordRules built with {len(normalized)} countries")
    return RecordRules(country_names=MappingProxyType(normalized))
