"""
SWIFT/BIC identifier structure.

A bank identifier is 8 or 11 uppercase alphanumerics:

    AAAA BB CC [DDD]
    |    |  |   +-- branch code (optional, "XXX" marks the headquarters)
    |    |  +------ location code
    |    +--------- country code (two letters)
    +-------------- institution code

Everything the directory knows about headquarters/branch relationships and
country membership is derived from this layout; no stored field is consulted.
"""
import re
from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import MalformedIdentifier

HEADQUARTERS_SUFFIX = "XXX"
WILDCARD = "?"

GROUP_PREFIX_LENGTH = 8
IDENTIFIER_LENGTHS = (8, 11)

_COUNTRY_SEGMENT = re.compile(r"^[A-Z]{2}$")
_UPPER_ALNUM = re.compile(r"^[A-Z0-9]*$")


@dataclass(frozen=True)
class IdentifierParts:
    """Structural segments of a SWIFT code."""
    institution_code: str
    country_code: str
    location_code: str
    branch_code: Optional[str] = None

    @property
    def is_headquarters(self) -> bool:
        return self.branch_code is None or self.branch_code == HEADQUARTERS_SUFFIX


@dataclass(frozen=True)
class Classification:
    """Result of classify(): the two facts the directory cares about."""
    country_code: str
    is_headquarters: bool


def parse(identifier: str) -> IdentifierParts:
    """
    Split a SWIFT code into its structural segments.

    Args:
        identifier: 8 or 11 character SWIFT code

    Returns:
        IdentifierParts

    Raises:
        MalformedIdentifier: On wrong length, a non-letter country segment,
            or characters outside A-Z/0-9
    """
    if not isinstance(identifier, str):
        raise MalformedIdentifier(str(identifier), "identifier must be a string")

    if len(identifier) not in IDENTIFIER_LENGTHS:
        raise MalformedIdentifier(
            identifier, f"length must be 8 or 11, got {len(identifier)}"
        )

    country_code = identifier[4:6]
    if not _COUNTRY_SEGMENT.match(country_code):
        raise MalformedIdentifier(
            identifier, "country segment must be two uppercase letters"
        )

    if not _UPPER_ALNUM.match(identifier):
        raise MalformedIdentifier(
            identifier, "only uppercase letters and digits are allowed"
        )

    return IdentifierParts(
        institution_code=identifier[:4],
        country_code=country_code,
        location_code=identifier[6:8],
        branch_code=identifier[8:] or None,
    )


def classify(identifier: str) -> Classification:
    """Return the country code and headquarters flag of a SWIFT code."""
    parts = parse(identifier)
    return Classification(
        country_code=parts.country_code,
        is_headquarters=parts.is_headquarters,
    )


def group_prefix(identifier: str) -> str:
    """
    Return the headquarters group key (first 8 characters).

    Two identifiers belong to the same group iff their prefixes are equal.
    """
    if len(identifier) not in IDENTIFIER_LENGTHS:
        raise MalformedIdentifier(
            identifier, f"length must be 8 or 11, got {len(identifier)}"
        )
    return identifier[:GROUP_PREFIX_LENGTH]


def headquarters_identifier(identifier: str) -> str:
    """Return the 11 character headquarters code of the identifier's group."""
    return group_prefix(identifier) + HEADQUARTERS_SUFFIX


def is_branch_suffix(identifier: str) -> bool:
    """True iff the identifier is 11 characters and does not end in XXX."""
    return len(identifier) == 11 and identifier[-3:] != HEADQUARTERS_SUFFIX


def is_headquarters(identifier: str) -> bool:
    return not is_branch_suffix(identifier)


def matches_pattern(key: str, pattern: str) -> bool:
    """
    Fixed-length wildcard match.

    '?' matches any single character, every other character must match
    exactly (case-sensitive), and lengths must be equal.
    """
    if len(key) != len(pattern):
        return False
    return all(p == WILDCARD or p == k for k, p in zip(key, pattern))
