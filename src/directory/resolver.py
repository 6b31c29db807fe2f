"""
Relationship Resolver - which keys are related to a headquarters or country.

The store has no secondary index, so relationships are expressed as
fixed-length wildcard patterns over the key space:

    branches of ALBPPLPWXXX  ->  ALBPPLPW???
    banks in PL              ->  ????PL?????

Building a query is pure. `CandidateQuery.resolve()` turns the keys a store
scan returned into the candidate key set handed to the aggregator.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List

from src.directory.identifier import (
    WILDCARD,
    group_prefix,
    headquarters_identifier,
    matches_pattern,
)


@dataclass(frozen=True)
class CandidateQuery:
    """
    A wildcard pattern plus the keys that must never be returned for it.

    Attributes:
        pattern: Fixed-length pattern understood by RecordStore.scan()
        excluded: Keys dropped from the candidate set even if scanned
    """
    pattern: str
    excluded: FrozenSet[str] = field(default_factory=frozenset)

    def resolve(self, scanned_keys: Iterable[str]) -> List[str]:
        """
        Build the candidate key set from a scan result.

        Keys that do not really match the pattern or that are excluded are
        dropped; duplicates collapse. The result is sorted so repeated calls
        over the same key space dispatch in the same order.

        An empty list is a valid outcome, not an error.
        """
        return sorted({
            key for key in scanned_keys
            if key not in self.excluded and matches_pattern(key, self.pattern)
        })


def branch_candidates(hq_identifier: str) -> CandidateQuery:
    """
    Query for every branch sharing the headquarters' 8 character prefix.

    The headquarters itself is excluded, in both its given form and its
    11 character XXX form.
    """
    prefix = group_prefix(hq_identifier)
    return CandidateQuery(
        pattern=prefix + WILDCARD * 3,
        excluded=frozenset({hq_identifier, headquarters_identifier(hq_identifier)}),
    )


def country_candidates(country_code: str) -> CandidateQuery:
    """
    Query for every 11 character identifier registered in a country.

    The country code is used verbatim; callers normalize it to uppercase.
    """
    if len(country_code) != 2:
        raise ValueError(f"Country code must be 2 characters, got '{country_code}'")
    return CandidateQuery(
        pattern=WILDCARD * 4 + country_code + WILDCARD * 5,
    )
