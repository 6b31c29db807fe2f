"""
Directory core - identifier structure, relationships and aggregation.

This module provides:
- identifier.py : SWIFT code parsing and headquarters/branch classification
- countries.py  : ISO 3166-1 country names (pycountry)
- resolver.py   : Branch/country candidate queries
- aggregator.py : Concurrent scatter-gather fetch with partial results
- context.py    : Per-request cancellation and deadline
- store.py      : Record Store contract
"""
from src.directory.aggregator import ScatterGatherAggregator
from src.directory.context import RequestContext
from src.directory.identifier import (
    HEADQUARTERS_SUFFIX,
    classify,
    group_prefix,
    headquarters_identifier,
    is_branch_suffix,
    is_headquarters,
    matches_pattern,
    parse,
)
from src.directory.records import (
    AggregationResult,
    AggregationStatus,
    BankRecord,
    FetchFailure,
)
from src.directory.resolver import CandidateQuery, branch_candidates, country_candidates
from src.directory.store import RecordStore

__all__ = [
    # Identifier
    "HEADQUARTERS_SUFFIX",
    "classify",
    "group_prefix",
    "headquarters_identifier",
    "is_branch_suffix",
    "is_headquarters",
    "matches_pattern",
    "parse",
    # Records
    "AggregationResult",
    "AggregationStatus",
    "BankRecord",
    "FetchFailure",
    # Resolver
    "CandidateQuery",
    "branch_candidates",
    "country_candidates",
    # Aggregation
    "ScatterGatherAggregator",
    "RequestContext",
    "RecordStore",
]
