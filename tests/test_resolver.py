import pytest

from src.core.exceptions import MalformedIdentifier
from src.directory.resolver import CandidateQuery, branch_candidates, country_candidates


class TestBranchCandidates:
    def test_pattern_from_headquarters(self):
        query = branch_candidates("ALBPPLPWXXX")
        assert query.pattern == "ALBPPLPW???"
        assert "ALBPPLPWXXX" in query.excluded

    def test_eight_character_headquarters_excludes_xxx_form(self):
        query = branch_candidates("ALBPPLPW")
        assert query.pattern == "ALBPPLPW???"
        assert query.excluded == frozenset({"ALBPPLPW", "ALBPPLPWXXX"})

    def test_resolve_drops_headquarters_and_foreign_keys(self):
        query = branch_candidates("ALBPPLPWXXX")
        scanned = ["ALBPPLPWXXX", "ALBPPLPW002", "ALBPPLPW001", "BREXPLPW001", "ALBPPLPW001"]
        assert query.resolve(scanned) == ["ALBPPLPW001", "ALBPPLPW002"]

    def test_malformed_headquarters(self):
        with pytest.raises(MalformedIdentifier):
            branch_candidates("ALBP")


class TestCountryCandidates:
    def test_pattern(self):
        assert country_candidates("PL").pattern == "????PL?????"

    def test_only_eleven_character_keys(self):
        query = country_candidates("PL")
        assert query.resolve(["ALBPPLPW", "ALBPPLPWXXX", "COBADEFFXXX"]) == ["ALBPPLPWXXX"]

    def test_empty_scan(self):
        assert country_candidates("PL").resolve([]) == []

    @pytest.mark.parametrize("code", ["", "P", "POL"])
    def test_wrong_length(self, code):
        with pytest.raises(ValueError):
            country_candidates(code)


def test_candidate_query_without_exclusions():
    query = CandidateQuery(pattern="??")
    assert query.resolve(["AB", "ABC", "AB"]) == ["AB"]
