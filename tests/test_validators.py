import pytest

from src.core.exceptions import MalformedIdentifier, ValidationError
from src.core.validators import build_record_rules, sanitize_text


@pytest.fixture
def rules():
    return build_record_rules()


def _payload(**overrides):
    payload = {
        "swift_code": "ALBPPLPWXXX",
        "bank_name": "Headquarters Bank",
        "address": "HQ Street 1",
        "country_iso2": "PL",
        "country_name": "Poland",
        "is_headquarter": True,
    }
    payload.update(overrides)
    return payload


class TestSanitizeText:
    def test_collapses_whitespace(self):
        assert sanitize_text("  HQ \n Street\x00 1 ") == "HQ Street 1"

    def test_none(self):
        assert sanitize_text(None) == ""

    def test_truncates(self):
        assert sanitize_text("a" * 20, max_length=5) == "aaaaa"


class TestPathParameters:
    def test_valid_swift_code(self, rules):
        assert rules.validate_swift_code("ALBPPLPW") == "ALBPPLPW"

    @pytest.mark.parametrize("code", ["", "ALBP", "albpplpwxxx", "ALBP12PWXXX", "ALBPPLPW-01"])
    def test_malformed_swift_code(self, rules, code):
        with pytest.raises(MalformedIdentifier):
            rules.validate_swift_code(code)

    def test_unknown_country(self, rules):
        with pytest.raises(ValidationError):
            rules.validate_country_code("ZZ")

    def test_country_name_is_uppercase(self, rules):
        assert rules.country_name("PL") == "POLAND"
        assert rules.country_name("ZZ") == ""

    def test_default_table_covers_iso_3166(self, rules):
        assert rules.country_name("DE") == "GERMANY"
        assert rules.country_name("GB") == "UNITED KINGDOM"
        assert rules.validate_country_code("CH") == "CH"

    def test_custom_country_table(self):
        rules = build_record_rules({"PL": "Polska"})
        assert rules.country_name("PL") == "POLSKA"
        with pytest.raises(ValidationError):
            rules.validate_country_code("DE")


class TestValidateRecord:
    def test_normalizes_country_name(self, rules):
        record = rules.validate_record(**_payload())
        assert record.country_name == "POLAND"
        assert record.is_headquarter

    def test_empty_bank_name(self, rules):
        with pytest.raises(ValidationError) as exc:
            rules.validate_record(**_payload(bank_name="   "))
        assert exc.value.field == "bankName"

    def test_eight_character_code_rejected(self, rules):
        with pytest.raises(MalformedIdentifier):
            rules.validate_record(**_payload(swift_code="ALBPPLPW"))

    def test_country_code_mismatch(self, rules):
        with pytest.raises(ValidationError) as exc:
            rules.validate_record(**_payload(country_iso2="DE", country_name="Germany"))
        assert exc.value.field == "countryISO2"

    def test_country_name_mismatch(self, rules):
        with pytest.raises(ValidationError) as exc:
            rules.validate_record(**_payload(country_name="Germany"))
        assert exc.value.field == "countryName"

    def test_headquarter_flag_mismatch(self, rules):
        with pytest.raises(ValidationError) as exc:
            rules.validate_record(**_payload(swift_code="ALBPPLPW001"))
        assert exc.value.field == "isHeadquarter"
