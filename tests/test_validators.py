import pytest

from ecofire.shared.validators import validate_level, validate_name


class TestValidateName:
    @pytest.mark.parametrize("name", ["Revenue", "Q3 sales (EU)", "AB", "x" * 50, "Leads: inbound/outbound"])
    def test_valid_names(self, name):
        assert validate_name(name) == name

    @pytest.mark.parametrize(
        "name,message",
        [
            (None, "missing required field"),
            ("", "missing required field"),
            (42, "field must be string"),
            ("   ", "field cannot be empty"),
            ("A", "at least 2 characters"),
            ("x" * 51, "at most 50 characters"),
            ("Revenue☃", "invalid characters"),
        ],
    )
    def test_invalid_names(self, name, message):
        with pytest.raises(ValueError, match=message):
            validate_name(name)


class TestValidateLevel:
    def test_accepts_known_levels_and_none(self):
        assert validate_level("High") == "High"
        assert validate_level(None) is None

    def test_rejects_unknown_level(self):
        with pytest.raises(ValueError, match="High, Medium, Low"):
            validate_level("Extreme")
