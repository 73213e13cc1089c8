import pytest

from smartmed import settings


@pytest.mark.parametrize("raw", ["days", "Days", " MONTHS "])
def test_parse_expiry_unit_normalizes_case_and_spaces(raw):
    assert settings.parse_expiry_unit(raw) == raw.strip().lower()


def test_parse_expiry_unit_rejects_unknown_units():
    with pytest.raises(ValueError, match="EXPIRY_UNIT must be one of"):
        settings.parse_expiry_unit("weeks")


def test_loaded_expiry_unit_is_always_valid():
    assert settings.EXPIRY_UNIT in settings.EXPIRY_UNITS
