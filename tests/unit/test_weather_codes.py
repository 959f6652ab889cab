"""Tests for the weather code lookup table."""

from __future__ import annotations

import pytest

from src.weather.codes import UNKNOWN_CONDITION, WEATHER_CODES, describe


def test_clear_sky() -> None:
    assert describe(0) == "Clear sky"


def test_unknown_code() -> None:
    assert describe(9999) == "Unknown weather condition"


def test_none_is_unknown() -> None:
    assert describe(None) == UNKNOWN_CONDITION


@pytest.mark.parametrize("code,expected", [
    (3, "Overcast"),
    (45, "Foggy"),
    (61, "Slight rain"),
    (77, "Snow grains"),
    (82, "Violent rain showers"),
    (99, "Thunderstorm with heavy hail"),
])
def test_known_codes(code: int, expected: str) -> None:
    assert describe(code) == expected


def test_table_is_immutable() -> None:
    with pytest.raises(TypeError):
        WEATHER_CODES[0] = "Sunny"  # type: ignore[index]


def test_table_covers_wmo_codes() -> None:
    assert sorted(WEATHER_CODES) == [
        0, 1, 2, 3, 45, 48, 51, 53, 55, 61, 63, 65, 71, 73, 75, 77,
        80, 81, 82, 85, 86, 95, 96, 99,
    ]
