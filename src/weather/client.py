"""Async clients for the forecast and reverse-geocoding APIs."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.models import Coordinates, CurrentConditions, DailyForecast, WeatherSnapshot

logger = logging.getLogger(__name__)

FORECAST_DAYS = 4

_CURRENT_FIELDS = (
    "temperature_2m,relative_humidity_2m,wind_speed_10m,wind_gusts_10m,weather_code"
)
_DAILY_FIELDS = (
    "temperature_2m_max,temperature_2m_min,precipitation_probability_max,"
    "wind_gusts_10m_max,weather_code"
)


class UpstreamFetchError(Exception):
    """Raised when the forecast API is unreachable or returns unusable data."""


class WeatherClient:
    """Fetches current conditions and the daily forecast from Open-Meteo."""

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        self._base_url = base_url
        self._timeout = timeout

    async def fetch_forecast(self, coords: Coordinates) -> WeatherSnapshot:
        params = {
            "latitude": coords.lat,
            "longitude": coords.lon,
            "current": _CURRENT_FIELDS,
            "daily": _DAILY_FIELDS,
            "timezone": "auto",
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
        }
        try:
            async with httpx.AsyncClient(verify=True) as client:
                resp = await client.get(self._base_url, params=params, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.error("Error fetching weather data: %s", exc)
            raise UpstreamFetchError("Weather data fetch failed") from exc

        if resp.status_code >= 400:
            logger.error("Weather API returned %s", resp.status_code)
            raise UpstreamFetchError(f"Weather API returned {resp.status_code}")

        try:
            return parse_forecast(resp.json())
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.error("Malformed weather payload: %s", exc)
            raise UpstreamFetchError("Malformed weather payload") from exc


def parse_forecast(data: dict[str, Any]) -> WeatherSnapshot:
    """Translate the Open-Meteo response shape into a WeatherSnapshot.

    Raises KeyError, AttributeError or TypeError on a payload missing the
    current or daily sections, and ValidationError (a ValueError) on values
    of the wrong type.
    """
    current = data["current"]
    daily = data["daily"]
    dates: list[str] = daily["time"][:FORECAST_DAYS]

    def _column(name: str, index: int) -> Any:
        values = daily.get(name) or []
        return values[index] if index < len(values) else None

    days = [
        DailyForecast(
            date=date,
            high_temp=_column("temperature_2m_max", i),
            low_temp=_column("temperature_2m_min", i),
            precip_chance=_column("precipitation_probability_max", i),
            max_wind_gust=_column("wind_gusts_10m_max", i),
            weather_code=_column("weather_code", i),
        )
        for i, date in enumerate(dates)
    ]
    return WeatherSnapshot(
        current=CurrentConditions(
            temperature=current.get("temperature_2m"),
            humidity=current.get("relative_humidity_2m"),
            wind_speed=current.get("wind_speed_10m"),
            wind_gusts=current.get("wind_gusts_10m"),
            weather_code=current.get("weather_code"),
        ),
        daily=days,
        elevation=data.get("elevation"),
    )


class GeocodingClient:
    """Reverse-geocodes coordinates to a place name via OpenWeather.

    Failures are logged and reported as None; a missing place name is not
    fatal to a forecast reply.
    """

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._timeout = timeout

    async def fetch_location_name(self, coords: Coordinates) -> str | None:
        params = {
            "lat": coords.lat,
            "lon": coords.lon,
            "limit": 1,
            "appid": self._api_key,
        }
        try:
            async with httpx.AsyncClient(verify=True) as client:
                resp = await client.get(self._base_url, params=params, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.warning("Error fetching location data: %s", exc)
            return None

        if resp.status_code >= 400:
            logger.warning("Geocoding API error: %s", resp.status_code)
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Geocoding API returned undecodable body")
            return None

        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            logger.info("No results found in geocoding response")
            return None

        return format_location(data[0])


def format_location(location: dict[str, Any]) -> str | None:
    """Join name, state and country, skipping blanks."""
    parts = [
        str(location[key]) for key in ("name", "state", "country") if location.get(key)
    ]
    return ", ".join(parts) or None
