"""Shared test fixtures for the Slack weather bot."""

from __future__ import annotations

import time
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import urlencode

import pytest

from src.audit.logger import AuditLogger
from src.models import (
    AuditEvent,
    AuditEventType,
    BotConfig,
    Coordinates,
    CurrentConditions,
    DailyForecast,
    RiskLevel,
    WeatherSnapshot,
)
from src.slack.handler import SlackRequestHandler
from src.slack.signature import SlackSignatureVerifier, compute_signature

SIGNING_SECRET = "s3cret"
BOT_USER_ID = "UBOT123"


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


@pytest.fixture
def bot_config() -> BotConfig:
    return make_bot_config()


# --- Factory functions for test data ---


def make_bot_config(**kwargs: Any) -> BotConfig:
    defaults: dict[str, Any] = {
        "signing_secret": SIGNING_SECRET,
        "openweather_api_key": "ow-key",
        "bot_user_id": BOT_USER_ID,
    }
    defaults.update(kwargs)
    return BotConfig(**defaults)


def make_audit_event(**kwargs: Any) -> AuditEvent:
    """Factory for AuditEvent with sensible defaults."""
    defaults: dict[str, Any] = {
        "event_type": AuditEventType.AUTH_FAILURE,
        "action": "verify_signature",
        "result": "rejected",
        "risk_level": RiskLevel.HIGH,
    }
    defaults.update(kwargs)
    return AuditEvent(**defaults)


def make_forecast_payload(days: int = 7) -> dict[str, Any]:
    """Open-Meteo style forecast response starting Monday 2024-01-01."""
    dates = [f"2024-01-{d:02d}" for d in range(1, days + 1)]
    return {
        "elevation": 16.0,
        "current": {
            "temperature_2m": 58.3,
            "relative_humidity_2m": 81,
            "wind_speed_10m": 7.2,
            "wind_gusts_10m": 14.5,
            "weather_code": 3,
        },
        "daily": {
            "time": dates,
            "temperature_2m_max": [60.0 + i for i in range(days)],
            "temperature_2m_min": [48.0 + i for i in range(days)],
            "precipitation_probability_max": [10 * i for i in range(days)],
            "wind_gusts_10m_max": [20.5 + i for i in range(days)],
            "weather_code": [0, 61, 95, 3, 1, 2, 45][:days],
        },
    }


def make_snapshot(days: int = 4, **kwargs: Any) -> WeatherSnapshot:
    daily = [
        DailyForecast(
            date=f"2024-01-{i + 1:02d}",
            high_temp=60.0 + i,
            low_temp=48.0 + i,
            precip_chance=10 * i,
            max_wind_gust=20.5 + i,
            weather_code=[0, 61, 95, 3][i % 4],
        )
        for i in range(days)
    ]
    defaults: dict[str, Any] = {
        "current": CurrentConditions(
            temperature=58.3, humidity=81, wind_speed=7.2, wind_gusts=14.5, weather_code=3,
        ),
        "daily": daily,
        "elevation": 16.0,
    }
    defaults.update(kwargs)
    return WeatherSnapshot(**defaults)


SF = Coordinates(lat=37.7749, lon=-122.4194)


def signed_headers(
    body: str | bytes, secret: str = SIGNING_SECRET, timestamp: str | None = None,
) -> dict[str, str]:
    ts = timestamp or str(int(time.time()))
    return {
        "x-slack-request-timestamp": ts,
        "x-slack-signature": compute_signature(secret, ts, body),
        "content-type": "application/x-www-form-urlencoded",
    }


def command_body(text: str, command: str = "/weather") -> str:
    return urlencode({"command": command, "text": text, "user_id": "U42", "channel_id": "C1"})


def make_handler(
    snapshot: WeatherSnapshot | None = None,
    location_name: str | None = "San Francisco, California, US",
    **kwargs: Any,
) -> tuple[SlackRequestHandler, AsyncMock, AsyncMock]:
    """Handler with mocked weather and geocoding clients."""
    weather = AsyncMock()
    weather.fetch_forecast.return_value = snapshot or make_snapshot()
    geocoding = AsyncMock()
    geocoding.fetch_location_name.return_value = location_name
    defaults: dict[str, Any] = {
        "verifier": SlackSignatureVerifier(SIGNING_SECRET),
        "weather_client": weather,
        "geocoding_client": geocoding,
        "bot_user_id": BOT_USER_ID,
    }
    defaults.update(kwargs)
    return SlackRequestHandler(**defaults), weather, geocoding
