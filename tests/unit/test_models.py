"""Tests for shared data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.models import (
    AuditEvent,
    AuditEventType,
    BotConfig,
    Coordinates,
    ReplyMessage,
    ResponseType,
    RiskLevel,
    SlackResponse,
)
from src.weather.charts import DEFAULT_CHART_URL
from tests.conftest import make_snapshot


class TestCoordinates:
    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Coordinates(lat=91, lon=0)
        with pytest.raises(ValidationError):
            Coordinates(lat=0, lon=-181)

    def test_frozen(self) -> None:
        coords = Coordinates(lat=1, lon=2)
        with pytest.raises(ValidationError):
            coords.lat = 5  # type: ignore[misc]

    def test_label(self) -> None:
        assert Coordinates(lat=37.0, lon=-122.4194).label() == "37, -122.4194"


def test_snapshot_limited_to_four_days() -> None:
    with pytest.raises(ValidationError):
        make_snapshot(days=5)


def test_reply_message_serialization() -> None:
    reply = ReplyMessage(response_type=ResponseType.EPHEMERAL, text="hi")
    assert reply.model_dump(mode="json") == {"response_type": "ephemeral", "text": "hi"}


def test_slack_response_constructors() -> None:
    assert SlackResponse.plain("OK") == SlackResponse(status_code=200, body="OK")
    json_response = SlackResponse.json_body({"a": 1}, status_code=201)
    assert json_response.media_type == "application/json"
    assert json_response.status_code == 201


def test_bot_config_defaults() -> None:
    config = BotConfig(signing_secret="s", openweather_api_key="k")
    assert config.bot_user_id == ""
    assert config.max_request_age_seconds == 0
    assert config.forecast_url == "https://api.open-meteo.com/v1/forecast"
    assert config.chart_url == DEFAULT_CHART_URL


def test_bot_config_rejects_negative_age() -> None:
    with pytest.raises(ValidationError):
        BotConfig(signing_secret="s", openweather_api_key="k", max_request_age_seconds=-1)


def test_audit_event_timestamp_default() -> None:
    event = AuditEvent(
        event_type=AuditEventType.URL_VERIFICATION,
        action="url_verification",
        result="success",
        risk_level=RiskLevel.INFO,
    )
    assert event.timestamp.endswith("+00:00")


def test_weather_models_reject_non_finite_readings() -> None:
    with pytest.raises(ValidationError):
        make_snapshot(elevation=float("nan"))
