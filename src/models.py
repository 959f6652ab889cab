"""Shared Pydantic data models for the Slack weather bot."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.weather.charts import DEFAULT_CHART_URL

# --- Enums ---


class ResponseType(str, Enum):
    EPHEMERAL = "ephemeral"
    IN_CHANNEL = "in_channel"


class AuditEventType(str, Enum):
    AUTH_FAILURE = "auth_failure"
    URL_VERIFICATION = "url_verification"
    WEATHER_REPLY = "weather_reply"
    INVALID_COORDINATES = "invalid_coordinates"
    UPSTREAM_ERROR = "upstream_error"


class RiskLevel(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


# --- Request Models ---


class SignedRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_body: bytes
    signature_header: str | None = None
    timestamp_header: str | None = None


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)

    def label(self) -> str:
        return f"{_format_number(self.lat)}, {_format_number(self.lon)}"


def _format_number(value: float) -> str:
    # 37.0 -> "37", matching how users typed the coordinate
    return str(int(value)) if value.is_integer() else str(value)


# --- Weather Models ---


class CurrentConditions(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    temperature: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    wind_gusts: float | None = None
    weather_code: int | None = None


class DailyForecast(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    date: str  # ISO8601 date as returned by the forecast API
    high_temp: float | None = None
    low_temp: float | None = None
    precip_chance: float | None = None
    max_wind_gust: float | None = None
    weather_code: int | None = None


class WeatherSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    current: CurrentConditions
    daily: list[DailyForecast] = Field(max_length=4)
    elevation: float | None = None


# --- Reply Models ---


class ReplyMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    response_type: ResponseType
    text: str


class HelpMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    response_type: ResponseType = ResponseType.EPHEMERAL
    blocks: list[dict[str, Any]]


class SlackResponse(BaseModel):
    """Transport-neutral result of handling one Slack request."""

    model_config = ConfigDict(frozen=True)

    status_code: int = 200
    body: str | dict[str, Any]
    media_type: str = "text/plain"

    @classmethod
    def plain(cls, body: str, status_code: int = 200) -> SlackResponse:
        return cls(status_code=status_code, body=body)

    @classmethod
    def json_body(cls, body: dict[str, Any], status_code: int = 200) -> SlackResponse:
        return cls(status_code=status_code, body=body, media_type="application/json")


# --- Config Models ---


class BotConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    signing_secret: str
    openweather_api_key: str
    bot_user_id: str = ""
    max_request_age_seconds: int = Field(default=0, ge=0)
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    geocoding_url: str = "https://api.openweathermap.org/geo/1.0/reverse"
    chart_url: str = DEFAULT_CHART_URL
    http_timeout: float = Field(default=10.0, gt=0)


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    user_id: str | None = None
    action: str
    result: str  # "success" | "failure" | "rejected"
    risk_level: RiskLevel
    details: dict[str, object] | None = None
