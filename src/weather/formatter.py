"""Slack mrkdwn formatting for forecast replies and fixed bot messages."""

from __future__ import annotations

import logging
import math

from src.models import (
    Coordinates,
    HelpMessage,
    ReplyMessage,
    ResponseType,
    WeatherSnapshot,
)
from src.weather.charts import (
    DEFAULT_CHART_URL,
    precipitation_chart_url,
    temperature_chart_url,
    weekday_name,
)
from src.weather.codes import describe

logger = logging.getLogger(__name__)

_FEET_PER_METRE = 3.28084

COMMAND_USAGE_TEXT = (
    "Please provide valid latitude and longitude coordinates. "
    "Example: /weather 37.7749 -122.4194 or /weather 37.7749,-122.4194"
)
MESSAGE_USAGE_TEXT = (
    "Please provide valid latitude and longitude coordinates. "
    "Example: `37.7749 -122.4194` or `37.7749,-122.4194`\n\n"
    "Type `help` to see all available commands."
)
APOLOGY_TEXT = (
    "Sorry, I encountered an error while fetching the weather data. "
    "Please try again later."
)


def format_value(value: float | int | None) -> str:
    """Render a reading without a trailing ``.0``; missing readings show N/A."""
    if value is None:
        return "N/A"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_current_conditions(
    snapshot: WeatherSnapshot, coords: Coordinates, location_name: str | None,
) -> str:
    place = location_name or coords.label()
    header = f"*Weather for {place}*"
    if snapshot.elevation is not None:
        feet = _round_half_up(snapshot.elevation * _FEET_PER_METRE)
        header += (
            f" (Elevation: {format_value(snapshot.elevation)} meters / {feet} feet)"
        )
    current = snapshot.current
    return (
        f"{header}\n\n"
        "*Current Weather Conditions*\n"
        f"• Temperature: {format_value(current.temperature)}°F\n"
        f"• Relative Humidity: {format_value(current.humidity)}%\n"
        f"• Wind Speed: {format_value(current.wind_speed)} mph\n"
        f"• Wind Gusts: {format_value(current.wind_gusts)} mph\n"
        f"• Conditions: {describe(current.weather_code)}\n"
    )


def _day_heading(iso_date: str) -> str:
    try:
        return weekday_name(iso_date)
    except ValueError:
        return iso_date


def format_forecast(snapshot: WeatherSnapshot) -> str:
    days = []
    for day in snapshot.daily:
        days.append(
            f"{_day_heading(day.date)}:\n"
            f"• High: {format_value(day.high_temp)}°F\n"
            f"• Low: {format_value(day.low_temp)}°F\n"
            f"• Precipitation Chance: {format_value(day.precip_chance)}%\n"
            f"• Max Wind Gusts: {format_value(day.max_wind_gust)} mph\n"
            f"• Conditions: {describe(day.weather_code)}"
        )
    return "\n*4-Day Forecast*\n" + "\n\n".join(days)


def format_chart_links(snapshot: WeatherSnapshot, chart_url: str = DEFAULT_CHART_URL) -> str:
    temp_url = temperature_chart_url(snapshot.daily, chart_url)
    precip_url = precipitation_chart_url(snapshot.daily, chart_url)
    return (
        f"\n\n*Temperature Forecast*\n<{temp_url}|View Temperature Chart>\n\n"
        f"*Precipitation Forecast*\n<{precip_url}|View Precipitation Chart>"
    )


def compose_weather_reply(
    snapshot: WeatherSnapshot,
    coords: Coordinates,
    location_name: str | None,
    chart_url: str = DEFAULT_CHART_URL,
) -> ReplyMessage:
    """Build the in-channel forecast reply.

    Chart links are appended when they can be built; any chart fault
    degrades to the text-only forecast.
    """
    text = format_current_conditions(snapshot, coords, location_name) + format_forecast(snapshot)
    try:
        text += format_chart_links(snapshot, chart_url)
    except Exception:
        logger.exception("Error generating charts")
    return ReplyMessage(response_type=ResponseType.IN_CHANNEL, text=text)


def usage_reply(for_command: bool) -> ReplyMessage:
    return ReplyMessage(
        response_type=ResponseType.EPHEMERAL,
        text=COMMAND_USAGE_TEXT if for_command else MESSAGE_USAGE_TEXT,
    )


def apology_reply() -> ReplyMessage:
    return ReplyMessage(response_type=ResponseType.EPHEMERAL, text=APOLOGY_TEXT)


def _section(text: str) -> dict[str, object]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def help_message() -> HelpMessage:
    return HelpMessage(blocks=[
        _section(
            "*Weather Bot Help*\n\nI can help you get weather information for any "
            "location using coordinates. Here's how to use me:"
        ),
        _section(
            "• *Direct message me* with coordinates like: `37.7749 -122.4194` or "
            "`37.7749,-122.4194`\n• *Mention me in a channel* with coordinates\n"
            "• Use the `/weather` command with coordinates"
        ),
        _section(
            "I'll provide you with:\n• Current conditions\n• 4-day forecast\n"
            "• Temperature and precipitation charts"
        ),
    ])
