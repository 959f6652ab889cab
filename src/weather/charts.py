"""QuickChart URL construction for forecast charts."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import date
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

if TYPE_CHECKING:
    from src.models import DailyForecast

DEFAULT_CHART_URL = "https://quickchart.io/chart"

_SHORT_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_LONG_WEEKDAYS = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)


class ChartRenderError(Exception):
    """Raised when a chart URL cannot be built from the forecast."""


def weekday_name(iso_date: str, short: bool = False) -> str:
    """Return the English weekday for an ISO date (``2024-05-01`` -> ``Wednesday``)."""
    weekday = date.fromisoformat(iso_date[:10]).weekday()
    return _SHORT_WEEKDAYS[weekday] if short else _LONG_WEEKDAYS[weekday]


def _chart_url(config: dict[str, Any], base_url: str) -> str:
    encoded = quote(json.dumps(config, separators=(",", ":")), safe="")
    return f"{base_url}?c={encoded}&width=800&height=300"


def _labels(daily: Sequence[DailyForecast]) -> list[str]:
    try:
        return [weekday_name(day.date, short=True) for day in daily]
    except ValueError as exc:
        raise ChartRenderError(f"Unparseable forecast date: {exc}") from exc


def temperature_chart_url(
    daily: Sequence[DailyForecast], base_url: str = DEFAULT_CHART_URL,
) -> str:
    if not daily:
        raise ChartRenderError("No forecast days to chart")
    config = {
        "type": "line",
        "data": {
            "labels": _labels(daily),
            "datasets": [
                {
                    "label": "High",
                    "data": [day.high_temp for day in daily],
                    "borderColor": "rgb(255, 99, 132)",
                    "backgroundColor": "rgba(255, 99, 132, 0.5)",
                },
                {
                    "label": "Low",
                    "data": [day.low_temp for day in daily],
                    "borderColor": "rgb(54, 162, 235)",
                    "backgroundColor": "rgba(54, 162, 235, 0.5)",
                },
            ],
        },
        "options": {
            "responsive": True,
            "plugins": {
                "title": {"display": True, "text": "4-Day Temperature Forecast"},
            },
            "scales": {
                "y": {"title": {"display": True, "text": "Temperature (°F)"}},
            },
        },
    }
    return _chart_url(config, base_url)


def precipitation_chart_url(
    daily: Sequence[DailyForecast], base_url: str = DEFAULT_CHART_URL,
) -> str:
    if not daily:
        raise ChartRenderError("No forecast days to chart")
    config = {
        "type": "line",
        "data": {
            "labels": _labels(daily),
            "datasets": [
                {
                    "label": "Precipitation Chance",
                    "data": [day.precip_chance for day in daily],
                    "borderColor": "rgb(75, 192, 192)",
                    "backgroundColor": "rgba(75, 192, 192, 0.5)",
                    "borderDash": [5, 5],
                },
            ],
        },
        "options": {
            "responsive": True,
            "plugins": {
                "title": {"display": True, "text": "4-Day Precipitation Forecast"},
            },
            "scales": {
                "y": {
                    "min": 0,
                    "max": 100,
                    "title": {"display": True, "text": "Precipitation Chance (%)"},
                },
            },
        },
    }
    return _chart_url(config, base_url)
