"""Latitude/longitude extraction from free-form Slack text."""

from __future__ import annotations

import math
import re

from src.models import Coordinates

_MENTION_RE = re.compile(r"<@[^>]+>")
_SEPARATOR_RE = re.compile(r"[,\s]+")
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")


def _to_float(token: str) -> float | None:
    if not _NUMBER_RE.fullmatch(token):
        return None
    value = float(token)
    return value if math.isfinite(value) else None


def parse_coordinates(text: str | None) -> Coordinates | None:
    """Parse ``"<lat> <lon>"`` or ``"<lat>,<lon>"`` into Coordinates.

    Mention tags such as ``<@U123>`` are removed first. Tokens beyond the
    first two are ignored. Returns None when either value is missing, not a
    decimal number, or out of range.
    """
    if not text:
        return None
    cleaned = _MENTION_RE.sub("", text).strip()
    tokens = [t for t in _SEPARATOR_RE.split(cleaned) if t]
    if len(tokens) < 2:
        return None

    lat = _to_float(tokens[0])
    lon = _to_float(tokens[1])
    if lat is None or lon is None:
        return None
    if not -90 <= lat <= 90 or not -180 <= lon <= 180:
        return None
    return Coordinates(lat=lat, lon=lon)
