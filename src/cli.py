"""Click CLI for local forecasts, signing test requests and reading the audit log."""

from __future__ import annotations

import asyncio
import json
import time
from pathlib import Path

import click

from src.audit.logger import read_audit_log
from src.models import BotConfig
from src.slack.coordinates import parse_coordinates
from src.slack.signature import compute_signature, verify
from src.weather.client import GeocodingClient, UpstreamFetchError, WeatherClient
from src.weather.formatter import compose_weather_reply


@click.group()
def cli() -> None:
    """Slack weather bot developer tools."""


@cli.command()
@click.argument("coordinates", nargs=-1, required=True)
@click.option("--api-key", envvar="OPENWEATHER_API_KEY", default="", help="OpenWeather key for place names.")
@click.option("--timeout", default=10.0, show_default=True, help="HTTP timeout in seconds.")
def forecast(coordinates: tuple[str, ...], api_key: str, timeout: float) -> None:
    """Print the reply the bot would send for COORDINATES.

    Pass "37.77,-122.42", or use "--" before a negative latitude.
    """
    coords = parse_coordinates(" ".join(coordinates))
    if coords is None:
        raise click.BadParameter("expected '<lat> <lon>' within range", param_hint="COORDINATES")

    config = BotConfig(signing_secret="", openweather_api_key=api_key, http_timeout=timeout)
    weather = WeatherClient(config.forecast_url, config.http_timeout)
    geocoding = GeocodingClient(config.geocoding_url, api_key, config.http_timeout)

    async def _run() -> str:
        snapshot = await weather.fetch_forecast(coords)
        name = await geocoding.fetch_location_name(coords) if api_key else None
        return compose_weather_reply(snapshot, coords, name, config.chart_url).text

    try:
        click.echo(asyncio.run(_run()))
    except UpstreamFetchError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc


@cli.command()
@click.option("--secret", envvar="SLACK_SIGNING_SECRET", required=True, help="Slack signing secret.")
@click.option("--timestamp", default=None, help="Unix timestamp; defaults to now.")
@click.argument("body")
def sign(secret: str, timestamp: str | None, body: str) -> None:
    """Print Slack signature headers for BODY."""
    ts = timestamp or str(int(time.time()))
    click.echo(f"x-slack-request-timestamp: {ts}")
    click.echo(f"x-slack-signature: {compute_signature(secret, ts, body)}")


@cli.command("verify")
@click.option("--secret", envvar="SLACK_SIGNING_SECRET", required=True, help="Slack signing secret.")
@click.option("--timestamp", required=True, help="x-slack-request-timestamp value.")
@click.option("--signature", required=True, help="x-slack-signature value.")
@click.argument("body")
def verify_command(secret: str, timestamp: str, signature: str, body: str) -> None:
    """Check a captured request's signature; exits 1 when invalid."""
    if verify(secret, signature, timestamp, body):
        click.echo("valid")
        return
    click.echo("invalid", err=True)
    raise SystemExit(1)


@cli.command("audit")
@click.option("--log", "log_path", envvar="AUDIT_LOG_PATH", required=True, help="Audit log file path.")
@click.option("--event-type", default=None, help="Only show this event type, e.g. auth_failure.")
def audit_command(log_path: str, event_type: str | None) -> None:
    """Print audit log events, oldest first, one JSON object per line."""
    for event in read_audit_log(Path(log_path)):
        if event_type and event.get("event_type") != event_type:
            continue
        click.echo(json.dumps(event, separators=(",", ":")))


if __name__ == "__main__":
    cli()
