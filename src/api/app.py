"""FastAPI application exposing the Slack events endpoint."""

from __future__ import annotations

import os

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from src.audit.logger import AuditLogger
from src.models import BotConfig, SlackResponse
from src.slack.handler import SlackRequestHandler
from src.slack.signature import SlackSignatureVerifier
from src.weather.client import GeocodingClient, WeatherClient


def load_config_from_env() -> BotConfig:
    """Read bot configuration from environment variables.

    SLACK_SIGNING_SECRET and OPENWEATHER_API_KEY are required.
    """
    return BotConfig(
        signing_secret=os.environ["SLACK_SIGNING_SECRET"],
        openweather_api_key=os.environ["OPENWEATHER_API_KEY"],
        bot_user_id=os.environ.get("SLACK_BOT_USER_ID", ""),
        max_request_age_seconds=int(os.environ.get("SLACK_MAX_REQUEST_AGE", "0")),
        http_timeout=float(os.environ.get("WEATHER_HTTP_TIMEOUT", "10")),
    )


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    config = load_config_from_env()
    audit_log = os.environ.get("AUDIT_LOG_PATH")
    audit_logger = AuditLogger.from_env(audit_log) if audit_log else None
    return create_app(config, audit_logger)


def build_handler(
    config: BotConfig, audit_logger: AuditLogger | None = None,
) -> SlackRequestHandler:
    return SlackRequestHandler(
        verifier=SlackSignatureVerifier(
            config.signing_secret, config.max_request_age_seconds,
        ),
        weather_client=WeatherClient(config.forecast_url, config.http_timeout),
        geocoding_client=GeocodingClient(
            config.geocoding_url, config.openweather_api_key, config.http_timeout,
        ),
        bot_user_id=config.bot_user_id,
        chart_url=config.chart_url,
        audit_logger=audit_logger,
    )


def create_app(
    config: BotConfig,
    audit_logger: AuditLogger | None = None,
    handler: SlackRequestHandler | None = None,
) -> FastAPI:
    """Create the bot's FastAPI app."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    slack_handler = handler or build_handler(config, audit_logger)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/slack/events")
    async def slack_events(request: Request) -> Response:
        body = await request.body()
        result = await slack_handler.handle(dict(request.headers), body)
        return _to_response(result)

    @app.api_route(
        "/{path:path}",
        methods=["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"],
    )
    async def not_found(path: str) -> Response:
        return PlainTextResponse("Not Found", status_code=404)

    return app


def _to_response(result: SlackResponse) -> Response:
    if isinstance(result.body, dict):
        return JSONResponse(result.body, status_code=result.status_code)
    return PlainTextResponse(result.body, status_code=result.status_code)
