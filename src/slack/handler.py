"""Slack request dispatch: handshake, authentication, commands and messages.

Dispatch order:
1. ``url_verification`` handshake (JSON, unauthenticated by protocol)
2. Signature verification (401 on failure)
3. ``/weather`` slash command
4. ``message`` event callbacks that DM or mention the bot
5. Anything else is acknowledged with 200 OK
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.models import (
    AuditEvent,
    AuditEventType,
    Coordinates,
    ReplyMessage,
    RiskLevel,
    SlackResponse,
)
from src.slack.coordinates import parse_coordinates
from src.slack.payloads import (
    EventCallbackPayload,
    HandshakePayload,
    MessageEvent,
    SlashCommandPayload,
    decode_payload,
)
from src.weather.charts import DEFAULT_CHART_URL
from src.weather.client import UpstreamFetchError
from src.weather.formatter import (
    apology_reply,
    compose_weather_reply,
    help_message,
    usage_reply,
)

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger
    from src.slack.signature import SlackSignatureVerifier
    from src.weather.client import GeocodingClient, WeatherClient

logger = logging.getLogger(__name__)

WEATHER_COMMAND = "/weather"


class SlackRequestHandler:
    """Turns one raw Slack request into a SlackResponse.

    Upstream faults never escape: they are converted to an ephemeral
    apology reply with status 200.
    """

    def __init__(
        self,
        verifier: SlackSignatureVerifier,
        weather_client: WeatherClient,
        geocoding_client: GeocodingClient,
        bot_user_id: str = "",
        chart_url: str = DEFAULT_CHART_URL,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._verifier = verifier
        self._weather = weather_client
        self._geocoding = geocoding_client
        self._bot_user_id = bot_user_id
        self._chart_url = chart_url
        self._audit = audit_logger

    async def handle(self, headers: dict[str, str], raw_body: bytes) -> SlackResponse:
        headers = {k.lower(): v for k, v in headers.items()}
        payload = decode_payload(raw_body)

        if isinstance(payload, HandshakePayload):
            self._log(AuditEventType.URL_VERIFICATION, "url_verification", "success")
            return SlackResponse.json_body({"challenge": payload.challenge})

        signed = self._verifier.from_headers(headers, raw_body)
        if not self._verifier.verify_request(signed):
            logger.warning("Rejected Slack request with invalid or missing signature")
            self._log(
                AuditEventType.AUTH_FAILURE, "verify_signature", "rejected",
                risk_level=RiskLevel.HIGH,
            )
            return SlackResponse.plain("Unauthorized", status_code=401)

        if isinstance(payload, SlashCommandPayload) and payload.command == WEATHER_COMMAND:
            return await self._handle_command(payload)

        if isinstance(payload, EventCallbackPayload) and payload.event.type == "message":
            return await self._handle_message(payload.event)

        return SlackResponse.plain("OK")

    async def _handle_command(self, payload: SlashCommandPayload) -> SlackResponse:
        coords = parse_coordinates(payload.text)
        if coords is None:
            self._log(
                AuditEventType.INVALID_COORDINATES, WEATHER_COMMAND, "failure",
                user_id=payload.user_id or None,
            )
            return _reply(usage_reply(for_command=True))
        return _reply(await self.weather_reply(coords, user_id=payload.user_id or None))

    async def _handle_message(self, event: MessageEvent) -> SlackResponse:
        # Never answer bots, including ourselves
        if event.bot_id:
            return SlackResponse.plain("OK")

        is_direct_message = event.channel_type == "im"
        is_mention = bool(self._bot_user_id) and f"<@{self._bot_user_id}>" in event.text
        if not is_direct_message and not is_mention:
            return SlackResponse.plain("OK")

        if "help" in event.text.lower():
            return SlackResponse.json_body(help_message().model_dump(mode="json"))

        coords = parse_coordinates(event.text)
        if coords is None:
            self._log(
                AuditEventType.INVALID_COORDINATES, "message", "failure",
                user_id=event.user or None,
            )
            return _reply(usage_reply(for_command=False))
        return _reply(await self.weather_reply(coords, user_id=event.user or None))

    async def weather_reply(
        self, coords: Coordinates, user_id: str | None = None,
    ) -> ReplyMessage:
        """Fetch the forecast and place name for coords and format the reply."""
        try:
            snapshot = await self._weather.fetch_forecast(coords)
            location_name = await self._geocoding.fetch_location_name(coords)
        except UpstreamFetchError as exc:
            self._log(
                AuditEventType.UPSTREAM_ERROR, "fetch_weather", "failure",
                user_id=user_id, risk_level=RiskLevel.LOW, details={"error": str(exc)},
            )
            return apology_reply()
        except Exception:
            logger.exception("Unexpected error fetching weather data")
            self._log(
                AuditEventType.UPSTREAM_ERROR, "fetch_weather", "failure",
                user_id=user_id, risk_level=RiskLevel.MEDIUM,
            )
            return apology_reply()

        self._log(
            AuditEventType.WEATHER_REPLY, "fetch_weather", "success",
            user_id=user_id, details={"lat": coords.lat, "lon": coords.lon},
        )
        return compose_weather_reply(snapshot, coords, location_name, self._chart_url)

    def _log(
        self,
        event_type: AuditEventType,
        action: str,
        result: str,
        user_id: str | None = None,
        risk_level: RiskLevel = RiskLevel.INFO,
        details: dict[str, object] | None = None,
    ) -> None:
        if self._audit:
            self._audit.log(AuditEvent(
                event_type=event_type,
                user_id=user_id,
                action=action,
                result=result,
                risk_level=risk_level,
                details=details,
            ))


def _reply(message: ReplyMessage) -> SlackResponse:
    return SlackResponse.json_body(message.model_dump(mode="json"))
