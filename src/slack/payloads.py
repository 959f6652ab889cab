"""Decoding of raw Slack request bodies into typed payload variants.

Slack delivers the URL verification handshake and event callbacks as JSON,
and slash commands as ``application/x-www-form-urlencoded`` fields.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl


@dataclass(frozen=True)
class HandshakePayload:
    """``url_verification`` challenge sent when the endpoint is registered."""

    challenge: str


@dataclass(frozen=True)
class SlashCommandPayload:
    command: str
    text: str
    user_id: str = ""
    channel_id: str = ""


@dataclass(frozen=True)
class MessageEvent:
    type: str
    text: str = ""
    user: str = ""
    channel: str = ""
    channel_type: str = ""
    bot_id: str | None = None


@dataclass(frozen=True)
class EventCallbackPayload:
    event: MessageEvent


@dataclass(frozen=True)
class UnrecognizedPayload:
    """Anything else; acknowledged without a reply."""


Payload = HandshakePayload | SlashCommandPayload | EventCallbackPayload | UnrecognizedPayload


def _parse_event(raw: Any) -> MessageEvent | None:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return None
    if not isinstance(raw, dict):
        return None
    return MessageEvent(
        type=str(raw.get("type", "")),
        text=str(raw.get("text") or ""),
        user=str(raw.get("user") or ""),
        channel=str(raw.get("channel") or ""),
        channel_type=str(raw.get("channel_type") or ""),
        bot_id=raw.get("bot_id") or None,
    )


def _from_mapping(data: dict[str, Any], is_json: bool) -> Payload:
    # The handshake is only ever sent as JSON
    if is_json and data.get("type") == "url_verification":
        return HandshakePayload(challenge=str(data.get("challenge", "")))

    command = data.get("command")
    if command:
        return SlashCommandPayload(
            command=str(command),
            text=str(data.get("text") or ""),
            user_id=str(data.get("user_id") or ""),
            channel_id=str(data.get("channel_id") or ""),
        )

    if data.get("type") == "event_callback":
        event = _parse_event(data.get("event"))
        if event is not None:
            return EventCallbackPayload(event=event)

    return UnrecognizedPayload()


def parse_form(body: str) -> dict[str, str]:
    """Decode a form-urlencoded body; a repeated key keeps its last value."""
    return dict(parse_qsl(body, keep_blank_values=True))


def decode_payload(raw_body: bytes) -> Payload:
    """Classify a raw request body.

    JSON is attempted first, then form decoding. Undecodable bodies are
    reported as UnrecognizedPayload.
    """
    try:
        body = raw_body.decode()
    except UnicodeDecodeError:
        return UnrecognizedPayload()

    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return _from_mapping(parse_form(body), is_json=False)

    if isinstance(data, dict):
        return _from_mapping(data, is_json=True)
    return UnrecognizedPayload()
