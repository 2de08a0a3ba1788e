"""RTC service abstraction.

This module turns a verified caller and a requested room into a LiveKit access
token. Missing caller details and room names never fail: they fall back to
guest values so anonymous sessions keep working. The only failure is the
signing step itself."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Protocol

from livekit import api

from ..core import config
from .identity import CallerContext

logger = logging.getLogger(__name__)

TOKEN_TTL = timedelta(minutes=10)
GUEST_NAME = "Guest"
GUEST_IDENTITY = "guest"
DEFAULT_ROOM = "room"


class SigningFailure(RuntimeError):
    """Raised when no token could be signed for the request."""


@dataclass(slots=True)
class RtcToken:
    token: str
    expires_in: int


@dataclass(frozen=True, slots=True)
class ResolvedGrant:
    identity: str
    name: str
    room: str


class TokenSigner(Protocol):
    def sign(self, grant: ResolvedGrant, ttl: timedelta) -> str:
        ...


def resolve_grant(caller: CallerContext | None, room_name: Any = None) -> ResolvedGrant:
    """Apply the guest fallbacks to a caller and a requested room."""

    email = caller.email if caller is not None else None
    uid = caller.uid if caller is not None else None
    return ResolvedGrant(
        identity=uid if uid is not None else GUEST_IDENTITY,
        name=email if email is not None else GUEST_NAME,
        room=room_name if isinstance(room_name, str) and room_name else DEFAULT_ROOM,
    )


class LiveKitTokenSigner:
    """Signs room-join grants with a LiveKit API key pair."""

    def __init__(self, api_key: str, api_secret: str) -> None:
        self._api_key = api_key
        self._api_secret = api_secret

    def sign(self, grant: ResolvedGrant, ttl: timedelta) -> str:
        try:
            token = (
                api.AccessToken(self._api_key, self._api_secret)
                .with_identity(grant.identity)
                .with_name(grant.name)
                .with_ttl(ttl)
                .with_grants(api.VideoGrants(room_join=True, room=grant.room))
            )
            return token.to_jwt()
        except Exception as exc:  # noqa: BLE001 - any SDK fault is a signing failure
            raise SigningFailure(f"LiveKit token signing failed: {exc.__class__.__name__}") from exc


def signer_from_settings() -> LiveKitTokenSigner:
    """Build a signer from the process-wide LiveKit key pair."""

    settings = config.settings
    api_key = settings.livekit_api_key.strip()
    api_secret = settings.livekit_api_secret.get_secret_value().strip()
    if not api_key or not api_secret:
        raise SigningFailure("LIVEKIT_API_KEY / LIVEKIT_API_SECRET are not configured")
    return LiveKitTokenSigner(api_key, api_secret)


async def issue_token(
    caller: CallerContext | None,
    room_name: Any = None,
    signer: TokenSigner | None = None,
) -> RtcToken:
    """Produce a LiveKit access token that lets the caller join one room."""

    grant = resolve_grant(caller, room_name)
    token_signer = signer if signer is not None else signer_from_settings()
    token = token_signer.sign(grant, TOKEN_TTL)
    logger.info("Issued LiveKit token identity=%s room=%s", grant.identity, grant.room)
    return RtcToken(token=token, expires_in=int(TOKEN_TTL.total_seconds()))
