"""Caller authentication for callable functions.

Firebase callable clients attach the signed-in user's ID token as a bearer
token. We verify it with the Admin SDK before the function body runs, the same
way the hosted callable runtime does. Requests without a token are passed
through as anonymous invocations."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

import firebase_admin
from fastapi import Header
from fastapi.concurrency import run_in_threadpool
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from ..core.config import settings

logger = logging.getLogger(__name__)


class CallerUnauthenticated(RuntimeError):
    """Raised when a bearer token is present but cannot be verified."""


@dataclass(frozen=True, slots=True)
class CallerContext:
    uid: str | None = None
    email: str | None = None


@lru_cache
def _get_firebase_app() -> firebase_admin.App:
    try:
        return firebase_admin.get_app()
    except ValueError:
        options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
        return firebase_admin.initialize_app(options=options)


def _bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise CallerUnauthenticated("Authorization header must be a bearer token")
    return token.strip()


async def verify_caller(authorization: str | None) -> CallerContext | None:
    """Resolve the caller context from an ``Authorization`` header value."""

    if authorization is None or not authorization.strip():
        return None

    token = _bearer_token(authorization)
    try:
        claims = await run_in_threadpool(firebase_auth.verify_id_token, token, app=_get_firebase_app())
    except (ValueError, firebase_exceptions.FirebaseError) as exc:
        logger.info("Rejected caller ID token: %s", exc.__class__.__name__)
        raise CallerUnauthenticated("ID token could not be verified") from exc

    return CallerContext(uid=claims.get("uid"), email=claims.get("email"))


async def get_caller(authorization: str | None = Header(default=None)) -> CallerContext | None:
    """FastAPI dependency exposing the verified caller."""

    return await verify_caller(authorization)
