"""Data contracts for the callable RTC endpoints.

Callable functions share one envelope: the client posts ``{"data": ...}`` and
gets back either ``{"result": ...}`` or ``{"error": {"status", "message"}}``.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CallableRequest(BaseModel):
    data: Any = Field(..., description="Function payload supplied by the client SDK")


class LiveKitTokenData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Any JSON value is accepted; non-string room names resolve to the default room.
    room_name: Any = Field(default=None, alias="roomName", description="Room name to join")


class CallableResult(BaseModel):
    result: str = Field(..., description="Signed LiveKit access token")


class CallableErrorBody(BaseModel):
    status: str
    message: str


class CallableError(BaseModel):
    error: CallableErrorBody
