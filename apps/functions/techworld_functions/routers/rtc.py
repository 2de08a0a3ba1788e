"""Callable RTC functions."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas.rtc import CallableRequest, CallableResult, LiveKitTokenData
from ..services import rtc as rtc_service
from ..services.identity import CallerContext, get_caller

router = APIRouter()


@router.post("/retrieveLiveKitToken", response_model=CallableResult)
async def retrieve_livekit_token(
    payload: CallableRequest,
    caller: CallerContext | None = Depends(get_caller),
) -> CallableResult:
    """Return a LiveKit token that lets the caller join the requested room."""

    data = payload.data if isinstance(payload.data, dict) else {}
    request = LiveKitTokenData.model_validate(data)

    token = await rtc_service.issue_token(caller, request.room_name)
    return CallableResult(result=token.token)
