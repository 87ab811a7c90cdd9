from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from healthnav.domain.errors import AssistantError, AssistantErrorKind
from healthnav.domain.schemas.chat import ChatReply, ChatRequest

from .deps import get_pipeline


router = APIRouter()


@router.post("/chat", summary="Ask the health assistant a general question", response_model=ChatReply)
def chat(request: Request, body: ChatRequest) -> ChatReply:
    pipeline = get_pipeline(request)
    try:
        reply = pipeline.chat(body.message, body.user_id)
    except AssistantError as e:
        status = 429 if e.kind == AssistantErrorKind.RATE_LIMITED else 503
        raise HTTPException(status_code=status, detail=e.user_message) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return ChatReply(reply=reply)
