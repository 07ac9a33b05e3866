"""Inbound message endpoint - POST /messages."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from manualbot.app.api.deps import get_request_router
from manualbot.app.router import RequestRouter

router = APIRouter(prefix="/messages", tags=["messages"])


class MessageRequest(BaseModel):
    """Request body for POST /messages."""

    user_key: str = Field(..., min_length=1, max_length=128, description="Stable participant id")
    text: str = Field(..., max_length=2000, description="Inbound message text")


class MessageResponse(BaseModel):
    """Response for POST /messages."""

    reply: str
    action: str


@router.post("", response_model=MessageResponse)
async def post_message(
    request: MessageRequest,
    request_router: Annotated[RequestRouter, Depends(get_request_router)],
) -> MessageResponse:
    """Route one message through dialogue or search and return the reply.

    Args:
        request: Message from a chat adapter
        request_router: Shared request router

    Returns:
        Reply text and the action taken
    """
    result = await request_router.route(request.user_key, request.text)
    return MessageResponse(reply=result.text, action=result.action)
