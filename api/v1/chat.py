from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_chat_services
from api.errors import SERVER_ERROR, error_response
from api.schemas.mint import ErrorResponse
from app.chat.contracts import ChatRequest, ChatResponse
from app.chat.router import ChatServices, route_chat

router = APIRouter(tags=["chat"])
logger = logging.getLogger(__name__)


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def chat(req: ChatRequest, services: ChatServices = Depends(get_chat_services)):
    logger.info("chat called messages=%s", len(req.messages))
    try:
        return route_chat(req, services=services)
    except Exception as e:
        logger.exception("chat endpoint error")
        return error_response(500, SERVER_ERROR, str(e) or type(e).__name__)
