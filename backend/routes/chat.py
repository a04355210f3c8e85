"""
Chat endpoints: the webhook-compatible ``/chat`` contract and the widget's
send-message pipeline.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from middleware.rate_limit import limiter, CHAT_RATE_LIMIT
from models.schemas import ChatEnvelope, ChatRequest, ChatTurn, SendMessageRequest
from routes.deps import get_chat_service, get_engine
from services.chat_service import ChatService
from services.response_service import ResponseEngine

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatEnvelope)
@limiter.limit(CHAT_RATE_LIMIT)
async def webhook_chat(
    request: Request,
    req: ChatRequest,
    engine: ResponseEngine = Depends(get_engine),
):
    """Stateless answer in the ``{success, response}`` webhook shape."""
    response = await engine.respond(req.message, req.conversation_id, req.language, user_id=req.user_id)
    return ChatEnvelope(success=True, response=response)


@router.post("/api/chat/send", response_model=ChatTurn)
@limiter.limit(CHAT_RATE_LIMIT)
async def send_message(
    request: Request,
    req: SendMessageRequest,
    chat: ChatService = Depends(get_chat_service),
):
    turn = await chat.send_message(req.message)
    if turn is None:
        raise HTTPException(status_code=422, detail="Message must not be blank")
    return turn
