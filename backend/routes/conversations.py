"""
Conversation history endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from models.schemas import Conversation, FeedbackRequest
from routes.deps import get_chat_service, get_store
from services.chat_service import ChatService
from services.storage_service import ConversationStore

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@router.get("/", response_model=list[Conversation])
async def list_conversations(
    skip: int = 0,
    limit: int = 50,
    store: ConversationStore = Depends(get_store),
):
    conversations = await store.list_conversations()
    return conversations[skip:skip + limit]


@router.post("/", response_model=Conversation)
async def new_conversation(chat: ChatService = Depends(get_chat_service)):
    return await chat.start_new_conversation()


@router.get("/current", response_model=Conversation)
async def get_current_conversation(store: ConversationStore = Depends(get_store)):
    conv = await store.get_current()
    if not conv:
        raise HTTPException(status_code=404, detail="No current conversation")
    return conv


@router.post("/current", response_model=Conversation)
async def load_current_conversation(chat: ChatService = Depends(get_chat_service)):
    """Current conversation, or a freshly greeted one if there is none."""
    return await chat.load_conversation()


@router.post("/current/messages/{message_id}/feedback")
async def submit_feedback(
    message_id: str,
    req: FeedbackRequest,
    chat: ChatService = Depends(get_chat_service),
):
    await chat.submit_feedback(message_id, req.helpful)
    return {"status": "ok", "message_id": message_id}


@router.delete("/")
async def clear_all(store: ConversationStore = Depends(get_store)):
    await store.clear_all()
    return {"status": "cleared"}
