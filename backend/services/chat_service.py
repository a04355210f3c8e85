"""
Chat pipeline: user text -> response engine -> conversation store.
"""

import asyncio
from typing import Optional

from loguru import logger

from config import settings, Settings
from models.schemas import ChatTurn, Conversation, Message
from services.language_service import LanguageService
from services.response_service import ResponseEngine
from services.storage_service import ConversationStore


class ChatService:
    def __init__(
        self,
        store: ConversationStore,
        engine: ResponseEngine,
        languages: LanguageService,
        config: Optional[Settings] = None,
    ):
        self.store = store
        self.engine = engine
        self.languages = languages
        self.config = config or settings
        # One request in flight at a time; later sends wait their turn.
        self._lock = asyncio.Lock()

    async def _add_greeting(self) -> Message:
        return await self.store.append_message(Message(
            role="bot",
            content=await self.languages.get_greeting(),
            citations=[],
            suggested_followups=list(self.config.SUGGESTED_QUESTIONS),
        ))

    async def _greeted_conversation(self) -> Conversation:
        created = await self.store.create_conversation(language=await self.languages.get_language())
        greeting = await self._add_greeting()
        # Dropped writes leave no current conversation; hand back the one just built.
        current = await self.store.get_current()
        if current is None:
            logger.warning(f"Conversation {created.id} was not persisted")
            return created.model_copy(update={"messages": [greeting]})
        return current

    async def load_conversation(self) -> Conversation:
        """Current conversation, creating a greeted one on first use."""
        conversation = await self.store.get_current()
        if conversation is not None:
            return conversation
        return await self._greeted_conversation()

    async def start_new_conversation(self) -> Conversation:
        return await self._greeted_conversation()

    async def send_message(self, text: str) -> Optional[ChatTurn]:
        """Store the user's message and the bot's reply; ``None`` for blank input."""
        text = (text or "").strip()
        if not text:
            return None

        async with self._lock:
            conversation = await self.load_conversation()
            user_message = await self.store.append_message(Message(role="user", content=text))

            language = await self.languages.get_language()
            response = await self.engine.respond(
                text,
                conversation.id,
                language,
                user_id=await self.store.get_user_id(),
            )

            bot_message = await self.store.append_message(Message(
                role="bot",
                content=response.text,
                citations=response.citations,
                confidence=response.confidence,
                suggested_followups=response.suggested_followups,
            ))

        logger.info(f"Chat [{conversation.id}]: '{text[:50]}' -> '{response.text[:50]}'")
        return ChatTurn(conversation_id=conversation.id, user_message=user_message, bot_message=bot_message)

    async def submit_feedback(self, message_id: str, helpful: bool) -> None:
        await self.store.set_feedback(message_id, helpful)
