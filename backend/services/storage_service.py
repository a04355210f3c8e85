"""
Conversation store: conversations, messages, user id, language preference
and usage statistics, persisted through a key-value adapter.

The whole conversation list lives as one JSON blob under a single key and is
read-modify-written on every mutation. The current-conversation pointer is a
separate key, so a stale pointer is possible and resolves to "no current
conversation".
"""

import math
import time
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from config import settings, StorageKeys
from models.schemas import (
    AllTimeStats,
    Conversation,
    Message,
    Stats,
    TodayStats,
    TopQuestion,
)
from services.kv_store import KeyValueStore

UNANSWERED_MARKER = "don't have"
UNKNOWN_QUESTION = "Unknown question"
TOP_QUESTIONS_LIMIT = 10
UNANSWERED_LIMIT = 5
RECENT_CONVERSATIONS_LIMIT = 20

_conversation_list = TypeAdapter(List[Conversation])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id(prefix: str = "id") -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def _unique_id(prefix: str, taken: Iterable[str]) -> str:
    taken = set(taken)
    new_id = generate_id(prefix)
    while new_id in taken:
        new_id = generate_id(prefix)
    return new_id


def answered_rate(stats: Stats) -> int:
    """Percentage of messages not counted as unanswered; 100 with no messages."""
    total = stats.all_time.total_messages
    if total <= 0:
        return 100
    return math.floor((total - len(stats.unanswered)) / total * 100 + 0.5)


def _find(conversations: List[Conversation], conversation_id: Optional[str]) -> Optional[Conversation]:
    if not conversation_id:
        return None
    return next((c for c in conversations if c.id == conversation_id), None)


class ConversationStore:
    def __init__(
        self,
        backend: KeyValueStore,
        keys: Optional[StorageKeys] = None,
        default_language: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._backend = backend
        self._keys = keys or settings.STORAGE_KEYS
        self._default_language = default_language or settings.DEFAULT_LANGUAGE
        self._clock = clock or _utcnow

    # ── User & language ──────────────────────────────────
    async def get_user_id(self) -> str:
        user_id = await self._backend.get(self._keys.user_id)
        if not user_id:
            user_id = generate_id("user")
            await self._backend.set(self._keys.user_id, user_id)
            logger.info(f"Generated user id {user_id}")
        return user_id

    async def get_language(self) -> str:
        return await self._backend.get(self._keys.language) or self._default_language

    async def set_language(self, code: str) -> None:
        await self._backend.set(self._keys.language, code)

    # ── Conversations ────────────────────────────────────
    async def list_conversations(self) -> List[Conversation]:
        data = await self._backend.get(self._keys.conversations)
        if not data:
            return []
        try:
            return _conversation_list.validate_json(data)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable conversation data: {e.error_count()} error(s)")
            return []

    async def _save_conversations(self, conversations: List[Conversation]) -> None:
        payload = _conversation_list.dump_json(conversations).decode("utf-8")
        await self._backend.set(self._keys.conversations, payload)

    async def get_current_id(self) -> Optional[str]:
        return await self._backend.get(self._keys.current_conversation)

    async def get_current(self) -> Optional[Conversation]:
        current_id = await self.get_current_id()
        if not current_id:
            return None
        return _find(await self.list_conversations(), current_id)

    async def get_messages(self) -> List[Message]:
        conversation = await self.get_current()
        return conversation.messages if conversation else []

    async def create_conversation(self, user_id: str = None, language: str = None) -> Conversation:
        conversations = await self.list_conversations()
        conversation = Conversation(
            id=_unique_id("conv", (c.id for c in conversations)),
            user_id=user_id or await self.get_user_id(),
            started_at=self._clock(),
            language=language or await self.get_language(),
            messages=[],
            resolved=False,
        )

        conversations.insert(0, conversation)
        await self._save_conversations(conversations)
        await self._backend.set(self._keys.current_conversation, conversation.id)

        logger.info(f"Created conversation {conversation.id} ({conversation.language})")
        return conversation

    async def append_message(self, message: Message) -> Message:
        """Stamp ``message`` with an id and timestamp and add it to the current conversation.

        Returns the stored copy, or ``message`` untouched when there is no
        current conversation.
        """
        conversations = await self.list_conversations()
        conversation = _find(conversations, await self.get_current_id())
        if conversation is None:
            return message

        timestamp = self._clock()
        if conversation.messages:
            last = conversation.messages[-1].timestamp
            if last is not None and last > timestamp:
                timestamp = last

        taken = (m.id for c in conversations for m in c.messages if m.id)
        saved = message.model_copy(
            update={"id": _unique_id("msg", taken), "timestamp": timestamp},
            deep=True,
        )
        conversation.messages.append(saved)
        await self._save_conversations(conversations)
        return saved

    async def set_feedback(self, message_id: str, helpful: bool) -> None:
        conversations = await self.list_conversations()
        conversation = _find(conversations, await self.get_current_id())
        if conversation is None:
            return

        message = next((m for m in conversation.messages if m.id == message_id), None)
        if message is None:
            return

        message.feedback = helpful
        await self._save_conversations(conversations)
        logger.debug(f"Feedback on {message_id}: helpful={helpful}")

    # ── Statistics ───────────────────────────────────────
    async def compute_statistics(self) -> Stats:
        conversations = await self.list_conversations()
        today = self._clock().astimezone().date()

        todays = [c for c in conversations if c.started_at.astimezone().date() == today]
        all_messages = [m for c in conversations for m in c.messages]

        languages = Counter(c.language for c in conversations)

        questions = Counter(
            m.content.lower().strip() for m in all_messages if m.role == "user"
        )
        top_questions = [
            TopQuestion(question=q, count=n)
            for q, n in questions.most_common(TOP_QUESTIONS_LIMIT)
        ]

        # Approximation: the message just before a fallback reply is taken as the question.
        unanswered = []
        for conversation in conversations:
            for index, message in enumerate(conversation.messages):
                if message.role != "bot" or UNANSWERED_MARKER not in message.content:
                    continue
                previous = conversation.messages[index - 1] if index > 0 else None
                unanswered.append((previous.content if previous else "") or UNKNOWN_QUESTION)

        return Stats(
            today=TodayStats(
                total_conversations=len(todays),
                total_messages=sum(len(c.messages) for c in todays),
                languages=dict(languages),
            ),
            all_time=AllTimeStats(
                total_conversations=len(conversations),
                total_messages=len(all_messages),
            ),
            top_questions=top_questions,
            unanswered=list(dict.fromkeys(unanswered))[:UNANSWERED_LIMIT],
            recent_conversations=conversations[:RECENT_CONVERSATIONS_LIMIT],
        )

    async def clear_all(self) -> None:
        for key in self._keys.all():
            await self._backend.remove(key)
        logger.info("Cleared all stored conversation data")
