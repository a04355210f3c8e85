"""
Pydantic schemas for conversations, bot responses, statistics and the API.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


# ── Conversation data ────────────────────────────────────
class Citation(BaseModel):
    document: str
    section: str
    excerpt: str
    page: int

    class Config:
        frozen = True


class Message(BaseModel):
    id: Optional[str] = None
    role: Literal["user", "bot"]
    content: str
    timestamp: Optional[datetime] = None
    citations: Optional[List[Citation]] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    suggested_followups: Optional[List[str]] = None
    feedback: Optional[bool] = None


class Conversation(BaseModel):
    id: str
    user_id: str
    started_at: datetime
    language: str
    messages: List[Message] = []
    resolved: bool = False


# ── Bot response ─────────────────────────────────────────
class BotResponse(BaseModel):
    text: str
    citations: List[Citation] = []
    confidence: float = Field(ge=0.0, le=1.0)
    language_detected: str
    suggested_followups: List[str] = []


class ChatEnvelope(BaseModel):
    """Wire shape of the webhook ``/chat`` reply."""

    success: bool
    response: Optional[BotResponse] = None


# ── Statistics ───────────────────────────────────────────
class TodayStats(BaseModel):
    total_conversations: int = 0
    total_messages: int = 0
    languages: Dict[str, int] = {}


class AllTimeStats(BaseModel):
    total_conversations: int = 0
    total_messages: int = 0


class TopQuestion(BaseModel):
    question: str
    count: int


class Stats(BaseModel):
    today: TodayStats = TodayStats()
    all_time: AllTimeStats = AllTimeStats()
    top_questions: List[TopQuestion] = []
    unanswered: List[str] = []
    recent_conversations: List[Conversation] = []


class AnalyticsSummary(BaseModel):
    stats: Stats
    answered_rate: int
    source: Literal["remote", "local"]


# ── Requests ─────────────────────────────────────────────
class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    conversation_id: Optional[str] = None
    language: str = "en"
    user_id: Optional[str] = None


class SendMessageRequest(BaseModel):
    message: str

    @field_validator("message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("message must not be blank")
        return value


class ChatTurn(BaseModel):
    """One exchange: the stored user message, the bot reply and the conversation they went to."""
    conversation_id: str
    user_message: Message
    bot_message: Message


class FeedbackRequest(BaseModel):
    helpful: bool


class LanguageUpdate(BaseModel):
    language: str


class SuggestionsResponse(BaseModel):
    suggested_questions: List[str]
    categories: Dict[str, List[str]]
