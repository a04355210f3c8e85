"""
Response engine: forwards questions to the remote webhook when one is
configured, and falls back to a keyword-matching demo responder otherwise
(or whenever the webhook fails).
"""

from typing import Dict, Optional, Protocol, Tuple

from loguru import logger

from config import settings, Settings
from integrations.webhook import WebhookClient
from models.results import Result, Success
from models.schemas import BotResponse, Stats
from services.knowledge_base import KNOWLEDGE_BASE, KnowledgeEntry

KEY_PHRASE_SCORE = 10
KEYWORD_SCORE = 2
MATCH_THRESHOLD = 2

GREETING_CONFIDENCE = 1.0
MATCH_CONFIDENCE = 0.92
FALLBACK_CONFIDENCE = 0.1

MATCH_FOLLOWUPS = [
    "How do I register for VAT?",
    "What is the E-Levy rate?",
]


# ─────────────────────────────────────────────────────────
#  CANNED TEXT
# ─────────────────────────────────────────────────────────

_GREETINGS = [
    "hello", "hi", "hey", "good morning", "good afternoon",
    "good evening", "akwaaba", "chale", "charley",
]

_GREETING_RESPONSES = {
    "en": (
        "Hello! I'm Kofi, your GRA tax assistant. I can help you with questions about VAT, income tax, "
        "E-Levy, TIN registration, and more. What would you like to know?"
    ),
    "pidgin": (
        "Chale! I be Kofi, your GRA tax assistant. I fit help you with VAT, income tax, E-Levy, "
        "TIN registration, and plenty more. Wetin you wan know?"
    ),
    "twi": (
        "Akwaaba! Me din de Kofi, wo GRA tax assistant. Metumi aboa wo VAT, income tax, E-Levy, "
        "TIN registration ne nea aka nyinaa ho. Dɛn na wopɛ sɛ wohunu?"
    ),
}

_FALLBACK_RESPONSES = {
    "en": (
        "I don't have specific information about that in my knowledge base. For detailed assistance, please:\n\n"
        "• Call GRA: {phone}\n"
        "• Visit: {website}\n"
        "• Visit any GRA office near you\n\n"
        "Is there something else about VAT, income tax, or E-Levy I can help with?"
    ),
    "pidgin": (
        "I no get answer for dat one for my head o. Abeg try:\n\n"
        "• Call GRA: {phone}\n"
        "• Check: {website}\n"
        "• Go any GRA office wey dey near you\n\n"
        "Anything else about VAT, income tax or E-Levy wey I fit help?"
    ),
    "twi": (
        "Menni nkɔmɔ pa bi wɔ me nkyerɛwde mu. Mesrɛ wo:\n\n"
        "• Frɛ GRA: {phone}\n"
        "• Kɔ: {website}\n"
        "• Kɔ GRA ofisi biara a ɛbɛn wo\n\n"
        "Biribi foforo wɔ VAT, income tax anaa E-Levy ho a metumi aboa wo?"
    ),
}

# Applied in order, first occurrence only.
_PIDGIN_SUBSTITUTIONS = [
    ("You must", "You go need to"),
    ("You can", "You fit"),
    ("This means", "Dis mean sey"),
    ("Great news", "Good news"),
    ("Yes,", "Yes o,"),
]


def to_pidgin(text: str) -> str:
    for phrase, replacement in _PIDGIN_SUBSTITUTIONS:
        text = text.replace(phrase, replacement, 1)
    return text


def is_greeting(text: str) -> bool:
    return any(g in text for g in _GREETINGS)


def score_entry(text: str, key: str, entry: KnowledgeEntry) -> int:
    score = KEY_PHRASE_SCORE if key in text else 0
    score += sum(KEYWORD_SCORE for keyword in entry.keywords if keyword in text)
    return score


def find_best_match(
    text: str,
    knowledge: Optional[Dict[str, KnowledgeEntry]] = None,
) -> Optional[KnowledgeEntry]:
    """Return the highest-scoring entry for already-normalized ``text``.

    Ties keep the entry defined first. Anything scoring below
    ``MATCH_THRESHOLD`` is not a match.
    """
    knowledge = KNOWLEDGE_BASE if knowledge is None else knowledge
    best_match, best_score = None, 0

    for key, entry in knowledge.items():
        score = score_entry(text, key, entry)
        if score > best_score:
            best_match, best_score = entry, score

    return best_match if best_score >= MATCH_THRESHOLD else None


# ─────────────────────────────────────────────────────────
#  RESPONDERS
# ─────────────────────────────────────────────────────────

class Responder(Protocol):
    async def respond(
        self,
        message: str,
        language: str,
        conversation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Result[BotResponse]:
        ...


class DemoResponder:
    """Local simulation of the backend. Deterministic; never fails."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        knowledge: Optional[Dict[str, KnowledgeEntry]] = None,
    ):
        self.config = config or settings
        self.knowledge = KNOWLEDGE_BASE if knowledge is None else knowledge

    async def respond(
        self,
        message: str,
        language: str,
        conversation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Result[BotResponse]:
        return Success(self.answer(message, language))

    def answer(self, message: str, language: str) -> BotResponse:
        text = message.lower().strip()

        if is_greeting(text):
            return self._greeting(language)

        match = find_best_match(text, self.knowledge)
        if match is not None:
            return self._matched(match, language)

        return self._fallback(language)

    def _greeting(self, language: str) -> BotResponse:
        return BotResponse(
            text=_GREETING_RESPONSES.get(language, _GREETING_RESPONSES["en"]),
            citations=[],
            confidence=GREETING_CONFIDENCE,
            language_detected=language,
            suggested_followups=self.config.SUGGESTED_QUESTIONS[:3],
        )

    def _matched(self, entry: KnowledgeEntry, language: str) -> BotResponse:
        answer = to_pidgin(entry.answer) if language == "pidgin" else entry.answer
        return BotResponse(
            text=answer,
            citations=[entry.citation],
            confidence=MATCH_CONFIDENCE,
            language_detected=language,
            suggested_followups=list(MATCH_FOLLOWUPS),
        )

    def _fallback(self, language: str) -> BotResponse:
        template = _FALLBACK_RESPONSES.get(language, _FALLBACK_RESPONSES["en"])
        return BotResponse(
            text=template.format(phone=self.config.GRA_PHONE, website=self.config.GRA_WEBSITE),
            citations=[],
            confidence=FALLBACK_CONFIDENCE,
            language_detected=language,
            suggested_followups=list(self.config.SUGGESTED_QUESTIONS),
        )


class WebhookResponder:
    def __init__(self, client: WebhookClient):
        self.client = client

    async def respond(
        self,
        message: str,
        language: str,
        conversation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Result[BotResponse]:
        return await self.client.post_chat(message, conversation_id, language, user_id)


# ─────────────────────────────────────────────────────────
#  ENGINE
# ─────────────────────────────────────────────────────────

class ResponseEngine:
    """Picks the remote or demo responder; the caller always gets an answer."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        client: Optional[WebhookClient] = None,
        demo: Optional[DemoResponder] = None,
        remote: Optional[Responder] = None,
    ):
        self.config = config or settings
        self.client = client or WebhookClient(
            base_url=self.config.WEBHOOK_URL,
            timeout=self.config.REQUEST_TIMEOUT_SECONDS,
        )
        self.demo = demo or DemoResponder(self.config)
        self.remote = remote
        if self.remote is None and not self.config.use_demo_mode():
            self.remote = WebhookResponder(self.client)

    @property
    def mode(self) -> str:
        return "demo" if self.remote is None else "remote"

    async def respond(
        self,
        message: str,
        conversation_id: Optional[str],
        language: str,
        user_id: Optional[str] = None,
    ) -> BotResponse:
        if self.remote is not None:
            result = await self.remote.respond(message, language, conversation_id, user_id)
            if isinstance(result, Success):
                return result.value
            logger.warning(f"Webhook unavailable, answering locally: {result.reason}")

        response = self.demo.answer(message, language)
        logger.info(f"[DEMO] '{message[:40]}' -> confidence {response.confidence}")
        return response

    async def get_stats(self, local_stats: Stats) -> Tuple[Stats, str]:
        """Remote statistics when reachable, otherwise ``local_stats``. Also returns the source."""
        if self.remote is not None:
            result = await self.client.fetch_stats()
            if isinstance(result, Success):
                return result.value, "remote"
            logger.warning(f"Remote stats unavailable, using local: {result.reason}")
        return local_stats, "local"
