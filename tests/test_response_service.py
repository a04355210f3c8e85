import json

import httpx
import pytest

from config import Settings
from integrations.webhook import WebhookClient
from models.results import Failure, Success
from models.schemas import Citation, Stats
from services.knowledge_base import KNOWLEDGE_BASE, KnowledgeEntry
from services.response_service import (
    DemoResponder,
    ResponseEngine,
    find_best_match,
    score_entry,
    to_pidgin,
)

REMOTE_REPLY = {
    "success": True,
    "response": {
        "text": "Answer from the workflow",
        "citations": [],
        "confidence": 0.8,
        "language_detected": "en",
        "suggested_followups": [],
    },
}


def _entry(answer, *keywords):
    return KnowledgeEntry(
        answer=answer,
        citation=Citation(document=answer, section="s", excerpt="e", page=1),
        keywords=keywords,
    )


def _remote_engine(handler):
    config = Settings(WEBHOOK_URL="http://hook.test/webhook", DEMO_MODE=False)
    client = WebhookClient(base_url=config.WEBHOOK_URL, timeout=5, transport=httpx.MockTransport(handler))
    return ResponseEngine(config=config, client=client)


# ── Demo matching ────────────────────────────────────────
def test_vat_rate_question_matches_key_phrase():
    text = "what is the vat rate"

    assert score_entry(text, "vat rate", KNOWLEDGE_BASE["vat rate"]) >= 10
    match = find_best_match(text)

    assert match.citation.document == "Value Added Tax Act, 2013 (Act 870)"
    assert match.citation.section == "Section 3"


def test_demo_vat_rate_response():
    response = DemoResponder().answer("  What is the VAT rate  ", "en")

    assert response.confidence == 0.92
    assert response.citations == [KNOWLEDGE_BASE["vat rate"].citation]
    assert response.suggested_followups == ["How do I register for VAT?", "What is the E-Levy rate?"]
    assert response.language_detected == "en"


def test_greeting_short_circuits_even_without_knowledge():
    config = Settings()
    response = DemoResponder(config=config, knowledge={}).answer("hello", "en")

    assert response.citations == []
    assert response.confidence == 1.0
    assert response.suggested_followups == config.SUGGESTED_QUESTIONS[:3]
    assert response.text.startswith("Hello! I'm Kofi")


def test_greeting_in_pidgin_and_unknown_language():
    demo = DemoResponder()

    assert demo.answer("Chale, good morning", "pidgin").text.startswith("Chale! I be Kofi")
    assert demo.answer("hey", "ewe").text.startswith("Hello! I'm Kofi")


def test_unmatched_question_falls_back():
    config = Settings()
    response = DemoResponder(config=config).answer("what time is it", "en")

    assert response.confidence == 0.1
    assert response.citations == []
    assert response.suggested_followups == config.SUGGESTED_QUESTIONS
    assert "don't have" in response.text
    assert config.GRA_PHONE in response.text
    assert config.GRA_WEBSITE in response.text


def test_fallback_uses_language_specific_text():
    response = DemoResponder().answer("what time is it", "twi")

    assert response.text.startswith("Menni nkɔmɔ")
    assert response.language_detected == "twi"


def test_single_keyword_reaches_threshold():
    match = find_best_match("tell me about cocoa")

    assert match is KNOWLEDGE_BASE["export vat"]
    assert find_best_match("what time is it") is None


def test_ties_keep_first_entry_in_table_order():
    knowledge = {
        "first": _entry("first", "levy"),
        "second": _entry("second", "levy"),
        "third": _entry("third", "nothing"),
    }

    assert find_best_match("levy question", knowledge).answer == "first"


def test_key_phrase_outweighs_keywords():
    knowledge = {
        "many": _entry("many", "a1", "a2", "a3", "a4"),
        "phrase": _entry("phrase", "zzz"),
    }

    assert find_best_match("a1 a2 a3 a4 phrase", knowledge).answer == "phrase"


def test_pidgin_answers_are_transformed():
    response = DemoResponder().answer("Do I need to register for VAT?", "pidgin")

    assert response.text.startswith("You go need to register for VAT")
    assert "You fit also voluntarily register" in response.text


def test_pidgin_transform_replaces_first_occurrence_only():
    assert to_pidgin("You can. You can.") == "You fit. You can."
    assert to_pidgin("you can") == "you can"


@pytest.mark.asyncio
async def test_demo_responder_returns_success():
    result = await DemoResponder().respond("what is e-levy", "en")

    assert isinstance(result, Success)
    assert result.value.citations[0].document.startswith("Electronic Transfer Levy Act")


# ── Engine mode selection ────────────────────────────────
def test_engine_uses_demo_mode_without_webhook():
    assert ResponseEngine(config=Settings(WEBHOOK_URL="")).mode == "demo"
    assert ResponseEngine(config=Settings(WEBHOOK_URL="https://zonecrest.app.n8n.cloud/webhook")).mode == "demo"
    assert ResponseEngine(config=Settings(WEBHOOK_URL="http://hook.test", DEMO_MODE=True)).mode == "demo"
    assert ResponseEngine(config=Settings(WEBHOOK_URL="http://hook.test", DEMO_MODE=False)).mode == "remote"


@pytest.mark.asyncio
async def test_remote_success_is_returned():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=REMOTE_REPLY)

    engine = _remote_engine(handler)
    response = await engine.respond("what is the vat rate", "conv_1", "en", user_id="user_1")

    assert response.text == "Answer from the workflow"
    assert seen["url"] == "http://hook.test/webhook/chat"
    assert seen["body"] == {
        "message": "what is the vat rate",
        "conversation_id": "conv_1",
        "language": "en",
        "user_id": "user_1",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [
    httpx.Response(500, json={"error": "boom"}),
    httpx.Response(200, json={"success": False}),
    httpx.Response(200, text="<html>not json</html>"),
])
async def test_remote_failures_fall_back_to_demo(reply):
    engine = _remote_engine(lambda request: reply)

    response = await engine.respond("what is the vat rate", "conv_1", "en")

    assert response.confidence == 0.92
    assert response.citations[0].section == "Section 3"


@pytest.mark.asyncio
async def test_transport_error_falls_back_to_demo():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    response = await _remote_engine(handler).respond("hello", None, "en")

    assert response.confidence == 1.0


@pytest.mark.asyncio
async def test_injected_responder_failure_falls_back():
    class BrokenResponder:
        async def respond(self, message, language, conversation_id=None, user_id=None):
            return Failure("offline")

    engine = ResponseEngine(config=Settings(WEBHOOK_URL=""), remote=BrokenResponder())

    assert engine.mode == "remote"
    response = await engine.respond("what time is it", "conv_1", "en")
    assert response.confidence == 0.1


# ── Statistics source ────────────────────────────────────
@pytest.mark.asyncio
async def test_get_stats_prefers_remote():
    remote_stats = {"all_time": {"total_conversations": 7, "total_messages": 30}}
    engine = _remote_engine(lambda request: httpx.Response(200, json=remote_stats))

    stats, source = await engine.get_stats(Stats())

    assert source == "remote"
    assert stats.all_time.total_conversations == 7


@pytest.mark.asyncio
async def test_get_stats_falls_back_to_local():
    local = Stats()
    engine = _remote_engine(lambda request: httpx.Response(503))

    stats, source = await engine.get_stats(local)
    assert (stats, source) == (local, "local")

    stats, source = await ResponseEngine(config=Settings(WEBHOOK_URL="")).get_stats(local)
    assert (stats, source) == (local, "local")
