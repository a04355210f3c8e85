"""
Application configuration — reads all settings from environment variables.
"""

from pydantic import BaseModel
from pydantic_settings import BaseSettings
from typing import Dict, List

# Placeholder webhook shipped with the widget; treated as "not configured".
PLACEHOLDER_WEBHOOK_URL = "https://zonecrest.app.n8n.cloud/webhook"


class LanguageOption(BaseModel):
    code: str
    name: str
    flag: str = ""
    greeting: str
    voice_supported: bool = True


class StorageKeys(BaseModel):
    conversations: str = "gra_conversations"
    current_conversation: str = "gra_current_conversation"
    language: str = "gra_language"
    user_id: str = "gra_user_id"

    def all(self) -> List[str]:
        return [self.conversations, self.current_conversation, self.language, self.user_id]


_DEFAULT_LANGUAGES = {
    "en": LanguageOption(
        code="en",
        name="English",
        flag="🇬🇧",
        greeting="Akwaaba! I'm Kofi, your GRA tax assistant. How can I help you today?",
    ),
    "pidgin": LanguageOption(
        code="pidgin",
        name="Pidgin",
        flag="🇬🇭",
        greeting="Chale! I be Kofi, your GRA tax assistant. Wetin I fit do for you today?",
    ),
    "twi": LanguageOption(
        code="twi",
        name="Twi",
        flag="🇬🇭",
        greeting="Akwaaba! Me din de Kofi, wo GRA tax assistant. Dɛn na wopɛ sɛ wohunu?",
        voice_supported=False,
    ),
    "ga": LanguageOption(
        code="ga",
        name="Ga",
        flag="🇬🇭",
        greeting="Ojekoo! I'm Kofi, your GRA tax assistant. How can I help you today?",
        voice_supported=False,
    ),
    "ewe": LanguageOption(
        code="ewe",
        name="Ewe",
        flag="🇬🇭",
        greeting="Woezɔ! I'm Kofi, your GRA tax assistant. How can I help you today?",
        voice_supported=False,
    ),
}


class Settings(BaseSettings):
    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "GRA Taxpayer Assistant"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    # ── Backend webhook ──────────────────────────────────
    WEBHOOK_URL: str = PLACEHOLDER_WEBHOOK_URL
    DEMO_MODE: bool = False
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # ── Storage ──────────────────────────────────────────
    STORAGE_BACKEND: str = "sqlite"  # sqlite / memory
    DATABASE_URL: str = "sqlite+aiosqlite:///./gra_chatbot.db"
    STORAGE_KEYS: StorageKeys = StorageKeys()

    # ── Bot persona ──────────────────────────────────────
    BOT_NAME: str = "Kofi"
    BOT_AVATAR: str = "K"
    BOT_GREETING: str = "Akwaaba! I'm Kofi, your GRA tax assistant. How can I help you today?"

    # ── Languages ────────────────────────────────────────
    DEFAULT_LANGUAGE: str = "en"
    LANGUAGES: Dict[str, LanguageOption] = _DEFAULT_LANGUAGES

    # ── GRA contact (fallback answers) ───────────────────
    GRA_PHONE: str = "0800-900-110"
    GRA_WEBSITE: str = "https://gra.gov.gh"

    # ── Suggested questions ──────────────────────────────
    SUGGESTED_QUESTIONS: List[str] = [
        "What is the VAT rate in Ghana?",
        "Do I need to register for VAT?",
        "How much is E-Levy?",
        "How do I get a TIN number?",
    ]
    QUESTION_CATEGORIES: Dict[str, List[str]] = {
        "VAT": [
            "What is the VAT rate in Ghana?",
            "Do I need to register for VAT?",
            "Are food items exempt from VAT?",
            "Do I pay VAT on exported goods?",
        ],
        "Income Tax": [
            "What are the income tax bands?",
            "How do I file my annual returns?",
            "What expenses can I deduct?",
        ],
        "E-Levy": [
            "What is E-Levy?",
            "How much is E-Levy on mobile money?",
            "Who is exempt from E-Levy?",
        ],
        "Registration": [
            "How do I get a TIN?",
            "What documents do I need to register my business?",
        ],
    }

    # ── Rate Limiting ────────────────────────────────────
    RATE_LIMIT_PER_MINUTE: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def is_webhook_configured(self) -> bool:
        url = self.WEBHOOK_URL.strip()
        return bool(url) and PLACEHOLDER_WEBHOOK_URL not in url

    def use_demo_mode(self) -> bool:
        return self.DEMO_MODE or not self.is_webhook_configured()

    def get_endpoint(self, path: str) -> str:
        return self.WEBHOOK_URL.rstrip("/") + path


settings = Settings()
