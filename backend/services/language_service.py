"""
Language preference: validated against the configured languages.
"""

from typing import List, Optional

from loguru import logger

from config import settings, Settings, LanguageOption
from services.storage_service import ConversationStore


class LanguageService:
    def __init__(self, store: ConversationStore, config: Optional[Settings] = None):
        self.store = store
        self.config = config or settings

    def list_languages(self) -> List[LanguageOption]:
        return list(self.config.LANGUAGES.values())

    def is_supported(self, code: str) -> bool:
        return code in self.config.LANGUAGES

    async def get_language(self) -> str:
        saved = await self.store.get_language()
        return saved if self.is_supported(saved) else self.config.DEFAULT_LANGUAGE

    async def get_language_config(self) -> LanguageOption:
        return self.config.LANGUAGES[await self.get_language()]

    async def set_language(self, code: str) -> bool:
        if not self.is_supported(code):
            logger.error(f"Unknown language: {code}")
            return False
        await self.store.set_language(code)
        logger.info(f"Language set to {code}")
        return True

    async def get_greeting(self) -> str:
        return (await self.get_language_config()).greeting

    async def is_voice_supported(self) -> bool:
        return (await self.get_language_config()).voice_supported
