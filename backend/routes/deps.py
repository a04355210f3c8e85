"""
FastAPI dependencies resolving the services built at startup.
"""

from fastapi import Request

from services.chat_service import ChatService
from services.language_service import LanguageService
from services.response_service import ResponseEngine
from services.storage_service import ConversationStore


def get_store(request: Request) -> ConversationStore:
    return request.app.state.store


def get_engine(request: Request) -> ResponseEngine:
    return request.app.state.engine


def get_languages(request: Request) -> LanguageService:
    return request.app.state.languages


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat
