"""
Language and suggestion settings endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from config import settings, LanguageOption
from models.schemas import LanguageUpdate, SuggestionsResponse
from routes.deps import get_languages
from services.language_service import LanguageService

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/languages", response_model=list[LanguageOption])
async def list_languages(languages: LanguageService = Depends(get_languages)):
    return languages.list_languages()


@router.get("/language", response_model=LanguageOption)
async def get_language(languages: LanguageService = Depends(get_languages)):
    return await languages.get_language_config()


@router.put("/language", response_model=LanguageOption)
async def update_language(
    update: LanguageUpdate,
    languages: LanguageService = Depends(get_languages),
):
    if not await languages.set_language(update.language):
        raise HTTPException(status_code=400, detail=f"Unknown language: {update.language}")
    return await languages.get_language_config()


@router.get("/suggestions", response_model=SuggestionsResponse)
async def get_suggestions():
    return SuggestionsResponse(
        suggested_questions=settings.SUGGESTED_QUESTIONS,
        categories=settings.QUESTION_CATEGORIES,
    )
