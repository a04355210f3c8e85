"""
GRA Taxpayer Assistant — FastAPI entry point.
"""

import sys
import os

# Ensure backend dir is on path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from loguru import logger

from config import settings
from models.database import init_db, make_engine, make_sessionmaker
from middleware.error_handler import global_exception_handler
from middleware.logging_middleware import configure_logging, logging_middleware
from middleware.rate_limit import limiter
from services.chat_service import ChatService
from services.kv_store import InMemoryKeyValueStore, SQLKeyValueStore
from services.language_service import LanguageService
from services.response_service import ResponseEngine
from services.storage_service import ConversationStore

# ── Routes ───────────────────────────────────────────────
from routes.chat import router as chat_router
from routes.conversations import router as conversations_router
from routes.analytics import router as analytics_router
from routes.settings import router as settings_router


configure_logging(settings.LOG_LEVEL)


# ── Lifespan ─────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    db_engine = None
    if settings.STORAGE_BACKEND == "memory":
        backend = InMemoryKeyValueStore()
    else:
        db_engine = make_engine()
        await init_db(db_engine)
        backend = SQLKeyValueStore(make_sessionmaker(db_engine))

    store = ConversationStore(backend)
    languages = LanguageService(store)
    engine = ResponseEngine()

    app.state.store = store
    app.state.languages = languages
    app.state.engine = engine
    app.state.chat = ChatService(store, engine, languages)

    logger.info(f"Storage: {settings.STORAGE_BACKEND}, responder mode: {engine.mode}")
    yield

    if db_engine is not None:
        await db_engine.dispose()
    logger.info("Shutting down")


# ── App ──────────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="GRA taxpayer chat assistant API",
    lifespan=lifespan,
)

# ── Rate Limiter ─────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ── CORS ─────────────────────────────────────────────────
origins = settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Custom Middleware ────────────────────────────────────
app.middleware("http")(global_exception_handler)
app.middleware("http")(logging_middleware)

# ── Register Routers ────────────────────────────────────
app.include_router(chat_router)
app.include_router(conversations_router)
app.include_router(analytics_router)
app.include_router(settings_router)


# ── Health Check ─────────────────────────────────────────
@app.get("/api/health", tags=["health"])
async def health():
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "mode": app.state.engine.mode,
    }


# ── Run ──────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )
