"""
Client for the remote chat webhook (n8n workflow).

Every call returns a ``Success`` or ``Failure``; transport problems never
escape as exceptions.
"""

from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from config import settings
from models.results import Failure, Result, Success
from models.schemas import BotResponse, ChatEnvelope, Stats


class WebhookClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.WEBHOOK_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> Result[Any]:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return Success(response.json())
        except httpx.HTTPStatusError as e:
            return Failure(f"{method} {url} returned HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            return Failure(f"{method} {url} failed: {type(e).__name__}: {e}")
        except ValueError:
            return Failure(f"{method} {url} returned a body that is not JSON")

    async def post_chat(
        self,
        message: str,
        conversation_id: Optional[str],
        language: str,
        user_id: Optional[str],
    ) -> Result[BotResponse]:
        result = await self._request(
            "POST",
            "/chat",
            json={
                "message": message,
                "conversation_id": conversation_id,
                "language": language,
                "user_id": user_id,
            },
        )
        if isinstance(result, Failure):
            return result

        payload = result.value
        if isinstance(payload, dict) and isinstance(payload.get("response"), dict):
            payload["response"].setdefault("language_detected", language)

        try:
            envelope = ChatEnvelope.model_validate(payload)
        except ValidationError as e:
            return Failure(f"Malformed chat reply: {e.error_count()} validation error(s)")

        if not envelope.success or envelope.response is None:
            return Failure("Webhook reported success=false")

        logger.debug(f"Webhook answered conversation {conversation_id}")
        return Success(envelope.response)

    async def fetch_stats(self) -> Result[Stats]:
        result = await self._request("GET", "/stats")
        if isinstance(result, Failure):
            return result
        try:
            return Success(Stats.model_validate(result.value))
        except ValidationError as e:
            return Failure(f"Malformed stats reply: {e.error_count()} validation error(s)")
