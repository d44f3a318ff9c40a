from __future__ import annotations

import httpx
from loguru import logger

from budget_bot.core.config import get_settings
from budget_bot.schemas.wa import OutgoingMessage


class WAGateway:
    """Outbound side of the WhatsApp gateway, used by scheduled notifications."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.wa_gateway_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.gateway_timeout

    async def send_text(self, phone: str, text: str) -> None:
        payload = OutgoingMessage(to=phone, message=text)
        url = f"{self.base_url}/send"
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(url, json=payload.model_dump())
            response.raise_for_status()
        logger.debug("Outbound WA message sent", phone=phone, length=len(text))


def normalize_sender(raw: str) -> str:
    """Strip the WhatsApp JID suffix and a leading '+' from a sender id."""
    phone = raw.strip()
    if "@" in phone:
        phone = phone.split("@", 1)[0]
    return phone.lstrip("+")


def is_group_sender(raw: str) -> bool:
    return raw.strip().endswith("@g.us")
