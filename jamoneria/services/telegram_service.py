"""
Telegram Service - operator notifications through the Telegram Bot API.
"""

import logging
from typing import Optional, Dict, Any

import httpx

from jamoneria.config import settings
from jamoneria.exceptions import NotificationError

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


class TelegramService:
    """Sends HTML-formatted messages to the fixed admin chat."""

    def __init__(
        self,
        bot_token: Optional[str] = None,
        chat_id: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.bot_token = bot_token if bot_token is not None else settings.telegram_bot_token
        self.chat_id = chat_id if chat_id is not None else settings.admin_chat_id
        self.client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    async def send_message(self, text: str) -> Optional[int]:
        """
        Deliver one message to the admin chat.

        Returns the Telegram message id. Raises NotificationError on any
        failure; there is no retry.
        """
        if not self.is_configured:
            raise NotificationError("Telegram bot token or admin chat id not configured")

        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }

        data = await self._post("sendMessage", payload)

        if not data.get("ok"):
            raise NotificationError(f"Telegram rejected message: {data.get('description')}")

        result = data.get("result")
        return result.get("message_id") if isinstance(result, dict) else None

    async def notify(self, text: str) -> bool:
        """Best-effort send: failures are logged and reported as False."""
        try:
            message_id = await self.send_message(text)
        except NotificationError as e:
            logger.error(f"Telegram notification failed: {e}")
            return False

        logger.info(f"Telegram notification sent: {message_id}")
        return True

    async def _post(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{TELEGRAM_API_URL}/bot{self.bot_token}/{method}"

        try:
            if self.client is not None:
                response = await self.client.post(url, json=payload, timeout=10.0)
            else:
                async with httpx.AsyncClient(timeout=10.0) as client:
                    response = await client.post(url, json=payload)
        except httpx.TimeoutException as e:
            raise NotificationError("Telegram request timeout") from e
        except httpx.HTTPError as e:
            raise NotificationError(f"Telegram transport error: {e.__class__.__name__}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise NotificationError(f"Telegram HTTP error: {response.status_code}") from e

        if not isinstance(data, dict):
            raise NotificationError(f"Telegram returned unexpected payload: {response.status_code}")

        if response.status_code != 200:
            raise NotificationError(
                f"Telegram HTTP error {response.status_code}: {data.get('description')}"
            )

        return data
