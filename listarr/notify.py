"""
Telegram notifications for titles added on request.

Notification is best-effort: failures are logged and never raised.
"""

import logging
import requests
from typing import Union

logger = logging.getLogger('listarr')

TELEGRAM_API_BASE = "https://api.telegram.org"
TELEGRAM_REQUEST_TIMEOUT = 10


class NullNotifier:
    """Notifier used when no credentials are configured."""

    def notify(self, text: str) -> bool:
        logger.debug("Telegram token or chat id not set - skipping notify")
        return False


class TelegramNotifier:
    """Sends HTML-formatted messages to one Telegram chat."""

    def __init__(self, token: str, chat_id: str):
        self.token = token
        self.chat_id = chat_id

    def notify(self, text: str) -> bool:
        """
        Send a message.

        Returns:
            True if Telegram accepted the message, False otherwise
        """
        url = f"{TELEGRAM_API_BASE}/bot{self.token}/sendMessage"
        try:
            response = requests.post(
                url,
                json={"chat_id": self.chat_id, "text": text, "parse_mode": "HTML"},
                timeout=TELEGRAM_REQUEST_TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Telegram notify failed: {e}")
            return False

        if response.status_code >= 400:
            logger.error(f"Telegram notify failed: {response.status_code} {response.text}")
            return False

        logger.info("Sent Telegram notification")
        return True


def create_notifier(settings) -> Union[TelegramNotifier, NullNotifier]:
    """
    Build the notifier for the configured credentials.

    Returns:
        TelegramNotifier, or NullNotifier when token or chat id is missing
    """
    telegram = settings.telegram
    if not telegram.is_configured:
        return NullNotifier()
    return TelegramNotifier(telegram.token, telegram.chat_id)
