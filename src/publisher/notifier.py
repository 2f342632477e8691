"""Owner notifications.

Messages go to a JSON webhook when one is configured, otherwise only to the
log. A failed delivery is logged and reported as False; it never breaks the
operation that triggered it.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from src.common.config import NotificationSettings, settings

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(
        self,
        config: Optional[NotificationSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or settings.notifications
        self._session = session or requests.Session()

    def notify(self, title: str, content: str) -> bool:
        """Send one notification. Returns True when delivered (or logged only)."""
        logger.info("Notification: %s | %s", title, content.replace("\n", " "))
        if not self.config.webhook_url:
            return True

        try:
            resp = self._session.post(
                self.config.webhook_url,
                json={"title": title, "content": content},
                timeout=self.config.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Notification webhook failed: %s", exc)
            return False
        return True
