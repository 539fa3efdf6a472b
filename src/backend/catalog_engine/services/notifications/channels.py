"""
Presentation side channels: transient notifications and clipboard.

Both are fire-and-forget from the engine's point of view.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    message: str
    is_error: bool = False


class Notifier(ABC):
    """Transient notification ("toast") channel"""

    @abstractmethod
    def notify(self, message: str, is_error: bool = False) -> None:
        pass


class QueuedNotifier(Notifier):
    """Collects notifications until the host drains them"""

    def __init__(self):
        self._pending: List[Notification] = []

    def notify(self, message: str, is_error: bool = False) -> None:
        self._pending.append(Notification(message=message, is_error=is_error))
        logger.debug(f"Notification queued (error={is_error}): {message}")

    def drain(self) -> List[Notification]:
        pending, self._pending = self._pending, []
        return pending


class Clipboard(ABC):
    @abstractmethod
    async def copy(self, text: str) -> None:
        """Raises on failure"""
        pass


class QueuedClipboard(Clipboard):
    """Records copied values for the host to apply"""

    def __init__(self):
        self.copied: List[str] = []

    async def copy(self, text: str) -> None:
        self.copied.append(text)
