# app/board/notices.py
import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """User-facing notices and confirmation prompts."""

    def error(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    async def confirm(self, title: str, message: str) -> bool: ...


class LogNotifier:
    """Headless notifier: logs notices and answers every prompt the same way."""

    def __init__(self, auto_confirm: bool = True) -> None:
        self.auto_confirm = auto_confirm

    def error(self, message: str) -> None:
        logger.error(message)

    def info(self, message: str) -> None:
        logger.info(message)

    async def confirm(self, title: str, message: str) -> bool:
        logger.info("%s %s -> %s", title, message, "yes" if self.auto_confirm else "no")
        return self.auto_confirm
