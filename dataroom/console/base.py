"""
Admin console building blocks.

Every screen follows the same cycle: load the list, filter/sort it locally,
mutate through the admin client, reload, and raise a toast. Loads are
stamped with a generation number; a response that arrives after a newer
load was started is dropped.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from rich.console import Console

from dataroom.client.admin_api_client import AdminAPIClient
from dataroom.client.errors import APIClientError
from dataroom.core.logging_config import logger

ConfirmCallback = Callable[[str], bool]


class ToastLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Toast:
    message: str
    level: ToastLevel = ToastLevel.INFO
    created_at: datetime = field(default_factory=datetime.now)


class Notifier:
    """
    Transient notifications.

    Toasts are kept in memory for screens and tests to inspect; when a rich
    Console is given they are printed as well.
    """

    STYLES = {
        ToastLevel.SUCCESS: "green",
        ToastLevel.ERROR: "red",
        ToastLevel.INFO: "cyan",
    }

    def __init__(self, console: Optional[Console] = None, max_toasts: int = 20):
        self.console = console
        self.max_toasts = max_toasts
        self.toasts: List[Toast] = []

    def notify(self, message: str, level: ToastLevel = ToastLevel.INFO) -> Toast:
        toast = Toast(message=message, level=level)
        self.toasts.append(toast)
        del self.toasts[:-self.max_toasts]
        if self.console is not None:
            style = self.STYLES[level]
            self.console.print(f"[{style}]{message}[/{style}]")
        return toast

    def success(self, message: str) -> Toast:
        return self.notify(message, ToastLevel.SUCCESS)

    def error(self, message: str) -> Toast:
        return self.notify(message, ToastLevel.ERROR)

    def info(self, message: str) -> Toast:
        return self.notify(message, ToastLevel.INFO)

    @property
    def latest(self) -> Optional[Toast]:
        return self.toasts[-1] if self.toasts else None

    def clear(self) -> None:
        self.toasts.clear()


class ListScreen:
    """Base for admin screens backed by one list endpoint"""

    def __init__(self, client: AdminAPIClient, notifier: Optional[Notifier] = None):
        self.client = client
        self.notifier = notifier or Notifier()
        self.items: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self.last_result: Any = None
        self._generation = 0

    async def fetch(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def load(self) -> List[Dict[str, Any]]:
        self._generation += 1
        generation = self._generation
        self.loading = True

        try:
            items = await self.fetch()
        except APIClientError as e:
            if generation == self._generation:
                self.loading = False
                self.error = e.message
                self.notifier.error(e.message)
            return self.items

        if generation != self._generation:
            logger.debug(f"{type(self).__name__}: dropped stale load {generation}")
            return self.items

        self.items = items
        self.loading = False
        self.error = None
        return self.items

    def reject(self, message: str) -> bool:
        """Client-side validation failure; nothing is sent"""
        self.error = message
        self.notifier.error(message)
        return False

    async def mutate(self, action: Callable[[], Awaitable[Any]], success_message: str) -> bool:
        try:
            self.last_result = await action()
        except APIClientError as e:
            self.error = e.message
            self.notifier.error(e.message)
            return False

        self.error = None
        self.notifier.success(success_message)
        await self.load()
        return True

    async def confirm_and_mutate(
        self,
        confirm: ConfirmCallback,
        prompt: str,
        action: Callable[[], Awaitable[Any]],
        success_message: str,
    ) -> bool:
        if not confirm(prompt):
            return False
        return await self.mutate(action, success_message)

    async def fetch_detail(self, action: Callable[[], Awaitable[Any]]) -> Any:
        """One-off read outside the list; errors are surfaced, not raised"""
        try:
            return await action()
        except APIClientError as e:
            self.error = e.message
            self.notifier.error(e.message)
            return None
