# groupchat/infrastructure/event_dispatcher.py
import logging
from collections import defaultdict
from collections.abc import Callable

from groupchat.domain.events import Event
from groupchat.domain.exceptions import StoreError


class EventDispatcher:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.handlers: dict[str, list[Callable]] = defaultdict(list)
        self.logger = logger or logging.getLogger("GroupChatAPI")

    def register(self, event_type: str, handler: Callable) -> None:
        self.handlers[event_type].append(handler)

    async def dispatch(self, event: Event) -> None:
        # Notifications are fire-and-forget: a broker outage must never
        # abort the state change that produced the event.
        event_type = event.__class__.__name__
        for handler in self.handlers[event_type]:
            try:
                await handler(event)
            except StoreError as e:
                self.logger.warning(f"Failed to publish {event_type}: {e.detail}")
