"""
Event System Module

Publish/subscribe dispatcher for ledger events. Presentation layers
subscribe to render confirmations; handler failures are logged and never
break the ledger operation that published the event.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid
import logging
from threading import RLock


class LedgerEvent(Enum):
    """Events raised by accounts and the registry"""
    ACCOUNT_OPENED = "account.opened"
    DEPOSIT_POSTED = "account.deposit_posted"
    WITHDRAWAL_POSTED = "account.withdrawal_posted"
    OVERDRAFT_FEE_CHARGED = "account.overdraft_fee_charged"
    INTEREST_ACCRUED = "account.interest_accrued"
    OPERATION_DECLINED = "account.operation_declined"


@dataclass
class EventPayload:
    """Payload for ledger events"""
    event_type: LedgerEvent
    account_id: str
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'event_type': self.event_type.value,
            'account_id': self.account_id,
            'data': self.data,
            'timestamp': self.timestamp.isoformat(),
            'event_id': self.event_id
        }


EventHandler = Callable[[EventPayload], None]


class EventDispatcher:
    """Central event dispatcher"""

    def __init__(self):
        self._handlers: Dict[LedgerEvent, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []
        self._lock = RLock()
        self.logger = logging.getLogger("bank_ledger.events")

    def subscribe(self, event_type: LedgerEvent, handler: EventHandler) -> None:
        """Subscribe to a specific event type"""
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            self.logger.debug(f"Subscribed handler {_handler_name(handler)} to {event_type.value}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to ALL events"""
        with self._lock:
            self._global_handlers.append(handler)
            self.logger.debug(f"Subscribed global handler {_handler_name(handler)}")

    def unsubscribe(self, event_type: LedgerEvent, handler: EventHandler) -> None:
        """Unsubscribe from a specific event type"""
        with self._lock:
            try:
                self._handlers.get(event_type, []).remove(handler)
            except ValueError:
                self.logger.warning(
                    f"Handler {_handler_name(handler)} was not subscribed to {event_type.value}"
                )

    def unsubscribe_all(self, handler: EventHandler) -> None:
        """Remove a global handler"""
        with self._lock:
            try:
                self._global_handlers.remove(handler)
            except ValueError:
                self.logger.warning(f"Global handler {_handler_name(handler)} was not subscribed")

    def publish(self, event: EventPayload) -> None:
        """Publish event to all subscribers"""
        with self._lock:
            handlers = list(self._handlers.get(event.event_type, [])) + list(self._global_handlers)

        self.logger.debug(f"Publishing event {event.event_type.value} for account {event.account_id}")
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self.logger.error(
                    f"Error in event handler {_handler_name(handler)} for {event.event_type.value}: {e}"
                )

    def clear(self) -> None:
        """Clear all handlers"""
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()

    def get_handler_count(self, event_type: Optional[LedgerEvent] = None) -> int:
        """Get count of handlers for a specific event type or all"""
        with self._lock:
            if event_type:
                return len(self._handlers.get(event_type, []))
            return sum(len(h) for h in self._handlers.values()) + len(self._global_handlers)


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__name__", repr(handler))
