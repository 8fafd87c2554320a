"""
Change Bus

Routes storage writes to the store instances that did NOT perform them.

Delivery behavior:
1. Look up subscriptions by storage key
2. Skip subscriptions whose context is the event's origin
3. Execute listeners sequentially, in subscription order
4. Catch listener exceptions per listener and log them
5. Continue to the next listener

The bus never reads or writes storage and never interprets the value.
Ordering is per writer only; across writers the last write wins.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from farmledger.audit import AuditLogger
from farmledger.models.audit import AuditEventBuilder


# Origin used for writes detected from outside this process
EXTERNAL_ORIGIN = "external"


class StorageEvent(BaseModel):
    """A persisted value changed. `new_value` is None when the key was removed."""
    model_config = ConfigDict(frozen=True)

    key: str
    new_value: Optional[str]
    origin: str


StorageListener = Callable[[StorageEvent], None]


@dataclass(eq=False)
class _Subscription:
    key: str
    listener: StorageListener
    context_id: str


class ChangeBus:
    """
    In-process publish/subscribe channel for storage changes.

    One bus is shared by every backend and store that represent the same
    physical storage. It is created and passed around explicitly.
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._subscriptions: list[_Subscription] = []
        self._audit = audit_logger or AuditLogger()

    def subscribe(
        self,
        key: str,
        listener: StorageListener,
        context_id: str,
    ) -> Callable[[], None]:
        """
        Register a listener for changes to `key` made by other contexts.

        Returns:
            A callable that removes the subscription. Calling it more
            than once is harmless.
        """
        subscription = _Subscription(key=key, listener=listener, context_id=context_id)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def publish(self, event: StorageEvent) -> int:
        """
        Deliver an event to every other context subscribed to its key.

        Returns:
            Number of listeners that handled the event without raising.
        """
        delivered = 0
        # Listeners may unsubscribe while we deliver
        for subscription in list(self._subscriptions):
            if subscription.key != event.key:
                continue
            if subscription.context_id == event.origin:
                continue
            try:
                subscription.listener(event)
                delivered += 1
            except Exception as e:
                listener_name = getattr(
                    subscription.listener, "__qualname__", repr(subscription.listener)
                )
                self._audit.log(
                    AuditEventBuilder.listener_failed(
                        listener=listener_name,
                        error=str(e),
                        context_id=subscription.context_id,
                    )
                )
        return delivered

    def subscriber_count(self, key: Optional[str] = None) -> int:
        if key is None:
            return len(self._subscriptions)
        return sum(1 for s in self._subscriptions if s.key == key)
