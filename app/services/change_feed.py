"""
PayDesk - Change Feed

In-process realtime change notification over the payroll collections.

Services publish a ChangeEvent after every committed write; listeners
(the WebSocket endpoint, caches, tests) subscribe per collection and company
and get back a Subscription handle they can cancel.

Listeners receive events only. Anything that needs payroll data (such as the
payroll aggregator) queries a snapshot instead of reading from the feed.
"""

import inspect
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    """Record collections that publish change events."""
    COMPANIES = "companies"
    EMPLOYEES = "employees"
    TRANSACTIONS = "transactions"
    USERS = "users"


class ChangeAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class ChangeEvent:
    """A committed change to one record."""
    collection: Collection
    action: ChangeAction
    company_id: str
    record_id: str
    data: Dict[str, Any] = field(default_factory=dict)
    employee_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "collection": self.collection.value,
            "action": self.action.value,
            "company_id": self.company_id,
            "record_id": self.record_id,
            "employee_id": self.employee_id,
            "data": self.data,
            "timestamp": self.timestamp.isoformat() + "Z",
        }


ChangeCallback = Callable[[ChangeEvent], Union[None, Awaitable[None]]]
ChangePredicate = Callable[[ChangeEvent], bool]


@dataclass
class Subscription:
    """Cancellable handle returned by ChangeFeed.subscribe."""
    feed: "ChangeFeed"
    collection: Optional[Collection]
    company_id: str
    on_change: ChangeCallback
    predicate: Optional[ChangePredicate] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    active: bool = True

    def matches(self, event: ChangeEvent) -> bool:
        if not self.active:
            return False
        if self.collection is not None and event.collection != self.collection:
            return False
        if event.company_id != self.company_id:
            return False
        return self.predicate is None or self.predicate(event)

    def cancel(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self.active:
            self.active = False
            self.feed._remove(self.id)


class ChangeFeed:
    """
    Publish/subscribe hub for committed record changes.

    Callbacks may be plain functions or coroutines. They run one after the
    other for every publish; a callback that raises is logged and skipped.
    """

    _instance: Optional["ChangeFeed"] = None

    def __new__(cls):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        # subscription_id -> Subscription
        self._subscriptions: Dict[str, Subscription] = {}

        self._initialized = True
        logger.info("ChangeFeed initialized")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        collection: Optional[Union[Collection, str]],
        company_id: str,
        on_change: ChangeCallback,
        predicate: Optional[ChangePredicate] = None,
    ) -> Subscription:
        """
        Register a listener.

        Args:
            collection: Collection to watch, or None for every collection
            company_id: Only events of this company are delivered
            on_change: Called with each matching ChangeEvent
            predicate: Optional extra filter
        """
        subscription = Subscription(
            feed=self,
            collection=Collection(collection) if collection is not None else None,
            company_id=company_id,
            on_change=on_change,
            predicate=predicate,
        )
        self._subscriptions[subscription.id] = subscription
        logger.debug(
            f"Subscription {subscription.id} added for "
            f"{collection or '*'} in company {company_id}"
        )
        return subscription

    def _remove(self, subscription_id: str) -> None:
        self._subscriptions.pop(subscription_id, None)
        logger.debug(f"Subscription {subscription_id} cancelled")

    async def publish(self, event: ChangeEvent) -> int:
        """
        Deliver an event to every matching subscriber.

        Returns:
            Number of subscribers the event was delivered to
        """
        targets = [s for s in list(self._subscriptions.values()) if s.matches(event)]

        delivered = 0
        for subscription in targets:
            # cancelled by an earlier callback in this round
            if not subscription.active:
                continue
            try:
                result = subscription.on_change(event)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Change listener {subscription.id} failed on "
                    f"{event.collection.value}/{event.action.value}: {e}",
                    exc_info=e,
                )
        return delivered

    def clear(self) -> None:
        """Drop every subscription."""
        for subscription in list(self._subscriptions.values()):
            subscription.active = False
        self._subscriptions.clear()


# Global instance
change_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    """Get the global change feed instance."""
    return change_feed


async def publish_change(
    collection: Collection,
    action: ChangeAction,
    company_id: str,
    record_id: str,
    data: Optional[Dict[str, Any]] = None,
    employee_id: Optional[str] = None,
) -> None:
    """Shortcut used by services after a commit."""
    await change_feed.publish(
        ChangeEvent(
            collection=collection,
            action=action,
            company_id=company_id,
            record_id=record_id,
            data=data or {},
            employee_id=employee_id,
        )
    )


__all__: List[str] = [
    "Collection",
    "ChangeAction",
    "ChangeEvent",
    "Subscription",
    "ChangeFeed",
    "change_feed",
    "get_change_feed",
    "publish_change",
]
