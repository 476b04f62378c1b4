"""Collection subscription - snapshot + unsubscribe capability held by the presentation layer."""

from typing import Awaitable, Callable, Optional

from src.models.listing import ListingRecord
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

Loader = Callable[[], Awaitable[list[ListingRecord]]]
Listener = Callable[[list[ListingRecord]], None]


class CollectionSubscription:
    """
    Deliver fresh snapshots of a collection to a listener until unsubscribed.

    Each refresh stores the loaded records as an immutable tuple and hands the
    listener a new plain list, so consumers never share or mutate the stored
    snapshot.
    """

    def __init__(self, loader: Loader, listener: Listener, name: Optional[str] = None):
        self._loader = loader
        self._listener = listener
        self._snapshot: tuple[ListingRecord, ...] = ()
        self._active = True
        self._version = 0
        self.name = name or getattr(loader, "__name__", "collection")

    @property
    def active(self) -> bool:
        return self._active

    @property
    def version(self) -> int:
        """Number of snapshots delivered so far."""
        return self._version

    @property
    def snapshot(self) -> list[ListingRecord]:
        return list(self._snapshot)

    async def refresh(self) -> bool:
        """Load a new snapshot and notify the listener. Returns False once unsubscribed."""
        if not self._active:
            return False

        records = await self._loader()

        # Unsubscribed while the load was in flight
        if not self._active:
            logger.debug("Snapshot dropped after unsubscribe", subscription=self.name)
            return False

        self._snapshot = tuple(records)
        self._version += 1
        self._listener(list(self._snapshot))
        logger.debug(
            "Snapshot delivered",
            subscription=self.name,
            record_count=len(self._snapshot),
            version=self._version,
        )
        return True

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            logger.debug("Subscription closed", subscription=self.name)


async def subscribe(loader: Loader, listener: Listener, name: Optional[str] = None) -> CollectionSubscription:
    """Create a subscription and deliver its first snapshot."""
    subscription = CollectionSubscription(loader, listener, name=name)
    await subscription.refresh()
    return subscription
