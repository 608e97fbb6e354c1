"""Channel collection: thread-safe channel storage with a derived item view."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from .criteria import (
    ChannelFilterCriterion,
    ChannelSortCriterion,
    ItemFilterType,
    ItemSortType,
    NameFilter,
    PublisherSort,
)
from .dates import DatePolicy
from .exceptions import (
    CollectionPoisonedError,
    FeedAggregatorError,
    UnsupportedCriterionError,
)
from .item_collection import ItemCollection
from .logging_config import create_execution_logger
from .models import Channel, Item


@dataclass
class _CollectionState:
    channels: list[Channel] = field(default_factory=list)
    items: ItemCollection = field(default_factory=ItemCollection)


class ChannelCollection:
    """Channels pushed by any number of producers, queryable as one item view.

    A single lock guards the channel list together with the item view derived
    from it, so readers never see one updated without the other. The item
    view holds the channels' own item objects; ``channels()`` and ``items()``
    hand out snapshot lists of those objects.

    Channels can only be appended or reordered, never removed.
    """

    def __init__(
        self,
        date_policy: DatePolicy = DatePolicy.STRICT,
        execution_id: str | None = None,
    ):
        self.date_policy = date_policy
        self.logger = create_execution_logger("channel_collection", execution_id)
        self._lock = threading.Lock()
        self._state = _CollectionState(items=ItemCollection(date_policy=date_policy))
        self._poisoned = False

    @contextmanager
    def _locked(self) -> Iterator[_CollectionState]:
        """Hold the lock for one composite operation.

        Query errors are raised before any mutation and leave the state
        usable. Any other exception escaping while the lock is held may have
        left channels and items out of step, so the collection is poisoned.
        """
        with self._lock:
            if self._poisoned:
                raise CollectionPoisonedError(
                    "Channel collection is unusable after a failed operation"
                )
            try:
                yield self._state
            except FeedAggregatorError:
                raise
            except BaseException:
                self._poisoned = True
                self.logger.error("Channel collection poisoned by failed operation")
                raise

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def push(self, channel: Channel) -> None:
        """Append a channel and its items in one critical section."""
        with self._locked() as state:
            for item in channel.items:
                state.items.push(item)
            state.channels.append(channel)
        self.logger.log_channel_pushed(channel.title, len(channel.items))

    def channels(self) -> list[Channel]:
        with self._locked() as state:
            return list(state.channels)

    def items(self) -> list[Item]:
        with self._locked() as state:
            return state.items.items()

    def __len__(self) -> int:
        with self._locked() as state:
            return len(state.channels)

    def sort(self, criterion: ChannelSortCriterion) -> list[Item]:
        """Sort by an item property or by publisher and return the item order.

        ``ItemSortType`` reorders the item view and leaves channel order
        alone. ``PUBLISHER`` reorders the channels by title and rebuilds the
        item view in the new channel order.
        """
        with self._locked() as state:
            if isinstance(criterion, ItemSortType):
                result = state.items.sort(criterion.criterion)
            elif isinstance(criterion, PublisherSort):
                state.channels = sorted(state.channels, key=lambda channel: channel.title)
                state.items = self._flatten(state.channels)
                result = state.items.items()
            else:
                raise UnsupportedCriterionError(
                    f"Unsupported channel sort criterion: {criterion!r}"
                )
        self.logger.debug("Sorted channel collection", criterion=repr(criterion))
        return result

    def filter(self, criterion: ChannelFilterCriterion) -> list[Item]:
        """Return the items matching ``criterion`` without modifying the collection.

        ``NameFilter`` keeps every item of the channels whose title contains
        the substring, in channel order.
        """
        with self._locked() as state:
            if isinstance(criterion, ItemFilterType):
                result = state.items.filter(criterion.criterion).items()
            elif isinstance(criterion, NameFilter):
                matching = [
                    channel
                    for channel in state.channels
                    if criterion.substring in channel.title
                ]
                result = self._flatten(matching).items()
            else:
                raise UnsupportedCriterionError(
                    f"Unsupported channel filter criterion: {criterion!r}"
                )
        self.logger.debug(
            f"Filtered channel collection: {len(result)} items matched",
            criterion=repr(criterion),
        )
        return result

    def _flatten(self, channels: list[Channel]) -> ItemCollection:
        items = ItemCollection(date_policy=self.date_policy)
        for channel in channels:
            for item in channel.items:
                items.push(item)
        return items
