"""Item view collection: sortable, filterable references to feed items."""

from collections.abc import Callable, Iterable, Iterator
from datetime import UTC, datetime
from typing import Any

from .criteria import (
    DateFilter,
    ItemFilterCriterion,
    ItemSortCriterion,
    LengthFilter,
    SourceFilter,
    TitleFilter,
)
from .dates import DatePolicy, parse_pub_date, try_parse_pub_date
from .exceptions import UnsupportedCriterionError
from .models import Item

_EARLIEST = datetime.min.replace(tzinfo=UTC)


class ItemCollection:
    """Ordered references to items owned by their channels.

    The collection never copies an item: every entry is the very object that
    was pushed, so an item view is only meaningful while the channels it was
    built from are. ``sort`` reorders in place; ``filter`` returns a new
    collection and leaves the receiver untouched.
    """

    def __init__(
        self,
        items: Iterable[Item] | None = None,
        date_policy: DatePolicy = DatePolicy.STRICT,
    ):
        self.date_policy = date_policy
        self._items: list[Item] = list(items) if items is not None else []

    def push(self, item: Item) -> None:
        self._items.append(item)

    def items(self) -> list[Item]:
        """Return a snapshot of the current order."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(list(self._items))

    def sort(self, criterion: ItemSortCriterion) -> list[Item]:
        """Reorder the collection by ``criterion`` and return the new order.

        The sort is stable. The new order is computed in full before it
        replaces the stored one, so a sort that raises leaves the collection
        as it was.

        Raises:
            MalformedDateError: If sorting by date under the strict policy and
                a present publish date cannot be parsed
            UnsupportedCriterionError: If ``criterion`` is not an
                ``ItemSortCriterion``
        """
        key = self._sort_key(criterion)
        self._items = sorted(self._items, key=key)
        return self.items()

    def filter(self, criterion: ItemFilterCriterion) -> "ItemCollection":
        """Return a new collection holding the items matching ``criterion``.

        Raises:
            MalformedDateError: If filtering by date under the strict policy
                and the target or a present publish date cannot be parsed
            UnsupportedCriterionError: If ``criterion`` is not an item filter
        """
        predicate = self._predicate(criterion)
        return ItemCollection(
            [item for item in self._items if predicate(item)],
            date_policy=self.date_policy,
        )

    def _sort_key(self, criterion: ItemSortCriterion) -> Callable[[Item], Any]:
        if criterion is ItemSortCriterion.TITLE:
            return lambda item: (item.title is not None, item.title or "")
        if criterion is ItemSortCriterion.DATE:
            return self._date_sort_key()
        if criterion is ItemSortCriterion.LENGTH:
            # Any description, even an empty one, sorts before none at all
            return lambda item: (
                (0, len(item.description)) if item.description is not None else (1, 0)
            )
        if criterion is ItemSortCriterion.SOURCE:
            return lambda item: (item.source_title is not None, item.source_title or "")
        raise UnsupportedCriterionError(f"Unsupported item sort criterion: {criterion!r}")

    def _date_sort_key(self) -> Callable[[Item], Any]:
        if self.date_policy is DatePolicy.STRICT:
            parsed = {
                id(item): parse_pub_date(item.pub_date)
                for item in self._items
                if item.pub_date is not None
            }
        else:
            parsed = {}
            for item in self._items:
                if item.pub_date is None:
                    continue
                value = try_parse_pub_date(item.pub_date)
                if value is None:
                    # One bad date drops the whole sort to raw string order
                    return lambda item: (item.pub_date is not None, item.pub_date or "")
                parsed[id(item)] = value

        return lambda item: (
            (True, parsed[id(item)]) if item.pub_date is not None else (False, _EARLIEST)
        )

    def _predicate(self, criterion: ItemFilterCriterion) -> Callable[[Item], bool]:
        if isinstance(criterion, TitleFilter):
            return lambda item: item.title is not None and criterion.substring in item.title
        if isinstance(criterion, DateFilter):
            return self._date_predicate(criterion.target)
        if isinstance(criterion, LengthFilter):
            return lambda item: (
                item.description is not None
                and len(item.description) < criterion.max_length
            )
        if isinstance(criterion, SourceFilter):
            return lambda item: (
                item.source_title is not None
                and criterion.substring in item.source_title
            )
        raise UnsupportedCriterionError(f"Unsupported item filter criterion: {criterion!r}")

    def _date_predicate(self, target: str) -> Callable[[Item], bool]:
        if self.date_policy is DatePolicy.STRICT:
            limit = parse_pub_date(target)

            def on_or_before(item: Item) -> bool:
                if item.pub_date is None:
                    return False
                return parse_pub_date(item.pub_date) <= limit

            return on_or_before

        lenient_limit = try_parse_pub_date(target)

        def on_or_before_lenient(item: Item) -> bool:
            if item.pub_date is None:
                return False
            value = try_parse_pub_date(item.pub_date)
            if value is None or lenient_limit is None:
                return item.pub_date <= target
            return value <= lenient_limit

        return on_or_before_lenient
