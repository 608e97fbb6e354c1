"""Sort and filter criteria for item and channel collections.

Each criterion set is closed: collections dispatch on the concrete types
below and reject anything else with ``UnsupportedCriterionError``.
"""

from dataclasses import dataclass
from enum import Enum


class ItemSortCriterion(Enum):
    """Orderings available for an item collection."""

    TITLE = "title"
    DATE = "date"
    LENGTH = "length"
    SOURCE = "source"


@dataclass(frozen=True)
class TitleFilter:
    """Keep items whose title contains ``substring``."""

    substring: str


@dataclass(frozen=True)
class DateFilter:
    """Keep items published on or before ``target``."""

    target: str


@dataclass(frozen=True)
class LengthFilter:
    """Keep items whose description is shorter than ``max_length`` characters."""

    max_length: int


@dataclass(frozen=True)
class SourceFilter:
    """Keep items whose source title contains ``substring``."""

    substring: str


ItemFilterCriterion = TitleFilter | DateFilter | LengthFilter | SourceFilter


@dataclass(frozen=True)
class ItemSortType:
    """Sort a channel collection by one of its items' properties."""

    criterion: ItemSortCriterion


@dataclass(frozen=True)
class PublisherSort:
    """Sort a channel collection's channels by channel title."""


PUBLISHER = PublisherSort()

ChannelSortCriterion = ItemSortType | PublisherSort


@dataclass(frozen=True)
class ItemFilterType:
    """Filter a channel collection by one of its items' properties."""

    criterion: ItemFilterCriterion


@dataclass(frozen=True)
class NameFilter:
    """Keep the items of channels whose title contains ``substring``."""

    substring: str


ChannelFilterCriterion = ItemFilterType | NameFilter
