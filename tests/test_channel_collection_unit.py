"""Unit tests for the channel collection."""

import threading

import pytest

from feed_aggregator.channel_collection import ChannelCollection
from feed_aggregator.criteria import (
    PUBLISHER,
    DateFilter,
    ItemFilterType,
    ItemSortCriterion,
    ItemSortType,
    LengthFilter,
    NameFilter,
    TitleFilter,
)
from feed_aggregator.dates import DatePolicy
from feed_aggregator.exceptions import (
    CollectionPoisonedError,
    MalformedDateError,
    UnsupportedCriterionError,
)
from feed_aggregator.models import Channel, Item


def _titles(items):
    return [item.title for item in items]


def _build_collection(date_policy=DatePolicy.STRICT):
    collection = ChannelCollection(date_policy=date_policy)
    collection.push(
        Channel(
            title="c Channel 1",
            items=[
                Item(
                    title="a Item 1",
                    pub_date="2020-01-01",
                    description="Description 1 a",
                ),
                Item(
                    title="c Item 2",
                    pub_date="2020-01-02",
                    description="Description 2 aaaa",
                ),
            ],
        )
    )
    collection.push(
        Channel(
            title="b Channel 2",
            items=[
                Item(
                    title="b Item 3",
                    pub_date="2020-01-04",
                    description="Description 3 aa",
                )
            ],
        )
    )
    collection.push(
        Channel(
            title="a Channel 3",
            items=[
                Item(
                    title="d Item 4",
                    pub_date="2020-01-03",
                    description="Description 4 aaa",
                )
            ],
        )
    )
    return collection


class _ExplodingChannel:
    """Channel stand-in whose items fail halfway through iteration."""

    title = "broken"

    @property
    def items(self):
        yield Item(title="first")
        raise RuntimeError("feed record corrupted")


class TestChannelCollectionPush:
    """Tests for pushing channels."""

    def test_push_updates_channels_and_items(self):
        collection = ChannelCollection()
        assert len(collection.channels()) == 0
        assert len(collection.items()) == 0

        # Empty channel is added but contributes no items
        collection.push(Channel(title="empty"))
        assert len(collection.channels()) == 1
        assert len(collection.items()) == 0

        collection.push(Channel(title="one", items=[Item()]))
        assert len(collection.channels()) == 2
        assert len(collection.items()) == 1
        assert len(collection) == 2

    def test_items_are_flattened_in_channel_then_item_order(self):
        collection = _build_collection()
        assert _titles(collection.items()) == [
            "a Item 1",
            "c Item 2",
            "b Item 3",
            "d Item 4",
        ]

    def test_items_reference_channel_items(self):
        channel = Channel(title="x", items=[Item(title="one"), Item(title="two")])
        collection = ChannelCollection()
        collection.push(channel)

        assert collection.items()[0] is channel.items[0]
        assert collection.items()[1] is channel.items[1]
        assert collection.channels()[0] is channel

    def test_snapshots_do_not_alias_internal_state(self):
        collection = _build_collection()

        collection.channels().clear()
        collection.items().clear()

        assert len(collection.channels()) == 3
        assert len(collection.items()) == 4


class TestChannelCollectionSort:
    """Tests for channel and item level sorting."""

    def test_sort_by_item_properties(self):
        collection = _build_collection()

        collection.sort(ItemSortType(ItemSortCriterion.DATE))
        assert _titles(collection.items()) == [
            "a Item 1",
            "c Item 2",
            "d Item 4",
            "b Item 3",
        ]

        collection.sort(ItemSortType(ItemSortCriterion.TITLE))
        assert _titles(collection.items()) == [
            "a Item 1",
            "b Item 3",
            "c Item 2",
            "d Item 4",
        ]

    def test_sort_by_length(self):
        collection = _build_collection()

        result = collection.sort(ItemSortType(ItemSortCriterion.LENGTH))

        assert _titles(result) == ["a Item 1", "b Item 3", "d Item 4", "c Item 2"]
        assert result == collection.items()

    def test_item_sort_leaves_channel_order(self):
        collection = _build_collection()

        collection.sort(ItemSortType(ItemSortCriterion.TITLE))

        assert [c.title for c in collection.channels()] == [
            "c Channel 1",
            "b Channel 2",
            "a Channel 3",
        ]

    def test_sort_by_publisher(self):
        collection = _build_collection()

        result = collection.sort(PUBLISHER)

        assert [c.title for c in collection.channels()] == [
            "a Channel 3",
            "b Channel 2",
            "c Channel 1",
        ]
        assert _titles(result) == ["d Item 4", "b Item 3", "a Item 1", "c Item 2"]
        assert _titles(collection.items()) == _titles(result)

    def test_publisher_sort_is_stable(self):
        collection = ChannelCollection()
        first = Channel(title="same", items=[Item(title="1")])
        second = Channel(title="same", items=[Item(title="2")])
        collection.push(first)
        collection.push(Channel(title="earlier", items=[Item(title="0")]))
        collection.push(second)

        collection.sort(PUBLISHER)

        channels = collection.channels()
        assert channels[1] is first
        assert channels[2] is second

    def test_push_after_sort_appends_items(self):
        collection = _build_collection()
        collection.sort(ItemSortType(ItemSortCriterion.TITLE))

        collection.push(Channel(title="late", items=[Item(title="0 late")]))

        assert _titles(collection.items())[-1] == "0 late"
        assert len(collection.items()) == 5

    def test_malformed_date_fails_without_poisoning(self):
        collection = _build_collection()
        collection.push(Channel(title="bad", items=[Item(title="bad", pub_date="garbage")]))
        before = collection.items()

        with pytest.raises(MalformedDateError):
            collection.sort(ItemSortType(ItemSortCriterion.DATE))

        assert not collection.poisoned
        assert collection.items() == before

    def test_lenient_policy_sorts_malformed_dates(self):
        collection = _build_collection(date_policy=DatePolicy.LENIENT)
        collection.push(Channel(title="bad", items=[Item(title="bad", pub_date="garbage")]))

        result = collection.sort(ItemSortType(ItemSortCriterion.DATE))

        assert _titles(result)[-1] == "bad"

    def test_unsupported_sort_criterion(self):
        collection = _build_collection()

        with pytest.raises(UnsupportedCriterionError):
            collection.sort(ItemSortCriterion.TITLE)

        assert not collection.poisoned


class TestChannelCollectionFilter:
    """Tests for read-only filtering."""

    def test_filter_by_channel_name(self):
        collection = _build_collection()

        result = collection.filter(NameFilter("b"))

        assert _titles(result) == ["b Item 3"]

    def test_filter_by_channel_name_keeps_channel_order(self):
        collection = _build_collection()

        result = collection.filter(NameFilter("Channel"))

        assert _titles(result) == ["a Item 1", "c Item 2", "b Item 3", "d Item 4"]

    def test_filter_by_item_title(self):
        collection = _build_collection()

        result = collection.filter(ItemFilterType(TitleFilter("b")))

        assert _titles(result) == ["b Item 3"]

    def test_filter_by_item_length(self):
        collection = _build_collection()

        result = collection.filter(ItemFilterType(LengthFilter(17)))

        assert _titles(result) == ["a Item 1", "b Item 3"]

    def test_filter_by_item_date(self):
        collection = _build_collection()

        result = collection.filter(ItemFilterType(DateFilter("2020-01-01")))

        assert _titles(result) == ["a Item 1"]

    def test_filters_leave_collection_unchanged(self):
        collection = _build_collection()

        collection.filter(NameFilter("b"))
        collection.filter(ItemFilterType(TitleFilter("b")))
        collection.filter(ItemFilterType(LengthFilter(17)))
        collection.filter(ItemFilterType(DateFilter("2020-01-01")))

        assert len(collection.channels()) == 3
        assert len(collection.items()) == 4

    def test_unsupported_filter_criterion(self):
        with pytest.raises(UnsupportedCriterionError):
            _build_collection().filter(TitleFilter("b"))


class TestChannelCollectionLocking:
    """Tests for shared use across threads."""

    def test_concurrent_pushes_keep_channels_and_items_consistent(self):
        collection = ChannelCollection()
        producers = 8
        channels_per_producer = 25

        def produce(producer):
            for n in range(channels_per_producer):
                title = f"producer {producer} channel {n}"
                collection.push(
                    Channel(
                        title=title,
                        items=[Item(title=f"{title} item {i}") for i in range(3)],
                    )
                )

        threads = [threading.Thread(target=produce, args=(p,)) for p in range(producers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        channels = collection.channels()
        items = collection.items()
        assert len(channels) == producers * channels_per_producer
        assert len(items) == sum(len(c.items) for c in channels)

        # Each push lands as one contiguous block, in channel order
        expected = [item for channel in channels for item in channel.items]
        assert items == expected

    def test_failure_inside_lock_poisons_collection(self):
        collection = _build_collection()

        with pytest.raises(RuntimeError):
            collection.push(_ExplodingChannel())

        assert collection.poisoned
        with pytest.raises(CollectionPoisonedError):
            collection.items()
        with pytest.raises(CollectionPoisonedError):
            collection.channels()
        with pytest.raises(CollectionPoisonedError):
            collection.push(Channel(title="after"))
