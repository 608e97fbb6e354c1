"""
feed_aggregator

Collects RSS/Atom channels into one in-memory collection and answers sort and
filter queries over their items without copying them.

Example
-------
from feed_aggregator import ChannelCollection, FeedSource
from feed_aggregator.criteria import ItemSortCriterion, ItemSortType, NameFilter

collection = ChannelCollection()
for result in FeedSource().get_channels(["https://blog.python.org/feeds/posts/default"]):
    if not isinstance(result, Exception):
        collection.push(result)

newest_last = collection.sort(ItemSortType(ItemSortCriterion.DATE))
python_only = collection.filter(NameFilter("Python"))
"""
from .channel_collection import ChannelCollection
from .dates import DatePolicy
from .item_collection import ItemCollection
from .models import Channel, Item, SafeItem, Source
from .rss import FeedSource

__all__ = [
    "Channel",
    "ChannelCollection",
    "DatePolicy",
    "FeedSource",
    "Item",
    "ItemCollection",
    "SafeItem",
    "Source",
]
