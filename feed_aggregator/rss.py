"""Feed source: downloads RSS/Atom feeds and decodes them into channels."""

import feedparser
import requests

from .exceptions import FeedAggregatorError, FetchError, ParseError
from .logging_config import create_execution_logger
from .models import Channel, Item, Source


class FeedSource:
    """Fetches feed documents over HTTP and decodes them with feedparser."""

    def __init__(self, timeout: int = 30, execution_id: str | None = None):
        """Initialize FeedSource with configuration.

        Args:
            timeout: HTTP request timeout in seconds
            execution_id: Execution ID for logging context
        """
        self.timeout = timeout
        self.logger = create_execution_logger("feed_source", execution_id)
        self.session = requests.Session()
        self.session.headers.update(
            {"User-Agent": "feed-aggregator/1.0 (RSS/Atom aggregator)"}
        )

        self.logger.debug("FeedSource initialized", timeout=timeout)

    def get_channels(self, feed_urls: list[str]) -> list[Channel | FeedAggregatorError]:
        """Fetch and decode several feeds, one result per URL in URL order.

        A feed that fails yields its error in place of a channel so the
        remaining feeds are still processed.
        """
        results: list[Channel | FeedAggregatorError] = []
        for feed_url in feed_urls:
            try:
                results.append(self.get_channel(feed_url))
            except FeedAggregatorError as e:
                self.logger.error(
                    f"Failed to load feed {feed_url}: {e}",
                    feed_url=feed_url,
                    error=str(e),
                )
                results.append(e)
        return results

    def get_channel(self, feed_url: str) -> Channel:
        """Fetch a single feed and decode it into a channel.

        Raises:
            FetchError: If the download fails
            ParseError: If the document is not a feed
        """
        channel = self.parse(self.fetch(feed_url))
        self.logger.log_feed_processing(feed_url, len(channel.items))
        return channel

    def fetch(self, feed_url: str) -> str:
        """Download a feed document.

        Raises:
            FetchError: If the request fails or returns an error status
        """
        self.logger.info("Downloading feed content", feed_url=feed_url)
        try:
            response = self.session.get(feed_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(feed_url, str(e)) from e

        self.logger.info(
            "Feed downloaded successfully",
            feed_url=feed_url,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return response.text

    def parse(self, raw_text: str) -> Channel:
        """Decode a feed document into a channel.

        Raises:
            ParseError: If the document is not recognizable as RSS or Atom
        """
        feed = feedparser.parse(raw_text)
        title = feed.feed.get("title")
        bozo_exception = getattr(feed, "bozo_exception", None)

        if not feed.get("version") and not feed.entries:
            raise ParseError(f"Not a valid RSS/Atom document: {bozo_exception}")

        if feed.bozo:
            self.logger.warning(
                f"Feed parsing warning: {bozo_exception}",
                channel_title=title,
                bozo_exception=str(bozo_exception),
            )

        return Channel(
            title=title or "",
            link=feed.feed.get("link"),
            description=feed.feed.get("subtitle") or feed.feed.get("description"),
            items=tuple(self.normalize_item(entry) for entry in feed.entries),
        )

    def normalize_item(self, entry: dict) -> Item:
        """Map a feedparser entry onto an item, keeping absent fields as None."""
        description = entry.get("summary")
        if description is None:
            description = entry.get("description")

        pub_date = entry.get("published") or entry.get("updated")

        source = None
        raw_source = entry.get("source")
        if raw_source:
            source = Source(title=raw_source.get("title"), url=raw_source.get("href"))

        return Item(
            title=entry.get("title"),
            link=entry.get("link"),
            description=description,
            pub_date=pub_date,
            author=entry.get("author"),
            source=source,
        )
