"""Aggregation pipeline: configured feeds into one shared channel collection."""

import concurrent.futures as _fut
from dataclasses import dataclass, field
from datetime import UTC, datetime

from .channel_collection import ChannelCollection
from .config import Config
from .logging_config import create_execution_logger
from .rss import FeedSource


@dataclass
class AggregationResult:
    """Outcome of one aggregation run."""

    collection: ChannelCollection
    feeds_processed: int = 0
    errors: list[str] = field(default_factory=list)


def aggregate(
    config: Config | None = None,
    execution_id: str | None = None,
    feed_source: FeedSource | None = None,
) -> AggregationResult:
    """Fetch every configured feed and push the channels into one collection.

    Feeds are downloaded on a thread pool; each worker only takes the
    collection lock to push its finished channel. A feed that fails is logged
    and recorded in ``errors`` without stopping the others, in the order the
    feeds complete.

    Raises:
        FileNotFoundError: If the feeds file is missing
        ValueError: If the feeds file is invalid or lists no enabled feed
    """
    if not execution_id:
        execution_id = f"aggregate_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    logger = create_execution_logger("pipeline", execution_id)
    config = config or Config()

    try:
        feed_urls = config.get_feed_urls()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot read feed list: {e}", error=str(e))
        raise

    logger.log_execution_start(feed_count=len(feed_urls))

    fetch_config = config.get_fetch_config()
    source = feed_source or FeedSource(
        timeout=fetch_config.timeout, execution_id=execution_id
    )
    result = AggregationResult(
        collection=ChannelCollection(
            date_policy=config.date_policy, execution_id=execution_id
        )
    )

    def _load(feed_url: str) -> None:
        channel = source.get_channel(feed_url)
        result.collection.push(channel)

    max_workers = max(1, min(fetch_config.max_workers, len(feed_urls)))
    with _fut.ThreadPoolExecutor(max_workers=max_workers) as ex:
        futures = {ex.submit(_load, url): url for url in feed_urls}
        for fu in _fut.as_completed(futures):
            feed_url = futures[fu]
            try:
                fu.result()
                result.feeds_processed += 1
            except Exception as e:
                error_msg = f"Failed to process feed {feed_url}: {e}"
                logger.error(error_msg, feed_url=feed_url, error=str(e))
                result.errors.append(error_msg)

    metrics = {
        "feeds_processed": result.feeds_processed,
        "channels": len(result.collection),
        "items": len(result.collection.items()),
        "errors": len(result.errors),
    }
    logger.log_metrics(metrics)
    logger.log_execution_end(success=not result.errors, metrics=metrics)

    return result
