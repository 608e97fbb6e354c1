"""Exception hierarchy for the feed aggregator."""


class FeedAggregatorError(Exception):
    """Base class for all feed aggregator errors."""


class MalformedDateError(FeedAggregatorError, ValueError):
    """Raised when a publish date cannot be parsed for a date-based query."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Cannot parse publish date: {value!r}")


class UnsupportedCriterionError(FeedAggregatorError, TypeError):
    """Raised when a sort or filter receives an object outside its criterion set."""


class CollectionPoisonedError(FeedAggregatorError, RuntimeError):
    """Raised when a collection was left inconsistent by a failed operation."""


class FetchError(FeedAggregatorError):
    """Raised when a feed cannot be downloaded."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Failed to fetch feed {url}: {message}")


class ParseError(FeedAggregatorError):
    """Raised when downloaded content cannot be decoded as a feed."""
