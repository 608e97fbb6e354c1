"""Configuration management for the feed aggregator."""

import json
import os
from dataclasses import dataclass
from pathlib import Path

from .dates import DatePolicy


@dataclass
class FetchConfig:
    """Configuration for downloading feeds."""

    timeout: int = 30
    max_workers: int = 4


class Config:
    """Main configuration manager."""

    FEEDS_FILE = "feeds.json"

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.feeds_file = os.getenv("FEEDS_FILE", self.FEEDS_FILE)
        self.timeout = self._positive_int("FEED_TIMEOUT", 30)
        self.max_workers = self._positive_int("MAX_WORKERS", 4)
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        policy = os.getenv("DATE_POLICY", DatePolicy.STRICT.value).lower()
        try:
            self.date_policy = DatePolicy(policy)
        except ValueError:
            raise ValueError(
                f"DATE_POLICY must be one of "
                f"{[p.value for p in DatePolicy]}, got {policy!r}"
            ) from None

    @staticmethod
    def _positive_int(name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or raw == "":
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {raw!r}") from None
        if value < 1:
            raise ValueError(f"{name} must be positive, got {value}")
        return value

    def get_feed_urls(self) -> list[str]:
        """Get enabled feed URLs from the feeds file."""
        feeds_file = Path(self.feeds_file)
        if not feeds_file.exists():
            raise FileNotFoundError(f"Feeds file not found: {self.feeds_file}")

        try:
            with open(feeds_file, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in feeds file: {e}") from e

        feeds = data.get("feeds", []) if isinstance(data, dict) else []
        enabled_urls = [
            feed["url"]
            for feed in feeds
            if isinstance(feed, dict) and feed.get("enabled", True) and "url" in feed
        ]

        if not enabled_urls:
            raise ValueError(f"No enabled feeds found in {self.feeds_file}")

        return enabled_urls

    def get_fetch_config(self) -> FetchConfig:
        """Get feed download configuration."""
        return FetchConfig(timeout=self.timeout, max_workers=self.max_workers)
