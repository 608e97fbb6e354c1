"""Data models for the feed aggregator."""

from dataclasses import dataclass, field

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class Source:
    """Publisher an item was originally taken from."""

    title: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class Item:
    """Represents a single RSS/Atom feed item.

    Every field is optional because feeds in the wild omit any of them.
    Items are shared by reference between channels and item views and are
    never modified after construction.
    """

    title: str | None = None
    link: str | None = None
    description: str | None = None
    pub_date: str | None = None
    author: str | None = None
    source: Source | None = None

    @property
    def source_title(self) -> str | None:
        if self.source is None:
            return None
        return self.source.title


@dataclass(frozen=True)
class Channel:
    """A named feed holding its items in original feed order."""

    title: str
    items: tuple[Item, ...] = field(default_factory=tuple)
    link: str | None = None
    description: str | None = None

    def __post_init__(self):
        # Accept any iterable but freeze membership
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class SafeItem:
    """Display-safe projection of an item with placeholders for absent fields."""

    title: str
    link: str
    description: str
    pub_date: str
    author: str
    source: str

    @classmethod
    def from_item(cls, item: Item) -> "SafeItem":
        description = "No description"
        if item.description is not None:
            description = clean_html_content(item.description) or description

        return cls(
            title=item.title if item.title is not None else "No title",
            link=item.link if item.link is not None else "No link",
            description=description,
            pub_date=item.pub_date if item.pub_date is not None else "No pub_date",
            author=item.author if item.author is not None else "No author",
            source=item.source_title if item.source_title is not None else "No source",
        )


def clean_html_content(content: str | None) -> str:
    """Remove HTML tags from content and normalize whitespace.

    Args:
        content: Raw content that may contain HTML

    Returns:
        Clean text content without HTML tags
    """
    if not content:
        return ""

    if "<" not in content and ">" not in content:
        return " ".join(content.split())

    soup = BeautifulSoup(content, "html.parser")

    for script in soup(["script", "style"]):
        script.decompose()

    text = soup.get_text(separator=" ")

    # Stray brackets survive get_text()
    text = text.replace("<", "").replace(">", "")

    return " ".join(text.split())
