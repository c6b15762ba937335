"""
Normalized feed documents.

FeedDocument and FeedEntry are built per fetch from feedparser output and
discarded once the feed has been synchronized.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FeedEntry:
    """
    Normalized RSS/Atom entry.

    Attributes
    ----------
    title : str
        Entry title.
    link : str
        Entry URL.
    published : str
        Publication date, as written in the feed.
    description : str
        Entry summary or content.
    author_name : str
        Author name.
    author_email : str
        Author email address.
    guid : str
        Entry id/GUID as published by the feed.
    """

    title: str = ""
    link: str = ""
    published: str = ""
    description: str = ""
    author_name: str = ""
    author_email: str = ""
    guid: str = ""

    @property
    def identifier(self) -> str:
        """Watermark identity of the entry: its link, or its GUID if it has no link."""
        return self.link or self.guid

    @classmethod
    def from_feedparser(cls, entry: Any) -> "FeedEntry":
        """
        Create a FeedEntry from a feedparser entry.

        Parameters
        ----------
        entry : Any
            A feedparser entry object.

        Returns
        -------
        FeedEntry
            Normalized entry instance.
        """
        # Prefer the summary, fall back to full content
        description = entry.get("summary", "") or ""
        if not description and entry.get("content"):
            description = entry.get("content")[0].get("value", "") or ""

        author_detail = entry.get("author_detail") or {}
        author_name = author_detail.get("name", "") or entry.get("author", "") or ""
        author_email = author_detail.get("email", "") or ""

        return cls(
            title=entry.get("title", "") or "",
            link=entry.get("link", "") or "",
            published=entry.get("published", "") or entry.get("updated", "") or "",
            description=description,
            author_name=author_name,
            author_email=author_email,
            guid=entry.get("id", "") or "",
        )


@dataclass
class FeedDocument:
    """
    Normalized feed with its entries, newest first.

    Attributes
    ----------
    title : str
        Feed title.
    description : str
        Feed description/subtitle.
    language : str
        Feed language code.
    entries : list[FeedEntry]
        Entries in feed order; ``entries[0]`` is the most recent.
    """

    title: str = ""
    description: str = ""
    language: str = ""
    entries: list[FeedEntry] = field(default_factory=list)

    @property
    def newest(self) -> FeedEntry:
        """Return the most recent entry."""
        return self.entries[0]

    @classmethod
    def from_feedparser(cls, parsed: Any) -> "FeedDocument":
        """
        Create a FeedDocument from a feedparser result.

        Parameters
        ----------
        parsed : Any
            Return value of ``feedparser.parse``.

        Returns
        -------
        FeedDocument
            Normalized document. May have no entries.
        """
        feed = parsed.get("feed") or {}
        return cls(
            title=feed.get("title", "") or "",
            description=feed.get("subtitle", "") or feed.get("description", "") or "",
            language=feed.get("language", "") or "",
            entries=[FeedEntry.from_feedparser(entry) for entry in parsed.get("entries", [])],
        )
