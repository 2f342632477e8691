"""Data models for the writers module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.common.models import DEFAULT_CATEGORY, Category, WriterName


def count_words(content: str) -> int:
    """Whitespace-delimited token count of raw content (tags included)."""
    return len(content.split())


@dataclass(frozen=True)
class ArticleOutline:
    """The brief every writer receives for one generation cycle."""
    topic: str
    keywords: tuple[str, ...]
    target_length: int = 1500  # words
    sections: tuple[str, ...] = ()
    category: Category = DEFAULT_CATEGORY

    def __post_init__(self) -> None:
        # Accept lists from callers but store immutable tuples
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "sections", tuple(self.sections))
        if not self.topic.strip():
            raise ValueError("Outline topic must not be empty")
        if not self.keywords:
            raise ValueError("Outline needs at least one keyword")


@dataclass(frozen=True)
class GeneratedArticle:
    """One writer's article for one cycle. Never mutated after creation."""
    title: str
    content: str  # HTML
    writer: WriterName
    word_count: int
    generated_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_content(cls, title: str, content: str, writer: WriterName) -> GeneratedArticle:
        return cls(
            title=title,
            content=content,
            writer=writer,
            word_count=count_words(content),
        )


@dataclass
class ProviderOutcome:
    """Settled result of one provider call: an article or an error."""
    writer: WriterName
    article: Optional[GeneratedArticle] = None
    error: Optional[str] = None
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return self.article is not None
