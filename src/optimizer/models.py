"""Data models for the optimizer module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from src.common.models import WriterName
from src.writers.models import GeneratedArticle


@dataclass(frozen=True)
class ScoreDetails:
    keyword_density: float  # percent of stripped words
    heading_structure: bool
    content_length: int  # raw word count
    avg_sentence_length: float
    paragraph_count: int
    has_call_to_action: bool


@dataclass(frozen=True)
class ArticleScore:
    """Sub-scores and weighted total for one article, all in 0-100."""
    seo_score: int
    readability_score: int
    engagement_score: int
    total_score: int
    details: ScoreDetails

    def summary(self) -> str:
        return (
            f"{self.total_score} (SEO: {self.seo_score}, "
            f"Readability: {self.readability_score}, "
            f"Engagement: {self.engagement_score})"
        )


@dataclass(frozen=True)
class OptimizedArticle:
    """A scored article with its publication extras.

    The underlying GeneratedArticle is kept untouched; links are inserted
    into optimized_content only.
    """
    article: GeneratedArticle
    meta_description: str
    optimized_content: str
    score: ArticleScore
    internal_links: tuple[str, ...] = field(default=())

    @property
    def title(self) -> str:
        return self.article.title

    @property
    def content(self) -> str:
        return self.article.content

    @property
    def writer(self) -> WriterName:
        return self.article.writer

    @property
    def word_count(self) -> int:
        return self.article.word_count

    @property
    def generated_at(self) -> datetime:
        return self.article.generated_at
