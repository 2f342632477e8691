"""Data models for the topics module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.common.models import DEFAULT_CATEGORY, Category, Topic
from src.writers.models import ArticleOutline


@dataclass
class SEOTopic:
    """A candidate blog topic with the outline its article will be written from.

    ``keywords`` is the wider set used for scoring; ``outline.keywords`` is
    the subset handed to the writers.
    """
    topic_name: str
    category: Category
    keywords: list[str]
    seo_difficulty: int
    related_products: list[str]
    outline: ArticleOutline
    topic_id: Optional[int] = field(default=None)

    @property
    def priority(self) -> int:
        """Easier topics with more linkable products rank higher."""
        return (100 - self.seo_difficulty) + len(self.related_products) * 10

    def to_record(self) -> Topic:
        return Topic(
            topic_name=self.topic_name,
            category=self.category,
            keywords=self.keywords,
            seo_difficulty=self.seo_difficulty,
            related_products=self.related_products,
            outline=list(self.outline.sections),
            target_length=self.outline.target_length,
        )

    @classmethod
    def from_record(cls, record: Topic) -> SEOTopic:
        """Rebuild a topic from the datastore; the outline uses all stored keywords."""
        keywords = list(record.keywords) or [record.topic_name]
        return cls(
            topic_name=record.topic_name,
            category=record.category,
            keywords=keywords,
            seo_difficulty=record.seo_difficulty,
            related_products=list(record.related_products),
            outline=ArticleOutline(
                topic=record.topic_name,
                keywords=tuple(keywords),
                target_length=record.target_length,
                sections=tuple(record.outline),
                category=record.category,
            ),
            topic_id=record.id,
        )


class TopicSeed(BaseModel):
    """One entry of a topic seed file (fixtures/blog_topics.json)."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    keywords: list[str] = Field(min_length=1)
    category: Category = DEFAULT_CATEGORY
    seo_difficulty: int = Field(default=50, alias="seoDifficulty", ge=0, le=100)
    related_products: list[str] = Field(default_factory=list, alias="relatedProducts")
    outline: list[str] = Field(default_factory=list)
    target_length: int = Field(default=1800, alias="targetLength", gt=0)

    def to_record(self) -> Topic:
        return Topic(
            topic_name=self.title,
            category=self.category,
            keywords=self.keywords,
            seo_difficulty=self.seo_difficulty,
            related_products=self.related_products,
            outline=self.outline,
            target_length=self.target_length,
        )
