"""Shared Pydantic data models for the SEO content agent.

Enums used across writers, optimizer and publisher live here, together with
the records persisted by the datastore. All modules import from here.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


# === Enums ===

class WriterName(str, Enum):
    """LLM writers, in provider-priority order."""
    GEMINI = "gemini"
    CHATGPT = "chatgpt"
    CLAUDE = "claude"


class Category(str, Enum):
    """Blog content categories."""
    REACTIVE_POWER = "kompensacja_mocy_biernej"
    SVG_COMPENSATORS = "kompensatory_svg"


DEFAULT_CATEGORY = Category.REACTIVE_POWER


class PostStatus(str, Enum):
    """Publication status of a blog post."""
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"
    FAILED = "failed"


class ApprovalStatus(str, Enum):
    """Editorial approval status of a blog post."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TopicStatus(str, Enum):
    PENDING = "pending"
    USED = "used"
    ARCHIVED = "archived"


class LogStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    RETRYING = "retrying"


class SocialPlatform(str, Enum):
    """Social channels that receive promotional posts."""
    LINKEDIN = "linkedin"
    FACEBOOK = "facebook"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"


class SocialPostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    FAILED = "failed"


# === Persisted records ===

class BlogPost(BaseModel):
    """A generated article stored for approval and publication."""
    id: int | None = None
    odoo_post_id: int | None = None
    title: str
    content: str
    meta_description: str = ""
    keywords: list[str] = Field(default_factory=list)
    ai_writer: WriterName
    seo_score: int = Field(default=0, ge=0, le=100)
    readability_score: int = Field(default=0, ge=0, le=100)
    engagement_score: int = Field(default=0, ge=0, le=100)
    total_score: int = Field(default=0, ge=0, le=100)
    status: PostStatus = PostStatus.DRAFT
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    published_date: datetime | None = None
    created_at: datetime | None = None


class Topic(BaseModel):
    """An SEO topic waiting to be turned into an article."""
    id: int | None = None
    topic_name: str
    category: Category = DEFAULT_CATEGORY
    keywords: list[str] = Field(default_factory=list)
    seo_difficulty: int = Field(default=50, ge=0, le=100)
    related_products: list[str] = Field(default_factory=list)
    outline: list[str] = Field(default_factory=list, description="Section headings")
    target_length: int = 1800
    status: TopicStatus = TopicStatus.PENDING
    created_at: datetime | None = None
    used_at: datetime | None = None


class PublicationLogEntry(BaseModel):
    """One publication attempt or failed cycle."""
    id: int | None = None
    post_id: int | None = None
    status: LogStatus
    error_message: str | None = None
    published_at: datetime | None = None


class SocialMediaPost(BaseModel):
    """A promotional post drafted for one social channel."""
    id: int | None = None
    blog_post_id: int
    platform: SocialPlatform
    content: str
    hashtags: list[str] = Field(default_factory=list)
    odoo_post_id: int | None = None
    status: SocialPostStatus = SocialPostStatus.DRAFT
    published_at: datetime | None = None
    created_at: datetime | None = None
