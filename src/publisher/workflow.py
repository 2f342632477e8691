"""Approval workflow for generated articles.

Lifecycle of a stored post (status / approval_status):

    draft/pending --approve--> draft/approved --publish--> published/approved
    draft/pending --reject---> draft/rejected  (terminal)

Any other transition raises InvalidStateError before anything external is
touched; in particular a post that is not approved never reaches the CMS.

Usage:
    workflow = ArticleWorkflow()
    await workflow.approve(post_id)
    odoo_id = await workflow.publish(post_id)
"""

from __future__ import annotations

import asyncio
import re
from datetime import datetime
from typing import Callable, Optional

from src.common.config import OdooSettings, WorkflowSettings, settings
from src.common.database import Database, get_database
from src.common.exceptions import (
    ConfigurationError,
    ContentAgentError,
    InvalidStateError,
    NotFoundError,
)
from src.common.logging import setup_logging
from src.common.models import (
    ApprovalStatus,
    BlogPost,
    LogStatus,
    PostStatus,
    SocialMediaPost,
)

from .notifier import Notifier
from .odoo_client import OdooClient
from .processor import prepare_for_cms
from .social_media import SocialMediaGenerator

logger = setup_logging(module_name="publisher.workflow")

# Datastore configuration keys that override the Odoo settings
ODOO_CONFIG_KEYS = {
    "odoo_url": "url",
    "odoo_api_key": "api_key",
    "odoo_database": "database",
    "odoo_blog_id": "blog_id",
}

CMSFactory = Callable[[OdooSettings], OdooClient]


def resolve_odoo_settings(db: Database, base: Optional[OdooSettings] = None) -> OdooSettings:
    """Merge Odoo values stored in the configuration table over file/env settings.

    Raises:
        ConfigurationError: If odoo_blog_id is stored but not an integer
    """
    if base is None:
        base = settings.odoo
    stored = db.get_all_configs()
    updates: dict = {}
    for key, field_name in ODOO_CONFIG_KEYS.items():
        value = stored.get(key, "").strip()
        if not value:
            continue
        if field_name == "blog_id":
            try:
                updates[field_name] = int(value)
            except ValueError as exc:
                raise ConfigurationError(f"odoo_blog_id must be an integer, got {value!r}") from exc
        else:
            updates[field_name] = value
    return base.model_copy(update=updates)


class ArticleWorkflow:
    """Applies approval, rejection and publication to stored blog posts."""

    def __init__(
        self,
        db: Optional[Database] = None,
        notifier: Optional[Notifier] = None,
        social: Optional[SocialMediaGenerator] = None,
        cms_factory: Optional[CMSFactory] = None,
        odoo: Optional[OdooSettings] = None,
        config: Optional[WorkflowSettings] = None,
    ) -> None:
        self.db = db or get_database()
        self.notifier = notifier or Notifier()
        self._social = social
        self._cms_factory = cms_factory or OdooClient.from_settings
        self._odoo = odoo
        self.config = config or settings.workflow

    @property
    def social(self) -> SocialMediaGenerator:
        if self._social is None:
            self._social = SocialMediaGenerator()
        return self._social

    # --- Transitions ---

    async def approve(self, post_id: int) -> list[SocialMediaPost]:
        """pending -> approved; drafts social posts and notifies the owner.

        Returns:
            The social media drafts that were stored (may be empty)
        """
        post = self._get_post(post_id)
        self._require(post, ApprovalStatus.PENDING, "approve")

        logger.info("Approving article %s...", post_id)
        self.db.update_blog_post(post_id, approval_status=ApprovalStatus.APPROVED)

        drafts = await self._draft_social_posts(post)
        await self._notify(
            "Artykuł zatwierdzony",
            f'Artykuł "{post.title}" został zatwierdzony. '
            f"Wygenerowano {len(drafts)} postów social media.",
        )
        logger.info("Article %s approved (%d social drafts)", post_id, len(drafts))
        return drafts

    async def reject(self, post_id: int, reason: Optional[str] = None) -> None:
        """pending -> rejected (terminal)."""
        post = self._get_post(post_id)
        self._require(post, ApprovalStatus.PENDING, "reject")

        logger.info("Rejecting article %s...", post_id)
        self.db.update_blog_post(post_id, approval_status=ApprovalStatus.REJECTED)

        message = f'Artykuł "{post.title}" został odrzucony.'
        if reason:
            message += f" Powód: {reason}"
        await self._notify("Artykuł odrzucony", message)

    async def publish(self, post_id: int) -> int:
        """approved -> published: create and publish the post in Odoo.

        Returns:
            The Odoo blog post id

        Raises:
            InvalidStateError: If the post is not approved or already published
            ConfigurationError: If the Odoo connection is not configured
            ExternalServiceError: If the CMS call fails
        """
        post = self._get_post(post_id)
        self._require(post, ApprovalStatus.APPROVED, "publish")

        logger.info("Publishing approved article %s...", post_id)
        odoo_post_id = post.odoo_post_id
        try:
            odoo = self.odoo_settings()
            if not odoo.is_configured:
                raise ConfigurationError("Odoo URL, API key and blog id must be configured")
            client = self._cms_factory(odoo)
            if odoo_post_id is None:
                body = prepare_for_cms(post.content)
                odoo_post_id = await asyncio.to_thread(
                    client.create_blog_post,
                    post.title,
                    body,
                    post.meta_description,
                    odoo.blog_id,
                    False,
                )
                # Kept while still approved so a retry only publishes
                self.db.update_blog_post(post_id, odoo_post_id=odoo_post_id)
            else:
                logger.info("Reusing Odoo draft %s for article %s", odoo_post_id, post_id)
            await asyncio.to_thread(client.publish_blog_post, odoo_post_id)
        except ContentAgentError as exc:
            logger.error("Failed to publish article %s: %s", post_id, exc)
            message = f"Failed to publish: {exc}"
            if odoo_post_id is not None:
                message += f" (Odoo draft ID: {odoo_post_id})"
            self.db.create_publication_log(
                LogStatus.FAILED, post_id=post_id, error_message=message
            )
            await self._notify(
                "Błąd publikacji wpisu",
                f'Publikacja artykułu "{post.title}" nie powiodła się.\n\nBłąd: {exc}',
            )
            raise

        self.db.update_blog_post(
            post_id,
            status=PostStatus.PUBLISHED,
            published_date=datetime.now(),
        )
        self._relink_social_drafts(post, odoo_post_id)
        self.db.create_publication_log(
            LogStatus.SUCCESS,
            post_id=post_id,
            error_message=f"Published to Odoo (ID: {odoo_post_id})",
        )
        await self._notify(
            "Artykuł opublikowany",
            f'Artykuł "{post.title}" został opublikowany na blogu (Odoo ID: {odoo_post_id}).',
        )
        logger.info("Article %s published (Odoo ID: %s)", post_id, odoo_post_id)
        return odoo_post_id

    # --- Helpers ---

    def odoo_settings(self) -> OdooSettings:
        return resolve_odoo_settings(self.db, self._odoo)

    def _get_post(self, post_id: int) -> BlogPost:
        post = self.db.get_blog_post(post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")
        return post

    @staticmethod
    def _require(post: BlogPost, approval: ApprovalStatus, action: str) -> None:
        if post.status != PostStatus.DRAFT or post.approval_status != approval:
            raise InvalidStateError(
                f"Cannot {action} post {post.id}: status={post.status.value}, "
                f"approval_status={post.approval_status.value}"
            )

    def post_url(self, ref: int) -> str:
        return f"{self.config.blog_base_url.rstrip('/')}/{ref}"

    async def _draft_social_posts(self, post: BlogPost) -> list[SocialMediaPost]:
        # Until publication the link uses the internal id; publish() rewrites it
        url = self.post_url(post.odoo_post_id or post.id)
        try:
            drafts = await self.social.generate_posts(
                post.id, post.title, post.meta_description, post.keywords, url
            )
        except ContentAgentError as exc:
            logger.warning("Social media drafts skipped for post %s: %s", post.id, exc)
            return []

        for draft in drafts:
            draft.id = self.db.create_social_media_post(draft)
        return drafts

    def _relink_social_drafts(self, post: BlogPost, odoo_post_id: int) -> None:
        """Point social drafts at the public blog URL of the published post."""
        placeholder = re.compile(re.escape(self.post_url(post.id)) + r"(?!\d)")
        public_url = self.post_url(odoo_post_id)
        for draft in self.db.get_social_media_posts(post.id):
            content = placeholder.sub(lambda _m: public_url, draft.content)
            if content != draft.content:
                self.db.update_social_media_post_content(draft.id, content)

    async def _notify(self, title: str, content: str) -> None:
        await asyncio.to_thread(self.notifier.notify, title, content)
