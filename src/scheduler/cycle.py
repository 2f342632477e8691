"""One end-to-end publication cycle.

Steps:
1. Choose a topic (pending topics from the datastore first, otherwise fresh
   topics from the Odoo catalogue and the trending list)
2. Generate one article per configured writer, in parallel
3. Score all candidates and select the best
4. Store it as a draft awaiting approval
5. With workflow.auto_publish, approve and publish it right away

A failure in steps 1-4 writes one failed publication log entry, notifies the
owner and re-raises. Publication failures are recorded by the workflow.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Optional

from src.common.config import Settings, load_provider_credentials, settings
from src.common.database import Database, get_database
from src.common.exceptions import ExternalServiceError, NotFoundError
from src.common.logging import setup_logging
from src.common.models import BlogPost, Category, LogStatus, WriterName
from src.optimizer.scorer import cta_phrases_for
from src.optimizer.selector import rank_articles
from src.publisher.notifier import Notifier
from src.publisher.odoo_client import OdooClient
from src.publisher.workflow import ArticleWorkflow, CMSFactory, resolve_odoo_settings
from src.topics.generator import (
    generate_topics_from_odoo,
    generate_trending_topics,
    select_best_topic,
)
from src.topics.models import SEOTopic
from src.writers.generator import ArticleGenerator, Credentials

logger = setup_logging(module_name="scheduler.cycle")


@dataclass
class CycleResult:
    post_id: int
    topic_name: str
    writer: WriterName
    total_score: int
    word_count: int
    duration_seconds: float
    odoo_post_id: Optional[int] = None
    # (writer, total score) of every candidate, best first
    ranking: list[tuple[WriterName, int]] = field(default_factory=list)


class PublicationCycle:
    """Runs the generate, select and store pipeline once per call to run()."""

    def __init__(
        self,
        db: Optional[Database] = None,
        generator: Optional[ArticleGenerator] = None,
        workflow: Optional[ArticleWorkflow] = None,
        notifier: Optional[Notifier] = None,
        credentials: Optional[Credentials] = None,
        cms_factory: Optional[CMSFactory] = None,
        config: Optional[Settings] = None,
    ) -> None:
        self.config = config or settings
        self.db = db or get_database()
        self.notifier = notifier or Notifier(self.config.notifications)
        self.generator = generator or ArticleGenerator(timeout=self.config.llm.timeout_seconds)
        self.credentials = credentials if credentials is not None else load_provider_credentials()
        self._cms_factory = cms_factory or OdooClient.from_settings
        self.workflow = workflow or ArticleWorkflow(
            db=self.db,
            notifier=self.notifier,
            cms_factory=self._cms_factory,
            odoo=self.config.odoo,
            config=self.config.workflow,
        )

    async def run(self, category: Optional[Category] = None) -> CycleResult:
        """Run one cycle, optionally restricted to one content category."""
        start = time.monotonic()
        logger.info("========== Starting Publication Cycle ==========")

        try:
            topic = await self.choose_topic(category)
            logger.info("Selected topic: '%s' (%s)", topic.topic_name, topic.category.value)

            articles = await self.generator.generate_all(topic.outline, self.credentials)
            logger.info("Generated %d article versions", len(articles))

            ranked = rank_articles(
                articles,
                topic.keywords,
                topic.related_products,
                cta_phrases_for(self.config.scoring.locale),
            )
            best = ranked[0]
            logger.info("Best article: %s (score: %d)", best.writer.value, best.score.total_score)

            post_id = self.db.create_blog_post(
                BlogPost(
                    title=best.title,
                    content=best.optimized_content,
                    meta_description=best.meta_description,
                    keywords=topic.keywords,
                    ai_writer=best.writer,
                    seo_score=best.score.seo_score,
                    readability_score=best.score.readability_score,
                    engagement_score=best.score.engagement_score,
                    total_score=best.score.total_score,
                )
            )
            if topic.topic_id is not None:
                self.db.mark_topic_used(topic.topic_id)
        except Exception as exc:
            duration = time.monotonic() - start
            logger.error("Publication cycle failed: %s", exc)
            self.db.create_publication_log(LogStatus.FAILED, error_message=str(exc))
            await self._notify(
                "Błąd generowania wpisu",
                f"Cykl publikacji nie powiódł się.\n\nBłąd: {exc}\nCzas: {duration:.2f}s",
            )
            raise

        result = CycleResult(
            post_id=post_id,
            topic_name=topic.topic_name,
            writer=best.writer,
            total_score=best.score.total_score,
            word_count=best.word_count,
            duration_seconds=0.0,
            ranking=[(item.writer, item.score.total_score) for item in ranked],
        )

        if self.config.workflow.auto_publish:
            await self.workflow.approve(post_id)
            result.odoo_post_id = await self.workflow.publish(post_id)
        else:
            await self._notify(
                "Nowy wpis czeka na zatwierdzenie",
                f'Wpis "{best.title}" (ID: {post_id}) czeka na zatwierdzenie.\n\n'
                f"Wynik: {best.writer.value} ({best.score.total_score}/100)\n"
                f"Słowa: {best.word_count}",
            )

        result.duration_seconds = round(time.monotonic() - start, 2)
        logger.info(
            "========== Publication Cycle Completed in %.2fs ==========",
            result.duration_seconds,
        )
        return result

    async def choose_topic(self, category: Optional[Category] = None) -> SEOTopic:
        """Best pending topic; generates and stores new topics when none are pending.

        Raises:
            NotFoundError: If no topic is available for the category
        """
        pending = self.db.get_pending_topics(category)
        if pending:
            topics = [SEOTopic.from_record(record) for record in pending]
        else:
            logger.info("No pending topics, generating new ones")
            topics = await self._generate_topics()
            for topic in topics:
                topic.topic_id = self.db.create_topic(topic.to_record())
            if category is not None:
                topics = [t for t in topics if t.category == category]

        best = select_best_topic(topics)
        if best is None:
            raise NotFoundError("No suitable topic found")
        return best

    async def _generate_topics(self) -> list[SEOTopic]:
        topics: list[SEOTopic] = []
        odoo = resolve_odoo_settings(self.db, self.config.odoo)
        if odoo.url and odoo.api_key:
            try:
                client = self._cms_factory(odoo)
                products = await asyncio.to_thread(client.get_products)
                categories = await asyncio.to_thread(client.get_categories)
                logger.info(
                    "Fetched %d products and %d categories", len(products), len(categories)
                )
                topics = generate_topics_from_odoo(products, categories)
            except ExternalServiceError as exc:
                logger.warning("Odoo catalogue unavailable, using trending topics only: %s", exc)
        else:
            logger.warning("Odoo not configured, using trending topics only")
        return topics + generate_trending_topics()

    async def _notify(self, title: str, content: str) -> None:
        await asyncio.to_thread(self.notifier.notify, title, content)
