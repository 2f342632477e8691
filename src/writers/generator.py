"""Parallel article generation across all configured LLM writers.

Each writer with a credential gets one concurrent call. All calls run to
completion (or their own timeout); a failing writer never cancels the
others. Results come back in provider-priority order, not completion order.

Usage:
    generator = ArticleGenerator()
    articles = await generator.generate_all(outline, load_provider_credentials())
"""

from __future__ import annotations

import asyncio
import time
from typing import Mapping, Optional, Union

from src.common.config import settings
from src.common.exceptions import AllProvidersFailedError, ConfigurationError
from src.common.logging import setup_logging
from src.common.models import WriterName

from .models import ArticleOutline, GeneratedArticle, ProviderOutcome
from .providers import PROVIDERS, WriterAdapter

logger = setup_logging(module_name="writers.generator")

Credentials = Mapping[Union[WriterName, str], Optional[str]]


def configured_writers(credentials: Credentials) -> list[tuple[WriterName, str]]:
    """Writers with a non-blank credential, in provider-priority order.

    Keys that name no known writer are logged and skipped.
    """
    normalized: dict[WriterName, str] = {}
    for key, value in credentials.items():
        try:
            writer = WriterName(key)
        except ValueError:
            logger.warning("Ignoring credential for unknown writer: %s", key)
            continue
        if value and value.strip():
            normalized[writer] = value.strip()
    return [(writer, normalized[writer]) for writer in PROVIDERS if writer in normalized]


class ArticleGenerator:
    """Fans one outline out to every configured writer."""

    def __init__(
        self,
        providers: Optional[Mapping[WriterName, WriterAdapter]] = None,
        timeout: Optional[float] = None,
    ):
        self._providers = dict(providers) if providers else {}
        self.timeout = timeout if timeout is not None else settings.llm.timeout_seconds

    def adapter_for(self, writer: WriterName) -> WriterAdapter:
        if writer not in self._providers:
            self._providers[writer] = PROVIDERS[writer]()
        return self._providers[writer]

    async def generate_all(
        self,
        outline: ArticleOutline,
        credentials: Credentials,
    ) -> list[GeneratedArticle]:
        """Generate one article per configured writer.

        Args:
            outline: The shared brief (read-only)
            credentials: API key per writer; blank or missing keys are skipped

        Returns:
            Successful articles in provider-priority order

        Raises:
            ConfigurationError: If no writer has a credential (nothing is called)
            AllProvidersFailedError: If every dispatched call failed
        """
        writers = configured_writers(credentials)
        if not writers:
            raise ConfigurationError(
                "No AI writer API keys configured. "
                "Set GEMINI_API_KEY, OPENAI_API_KEY or ANTHROPIC_API_KEY."
            )

        logger.info(
            "Starting parallel generation for '%s' with %s",
            outline.topic,
            ", ".join(w.value for w, _ in writers),
        )
        start = time.monotonic()

        outcomes: list[ProviderOutcome] = await asyncio.gather(
            *(self._run_one(writer, outline, credential) for writer, credential in writers)
        )

        articles = [o.article for o in outcomes if o.article is not None]
        if not articles:
            raise AllProvidersFailedError({o.writer.value: o.error or "" for o in outcomes})

        logger.info(
            "Completed %d/%d articles in %dms",
            len(articles),
            len(outcomes),
            int((time.monotonic() - start) * 1000),
        )
        return articles

    async def _run_one(
        self,
        writer: WriterName,
        outline: ArticleOutline,
        credential: str,
    ) -> ProviderOutcome:
        """Run one writer under its own timeout. Never raises."""
        start = time.monotonic()
        try:
            article = await asyncio.wait_for(
                self.adapter_for(writer).generate(outline, credential),
                timeout=self.timeout,
            )
            return ProviderOutcome(
                writer=writer,
                article=article,
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except asyncio.TimeoutError:
            error = f"Timeout after {self.timeout}s"
        except Exception as exc:
            error = str(exc)

        logger.error("[%s] failed: %s", writer.value, error)
        return ProviderOutcome(
            writer=writer,
            error=error,
            duration_ms=int((time.monotonic() - start) * 1000),
        )


async def generate_all(
    outline: ArticleOutline,
    credentials: Credentials,
    providers: Optional[Mapping[WriterName, WriterAdapter]] = None,
    timeout: Optional[float] = None,
) -> list[GeneratedArticle]:
    """Module-level shortcut for ArticleGenerator(...).generate_all()."""
    generator = ArticleGenerator(providers=providers, timeout=timeout)
    return await generator.generate_all(outline, credentials)
