"""Promotional social media posts for approved articles.

One draft per platform (LinkedIn, Facebook, Twitter/X, Instagram), written
by the first configured LLM writer. Platforms are generated concurrently;
a platform that fails is logged and left out.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from src.common.config import ContentSettings, load_provider_credentials, settings
from src.common.exceptions import ConfigurationError
from src.common.models import SocialMediaPost, SocialPlatform, WriterName
from src.writers.generator import Credentials, configured_writers
from src.writers.prompts import PromptRenderer, get_renderer
from src.writers.providers import PROVIDERS, WriterAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformProfile:
    platform: SocialPlatform
    label: str
    system: str
    tone: str
    length: str
    hashtags: str
    rules: tuple[str, ...]


PLATFORM_PROFILES: tuple[PlatformProfile, ...] = (
    PlatformProfile(
        platform=SocialPlatform.LINKEDIN,
        label="LinkedIn",
        system="Jesteś ekspertem od content marketingu B2B.",
        tone="profesjonalny, B2B",
        length="150-200 słów",
        hashtags="3-5",
        rules=(
            "Rozpocznij od pytania lub statystyki",
            "Podkreśl wartość biznesową",
            "Zakończ call-to-action",
        ),
    ),
    PlatformProfile(
        platform=SocialPlatform.FACEBOOK,
        label="Facebook",
        system="Jesteś ekspertem od social media marketingu.",
        tone="przystępny, przyjazny",
        length="100-150 słów",
        hashtags="3-5",
        rules=(
            "Rozpocznij od hooka (pytanie, ciekawostka)",
            "Użyj 2-3 emoji",
            "Zachęć do komentowania",
            "Zakończ call-to-action",
        ),
    ),
    PlatformProfile(
        platform=SocialPlatform.TWITTER,
        label="Twitter/X",
        system="Jesteś ekspertem od Twitter marketingu.",
        tone="dynamiczny, bezpośredni",
        length="maksymalnie 280 znaków (włącznie z hashtagami)",
        hashtags="3-4",
        rules=(
            "Rozpocznij od mocnego hooka",
            "Użyj 1-2 emoji",
        ),
    ),
    PlatformProfile(
        platform=SocialPlatform.INSTAGRAM,
        label="Instagram",
        system="Jesteś ekspertem od Instagram content marketingu.",
        tone="storytelling, emocjonalny",
        length="150-200 słów",
        hashtags="5-10",
        rules=(
            "Rozpocznij od mini-historii lub scenariusza",
            "Użyj 3-5 emoji",
            "Podziel na krótkie akapity",
            "Zakończ call-to-action (link w bio)",
        ),
    ),
)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def parse_social_response(text: str) -> tuple[str, list[str]]:
    """Extract (content, hashtags) from an LLM answer.

    Raises:
        ValueError: If no usable JSON object with content is found
    """
    json_str = text
    if "```json" in json_str:
        json_str = json_str.split("```json")[1].split("```")[0]
    elif "```" in json_str:
        json_str = json_str.split("```")[1].split("```")[0]

    match = _JSON_OBJECT_RE.search(json_str)
    if not match:
        raise ValueError("No JSON object in social post response")
    data = json.loads(match.group(0))

    content = str(data.get("content") or "").strip()
    if not content:
        raise ValueError("Social post response has no content")
    hashtags = [
        str(tag).strip().lstrip("#")
        for tag in data.get("hashtags") or []
        if str(tag).strip().lstrip("#")
    ]
    return content, hashtags


class SocialMediaGenerator:
    """Drafts platform posts for one blog post.

    Usage:
        generator = SocialMediaGenerator()
        drafts = await generator.generate_posts(post_id, title, meta, keywords, url)
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        providers: Optional[Mapping[WriterName, WriterAdapter]] = None,
        content: Optional[ContentSettings] = None,
        renderer: Optional[PromptRenderer] = None,
    ) -> None:
        self.credentials = credentials if credentials is not None else load_provider_credentials()
        self._providers = dict(providers) if providers else {}
        self.content = content or settings.content
        self.renderer = renderer or get_renderer()

    def _pick_writer(self) -> tuple[WriterAdapter, str]:
        writers = configured_writers(self.credentials)
        if not writers:
            raise ConfigurationError("No AI writer API key configured for social media posts")
        writer, credential = writers[0]
        adapter = self._providers.get(writer) or PROVIDERS[writer]()
        return adapter, credential

    async def generate_posts(
        self,
        blog_post_id: int,
        title: str,
        description: str,
        keywords: Sequence[str],
        url: str,
    ) -> list[SocialMediaPost]:
        """Generate one draft per platform.

        Raises:
            ConfigurationError: If no LLM writer has a credential
        """
        adapter, credential = self._pick_writer()
        logger.info(
            "Generating social media posts for blog post %s with %s",
            blog_post_id,
            adapter.name.value,
        )

        results = await asyncio.gather(
            *(
                self._generate_one(
                    adapter, credential, profile, blog_post_id, title, description, keywords, url
                )
                for profile in PLATFORM_PROFILES
            )
        )
        posts = [post for post in results if post is not None]
        logger.info("Generated %d/%d social media posts", len(posts), len(PLATFORM_PROFILES))
        return posts

    async def _generate_one(
        self,
        adapter: WriterAdapter,
        credential: str,
        profile: PlatformProfile,
        blog_post_id: int,
        title: str,
        description: str,
        keywords: Sequence[str],
        url: str,
    ) -> Optional[SocialMediaPost]:
        prompt = self.renderer.social_prompt(
            profile, title, description, list(keywords), url, self.content.language
        )
        try:
            answer = await adapter.complete(prompt, credential, system=profile.system)
            content, hashtags = parse_social_response(answer)
        except Exception as exc:
            logger.warning("Social post for %s failed: %s", profile.label, exc)
            return None

        return SocialMediaPost(
            blog_post_id=blog_post_id,
            platform=profile.platform,
            content=content,
            hashtags=hashtags,
        )
