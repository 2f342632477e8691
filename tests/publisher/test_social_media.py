"""Tests for social media draft generation."""

import asyncio
import json

import pytest

from src.common.exceptions import ConfigurationError, ProviderError
from src.common.models import SocialPlatform, WriterName
from src.publisher.social_media import (
    PLATFORM_PROFILES,
    SocialMediaGenerator,
    parse_social_response,
)

ANSWER = json.dumps({"content": "Nowy artykuł o mocy biernej!", "hashtags": ["#energia", "moc"]})


class TestParseSocialResponse:
    def test_plain_json(self):
        assert parse_social_response(ANSWER) == (
            "Nowy artykuł o mocy biernej!",
            ["energia", "moc"],
        )

    def test_fenced_json_with_prose(self):
        text = f"Oto post:\n```json\n{ANSWER}\n```\nPowodzenia!"
        content, hashtags = parse_social_response(text)
        assert content.startswith("Nowy artykuł")
        assert hashtags == ["energia", "moc"]

    def test_missing_hashtags(self):
        assert parse_social_response('{"content": "Post"}') == ("Post", [])

    @pytest.mark.parametrize("text", ["brak JSON-a", '{"content": "  "}'])
    def test_unusable_answers(self, text):
        with pytest.raises(ValueError):
            parse_social_response(text)


class TestSocialMediaGenerator:
    def test_one_draft_per_platform(self, fake_writer):
        writer = fake_writer(WriterName.CHATGPT, completion=ANSWER)
        generator = SocialMediaGenerator(
            credentials={WriterName.CHATGPT: "key"},
            providers={WriterName.CHATGPT: writer},
        )

        posts = asyncio.run(
            generator.generate_posts(
                7, "Moc bierna", "Opis", ["moc bierna"], "https://example.com/blog/7"
            )
        )

        assert [p.platform for p in posts] == [p.platform for p in PLATFORM_PROFILES]
        assert all(p.blog_post_id == 7 for p in posts)
        assert writer.calls == len(PLATFORM_PROFILES)
        assert all("https://example.com/blog/7" in prompt for prompt in writer.prompts)

    def test_uses_first_configured_writer(self, fake_writer):
        gemini = fake_writer(WriterName.GEMINI, completion=ANSWER)
        claude = fake_writer(WriterName.CLAUDE, completion=ANSWER)
        generator = SocialMediaGenerator(
            credentials={WriterName.CLAUDE: "c", WriterName.GEMINI: "g"},
            providers={WriterName.GEMINI: gemini, WriterName.CLAUDE: claude},
        )
        asyncio.run(generator.generate_posts(1, "T", "D", ["k"], "https://example.com"))
        assert gemini.calls == len(PLATFORM_PROFILES)
        assert claude.calls == 0

    def test_failing_platform_is_skipped(self, fake_writer):
        class FlakyWriter(fake_writer):
            async def complete(self, prompt, credential, system=None):
                if "Instagram" in prompt:
                    raise ProviderError("claude", "overloaded")
                return await super().complete(prompt, credential, system)

        writer = FlakyWriter(WriterName.CLAUDE, completion=ANSWER)
        generator = SocialMediaGenerator(
            credentials={WriterName.CLAUDE: "key"},
            providers={WriterName.CLAUDE: writer},
        )
        posts = asyncio.run(generator.generate_posts(1, "T", "D", ["k"], "https://example.com"))

        platforms = {p.platform for p in posts}
        assert SocialPlatform.INSTAGRAM not in platforms
        assert len(posts) == len(PLATFORM_PROFILES) - 1

    def test_no_credentials(self):
        generator = SocialMediaGenerator(credentials={})
        with pytest.raises(ConfigurationError):
            asyncio.run(generator.generate_posts(1, "T", "D", ["k"], "https://example.com"))
