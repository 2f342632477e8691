"""Shared test fixtures for the SEO content agent."""

import asyncio
import sys
import time
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.database import Database, reset_database
from src.common.models import WriterName
from src.writers.models import ArticleOutline, GeneratedArticle

FILLER = (
    "lorem ipsum dolor sit amet consectetur adipiscing elit "
    "sed do eiusmod tempor incididunt ut labore et"
).split()  # 16 words, no "x" or "y" anywhere


class FakeWriter:
    """Stand-in for a WriterAdapter that never touches the network."""

    def __init__(self, name, content=None, error=None, delay=0.0, completion=None):
        self.name = name
        self.content = content
        self.error = error
        self.delay = delay
        self.completion = completion
        self.calls = 0
        self.prompts = []
        self.finished_at = None

    async def generate(self, outline, credential):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        self.finished_at = time.monotonic()
        if self.error is not None:
            raise self.error
        return GeneratedArticle.from_content(outline.topic, self.content, self.name)

    async def complete(self, prompt, credential, system=None):
        self.calls += 1
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.completion


def build_seo_article_html() -> str:
    """1610-word article: density 24/1610, h2+h3, 10 paragraphs, a list,
    one Polish CTA, two question marks and no emphasis tags.

    Every tag touches a word so raw and stripped word counts are equal.
    """
    sentences = []
    for i in range(100):
        words = list(FILLER)
        end = "."
        if i < 24:
            words[0] = "x" if i % 2 == 0 else "y"
        elif i == 24:
            words[0:2] = ["skontaktuj", "się"]
        elif i in (25, 26):
            end = "?"
        sentences.append(" ".join(words) + end)

    paragraphs = [
        "<p>" + " ".join(sentences[i * 10:(i + 1) * 10]) + "</p>" for i in range(10)
    ]
    parts = ["<h2>Lorem ipsum dolor</h2>"]
    parts.extend(paragraphs[:5])
    parts.append("<h3>Sit amet elit</h3>")
    parts.extend(paragraphs[5:])
    parts.append("<ul><li>lorem ipsum</li> <li>dolor sit</li></ul>")
    return "\n".join(parts)


@pytest.fixture(autouse=True)
def _reset_shared_database():
    yield
    reset_database()


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def db(tmp_path):
    """A fresh Database backed by a temporary SQLite file."""
    database = Database(str(tmp_path / "test_seo_agent.db"))
    yield database
    database.close()


@pytest.fixture
def outline() -> ArticleOutline:
    return ArticleOutline(
        topic="X",
        keywords=("x", "y"),
        target_length=1500,
        sections=("A", "B"),
    )


@pytest.fixture
def fake_writer():
    """The FakeWriter class, for building per-test writers."""
    return FakeWriter


@pytest.fixture
def seo_article_html() -> str:
    return build_seo_article_html()


@pytest.fixture
def all_credentials() -> dict:
    return {
        WriterName.GEMINI: "gemini-key",
        WriterName.CHATGPT: "openai-key",
        WriterName.CLAUDE: "anthropic-key",
    }
