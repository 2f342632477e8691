"""Provider adapters: one class per LLM vendor.

Every adapter turns an outline into a GeneratedArticle with the same prompt.
Vendor SDK errors, timeouts raised by the SDK and empty answers all surface
as ProviderError so the generator can treat vendors uniformly.

Usage:
    adapter = PROVIDERS[WriterName.CLAUDE]()
    article = await adapter.generate(outline, api_key)
"""

from __future__ import annotations

import logging
import re
import time
from abc import ABC, abstractmethod
from typing import Optional

from src.common.config import ContentSettings, LLMSettings, settings
from src.common.exceptions import ProviderError
from src.common.models import WriterName

from .models import ArticleOutline, GeneratedArticle
from .prompts import PromptRenderer, get_renderer

logger = logging.getLogger(__name__)

_FENCED_RE = re.compile(r"^\s*```[\w-]*[ \t]*\n(.*?)\n?```\s*$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapping the whole response."""
    match = _FENCED_RE.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


class WriterAdapter(ABC):
    """Base class for vendor adapters."""

    name: WriterName

    def __init__(
        self,
        llm: Optional[LLMSettings] = None,
        content: Optional[ContentSettings] = None,
        renderer: Optional[PromptRenderer] = None,
    ):
        self.llm = llm or settings.llm
        self.content = content or settings.content
        self.renderer = renderer or get_renderer()

    async def generate(self, outline: ArticleOutline, credential: str) -> GeneratedArticle:
        """Write one article for the outline.

        Raises:
            ProviderError: On any vendor failure or an empty answer
        """
        prompt = self.renderer.article_prompt(outline, self.content.language)
        system = self.renderer.system_prompt(self.content.language)

        logger.info("[%s] Starting generation for: %s", self.name.value, outline.topic)
        start = time.monotonic()
        content = await self.complete(prompt, credential, system=system)
        article = GeneratedArticle.from_content(outline.topic, content, self.name)

        logger.info(
            "[%s] Completed in %dms, %d words",
            self.name.value,
            int((time.monotonic() - start) * 1000),
            article.word_count,
        )
        return article

    async def complete(
        self,
        prompt: str,
        credential: str,
        system: Optional[str] = None,
    ) -> str:
        """Send a raw prompt and return the cleaned response text."""
        try:
            raw = await self._complete(prompt, system, credential)
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(self.name.value, f"{type(exc).__name__}: {exc}") from exc

        text = strip_code_fences(raw or "")
        if not text:
            raise ProviderError(self.name.value, "Empty response")
        return text

    @abstractmethod
    async def _complete(self, prompt: str, system: Optional[str], credential: str) -> str:
        """Vendor-specific call. May raise anything; complete() wraps it."""


class GeminiWriter(WriterAdapter):
    name = WriterName.GEMINI

    async def _complete(self, prompt: str, system: Optional[str], credential: str) -> str:
        import google.generativeai as genai

        genai.configure(api_key=credential)
        model = genai.GenerativeModel(
            self.llm.gemini_model,
            system_instruction=system,
        )
        response = await model.generate_content_async(
            prompt,
            generation_config=genai.GenerationConfig(
                temperature=self.llm.temperature,
                max_output_tokens=self.llm.max_tokens,
            ),
        )
        return response.text


class ChatGPTWriter(WriterAdapter):
    name = WriterName.CHATGPT

    async def _complete(self, prompt: str, system: Optional[str], credential: str) -> str:
        import openai

        client = openai.AsyncOpenAI(api_key=credential)
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        response = await client.chat.completions.create(
            model=self.llm.openai_model,
            messages=messages,
            temperature=self.llm.temperature,
            max_tokens=self.llm.max_tokens,
        )
        return response.choices[0].message.content or ""


class ClaudeWriter(WriterAdapter):
    name = WriterName.CLAUDE

    async def _complete(self, prompt: str, system: Optional[str], credential: str) -> str:
        import anthropic

        client = anthropic.AsyncAnthropic(api_key=credential)
        kwargs = {}
        if system:
            kwargs["system"] = system

        response = await client.messages.create(
            model=self.llm.anthropic_model,
            max_tokens=self.llm.max_tokens,
            temperature=self.llm.temperature,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )


# Closed registry in provider-priority order
PROVIDERS: dict[WriterName, type[WriterAdapter]] = {
    WriterName.GEMINI: GeminiWriter,
    WriterName.CHATGPT: ChatGPTWriter,
    WriterName.CLAUDE: ClaudeWriter,
}


def create_adapter(writer: WriterName) -> WriterAdapter:
    return PROVIDERS[writer]()
