"""Prompt rendering for article and social post generation.

Prompts live as Jinja2 templates in ./templates so copywriters can edit them
without touching code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from src.common.models import Category

from .models import ArticleOutline

SYSTEM_PROMPT = "You are an expert SEO content writer. Always write in {language}."

CATEGORY_LABELS: dict[Category, str] = {
    Category.REACTIVE_POWER: "Kompensacja mocy biernej",
    Category.SVG_COMPENSATORS: "Kompensatory SVG",
}


class PromptRenderer:
    """
    Renders LLM prompts from Jinja2 templates.

    Usage:
        renderer = PromptRenderer()
        prompt = renderer.article_prompt(outline, language="Polish")
    """

    def __init__(self, templates_dir: Optional[Path] = None):
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"

        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        template = self.env.get_template(f"{template_name}.jinja2")
        return template.render(**context)

    def article_prompt(self, outline: ArticleOutline, language: str) -> str:
        """Build the user prompt every writer receives for one outline."""
        return self.render(
            "article_prompt",
            {
                "topic": outline.topic,
                "keywords": list(outline.keywords),
                "target_length": outline.target_length,
                "sections": list(outline.sections),
                "category_label": CATEGORY_LABELS[outline.category],
                "language": language,
            },
        )

    def social_prompt(
        self,
        profile: Any,
        title: str,
        description: str,
        keywords: list[str],
        url: str,
        language: str,
    ) -> str:
        """Build the prompt for one platform's promotional post."""
        return self.render(
            "social_post",
            {
                "profile": profile,
                "title": title,
                "description": description,
                "keywords": keywords,
                "url": url,
                "language": language,
            },
        )

    def system_prompt(self, language: str) -> str:
        return SYSTEM_PROMPT.format(language=language)


_renderer: Optional[PromptRenderer] = None


def get_renderer() -> PromptRenderer:
    """Shared renderer; the Jinja2 environment caches compiled templates."""
    global _renderer
    if _renderer is None:
        _renderer = PromptRenderer()
    return _renderer
