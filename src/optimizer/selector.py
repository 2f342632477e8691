"""Article optimization and best-article selection.

Every candidate gets a score, a meta description and internal product links.
Candidates are then ranked by total score with a stable sort, so on a tie the
writer earlier in provider-priority order wins.

Usage:
    best = select_best(articles, outline.keywords, related_products=["SVG 100"])
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from src.common.exceptions import NoArticlesError
from src.writers.models import GeneratedArticle

from .models import OptimizedArticle
from .scorer import evaluate, split_sentences, strip_html

logger = logging.getLogger(__name__)

META_DESCRIPTION_MAX = 160

_TAG_SPLIT_RE = re.compile(r"(<[^>]*>)")
_ANCHOR_OPEN_RE = re.compile(r"<a[\s>]", re.IGNORECASE)
_ANCHOR_CLOSE_RE = re.compile(r"</a\s*>", re.IGNORECASE)


def generate_meta_description(content: str, max_length: int = META_DESCRIPTION_MAX) -> str:
    """First two sentences of the plain text, cut to max_length characters."""
    sentences = [s.strip() for s in split_sentences(strip_html(content))]
    if not sentences:
        return ""

    first = sentences[0]
    second = sentences[1] if len(sentences) > 1 else ""
    description = f"{first}. {second}".strip()

    if len(description) > max_length:
        description = description[: max_length - 3] + "..."
    return description


def product_slug(product: str) -> str:
    return re.sub(r"\s+", "-", product.strip().lower())


def _link_first_occurrence(content: str, product: str) -> tuple[str, bool]:
    """Wrap the first whole-word match of product found in text (not in tags or links)."""
    pattern = re.compile(rf"\b{re.escape(product)}\b", re.IGNORECASE)
    anchor = f'<a href="/products/{product_slug(product)}">{product}</a>'

    parts = _TAG_SPLIT_RE.split(content)
    inside_anchor = 0
    for index, part in enumerate(parts):
        if index % 2 == 1:
            if _ANCHOR_OPEN_RE.match(part):
                inside_anchor += 1
            elif _ANCHOR_CLOSE_RE.match(part):
                inside_anchor = max(0, inside_anchor - 1)
            continue
        if inside_anchor:
            continue
        replaced, count = pattern.subn(lambda _m: anchor, part, count=1)
        if count:
            parts[index] = replaced
            return "".join(parts), True
    return content, False


def add_internal_links(content: str, related_products: Sequence[str]) -> tuple[str, list[str]]:
    """Link each related product once.

    Returns:
        (content with links, products that were actually linked)
    """
    linked: list[str] = []
    for product in related_products:
        if not product.strip():
            continue
        content, found = _link_first_occurrence(content, product.strip())
        if found:
            linked.append(product.strip())
    return content, linked


def optimize_article(
    article: GeneratedArticle,
    keywords: Sequence[str],
    related_products: Sequence[str] = (),
    cta_phrases: Optional[Sequence[str]] = None,
) -> OptimizedArticle:
    score = evaluate(article, keywords, cta_phrases)
    optimized_content, linked = add_internal_links(article.content, related_products)
    return OptimizedArticle(
        article=article,
        meta_description=generate_meta_description(article.content),
        optimized_content=optimized_content,
        internal_links=tuple(linked),
        score=score,
    )


def rank_articles(
    articles: Sequence[GeneratedArticle],
    keywords: Sequence[str],
    related_products: Sequence[str] = (),
    cta_phrases: Optional[Sequence[str]] = None,
) -> list[OptimizedArticle]:
    """Optimize every article and order them best first (stable on ties)."""
    optimized = [
        optimize_article(a, keywords, related_products, cta_phrases) for a in articles
    ]
    ranked = sorted(optimized, key=lambda o: -o.score.total_score)

    logger.info("Article scores:")
    for item in ranked:
        logger.info("  %s: %s", item.writer.value, item.score.summary())
    return ranked


def select_best(
    articles: Sequence[GeneratedArticle],
    keywords: Sequence[str],
    related_products: Sequence[str] = (),
    cta_phrases: Optional[Sequence[str]] = None,
) -> OptimizedArticle:
    """Return the highest-scoring optimized article.

    Raises:
        NoArticlesError: If articles is empty
    """
    if not articles:
        raise NoArticlesError("No articles to select from")
    return rank_articles(articles, keywords, related_products, cta_phrases)[0]
