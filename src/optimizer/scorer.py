"""Article scoring: SEO, readability and engagement sub-scores.

Weights for the total:
- SEO: 30%
- Readability: 30%
- Engagement: 40%

Everything here is pure; the same article and keywords always give the
same ArticleScore.
"""

from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from src.writers.models import GeneratedArticle

from .models import ArticleScore, ScoreDetails

logger = logging.getLogger(__name__)

SEO_WEIGHT = Decimal("0.3")
READABILITY_WEIGHT = Decimal("0.3")
ENGAGEMENT_WEIGHT = Decimal("0.4")

CTA_PHRASES: dict[str, tuple[str, ...]] = {
    "pl": (
        "skontaktuj się",
        "dowiedz się więcej",
        "sprawdź",
        "kup teraz",
        "zamów",
        "zadzwoń",
        "napisz do nas",
    ),
    "en": (
        "contact us",
        "learn more",
        "buy now",
        "order now",
        "call us",
        "get in touch",
        "check out",
    ),
}

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_HEADING_RE = re.compile(r"<h[23](?:\s[^>]*)?>", re.IGNORECASE)
_PARAGRAPH_RE = re.compile(r"<p(?:\s[^>]*)?>", re.IGNORECASE)
_LIST_RE = re.compile(r"<(?:ul|ol)(?:\s[^>]*)?>", re.IGNORECASE)
_EMPHASIS_RE = re.compile(r"<(?:strong|em|b|i)(?:\s[^>]*)?>", re.IGNORECASE)


def strip_html(html: str) -> str:
    """Replace tags with spaces and collapse whitespace."""
    return _WHITESPACE_RE.sub(" ", _TAG_RE.sub(" ", html)).strip()


def split_sentences(text: str) -> list[str]:
    """Non-blank segments between runs of . ! ?"""
    return [s for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cta_phrases_for(locale: str) -> tuple[str, ...]:
    """CTA lexicon for a locale such as "pl" or "en-GB"; unknown locales use Polish."""
    return CTA_PHRASES.get(locale.lower().split("-")[0], CTA_PHRASES["pl"])


# --- Metrics ---

def keyword_density(content: str, keywords: Iterable[str]) -> float:
    """Substring keyword hits per 100 plain-text words.

    Matching is case-insensitive and has no word-boundary requirement, so
    "moc" also counts inside "mocy".
    """
    text = strip_html(content).lower()
    total_words = len(text.split())
    if total_words == 0:
        return 0.0

    hits = 0
    for keyword in keywords:
        needle = keyword.strip().lower()
        if needle:
            hits += text.count(needle)
    return hits / total_words * 100


def has_heading_structure(content: str) -> bool:
    return bool(_HEADING_RE.search(content))


def avg_sentence_length(content: str) -> float:
    text = strip_html(content)
    sentences = split_sentences(text)
    if not sentences:
        return 0.0
    return len(text.split()) / len(sentences)


def count_paragraphs(content: str) -> int:
    return len(_PARAGRAPH_RE.findall(content))


def has_list(content: str) -> bool:
    return bool(_LIST_RE.search(content))


def has_call_to_action(content: str, phrases: Sequence[str]) -> bool:
    text = strip_html(content).lower()
    return any(phrase.lower() in text for phrase in phrases)


def count_questions(content: str) -> int:
    return content.count("?")


def has_emphasis(content: str) -> bool:
    return bool(_EMPHASIS_RE.search(content))


# --- Sub-scores ---

def seo_score(density: float, headings: bool, word_count: int) -> int:
    score = 0

    # Keyword density (target: 1-2%)
    if 1 <= density <= 2:
        score += 40
    elif 0.5 < density < 3:
        score += 25
    else:
        score += 10

    if headings:
        score += 30

    # Content length (target: 1500-3000 words)
    if 1500 <= word_count <= 3000:
        score += 30
    elif word_count >= 1000:
        score += 20

    return min(score, 100)


def readability_score(avg_length: float, paragraphs: int, lists: bool) -> int:
    score = 0

    # Average sentence length (target: 15-20 words)
    if 15 <= avg_length <= 20:
        score += 40
    elif 10 <= avg_length <= 25:
        score += 25
    else:
        score += 10

    if paragraphs >= 8:
        score += 30
    elif paragraphs >= 5:
        score += 20

    if lists:
        score += 30

    return min(score, 100)


def engagement_score(cta: bool, questions: int, emphasis: bool) -> int:
    score = 0
    if cta:
        score += 40

    if questions >= 3:
        score += 30
    elif questions >= 1:
        score += 15

    if emphasis:
        score += 30

    return min(score, 100)


def total_score(seo: int, readability: int, engagement: int) -> int:
    weighted = (
        Decimal(seo) * SEO_WEIGHT
        + Decimal(readability) * READABILITY_WEIGHT
        + Decimal(engagement) * ENGAGEMENT_WEIGHT
    )
    return round_half_up(weighted)


def evaluate(
    article: GeneratedArticle,
    keywords: Sequence[str],
    cta_phrases: Optional[Sequence[str]] = None,
) -> ArticleScore:
    """Score one article against the outline keywords.

    Args:
        article: Generated article (HTML content)
        keywords: Target keywords; blank entries are ignored
        cta_phrases: Call-to-action lexicon, Polish by default

    Returns:
        ArticleScore with sub-scores, total and raw metrics
    """
    content = article.content
    phrases = cta_phrases if cta_phrases is not None else CTA_PHRASES["pl"]

    details = ScoreDetails(
        keyword_density=keyword_density(content, keywords),
        heading_structure=has_heading_structure(content),
        content_length=article.word_count,
        avg_sentence_length=avg_sentence_length(content),
        paragraph_count=count_paragraphs(content),
        has_call_to_action=has_call_to_action(content, phrases),
    )

    seo = seo_score(details.keyword_density, details.heading_structure, article.word_count)
    readability = readability_score(
        details.avg_sentence_length, details.paragraph_count, has_list(content)
    )
    engagement = engagement_score(
        details.has_call_to_action, count_questions(content), has_emphasis(content)
    )

    score = ArticleScore(
        seo_score=seo,
        readability_score=readability,
        engagement_score=engagement,
        total_score=total_score(seo, readability, engagement),
        details=details,
    )
    logger.debug(
        "Score %s: density=%.2f%% avg_sentence=%.1f paragraphs=%d total=%d",
        article.writer.value,
        details.keyword_density,
        details.avg_sentence_length,
        details.paragraph_count,
        score.total_score,
    )
    return score
