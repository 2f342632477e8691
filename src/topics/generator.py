"""SEO topic generation from the Odoo catalogue and a curated trending list.

Topics come from three sources:
- product categories (first 5 that have products, up to 3 products each)
- popular products (first 5 in catalogue order)
- hand-picked trending topics

select_best_topic() prefers low SEO difficulty and many linkable products.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from src.common.models import Category
from src.writers.models import ArticleOutline

from .models import SEOTopic

logger = logging.getLogger(__name__)

MAX_CATEGORIES = 5
MAX_PRODUCTS_PER_CATEGORY = 3
MAX_POPULAR_PRODUCTS = 5

CATEGORY_TARGET_LENGTH = 2000
PRODUCT_TARGET_LENGTH = 1800


def detect_category(name: str) -> Category:
    lowered = name.lower()
    if "svg" in lowered or "kompensator" in lowered:
        return Category.SVG_COMPENSATORS
    return Category.REACTIVE_POWER


def estimate_seo_difficulty(keyword: str) -> int:
    """Rough competition estimate from phrase length: long-tail is easier."""
    word_count = len(keyword.split())
    if word_count == 1:
        return 75
    if word_count == 2:
        return 50
    return 30


def topic_from_category(category_name: str, product_names: Sequence[str]) -> SEOTopic:
    lowered = category_name.lower()
    topic_name = f"Przewodnik po {category_name}: Wszystko co musisz wiedzieć"
    outline_keywords = [lowered, f"{lowered} przewodnik", f"najlepsze {lowered}"]
    category = detect_category(category_name)

    return SEOTopic(
        topic_name=topic_name,
        category=category,
        keywords=outline_keywords + [p.lower() for p in product_names],
        seo_difficulty=estimate_seo_difficulty(category_name),
        related_products=list(product_names),
        outline=ArticleOutline(
            topic=topic_name,
            keywords=tuple(outline_keywords),
            target_length=CATEGORY_TARGET_LENGTH,
            sections=(
                "Wprowadzenie",
                f"Czym jest {category_name}?",
                "Najważniejsze cechy i korzyści",
                "Jak wybrać odpowiedni produkt",
                "Najlepsze produkty w kategorii",
                "Podsumowanie i rekomendacje",
            ),
            category=category,
        ),
    )


def topic_from_product(product_name: str) -> SEOTopic:
    lowered = product_name.lower()
    topic_name = f"{product_name}: Kompletny przegląd i recenzja"
    category = detect_category(product_name)

    return SEOTopic(
        topic_name=topic_name,
        category=category,
        keywords=[lowered, f"{lowered} recenzja", f"{lowered} opinie", f"{lowered} cena"],
        seo_difficulty=estimate_seo_difficulty(product_name),
        related_products=[product_name],
        outline=ArticleOutline(
            topic=topic_name,
            keywords=(lowered, f"{lowered} recenzja", f"{lowered} opinie"),
            target_length=PRODUCT_TARGET_LENGTH,
            sections=(
                "Wprowadzenie",
                f"Czym jest {product_name}?",
                "Główne funkcje i specyfikacja",
                "Zalety i wady",
                "Dla kogo jest ten produkt?",
                "Podsumowanie i werdykt",
            ),
            category=category,
        ),
    )


def generate_topics_from_odoo(
    products: Sequence[dict[str, Any]],
    categories: Sequence[dict[str, Any]],
) -> list[SEOTopic]:
    """Build topics from OdooClient.get_products() / get_categories() output."""
    topics: list[SEOTopic] = []

    for category in categories[:MAX_CATEGORIES]:
        name = category.get("name", "")
        related = [
            p["name"] for p in products if p.get("category") == name
        ][:MAX_PRODUCTS_PER_CATEGORY]
        if name and related:
            topics.append(topic_from_category(name, related))

    for product in products[:MAX_POPULAR_PRODUCTS]:
        if product.get("name"):
            topics.append(topic_from_product(product["name"]))

    logger.info(
        "Generated %d topics from %d products and %d categories",
        len(topics), len(products), len(categories),
    )
    return topics


def generate_trending_topics() -> list[SEOTopic]:
    """Curated evergreen topics, independent of the catalogue."""
    return [
        SEOTopic(
            topic_name="Jak zwiększyć efektywność energetyczną w domu",
            category=Category.REACTIVE_POWER,
            keywords=[
                "efektywność energetyczna",
                "oszczędzanie energii",
                "energia w domu",
                "ekologiczny dom",
            ],
            seo_difficulty=45,
            related_products=[],
            outline=ArticleOutline(
                topic="Jak zwiększyć efektywność energetyczną w domu",
                keywords=("efektywność energetyczna", "oszczędzanie energii"),
                target_length=2200,
                sections=(
                    "Wprowadzenie",
                    "Dlaczego efektywność energetyczna jest ważna?",
                    "Najlepsze sposoby na oszczędzanie energii",
                    "Nowoczesne technologie energooszczędne",
                    "Koszty i zwrot z inwestycji",
                    "Podsumowanie",
                ),
            ),
        ),
        SEOTopic(
            topic_name="Odnawialne źródła energii dla domu - kompletny przewodnik",
            category=Category.REACTIVE_POWER,
            keywords=[
                "odnawialne źródła energii",
                "panele słoneczne",
                "energia słoneczna",
                "fotowoltaika",
            ],
            seo_difficulty=55,
            related_products=[],
            outline=ArticleOutline(
                topic="Odnawialne źródła energii dla domu - kompletny przewodnik",
                keywords=("odnawialne źródła energii", "panele słoneczne"),
                target_length=2500,
                sections=(
                    "Wprowadzenie",
                    "Rodzaje odnawialnych źródeł energii",
                    "Panele słoneczne - jak działają?",
                    "Koszty instalacji i dotacje",
                    "Zwrot z inwestycji",
                    "Podsumowanie i rekomendacje",
                ),
            ),
        ),
    ]


def select_best_topic(topics: Sequence[SEOTopic]) -> Optional[SEOTopic]:
    """Highest priority topic; the first one wins a tie."""
    if not topics:
        return None
    return sorted(topics, key=lambda t: -t.priority)[0]
