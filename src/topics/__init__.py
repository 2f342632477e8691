# Topics: SEO topic generation and seeding
from .generator import (
    generate_topics_from_odoo,
    generate_trending_topics,
    select_best_topic,
)
from .models import SEOTopic, TopicSeed

__all__ = [
    "generate_topics_from_odoo",
    "generate_trending_topics",
    "select_best_topic",
    "SEOTopic",
    "TopicSeed",
]
