"""Tests for topic generation and seeding."""

import json
from unittest.mock import MagicMock, patch

from src.common.models import Category, Topic
from src.topics.generator import (
    detect_category,
    estimate_seo_difficulty,
    generate_topics_from_odoo,
    generate_trending_topics,
    select_best_topic,
    topic_from_category,
)
from src.topics.main import main, seed_from_odoo, seed_topics
from src.topics.models import SEOTopic

PRODUCTS = [
    {"id": i, "name": f"SVG {i}00", "category": "Kompensatory SVG"} for i in range(1, 5)
] + [
    {"id": 10, "name": "Dławik", "category": "Dławiki"},
    {"id": 11, "name": "Bateria", "category": "Baterie kondensatorów"},
]
CATEGORIES = [
    {"id": 1, "name": "Kompensatory SVG"},
    {"id": 2, "name": "Dławiki"},
    {"id": 3, "name": "Puste"},
]


class TestHeuristics:
    def test_detect_category(self):
        assert detect_category("Kompensatory SVG") == Category.SVG_COMPENSATORS
        assert detect_category("Baterie kondensatorów") == Category.REACTIVE_POWER

    def test_seo_difficulty_by_phrase_length(self):
        assert estimate_seo_difficulty("kompensator") == 75
        assert estimate_seo_difficulty("moc bierna") == 50
        assert estimate_seo_difficulty("kompensacja mocy biernej") == 30


class TestTopicGeneration:
    def test_from_catalogue(self):
        topics = generate_topics_from_odoo(PRODUCTS, CATEGORIES)

        # 2 categories with products + first 5 products
        assert len(topics) == 7
        svg = topics[0]
        assert svg.category == Category.SVG_COMPENSATORS
        assert svg.related_products == ["SVG 100", "SVG 200", "SVG 300"]
        assert svg.outline.target_length == 2000
        assert len(svg.outline.sections) == 6
        assert "svg 100" in svg.keywords
        assert "svg 100" not in svg.outline.keywords
        assert [t.related_products for t in topics[2:]] == [
            ["SVG 100"], ["SVG 200"], ["SVG 300"], ["SVG 400"], ["Dławik"]
        ]
        assert topics[2].outline.target_length == 1800

    def test_trending_topics(self):
        topics = generate_trending_topics()
        assert len(topics) == 2
        assert all(t.related_products == [] for t in topics)

    def test_select_best_topic(self):
        easy = topic_from_category("Kompensacja mocy biernej", [])  # difficulty 30
        linked = topic_from_category("Kompensatory SVG", ["A", "B", "C"])  # 50 - 30 links
        assert linked.priority == 80
        assert easy.priority == 70
        assert select_best_topic([easy, linked]) is linked
        assert select_best_topic([]) is None

    def test_select_best_topic_tie_keeps_first(self):
        first, second = generate_trending_topics()
        second.seo_difficulty = first.seo_difficulty
        assert select_best_topic([first, second]) is first

    def test_record_roundtrip(self, db):
        topic = topic_from_category("Kompensatory SVG", ["SVG 100"])
        topic_id = db.create_topic(topic.to_record())
        restored = SEOTopic.from_record(db.get_topic(topic_id))

        assert restored.topic_id == topic_id
        assert restored.outline.sections == topic.outline.sections
        assert restored.outline.keywords == tuple(topic.keywords)
        assert restored.outline.target_length == 2000

    def test_record_without_keywords_uses_name(self):
        restored = SEOTopic.from_record(Topic(id=1, topic_name="Moc bierna"))
        assert restored.outline.keywords == ("Moc bierna",)


class TestSeeding:
    def test_bundled_seed_file(self, db, project_root):
        count = seed_topics(project_root / "fixtures" / "blog_topics.json", db)
        assert count == 4
        assert len(db.get_pending_topics()) == 4

    def test_invalid_entries_skipped(self, db, tmp_path):
        path = tmp_path / "topics.json"
        path.write_text(
            json.dumps(
                [
                    {"title": "Kompensatory SVG", "keywords": ["svg"], "seoDifficulty": 40},
                    {"title": "Bez słów kluczowych", "keywords": []},
                    {"keywords": ["brak tytułu"]},
                ]
            ),
            encoding="utf-8",
        )
        assert seed_topics(path, db) == 1
        [topic] = db.get_pending_topics()
        assert topic.seo_difficulty == 40
        assert topic.target_length == 1800

    def test_seed_from_odoo(self, db):
        db.set_config("odoo_url", "https://erp.example.com")
        db.set_config("odoo_api_key", "k")
        client = MagicMock()
        client.get_products.return_value = PRODUCTS
        client.get_categories.return_value = CATEGORIES

        with patch("src.topics.main.OdooClient.from_settings", return_value=client) as build:
            count = seed_from_odoo(db)

        assert build.call_args.args[0].url == "https://erp.example.com"
        assert count == 9
        assert len(db.get_pending_topics()) == 9

    def test_cli(self, tmp_path, project_root, capsys):
        db_path = tmp_path / "cli.db"
        main(["--input", str(project_root / "fixtures" / "blog_topics.json"), "--db", str(db_path)])
        assert "Seeded 4 topics" in capsys.readouterr().out
