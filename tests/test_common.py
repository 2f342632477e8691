"""Tests for shared common modules: config, models, database, exceptions."""

import threading
from datetime import datetime

import pytest

from src.common.config import Settings, load_provider_credentials
from src.common.database import Database, get_database, init_db, get_connection
from src.common.exceptions import (
    AllProvidersFailedError,
    ExternalServiceError,
    OutlineValidationError,
    ProviderError,
)
from src.common.models import (
    ApprovalStatus,
    BlogPost,
    Category,
    LogStatus,
    PostStatus,
    SocialMediaPost,
    SocialPlatform,
    Topic,
    TopicStatus,
    WriterName,
)


def _post(**overrides) -> BlogPost:
    data = dict(
        title="Kompensacja mocy biernej",
        content="<p>Treść</p>",
        meta_description="Opis.",
        keywords=["moc bierna"],
        ai_writer=WriterName.CLAUDE,
        seo_score=80,
        readability_score=70,
        engagement_score=60,
        total_score=69,
    )
    data.update(overrides)
    return BlogPost(**data)


class TestSettings:
    def test_defaults_when_file_missing(self, tmp_path):
        settings = Settings.load(tmp_path / "missing.yaml")
        assert settings.llm.timeout_seconds == 55.0
        assert settings.scheduler.days_of_week == [0, 3]
        assert settings.scheduler.timezone == "Europe/Warsaw"
        assert settings.workflow.auto_publish is False

    def test_yaml_overrides(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "scoring:\n  locale: en\nodoo:\n  url: https://erp.example.com\n  blog_id: 4\n",
            encoding="utf-8",
        )
        settings = Settings.load(path)
        assert settings.scoring.locale == "en"
        assert settings.odoo.blog_id == 4

    def test_odoo_api_key_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ODOO_API_KEY", "odoo-secret")
        settings = Settings.load(tmp_path / "missing.yaml")
        assert settings.odoo.api_key == "odoo-secret"

    def test_odoo_is_configured(self, tmp_path, monkeypatch):
        monkeypatch.delenv("ODOO_API_KEY", raising=False)
        monkeypatch.delenv("ODOO_URL", raising=False)
        settings = Settings.load(tmp_path / "missing.yaml")
        assert not settings.odoo.is_configured
        settings.odoo.url = "https://erp.example.com"
        settings.odoo.api_key = "k"
        settings.odoo.blog_id = 1
        assert settings.odoo.is_configured


class TestProviderCredentials:
    def test_blank_keys_are_left_out(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "g-key")
        monkeypatch.setenv("OPENAI_API_KEY", "   ")
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        creds = load_provider_credentials()
        assert creds == {WriterName.GEMINI: "g-key"}

    def test_no_keys(self, monkeypatch):
        for var in ("GEMINI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
            monkeypatch.delenv(var, raising=False)
        assert load_provider_credentials() == {}


class TestModels:
    def test_blog_post_defaults(self):
        post = _post()
        assert post.status == PostStatus.DRAFT
        assert post.approval_status == ApprovalStatus.PENDING

    def test_score_out_of_range_rejected(self):
        with pytest.raises(Exception):
            _post(seo_score=120)

    def test_topic_defaults(self):
        topic = Topic(topic_name="T")
        assert topic.category == Category.REACTIVE_POWER
        assert topic.status == TopicStatus.PENDING


class TestDatabase:
    def test_init_db_creates_tables(self, tmp_path):
        path = str(tmp_path / "init.db")
        init_db(path)
        conn = get_connection(path)
        tables = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        conn.close()
        assert {
            "blog_posts",
            "topics",
            "publication_log",
            "configuration",
            "social_media_posts",
        } <= tables

    def test_blog_post_roundtrip(self, db: Database):
        post_id = db.create_blog_post(_post())
        stored = db.get_blog_post(post_id)
        assert stored.id == post_id
        assert stored.ai_writer == WriterName.CLAUDE
        assert stored.keywords == ["moc bierna"]
        assert stored.total_score == 69
        assert stored.created_at is not None

    def test_missing_blog_post(self, db: Database):
        assert db.get_blog_post(999) is None

    def test_update_blog_post(self, db: Database):
        post_id = db.create_blog_post(_post())
        published = datetime(2026, 3, 2, 9, 0, 0)
        db.update_blog_post(
            post_id,
            odoo_post_id=42,
            status=PostStatus.PUBLISHED,
            published_date=published,
        )
        stored = db.get_blog_post(post_id)
        assert stored.odoo_post_id == 42
        assert stored.status == PostStatus.PUBLISHED
        assert stored.published_date == published

    def test_update_unknown_column_rejected(self, db: Database):
        post_id = db.create_blog_post(_post())
        with pytest.raises(ValueError):
            db.update_blog_post(post_id, total_score=100)

    def test_pending_topics_by_category(self, db: Database):
        first = db.create_topic(Topic(topic_name="A", keywords=["a"]))
        db.create_topic(
            Topic(topic_name="B", keywords=["b"], category=Category.SVG_COMPENSATORS)
        )
        assert [t.topic_name for t in db.get_pending_topics()] == ["A", "B"]
        svg = db.get_pending_topics(Category.SVG_COMPENSATORS)
        assert [t.topic_name for t in svg] == ["B"]

        db.mark_topic_used(first)
        used = db.get_topic(first)
        assert used.status == TopicStatus.USED
        assert used.used_at is not None
        assert [t.topic_name for t in db.get_pending_topics()] == ["B"]

    def test_topic_lists_roundtrip(self, db: Database):
        topic_id = db.create_topic(
            Topic(
                topic_name="Kompensator SVG",
                keywords=["kompensator svg", "svg"],
                related_products=["SVG 100"],
                outline=["Wprowadzenie", "Podsumowanie"],
                target_length=2000,
            )
        )
        topic = db.get_topic(topic_id)
        assert topic.keywords == ["kompensator svg", "svg"]
        assert topic.related_products == ["SVG 100"]
        assert topic.outline == ["Wprowadzenie", "Podsumowanie"]
        assert topic.target_length == 2000

    def test_configuration_upsert(self, db: Database):
        assert db.get_config("odoo_url") is None
        db.set_config("odoo_url", "https://a.example.com")
        db.set_config("odoo_url", "https://b.example.com")
        db.set_config("odoo_blog_id", "3")
        assert db.get_config("odoo_url") == "https://b.example.com"
        assert db.get_all_configs() == {
            "odoo_blog_id": "3",
            "odoo_url": "https://b.example.com",
        }

    def test_publication_log(self, db: Database):
        db.create_publication_log(LogStatus.FAILED, error_message="boom")
        post_id = db.create_blog_post(_post())
        db.create_publication_log(LogStatus.SUCCESS, post_id=post_id)
        logs = db.get_publication_logs()
        assert {log.status for log in logs} == {LogStatus.FAILED, LogStatus.SUCCESS}
        failed = next(log for log in logs if log.status == LogStatus.FAILED)
        assert failed.post_id is None
        assert failed.error_message == "boom"

    def test_social_media_posts(self, db: Database):
        post_id = db.create_blog_post(_post())
        db.create_social_media_post(
            SocialMediaPost(
                blog_post_id=post_id,
                platform=SocialPlatform.LINKEDIN,
                content="Nowy artykuł",
                hashtags=["energia", "mocbierna"],
            )
        )
        posts = db.get_social_media_posts(post_id)
        assert len(posts) == 1
        assert posts[0].platform == SocialPlatform.LINKEDIN
        assert posts[0].hashtags == ["energia", "mocbierna"]

    def test_sqlite_errors_are_wrapped(self, db: Database):
        with pytest.raises(ExternalServiceError):
            db.create_social_media_post(
                SocialMediaPost(
                    blog_post_id=12345,  # violates the foreign key
                    platform=SocialPlatform.TWITTER,
                    content="x",
                )
            )


class TestDatabaseSingleton:
    def test_same_instance(self, tmp_path):
        path = str(tmp_path / "shared.db")
        assert get_database(path) is get_database(path)

    def test_concurrent_first_use_creates_one_instance(self, tmp_path):
        path = str(tmp_path / "shared.db")
        seen = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            seen.append(id(get_database(path)))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(seen) == 8
        assert len(set(seen)) == 1


class TestExceptions:
    def test_provider_error_carries_writer(self):
        err = ProviderError("claude", "rate limited")
        assert err.writer == "claude"
        assert str(err) == "[claude] rate limited"

    def test_all_providers_failed_lists_errors(self):
        err = AllProvidersFailedError({"gemini": "timeout", "claude": "401"})
        assert err.errors == {"gemini": "timeout", "claude": "401"}
        assert "gemini: timeout" in str(err)

    def test_outline_validation_error(self):
        err = OutlineValidationError([{"field": "topic", "message": "required"}])
        assert err.errors[0]["field"] == "topic"
        assert "topic: required" in str(err)
