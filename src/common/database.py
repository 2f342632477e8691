"""SQLite database utilities for the SEO content agent.

Provides connection management, table initialization and the record-level
operations used by the publication cycle and the approval workflow.

The process shares one Database instance. get_database() creates it lazily
behind a double-checked lock so concurrent callers never open two handles.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from .config import settings
from .exceptions import ExternalServiceError
from .models import (
    BlogPost,
    Category,
    LogStatus,
    PublicationLogEntry,
    SocialMediaPost,
    Topic,
    TopicStatus,
)

logger = logging.getLogger(__name__)

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS blog_posts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    odoo_post_id INTEGER,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    meta_description TEXT,
    keywords TEXT,
    ai_writer TEXT NOT NULL,
    seo_score INTEGER,
    readability_score INTEGER,
    engagement_score INTEGER,
    total_score INTEGER,
    status TEXT NOT NULL DEFAULT 'draft',
    approval_status TEXT NOT NULL DEFAULT 'pending',
    published_date TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS topics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    topic_name TEXT NOT NULL,
    category TEXT NOT NULL,
    keywords TEXT NOT NULL,
    seo_difficulty INTEGER,
    related_products TEXT,
    outline TEXT,
    target_length INTEGER NOT NULL DEFAULT 1800,
    status TEXT NOT NULL DEFAULT 'pending',
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    used_at TEXT
);

CREATE TABLE IF NOT EXISTS publication_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    post_id INTEGER,
    status TEXT NOT NULL,
    error_message TEXT,
    published_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS configuration (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS social_media_posts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    blog_post_id INTEGER NOT NULL,
    platform TEXT NOT NULL,
    content TEXT NOT NULL,
    hashtags TEXT,
    odoo_post_id INTEGER,
    status TEXT NOT NULL DEFAULT 'draft',
    published_at TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    FOREIGN KEY (blog_post_id) REFERENCES blog_posts(id)
);

CREATE INDEX IF NOT EXISTS idx_topics_status_category ON topics(status, category);
CREATE INDEX IF NOT EXISTS idx_social_blog_post ON social_media_posts(blog_post_id);
"""

# Columns of blog_posts that update_blog_post() may touch
_BLOG_POST_UPDATABLE = {
    "odoo_post_id",
    "title",
    "content",
    "meta_description",
    "status",
    "approval_status",
    "published_date",
}


def get_connection(db_path: str | None = None) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled."""
    path = db_path or settings.database.db_path
    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(db_path: str | None = None) -> None:
    """Create all tables if they don't exist."""
    conn = get_connection(db_path)
    try:
        conn.executescript(_CREATE_TABLES_SQL)
        conn.commit()
    finally:
        conn.close()


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _dump(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, Enum):
        return value.value
    return value


def _loads_list(raw: str | None) -> list:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Malformed JSON list in database column: %r", raw[:80])
        return []
    return data if isinstance(data, list) else []


class Database:
    """Record-level access to the agent's SQLite datastore.

    Every sqlite3 failure is re-raised as ExternalServiceError so callers
    handle datastore and CMS outages the same way.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or settings.database.db_path
        self._conn = get_connection(self.db_path)
        self._conn.executescript(_CREATE_TABLES_SQL)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
            return cursor
        except sqlite3.Error as exc:
            self._conn.rollback()
            logger.error("Database error on %s: %s", sql.split()[0], exc)
            raise ExternalServiceError(f"Database operation failed: {exc}") from exc

    # --- Blog posts ---

    def create_blog_post(self, post: BlogPost) -> int:
        """Insert a blog post and return its id."""
        cursor = self._execute(
            """
            INSERT INTO blog_posts (
                odoo_post_id, title, content, meta_description, keywords,
                ai_writer, seo_score, readability_score, engagement_score,
                total_score, status, approval_status, published_date, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                post.odoo_post_id,
                post.title,
                post.content,
                post.meta_description,
                json.dumps(post.keywords, ensure_ascii=False),
                post.ai_writer.value,
                post.seo_score,
                post.readability_score,
                post.engagement_score,
                post.total_score,
                post.status.value,
                post.approval_status.value,
                _dump(post.published_date),
                _dump(post.created_at) or _now(),
            ),
        )
        return cursor.lastrowid  # type: ignore[return-value]

    def get_blog_post(self, post_id: int) -> BlogPost | None:
        row = self._execute(
            "SELECT * FROM blog_posts WHERE id = ?", (post_id,)
        ).fetchone()
        return self._row_to_blog_post(row) if row else None

    def list_blog_posts(self) -> list[BlogPost]:
        rows = self._execute(
            "SELECT * FROM blog_posts ORDER BY created_at DESC, id DESC"
        ).fetchall()
        return [self._row_to_blog_post(r) for r in rows]

    def update_blog_post(self, post_id: int, **fields: Any) -> None:
        """Update selected columns of a blog post.

        Raises:
            ValueError: If a field is not an updatable column.
        """
        unknown = set(fields) - _BLOG_POST_UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update blog_posts columns: {sorted(unknown)}")
        if not fields:
            return
        assignments = ", ".join(f"{name} = ?" for name in fields)
        values = tuple(_dump(v) for v in fields.values())
        self._execute(
            f"UPDATE blog_posts SET {assignments} WHERE id = ?",
            values + (post_id,),
        )

    @staticmethod
    def _row_to_blog_post(row: sqlite3.Row) -> BlogPost:
        return BlogPost(
            id=row["id"],
            odoo_post_id=row["odoo_post_id"],
            title=row["title"],
            content=row["content"],
            meta_description=row["meta_description"] or "",
            keywords=_loads_list(row["keywords"]),
            ai_writer=row["ai_writer"],
            seo_score=row["seo_score"] or 0,
            readability_score=row["readability_score"] or 0,
            engagement_score=row["engagement_score"] or 0,
            total_score=row["total_score"] or 0,
            status=row["status"],
            approval_status=row["approval_status"],
            published_date=row["published_date"],
            created_at=row["created_at"],
        )

    # --- Topics ---

    def create_topic(self, topic: Topic) -> int:
        cursor = self._execute(
            """
            INSERT INTO topics (
                topic_name, category, keywords, seo_difficulty,
                related_products, outline, target_length, status, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                topic.topic_name,
                topic.category.value,
                json.dumps(topic.keywords, ensure_ascii=False),
                topic.seo_difficulty,
                json.dumps(topic.related_products, ensure_ascii=False),
                json.dumps(topic.outline, ensure_ascii=False),
                topic.target_length,
                topic.status.value,
                _dump(topic.created_at) or _now(),
            ),
        )
        return cursor.lastrowid  # type: ignore[return-value]

    def get_topic(self, topic_id: int) -> Topic | None:
        row = self._execute("SELECT * FROM topics WHERE id = ?", (topic_id,)).fetchone()
        return self._row_to_topic(row) if row else None

    def get_pending_topics(self, category: Category | None = None) -> list[Topic]:
        """Pending topics, oldest first, optionally limited to one category."""
        if category is None:
            rows = self._execute(
                "SELECT * FROM topics WHERE status = ? ORDER BY id",
                (TopicStatus.PENDING.value,),
            ).fetchall()
        else:
            rows = self._execute(
                "SELECT * FROM topics WHERE status = ? AND category = ? ORDER BY id",
                (TopicStatus.PENDING.value, category.value),
            ).fetchall()
        return [self._row_to_topic(r) for r in rows]

    def mark_topic_used(self, topic_id: int) -> None:
        self._execute(
            "UPDATE topics SET status = ?, used_at = ? WHERE id = ?",
            (TopicStatus.USED.value, _now(), topic_id),
        )

    @staticmethod
    def _row_to_topic(row: sqlite3.Row) -> Topic:
        return Topic(
            id=row["id"],
            topic_name=row["topic_name"],
            category=row["category"],
            keywords=_loads_list(row["keywords"]),
            seo_difficulty=row["seo_difficulty"] if row["seo_difficulty"] is not None else 50,
            related_products=_loads_list(row["related_products"]),
            outline=_loads_list(row["outline"]),
            target_length=row["target_length"],
            status=row["status"],
            created_at=row["created_at"],
            used_at=row["used_at"],
        )

    # --- Publication log ---

    def create_publication_log(
        self,
        status: LogStatus,
        post_id: int | None = None,
        error_message: str | None = None,
    ) -> int:
        cursor = self._execute(
            """
            INSERT INTO publication_log (post_id, status, error_message, published_at)
            VALUES (?, ?, ?, ?)
            """,
            (post_id, status.value, error_message, _now()),
        )
        return cursor.lastrowid  # type: ignore[return-value]

    def get_publication_logs(self) -> list[PublicationLogEntry]:
        rows = self._execute(
            "SELECT * FROM publication_log ORDER BY published_at DESC, id DESC"
        ).fetchall()
        return [
            PublicationLogEntry(
                id=r["id"],
                post_id=r["post_id"],
                status=r["status"],
                error_message=r["error_message"],
                published_at=r["published_at"],
            )
            for r in rows
        ]

    # --- Configuration ---

    def get_config(self, key: str) -> str | None:
        row = self._execute(
            "SELECT value FROM configuration WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def get_all_configs(self) -> dict[str, str]:
        rows = self._execute("SELECT key, value FROM configuration ORDER BY key").fetchall()
        return {r["key"]: r["value"] for r in rows}

    def set_config(self, key: str, value: str) -> None:
        self._execute(
            """
            INSERT INTO configuration (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                           updated_at = excluded.updated_at
            """,
            (key, value, _now()),
        )

    # --- Social media posts ---

    def create_social_media_post(self, post: SocialMediaPost) -> int:
        cursor = self._execute(
            """
            INSERT INTO social_media_posts (
                blog_post_id, platform, content, hashtags, odoo_post_id,
                status, published_at, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                post.blog_post_id,
                post.platform.value,
                post.content,
                json.dumps(post.hashtags, ensure_ascii=False),
                post.odoo_post_id,
                post.status.value,
                _dump(post.published_at),
                _dump(post.created_at) or _now(),
            ),
        )
        return cursor.lastrowid  # type: ignore[return-value]

    def update_social_media_post_content(self, social_post_id: int, content: str) -> None:
        self._execute(
            "UPDATE social_media_posts SET content = ? WHERE id = ?",
            (content, social_post_id),
        )

    def get_social_media_posts(self, blog_post_id: int) -> list[SocialMediaPost]:
        rows = self._execute(
            "SELECT * FROM social_media_posts WHERE blog_post_id = ? ORDER BY id",
            (blog_post_id,),
        ).fetchall()
        return [
            SocialMediaPost(
                id=r["id"],
                blog_post_id=r["blog_post_id"],
                platform=r["platform"],
                content=r["content"],
                hashtags=_loads_list(r["hashtags"]),
                odoo_post_id=r["odoo_post_id"],
                status=r["status"],
                published_at=r["published_at"],
                created_at=r["created_at"],
            )
            for r in rows
        ]


_database: Database | None = None
_database_lock = threading.Lock()


def get_database(db_path: str | None = None) -> Database:
    """Return the process-wide Database, creating it on first use."""
    global _database
    if _database is None:
        with _database_lock:
            if _database is None:
                _database = Database(db_path)
                logger.info("Database opened at %s", _database.db_path)
    return _database


def reset_database() -> None:
    """Close and forget the shared Database (tests, shutdown)."""
    global _database
    with _database_lock:
        if _database is not None:
            _database.close()
            _database = None
