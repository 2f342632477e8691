"""CLI entry point for seeding blog topics.

Usage:
    python -m src.topics.main --input fixtures/blog_topics.json
    python -m src.topics.main --from-odoo
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from src.common.config import FIXTURES_DIR
from src.common.database import Database, get_database
from src.common.exceptions import ContentAgentError
from src.common.logging import configure_cli_logging, setup_logging
from src.publisher.odoo_client import OdooClient
from src.publisher.workflow import resolve_odoo_settings

from .generator import generate_topics_from_odoo, generate_trending_topics
from .models import TopicSeed

logger = setup_logging(module_name="topics.main")


def seed_topics(path: Path, db: Database) -> int:
    """Insert every valid entry of a seed file as a pending topic.

    Invalid entries are logged and skipped.

    Returns:
        Number of topics inserted
    """
    with open(path, "r", encoding="utf-8") as f:
        entries = json.load(f)

    inserted = 0
    for index, entry in enumerate(entries):
        try:
            seed = TopicSeed.model_validate(entry)
        except ValidationError as exc:
            logger.error("Skipping topic #%d: %s", index, exc.errors()[0]["msg"])
            continue
        db.create_topic(seed.to_record())
        inserted += 1
        logger.info("Added topic: %s", seed.title)

    logger.info("Seeded %d/%d topics from %s", inserted, len(entries), path)
    return inserted


def seed_from_odoo(db: Database) -> int:
    """Generate topics from the Odoo catalogue plus the trending list and store them."""
    client = OdooClient.from_settings(resolve_odoo_settings(db))
    topics = generate_topics_from_odoo(client.get_products(), client.get_categories())
    topics += generate_trending_topics()
    for topic in topics:
        db.create_topic(topic.to_record())
    return len(topics)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed blog topics into the datastore")
    parser.add_argument(
        "--input",
        type=Path,
        default=FIXTURES_DIR / "blog_topics.json",
        help="Topic seed JSON (default: fixtures/blog_topics.json)",
    )
    parser.add_argument(
        "--from-odoo",
        action="store_true",
        help="Generate topics from the Odoo catalogue instead of a file",
    )
    parser.add_argument("--db", help="SQLite database path (default from settings)")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)
    configure_cli_logging(args.verbose)

    db = get_database(args.db)
    try:
        if args.from_odoo:
            count = seed_from_odoo(db)
        else:
            if not args.input.exists():
                logger.error("Seed file not found: %s", args.input)
                sys.exit(1)
            count = seed_topics(args.input, db)
    except ContentAgentError as exc:
        logger.error("Seeding failed: %s", exc)
        sys.exit(1)

    print(f"\nSeeded {count} topics")


if __name__ == "__main__":
    main()
