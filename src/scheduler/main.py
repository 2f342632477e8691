"""CLI entry point for the SEO content agent.

Usage:
    python -m src.scheduler.main generate --payload outline.json
    python -m src.scheduler.main generate --topic "Moc bierna" --keywords "moc bierna,kompensacja"
    python -m src.scheduler.main run-cycle [--category kompensatory_svg]
    python -m src.scheduler.main serve
    python -m src.scheduler.main approve 12
    python -m src.scheduler.main reject 12 --reason "Off topic"
    python -m src.scheduler.main publish 12
    python -m src.scheduler.main config set odoo_blog_id 3
    python -m src.scheduler.main config list
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from src.common.config import load_provider_credentials, settings
from src.common.database import get_database
from src.common.exceptions import ContentAgentError, OutlineValidationError
from src.common.logging import configure_cli_logging, setup_logging
from src.common.models import Category
from src.optimizer.scorer import cta_phrases_for
from src.optimizer.selector import rank_articles
from src.publisher.workflow import ArticleWorkflow
from src.writers.generator import generate_all
from src.writers.validation import parse_outline

from .cycle import PublicationCycle
from .service import PublicationScheduler

logger = setup_logging(module_name="scheduler.main")


def _outline_payload(args: argparse.Namespace) -> dict[str, Any]:
    if args.payload:
        with open(args.payload, "r", encoding="utf-8") as f:
            return json.load(f)
    payload: dict[str, Any] = {
        "topic": args.topic or "",
        "keywords": [k.strip() for k in (args.keywords or "").split(",") if k.strip()],
        "targetLength": args.target_length,
    }
    if args.sections:
        payload["sections"] = [s.strip() for s in args.sections.split(",") if s.strip()]
    if args.category:
        payload["category"] = args.category
    return payload


async def cmd_generate(args: argparse.Namespace) -> None:
    outline = parse_outline(_outline_payload(args))
    articles = await generate_all(outline, load_provider_credentials())
    ranked = rank_articles(
        articles, outline.keywords, cta_phrases=cta_phrases_for(settings.scoring.locale)
    )

    print(f"\nGenerated {len(ranked)} article(s) for: {outline.topic}")
    for item in ranked:
        print(f"  {item.writer.value:8s} {item.score.summary()}  words={item.word_count}")

    best = ranked[0]
    if args.output:
        args.output.write_text(best.optimized_content, encoding="utf-8")
        print(f"\nBest article ({best.writer.value}) written to: {args.output}")


async def cmd_run_cycle(args: argparse.Namespace) -> None:
    category = Category(args.category) if args.category else None
    result = await PublicationCycle().run(category)
    print(
        f"\nStored post {result.post_id}: '{result.topic_name}' "
        f"by {result.writer.value} ({result.total_score}/100) in {result.duration_seconds}s"
    )
    if result.odoo_post_id is not None:
        print(f"Published to Odoo (ID: {result.odoo_post_id})")


async def cmd_serve(args: argparse.Namespace) -> None:
    scheduler = PublicationScheduler()
    scheduler.start(settings.scheduler)
    print(f"\nScheduler running, next publication: {scheduler.next_run}")
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()


async def cmd_approve(args: argparse.Namespace) -> None:
    drafts = await ArticleWorkflow().approve(args.post_id)
    print(f"\nPost {args.post_id} approved, {len(drafts)} social media drafts created")


async def cmd_reject(args: argparse.Namespace) -> None:
    await ArticleWorkflow().reject(args.post_id, args.reason)
    print(f"\nPost {args.post_id} rejected")


async def cmd_publish(args: argparse.Namespace) -> None:
    odoo_post_id = await ArticleWorkflow().publish(args.post_id)
    print(f"\nPost {args.post_id} published (Odoo ID: {odoo_post_id})")


async def cmd_config(args: argparse.Namespace) -> None:
    db = get_database()
    if args.action == "set":
        db.set_config(args.key, args.value)
        print(f"{args.key} = {args.value}")
    elif args.action == "get":
        value = db.get_config(args.key)
        print(value if value is not None else "")
    else:
        for key, value in db.get_all_configs().items():
            shown = "****" if "key" in key or "password" in key else value
            print(f"{key} = {shown}")


COMMANDS = {
    "generate": cmd_generate,
    "run-cycle": cmd_run_cycle,
    "serve": cmd_serve,
    "approve": cmd_approve,
    "reject": cmd_reject,
    "publish": cmd_publish,
    "config": cmd_config,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SEO content agent")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate and score articles for one outline")
    gen.add_argument("--payload", type=Path, help="Outline JSON file")
    gen.add_argument("--topic")
    gen.add_argument("--keywords", help="Comma-separated keywords")
    gen.add_argument("--sections", help="Comma-separated section headings")
    gen.add_argument("--target-length", type=int, default=settings.content.default_target_length)
    gen.add_argument("--category", help="kompensacja_mocy_biernej or kompensatory_svg")
    gen.add_argument("--output", type=Path, help="Write the best article HTML here")

    cycle = sub.add_parser("run-cycle", help="Run one publication cycle now")
    cycle.add_argument("--category", choices=[c.value for c in Category])

    sub.add_parser("serve", help="Run the weekly publication scheduler")

    approve = sub.add_parser("approve", help="Approve a pending post")
    approve.add_argument("post_id", type=int)

    reject = sub.add_parser("reject", help="Reject a pending post")
    reject.add_argument("post_id", type=int)
    reject.add_argument("--reason")

    publish = sub.add_parser("publish", help="Publish an approved post to Odoo")
    publish.add_argument("post_id", type=int)

    config = sub.add_parser("config", help="Read or write runtime configuration")
    config.add_argument("action", choices=["get", "set", "list"])
    config.add_argument("key", nargs="?")
    config.add_argument("value", nargs="?")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(args.verbose)

    if args.command == "config" and args.action in ("get", "set") and not args.key:
        parser.error("config get/set needs a key")
    if args.command == "config" and args.action == "set" and args.value is None:
        parser.error("config set needs a value")

    try:
        asyncio.run(COMMANDS[args.command](args))
    except OutlineValidationError as exc:
        for err in exc.errors:
            logger.error("Invalid outline field %s: %s", err["field"], err["message"])
        sys.exit(2)
    except ContentAgentError as exc:
        logger.error("%s failed: %s", args.command, exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
