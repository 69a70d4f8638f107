"""Maintenance commands: seeding, backfills and counter reconciliation."""
import argparse
import json
import logging

from sqlalchemy.orm import sessionmaker

from prep_admin.config import LOG_LEVEL
from prep_admin.database import SessionLocal, init_db
from prep_admin.errors import AdminError
from prep_admin.logging_setup import setup_console_logging
from prep_admin.services import breakdown_service, chapter_service, question_service
from prep_admin.services.auth_service import create_account
from prep_admin.services.document_store import DocumentStore

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Exam prep content maintenance")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("seed-chapters", help="Create the sample chapters")

    for name, help_text in (
        ("backfill-skill-tags", "Copy scalar skillTag into skillTags"),
        ("backfill-test-defaults", "Fill derived fields on Test-bank questions"),
        ("reconcile-counters", "Recompute chapter counters from collection sizes"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument(
            "chapters",
            nargs="*",
            help="Chapter ids (default: every chapter)",
        )

    slides = commands.add_parser("backfill-slide-order", help="Order legacy slides")
    slides.add_argument("chapter", help="Chapter id")
    slides.add_argument("breakdown", help="Breakdown id")

    account = commands.add_parser("create-account", help="Create a login account")
    account.add_argument("email")
    account.add_argument("password")
    account.add_argument("--display-name", default=None)

    return parser.parse_args(argv)


def _chapter_ids(store: DocumentStore, requested: list[str]) -> list[str]:
    if requested:
        return requested
    return [chapter["id"] for chapter in chapter_service.list_chapters(store)]


def run(args: argparse.Namespace, session_factory: sessionmaker) -> dict[str, object]:
    store = DocumentStore(session_factory)

    if args.command == "seed-chapters":
        return {"chapters": chapter_service.seed_chapters(store)}

    if args.command == "backfill-skill-tags":
        return {
            chapter_id: chapter_service.backfill_skill_tags(store, chapter_id)
            for chapter_id in _chapter_ids(store, args.chapters)
        }

    if args.command == "backfill-test-defaults":
        return {
            chapter_id: question_service.backfill_test_defaults(
                store, chapter_service.get_chapter(store, chapter_id)
            )
            for chapter_id in _chapter_ids(store, args.chapters)
        }

    if args.command == "reconcile-counters":
        return {
            chapter_id: chapter_service.reconcile_counters(store, chapter_id)
            for chapter_id in _chapter_ids(store, args.chapters)
        }

    if args.command == "backfill-slide-order":
        chapter = chapter_service.get_chapter(store, args.chapter)
        updated = breakdown_service.backfill_slide_order(store, chapter, args.breakdown)
        return {"updated": updated}

    if args.command == "create-account":
        db = session_factory()
        try:
            account = create_account(db, args.email, args.password, args.display_name)
            return {"uid": account.uid, "email": account.email}
        finally:
            db.close()

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    setup_console_logging(LOG_LEVEL)
    args = parse_args(argv)
    init_db()
    try:
        result = run(args, SessionLocal)
    except AdminError as exc:
        logger.error(f"{args.command} failed: {exc.message}")
        return 1
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
