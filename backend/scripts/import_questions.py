#!/usr/bin/env python3
"""Load a PROVIQUIZ text export into the question bank.

Example:
    python scripts/import_questions.py data/PROVIQUIZ.txt --replace --status published
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from app.core.logging import get_logger, setup_logging
from app.db.session import session_scope
from app.models.question import QuestionStatus
from app.services.importer import ParseReport, QuestionWriter, parse_text
from app.services.importer.text_parser import SOURCE_NAME
from app.services.question_bank import next_question_id

logger = get_logger(__name__)


def import_file(
    path: Path,
    replace: bool = False,
    status: str = QuestionStatus.DRAFT.value,
    dry_run: bool = False,
) -> ParseReport:
    """Parse ``path`` and write its questions in a single transaction.

    ``replace`` first removes every question an earlier import of the same
    source created, so ids restart after whatever is left in the bank.
    ``dry_run`` parses and numbers the questions but writes nothing.
    """
    raw = path.read_text(encoding="utf-8")
    with session_scope() as db:
        writer = QuestionWriter(db)
        if replace and not dry_run:
            writer.delete_source(SOURCE_NAME)
            db.flush()
        report = parse_text(raw, first_id=next_question_id(db))
        if dry_run:
            db.rollback()
        else:
            writer.insert(report.questions, status=status)
    logger.info(
        "Question file imported",
        extra={
            "path": str(path),
            "parsed": len(report.questions),
            "skipped": report.skipped_blocks,
            "dry_run": dry_run,
        },
    )
    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", type=Path)
    parser.add_argument("--replace", action="store_true", help=f"remove earlier {SOURCE_NAME} imports first")
    parser.add_argument("--status", choices=[s.value for s in QuestionStatus], default=QuestionStatus.DRAFT.value)
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args(argv)

    if not args.path.is_file():
        print(f"✗ No such file: {args.path}", file=sys.stderr)
        return 1

    setup_logging()
    try:
        report = import_file(args.path, replace=args.replace, status=args.status, dry_run=args.dry_run)
    except SQLAlchemyError as e:
        print(f"✗ Import failed: {e}", file=sys.stderr)
        return 1
    action = "Would insert" if args.dry_run else "Inserted"
    print(f"✓ {action} {len(report.questions)} questions, skipped {report.skipped_blocks} blocks")
    return 0


if __name__ == "__main__":
    sys.exit(main())
