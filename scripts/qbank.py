#!/usr/bin/env python
"""
Command-line access to the question bank.

Browse questions through the subject/topic/subtopic taxonomy and the
enumerated filters, and export a subset as a PDF.

Usage:
    python scripts/qbank.py taxonomy [--subject S] [--topic T]
    python scripts/qbank.py list [filters] [--pages N | --all]
    python scripts/qbank.py export [filters] (--ids 1,2,3 | --all-visible)
    python scripts/qbank.py delete ID

Filters:
    --subject, --topic, --subtopic, --source, --difficulty, --type, --format

Examples:
    python scripts/qbank.py list --subject Polity --topic JUDICIARY
    python scripts/qbank.py export --subject Economy --all-visible --listing
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import config, DIFFICULTIES, FORMATS, QUESTION_TYPES
from config.logging_config import setup_logging, get_logger
from src.backend import QuestionBankClient
from src.catalog import (
    QuestionBankError,
    QuestionBankSession,
    RetrievalMode,
    load_taxonomy,
)

logger = get_logger("cli")

# Columns shown by the list command
DISPLAY_COLUMNS = [
    "id",
    "subject",
    "topic",
    "subtopic",
    "question_type",
    "format",
    "difficulty",
    "source",
]

# Hierarchy first so the cascade never clears a value given on the command line
FILTER_ARGUMENTS = [
    ("subject", "subject"),
    ("topic", "topic"),
    ("subtopic", "subtopic"),
    ("source", "source"),
    ("difficulty", "difficulty"),
    ("question_type", "type"),
    ("format", "format"),
]


def parse_ids(value: str) -> List[int]:
    """Parse a comma-separated list of question ids."""
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid id list: {value!r}")


def add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the seven filter dimensions as options."""
    group = parser.add_argument_group("filters")
    group.add_argument("--subject", help="Subject (see 'taxonomy')")
    group.add_argument("--topic", help="Topic within the subject")
    group.add_argument("--subtopic", help="Subtopic within the topic")
    group.add_argument("--source", help="Source, e.g. PYQ or Mock Test")
    group.add_argument("--difficulty", choices=DIFFICULTIES)
    group.add_argument("--type", dest="type", choices=QUESTION_TYPES, help="Question type")
    group.add_argument("--format", choices=FORMATS, help="Question format")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse and export the question bank",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--api-url",
        default=config.backend.base_url,
        help="Question backend URL",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.app.log_level,
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    taxonomy_parser = subparsers.add_parser("taxonomy", help="Show taxonomy options")
    taxonomy_parser.add_argument("--subject", help="List topics of this subject")
    taxonomy_parser.add_argument("--topic", help="List subtopics of this topic")

    list_parser = subparsers.add_parser("list", help="List matching questions")
    add_filter_arguments(list_parser)
    _add_loading_arguments(list_parser)

    export_parser = subparsers.add_parser("export", help="Export questions to PDF")
    add_filter_arguments(export_parser)
    _add_loading_arguments(export_parser)
    scope = export_parser.add_mutually_exclusive_group(required=True)
    scope.add_argument("--ids", type=parse_ids, help="Comma-separated ids to export")
    scope.add_argument(
        "--all-visible",
        action="store_true",
        help="Export every loaded question",
    )
    export_parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.export.exports_path,
        help="Directory for the exported file",
    )
    export_parser.add_argument(
        "--listing",
        action="store_true",
        help="Also write a CSV listing of the loaded questions",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a question")
    delete_parser.add_argument("id", type=int, help="Question id")

    return parser


def _add_loading_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--page-size",
        type=int,
        default=config.query.page_size,
        help="Questions per page",
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Number of pages to load",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Load every matching question in one request",
    )


def show_taxonomy(args: argparse.Namespace) -> int:
    """Print subjects, topics of a subject, or subtopics of a topic."""
    taxonomy = load_taxonomy()

    if args.topic and not args.subject:
        print("--topic requires --subject", file=sys.stderr)
        return 2

    if args.subject and args.topic:
        options = taxonomy.subtopics(args.subject, args.topic)
    elif args.subject:
        options = taxonomy.topics(args.subject)
    else:
        options = taxonomy.subjects()

    if not options:
        print("No options found", file=sys.stderr)
        return 1

    for option in options:
        print(option)
    return 0


async def load_questions(session: QuestionBankSession, args: argparse.Namespace) -> None:
    """Apply command-line filters and load the requested pages."""
    for dimension, attr in FILTER_ARGUMENTS:
        value = getattr(args, attr, None)
        if value:
            session.filters.set_dimension(dimension, value)

    await session.apply()

    extra_pages = max(0, args.pages - 1)
    if session.mode is RetrievalMode.PAGINATED and extra_pages:
        for _ in tqdm(range(extra_pages), desc="Loading pages", unit="page"):
            if not await session.load_more():
                break

    snapshot = session.results.snapshot
    logger.info(
        f"{len(session.results)} questions loaded for "
        f"{snapshot.get_summary() if snapshot else 'all questions'}"
    )


def print_results(session: QuestionBankSession) -> None:
    df = session.results.to_dataframe(DISPLAY_COLUMNS)
    if df.empty:
        print("No questions match the filters")
        return
    print(df.to_string(index=False))
    if session.results.has_more:
        print(f"\n{len(df)} questions shown; more available (use --pages or --all)")


async def run_command(args: argparse.Namespace) -> int:
    mode = RetrievalMode.FULL if getattr(args, "all", False) else RetrievalMode.PAGINATED

    async with QuestionBankClient(base_url=args.api_url) as client:
        session = QuestionBankSession(
            client,
            mode=mode,
            page_size=getattr(args, "page_size", None),
            export_dir=getattr(args, "output_dir", None),
        )

        if args.command == "delete":
            await session.delete(args.id)
            print(f"Deleted question {args.id}")
            return 0

        await load_questions(session, args)

        if args.command == "list":
            print_results(session)
            return 0

        # export
        if args.all_visible:
            artifact = await session.export_all_visible()
        else:
            missing = [i for i in args.ids if i not in session.results]
            if missing:
                print(
                    f"Questions not in the loaded results: {missing}. "
                    f"Adjust the filters or load more pages.",
                    file=sys.stderr,
                )
                return 1
            for record_id in args.ids:
                if not session.selection.is_selected(record_id):
                    session.toggle(record_id)
            artifact = await session.export_selected()

        filepath = session.exporter.save(artifact, args.output_dir)
        print(f"Exported {len(artifact.request.ids)} questions to {filepath}")

        if args.listing:
            listing = session.exporter.export_listing(
                session.results,
                args.output_dir / config.export.listing_filename,
            )
            print(f"Listing written to {listing}")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the question bank CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level)

    if args.command == "taxonomy":
        return show_taxonomy(args)

    try:
        return asyncio.run(run_command(args))
    except QuestionBankError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
