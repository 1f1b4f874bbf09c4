"""CLI entry point for the post collection.

Usage:
    python -m src.post_collection.main
    python -m src.post_collection.main --tag react --limit 5
    python -m src.post_collection.main --source data/posts.yaml --from 2024-01-01 --sort titleAsc
    python -m src.post_collection.main --tags
    python -m src.post_collection.main --related 1 --output related.json
"""

from __future__ import annotations

import argparse
import json
import sys

from pydantic import ValidationError

from src.common.config import settings
from src.common.logging import setup_logging

from .loader import load_records
from .query import QuerySpec, SortOrder
from .store import PostCollection

logger = setup_logging(level=settings.logging.level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Blog post collection query tool")
    parser.add_argument(
        "--source",
        type=str,
        help="YAML/JSON content file (default: settings.collection.seed_path)",
    )
    parser.add_argument("--tag", type=str, help="Exact tag label")
    parser.add_argument("--author", type=str, help="Exact author name")
    parser.add_argument("--from", dest="date_from", type=str, help="Earliest date, YYYY-MM-DD")
    parser.add_argument("--to", dest="date_to", type=str, help="Latest date, YYYY-MM-DD")
    parser.add_argument("--search", type=str, help="Case-insensitive text in title/excerpt")
    parser.add_argument(
        "--sort",
        choices=[s.value for s in SortOrder],
        default=SortOrder.DATE_DESC.value,
    )
    parser.add_argument("--limit", type=int, help="Maximum number of results")
    parser.add_argument("--offset", type=int, default=0, help="Results to skip")
    parser.add_argument(
        "--tags",
        action="store_true",
        help="Print post counts per tag instead of querying",
    )
    parser.add_argument("--related", type=str, metavar="ID", help="Posts related to ID")
    parser.add_argument("--output", type=str, help="Output JSON file path")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any record was rejected",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    source = args.source or settings.seed_abs_path
    try:
        records = load_records(source)
    except (OSError, ValueError) as e:
        logger.error("Could not load %s: %s", source, e)
        return 1

    collection = PostCollection()
    report = collection.ingest(records)
    for failure in report.failures:
        logger.warning(
            "  #%d %s [%s]: %s",
            failure.index,
            failure.record_id or "-",
            failure.kind.value,
            "; ".join(failure.reasons),
        )
    if args.strict and not report.ok:
        logger.error("%d record(s) rejected in strict mode", report.failed_count)
        return 1

    engine = collection.engine
    if args.tags:
        output_data = engine.tag_counts()
        for tag, count in output_data.items():
            logger.info("  %s: %d", tag, count)
    else:
        if args.related:
            posts = engine.related(args.related, limit=args.limit or 3)
        else:
            try:
                spec = QuerySpec(
                    tag=args.tag,
                    author=args.author,
                    date_from=args.date_from,
                    date_to=args.date_to,
                    text_search=args.search,
                    sort=args.sort,
                    limit=args.limit,
                    offset=args.offset,
                )
            except ValidationError as e:
                parser.error(str(e))
            posts = engine.query(spec)

        logger.info("%d post(s) matched", len(posts))
        for post in posts:
            logger.info("  [%s] %s %s (%s)", post.id, post.date.isoformat(), post.title, ", ".join(sorted(post.tags)))
        output_data = [p.to_dict() for p in posts]

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(output_data, f, ensure_ascii=False, indent=2)
        logger.info("Output written to %s", args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
