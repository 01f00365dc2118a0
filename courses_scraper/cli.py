"""Command-line interface for courses-scraper."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from pydantic import BaseModel

from .config import get_settings
from .document import ParseError
from .fetcher import build_course_url
from .pipeline import scrape_document, scrape_many

logger = logging.getLogger(__name__)

DATASET_NAME = "courses.jsonl"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    p = argparse.ArgumentParser(
        prog="courses-scraper",
        description="Fetch course listing pages and extract course and author records.",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    # --- fetch ---
    fetch = sub.add_parser("fetch", help="Fetch and extract one or more courses")
    fetch.add_argument("identifiers", nargs="+", metavar="ID", help="Course slug or id")
    fetch.add_argument(
        "--workers", type=int, default=None,
        help="Parallel fetches (default: COURSES_WORKERS or 4)",
    )
    fetch.add_argument(
        "--save", action="store_true",
        help=f"Also write successful records to <datasets_dir>/{DATASET_NAME}",
    )

    # --- extract ---
    extract = sub.add_parser("extract", help="Extract courses from saved pages")
    extract.add_argument("files", nargs="+", type=Path, metavar="FILE")

    # --- url ---
    url = sub.add_parser("url", help="Print the listing URL for a course")
    url.add_argument("identifier", metavar="ID")

    return p


def _configure_logging(verbose: bool) -> None:
    """Set up root logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _write_jsonl(path: Path, rows: Iterable[BaseModel]) -> None:
    """Write models to JSONL atomically via tmp-file rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8", newline="\n") as f:
        count = 0
        for r in rows:
            f.write(r.model_dump_json())
            f.write("\n")
            count += 1
    tmp.replace(path)
    logger.info("Wrote %d rows to %s", count, path)


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _run_fetch(args: argparse.Namespace) -> int:
    s = get_settings()
    results = scrape_many(args.identifiers, settings=s, workers=args.workers)
    _print_json([r.model_dump(mode="json") for r in results])

    if args.save:
        s.ensure_dirs()
        courses = [r.course for r in results if r.course is not None]
        _write_jsonl(s.project_root / s.datasets_dir / DATASET_NAME, courses)

    return 0 if all(r.is_success for r in results) else 1


def _run_extract(files: List[Path]) -> int:
    s = get_settings()
    records = []
    failed = 0
    for path in files:
        body = path.read_text(encoding="utf-8", errors="replace")
        try:
            course = scrape_document(body, base_url=s.base_url)
        except ParseError as exc:
            logger.error("Cannot extract %s: %s", path, exc.reason)
            failed += 1
            continue
        records.append({"file": str(path), "course": course.model_dump(mode="json")})
    _print_json(records)
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    if args.cmd == "fetch":
        return _run_fetch(args)

    if args.cmd == "extract":
        return _run_extract(args.files)

    if args.cmd == "url":
        try:
            print(build_course_url(args.identifier))
        except ValueError as exc:
            logger.error("%s", exc)
            return 2
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
