# main.py
import argparse
import asyncio
import logging
from collections import Counter
from pathlib import Path
from typing import List, Optional

from .config import LOG_DIR, LOG_FILE, USE_AI, WORKER_COUNT

# Heavy modules are imported lazily inside CLI branches to avoid import-time failures


# ---------- Logging Setup ----------
def setup_logging() -> None:
    LOG_DIR.mkdir(exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(),
        ],
    )


# ---------- Commands ----------
def run_ingest(args: argparse.Namespace) -> int:
    from tabulate import tabulate

    from .db import MongoDBManager
    from .extractor import ExtractionOrchestrator, ingest_resumes
    from .utils import AIAnalyzer, build_ai_client

    folder = Path(args.folder)
    if not folder.exists():
        raise FileNotFoundError(f"Resume folder not found: {folder}")

    analyzer = None
    if USE_AI and not args.no_ai:
        client = build_ai_client()
        if client is not None:
            analyzer = AIAnalyzer(client)

    store = MongoDBManager()
    store.ensure_indexes()
    orchestrator = ExtractionOrchestrator(analyzer=analyzer, store=store)

    results = asyncio.run(
        ingest_resumes(folder, args.user, orchestrator, workers=args.workers, force=args.force)
    )

    print(
        tabulate(
            [
                [
                    r.file_name,
                    r.status,
                    r.record.years_of_experience if r.record else "",
                    r.error or "",
                ]
                for r in sorted(results, key=lambda r: r.file_name)
            ],
            headers=["File", "Status", "Years", "Error"],
            tablefmt="github",
        )
    )
    counts = Counter(r.status for r in results)
    print(", ".join(f"{status}: {n}" for status, n in sorted(counts.items())) or "No resumes found.")
    return 1 if counts.get("failed") else 0


def run_list(args: argparse.Namespace) -> int:
    from .db import MongoDBManager
    from .report import format_candidate_table

    candidates = MongoDBManager().get_candidates(
        args.user,
        category=args.category,
        min_years=args.min_years,
        skill=args.skill,
        name=args.name,
    )
    if not candidates:
        print("No candidates found.")
        return 0
    print(format_candidate_table(candidates))
    return 0


def run_export(args: argparse.Namespace) -> int:
    from .db import MongoDBManager
    from .report import export_to_csv

    candidates = MongoDBManager().get_candidates(args.user)
    path = export_to_csv(candidates, Path(args.output))
    print(f"Exported {len(candidates)} candidates to {path}")
    return 0


# ---------- CLI ----------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CLI Resume Screening System"
    )
    subparsers = parser.add_subparsers(dest="command")

    # ---- ingest ----
    ingest_parser = subparsers.add_parser(
        "ingest", help="Extract and store candidates from a folder of resumes"
    )
    ingest_parser.add_argument("--folder", required=True, help="Path to folder containing resumes")
    ingest_parser.add_argument("--user", required=True, help="Owner of the uploaded resumes")
    ingest_parser.add_argument(
        "--workers",
        type=int,
        default=WORKER_COUNT,
        help=f"Concurrent workers (default {WORKER_COUNT})",
    )
    ingest_parser.add_argument("--no-ai", action="store_true", help="Use heuristic extraction only")
    ingest_parser.add_argument("--force", action="store_true", help="Reprocess files whose content is unchanged")

    # ---- list ----
    list_parser = subparsers.add_parser("list", help="List stored candidates")
    list_parser.add_argument("--user", required=True, help="Owner of the resumes")
    list_parser.add_argument("--category", help="Exact category, e.g. 'QA Engineer'")
    list_parser.add_argument("--min-years", type=int, help="Minimum years of experience")
    list_parser.add_argument("--skill", help="Skill the candidate must have")
    list_parser.add_argument("--name", help="Substring of the candidate name")

    # ---- export ----
    export_parser = subparsers.add_parser("export", help="Export stored candidates to CSV")
    export_parser.add_argument("--user", required=True, help="Owner of the resumes")
    export_parser.add_argument("--output", required=True, help="Destination CSV file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "ingest": run_ingest,
        "list": run_list,
        "export": run_export,
    }

    try:
        if args.command is None:
            parser.print_help()
            return 0
        return commands[args.command](args)
    except Exception as exc:
        logging.error("Command failed", exc_info=exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
