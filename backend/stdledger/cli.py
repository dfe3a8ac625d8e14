"""
stdledger — command line.

  stdledger harvest [--version 1.22 ...]   scrape release documents into the ledger
  stdledger import-json revisions.json     load minor-revision notes
  stdledger create-base                    add Base entries for minor-only packages
  stdledger serve [--refresh]              run the read API
  stdledger report [--search net/]         print an analysis of the ledger
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from stdledger.analyzer import StdLibAnalyzer
from stdledger.core.config import settings
from stdledger.errors import StdLedgerError
from stdledger.importer.base_versions import create_base_versions
from stdledger.importer.json_importer import JSONImporter
from stdledger.models.release import ChangeType
from stdledger.scraper.release import ReleaseScraper
from stdledger.storage.database import Database
from stdledger.utils.logging import logger, set_verbose, step_timer


def _add_db_arg(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--db",
        type=Path,
        default=Path(settings.db_path),
        help=f"SQLite ledger path (default: {settings.db_path})",
    )


def harvest(db: Database, versions: list[str] | None, no_delay: bool = False) -> int:
    scraper = ReleaseScraper(sleep=(lambda _seconds: None) if no_delay else None)
    try:
        with step_timer("harvest"):
            documents, report = scraper.harvest(versions)
    finally:
        scraper.close()

    with step_timer("persist"):
        for document in documents:
            db.persist(document)

    analysis = StdLibAnalyzer()
    result = analysis.analyze(documents)
    logger.info("Analysis: %d packages across %d versions", len(result.packages), len(result.versions))
    for warning in report.warnings:
        logger.warning("  %s", warning)
    return 0


def _cmd_harvest(args: argparse.Namespace, db: Database) -> int:
    return harvest(db, args.versions, no_delay=args.no_delay)


def _cmd_import_json(args: argparse.Namespace, db: Database) -> int:
    with step_timer(f"import {args.path}"):
        documents = JSONImporter(db).import_file(args.path)
    print(f"Imported {len(documents)} revisions")
    return 0


def _cmd_create_base(args: argparse.Namespace, db: Database) -> int:
    with step_timer("create base entries"):
        created = create_base_versions(db, settings.scraper.summary_locale)
    for major, packages in created.items():
        print(f"{major}: {len(packages)} base entries")
    return 0


def _cmd_serve(args: argparse.Namespace, db: Database) -> int:
    import uvicorn

    from stdledger.main import app, get_database

    if args.refresh:
        harvest(db, None)

    app.dependency_overrides[get_database] = lambda: db
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def _cmd_report(args: argparse.Namespace, db: Database) -> int:
    analysis = StdLibAnalyzer()
    analysis.analyze(db.load_documents())

    if args.search:
        for evolution in analysis.search(args.search):
            print(f"{evolution.package_name}: {len(evolution.timeline)} changes")
        return 0
    if args.change_type:
        for package in analysis.packages_by_change_type(args.change_type):
            print(package)
        return 0

    print(analysis.report_summary(), end="")
    return 0


COMMANDS = {
    "harvest": _cmd_harvest,
    "import-json": _cmd_import_json,
    "create-base": _cmd_create_base,
    "serve": _cmd_serve,
    "report": _cmd_report,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stdledger")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    harvest_p = sub.add_parser("harvest", help="Scrape release documents into the ledger")
    harvest_p.add_argument(
        "--version",
        dest="versions",
        action="append",
        default=None,
        help="Repeatable; defaults to STDLEDGER_TARGET_VERSIONS",
    )
    harvest_p.add_argument("--no-delay", action="store_true", help="Skip the pause between versions")
    _add_db_arg(harvest_p)

    import_p = sub.add_parser("import-json", help="Import minor-revision notes from JSON")
    import_p.add_argument("path", type=Path)
    _add_db_arg(import_p)

    base_p = sub.add_parser("create-base", help="Add Base entries for packages only seen in minor revisions")
    _add_db_arg(base_p)

    serve_p = sub.add_parser("serve", help="Run the read API")
    serve_p.add_argument("--host", default=settings.host)
    serve_p.add_argument("--port", type=int, default=settings.port)
    serve_p.add_argument("--refresh", action="store_true", help="Harvest before serving")
    _add_db_arg(serve_p)

    report_p = sub.add_parser("report", help="Print an analysis of the ledger")
    report_p.add_argument("--search", default=None, help="Substring of a package name")
    report_p.add_argument(
        "--change-type",
        default=None,
        choices=[t.value for t in ChangeType],
        help="List packages with at least one change of this type",
    )
    _add_db_arg(report_p)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)

    try:
        with Database(args.db) as db:
            return COMMANDS[args.cmd](args, db)
    except StdLedgerError as exc:
        print(json.dumps(exc.to_dict(), ensure_ascii=False, indent=2), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
