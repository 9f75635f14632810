"""
tsfclub.cli
===========

Command‑line helpers around the database snapshot and the engine.

Examples
--------
$ python -m tsfclub.cli init-db                     # first‑time table creation
$ python -m tsfclub.cli seed                        # fixtures → SQLite
$ python -m tsfclub.cli evaluate --user 3 --chapter 1
$ python -m tsfclub.cli reconcile
$ python -m tsfclub.cli charts --chapter 1
$ python -m tsfclub.cli serve                       # uvicorn api.main:app
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
from typing import List, Optional

from . import db
from .errors import ClubError
from .lifecycle import LifecycleEngine
from .settings import settings
from .store import EntityStore


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m tsfclub.cli",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            TSF club utilities
            ------------------
            init-db    Create all SQLModel tables (safe if they already exist)
            seed       Load the JSON fixtures and save them to the database
            evaluate   Issue any certificates a member has earned
            reconcile  Recompute cached points and member counts
            charts     Write chapter status / leaderboard PNGs
            serve      Run the HTTP API with uvicorn
            """
        ),
    )
    parser.add_argument("--db-url", default=None, help="override TSF_DB_URL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables")

    seed = sub.add_parser("seed", help="load fixtures into the database")
    seed.add_argument("--fixtures", default=None, help="fixture directory")

    ev = sub.add_parser("evaluate", help="issue earned certificates")
    ev.add_argument("--user", required=True)
    ev.add_argument("--chapter", required=True)
    ev.add_argument("--issued-by", default=None)

    sub.add_parser("reconcile", help="repair cached totals")

    charts = sub.add_parser("charts", help="write PNG charts")
    charts.add_argument("--chapter", default=None, help="also draw this chapter's leaderboard")
    charts.add_argument("--out", default="images", help="output directory")

    serve = sub.add_parser("serve", help="run the API")
    serve.add_argument("--host", default=settings.api_host)
    serve.add_argument("--port", type=int, default=settings.api_port)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    engine = db.make_engine(args.db_url) if args.db_url else db.engine

    try:
        if args.command == "init-db":
            db.create_all(engine)
            print("✅ database schema initialised")

        elif args.command == "seed":
            db.create_all(engine)
            store = EntityStore.from_fixtures(args.fixtures)
            with db.SessionLocal(engine) as s:
                rows = db.save_store(s, store)
            print(f"✅ seeded {rows} rows")

        elif args.command in ("evaluate", "reconcile"):
            with db.SessionLocal(engine) as s:
                store = db.load_store(s)
                lifecycle = LifecycleEngine(store)
                if args.command == "evaluate":
                    issued = lifecycle.evaluate_and_issue(args.user, args.chapter, args.issued_by)
                    for cert in issued:
                        print(f"issued {cert.type.value} certificate {cert.certificate_number}")
                    if not issued:
                        print("no new certificates")
                else:
                    print(f"corrected {lifecycle.reconcile()} cached values")
                db.save_store(s, store)

        elif args.command == "charts":
            from . import viz

            with db.SessionLocal(engine) as s:
                store = db.load_store(s)
            print(viz.chapter_status_summary(store, f"{args.out}/chapter_status.png"))
            if args.chapter:
                print(viz.points_leaderboard(store, args.chapter, f"{args.out}/leaderboard_{args.chapter}.png"))

        elif args.command == "serve":
            import uvicorn

            uvicorn.run("api.main:app", host=args.host, port=args.port, log_level=settings.log_level.lower())

    except ClubError as exc:
        print(f"⛔ {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
