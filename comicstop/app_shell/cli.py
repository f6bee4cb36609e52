import argparse
import logging
import sys
from datetime import datetime

import uvicorn

from comicstop.adapters.clock import FrozenClock, SystemClock
from comicstop.adapters.dev_notifier import DevNotifier
from comicstop.adapters.sqlite.migrator import SQLiteMigrator
from comicstop.adapters.sqlite.repos import SQLiteCreatorProfileRepo, SQLiteUserRepo
from comicstop.api.deps import Settings
from comicstop.components.creator_hub import CleanupInput, CreatorHubComponent
from comicstop.rules.loader import load_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    print(f"Applied {len(applied)} migration(s) to {settings.db_path}.")


def handle_cleanup(settings: Settings, args: argparse.Namespace) -> None:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    rules = load_rules(settings.rules_path)

    now = None
    if args.now:
        try:
            now = datetime.fromisoformat(args.now)
        except ValueError:
            logger.error("--now must be an ISO 8601 timestamp, got %r", args.now)
            sys.exit(2)

    clock = FrozenClock(now) if now else SystemClock()
    component = CreatorHubComponent(
        SQLiteUserRepo(settings.db_path),
        SQLiteCreatorProfileRepo(settings.db_path),
        DevNotifier(),
        clock,
        rules,
    )
    result = component.run_cleanup(CleanupInput())
    print(
        f"Cleaned up {result.deleted_count} expired creator profiles "
        f"({result.scanned_count} users scanned)."
    )


def handle_serve(settings: Settings, args: argparse.Namespace) -> None:
    handle_migrate(settings, args)
    uvicorn.run("comicstop.api.main:app", host=args.host, port=args.port, reload=args.reload)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="ComicStop CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # cleanup-creator-data
    cleanup_parser = subparsers.add_parser(
        "cleanup-creator-data", help="Delete creator data past the retention window"
    )
    cleanup_parser.add_argument("--now", help="Evaluate the window at this ISO timestamp")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings, args)
    elif args.command == "cleanup-creator-data":
        handle_cleanup(settings, args)
    elif args.command == "serve":
        handle_serve(settings, args)


if __name__ == "__main__":
    main()
