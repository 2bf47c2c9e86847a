#!/usr/bin/env python3

import argparse
import logging
import signal
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import uvicorn

from cliphistory.api import create_app
from cliphistory.clipboard import get_clipboard
from cliphistory.config import HistoryConfig
from cliphistory.database import HistoryStore
from cliphistory.exceptions import ClipHistoryError
from cliphistory.foreground import get_foreground_resolver
from cliphistory.models import ClipRecord
from cliphistory.services import (
    CallbackNotifier,
    ChangeDetector,
    CompositeNotifier,
    HistoryService,
    Notifier,
    RedisNotifier,
)

logger = logging.getLogger(__name__)


def build_notifier(config: HistoryConfig) -> Notifier:
    notifiers: List[Notifier] = [CallbackNotifier()]
    if config.redis is not None:
        notifiers.append(RedisNotifier(config.redis))
        logger.info("Publishing clip updates on Redis channel %s", config.redis.channel)
    return CompositeNotifier(notifiers)


class ClipHistoryApp:

    def __init__(self, config: HistoryConfig, serve_api: bool = True):
        self.config = config
        self.serve_api = serve_api
        self.service: Optional[HistoryService] = None
        self.detector: Optional[ChangeDetector] = None
        self.running = False

    def start(self) -> None:
        """Open the store and clipboard, then start the detector thread.

        Store and clipboard failures are fatal and propagate to the caller.
        """
        if self.running:
            return

        store = HistoryStore.open(self.config.db_path)
        try:
            clipboard = get_clipboard()
        except ClipHistoryError:
            store.close()
            raise

        self.service = HistoryService(
            store,
            clipboard,
            resolver=get_foreground_resolver(timeout=self.config.resolver_timeout),
            notifier=build_notifier(self.config),
            list_limit=self.config.list_limit,
        )
        self.service.prime_snapshot()

        self.detector = ChangeDetector(self.service, poll_interval=self.config.poll_interval)
        self.detector.start()
        self.running = True
        logger.info("ClipHistory running, %d clips in history", store.count())

    def stop(self) -> None:
        if not self.running:
            return

        self.running = False

        if self.detector:
            self.detector.stop()

        if self.service:
            self.service.close()

        logger.info("ClipHistory stopped")

    def run_forever(self) -> None:
        self.start()

        try:
            if self.serve_api:
                app = create_app(self.service, self.detector)
                uvicorn.run(app, host=self.config.api_host, port=self.config.api_port, log_level="info")
            else:
                while self.running:
                    time.sleep(1.0)
        except KeyboardInterrupt:
            logger.info("Stopping...")
        finally:
            self.stop()


def format_clip(record: ClipRecord, width: int = 80) -> str:
    stamp = datetime.fromtimestamp(record.captured_at / 1000).strftime("%Y-%m-%d %H:%M:%S")
    preview = record.value.replace("\n", "\\n")
    if len(preview) > width:
        preview = preview[: width - 3] + "..."
    source = record.source or "unknown"
    return f"{stamp}  [{source}]  {preview}"


def print_clips(records: List[ClipRecord]) -> None:
    for record in records:
        print(format_clip(record))
    if not records:
        print("No clips found.")


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="ClipHistory - Searchable clipboard history"
    )

    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="History database path (default: <user data dir>/cliphistory/history.db)"
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Read settings from this .env file"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    subparsers = parser.add_subparsers(dest="command")

    run = subparsers.add_parser("run", help="Watch the clipboard and serve the API")
    run.add_argument(
        "-i", "--poll-interval",
        type=float,
        default=None,
        help="Clipboard polling interval in seconds (default: 0.5)"
    )
    run.add_argument("--host", default=None, help="API bind address (default: 127.0.0.1)")
    run.add_argument("-p", "--port", type=int, default=None, help="API port (default: 3001)")
    run.add_argument("--no-api", action="store_true", help="Only watch the clipboard")

    listing = subparsers.add_parser("list", help="Show the most recent clips")
    listing.add_argument("-n", "--limit", type=int, default=None)

    search = subparsers.add_parser("search", help="Search clips by text and source")
    search.add_argument("term", nargs="?", default="")
    search.add_argument("-s", "--source", default="", help="Only clips copied from this application")
    search.add_argument("-n", "--limit", type=int, default=None)

    subparsers.add_parser("sources", help="List applications clips were copied from")

    select = subparsers.add_parser("select", help="Copy TEXT to the clipboard and record it")
    select.add_argument("text")

    subparsers.add_parser("clear", help="Delete the whole history")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "run"
        args.poll_interval = None
        args.host = None
        args.port = None
        args.no_api = False
    return args


def run_command(args, config: HistoryConfig) -> int:
    if args.command == "run":
        app = ClipHistoryApp(config, serve_api=not args.no_api)

        def signal_handler(signum, frame):
            app.stop()
            sys.exit(0)

        if args.no_api:
            # uvicorn installs its own handlers when serving
            signal.signal(signal.SIGINT, signal_handler)
            signal.signal(signal.SIGTERM, signal_handler)

        app.run_forever()
        return 0

    with HistoryStore.open(config.db_path) as store:
        if args.command == "list":
            print_clips(store.list_recent(args.limit or config.list_limit))
        elif args.command == "search":
            print_clips(store.search(args.term, args.source, limit=args.limit or config.list_limit))
        elif args.command == "sources":
            for source in store.distinct_sources():
                print(source)
        elif args.command == "clear":
            print(f"Removed {store.clear()} clips")
        elif args.command == "select":
            service = HistoryService(
                store,
                get_clipboard(),
                resolver=get_foreground_resolver(timeout=config.resolver_timeout),
            )
            if service.write_back(args.text):
                print("Copied to clipboard")
            else:
                print("Nothing to copy")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s',
    )

    try:
        config = HistoryConfig.from_env(env_path=args.env_file)
        config = config.with_overrides(
            db_path=args.db,
            poll_interval=getattr(args, "poll_interval", None),
            api_host=getattr(args, "host", None),
            api_port=getattr(args, "port", None),
        )
        return run_command(args, config)
    except ClipHistoryError as e:
        logger.error(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
