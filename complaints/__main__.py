"""
Run the complaint logger console.

Usage:
  python -m complaints [--database-url sqlite:///complaints.db] [--backup-file backup.json] [--log-level INFO]
"""
from __future__ import annotations

import argparse
import os
import sys

from complaints.console import ComplaintConsole
from complaints.core.config import get_settings
from complaints.core.logger import configure_logging
from complaints.db.session import reset_engine
from complaints.services.complaint_store import ComplaintStore
from complaints.services.persistence_gateway import StartupError, build_gateway


def _apply_overrides(args: argparse.Namespace) -> None:
    overrides = {
        "DATABASE_URL": args.database_url,
        "BACKUP_FILE": args.backup_file,
        "LOG_LEVEL": args.log_level,
    }
    for key, value in overrides.items():
        if value:
            os.environ[key] = value
    get_settings.cache_clear()
    reset_engine()


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="complaints", description="Community complaint logger")
    ap.add_argument("--database-url", help="SQLAlchemy URL of the relational mirror (env DATABASE_URL)")
    ap.add_argument("--backup-file", help="Path of the JSON backup snapshot (env BACKUP_FILE)")
    ap.add_argument("--log-level", help="Logging level, e.g. INFO or DEBUG (env LOG_LEVEL)")
    args = ap.parse_args(argv)

    _apply_overrides(args)
    settings = get_settings()
    configure_logging(settings.log_level)

    store = ComplaintStore(build_gateway(settings))
    try:
        store.start()
    except StartupError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    ComplaintConsole(store).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
