# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from deltasync.adapters.sqlalchemy import build_checkpoint_store
from deltasync.app import checkpoint_status, reset_checkpoint
from deltasync.config import configure_logging, load_environment

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from deltasync.domain.sync import SyncStatusSummary

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect and reset deltasync checkpoints")
    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser("status", help="Show checkpoint health for an organization")
    status.add_argument("--org", required=True, help="Organization id")
    status.add_argument(
        "--database-uri",
        type=str,
        help="Checkpoint database URI (defaults to DELTASYNC_DATABASE_URI or the data dir)",
    )

    reset = subparsers.add_parser("reset", help="Clear one entity's checkpoint")
    reset.add_argument("--org", required=True, help="Organization id")
    reset.add_argument("--entity", required=True, help="Entity type to reset")
    reset.add_argument(
        "--database-uri",
        type=str,
        help="Checkpoint database URI (defaults to DELTASYNC_DATABASE_URI or the data dir)",
    )

    return parser.parse_args(list(argv))


def format_status(organization_id: str, summary: SyncStatusSummary) -> str:
    last_sync = summary.last_sync.isoformat() if summary.last_sync else "never"
    lines = [
        f"organization:  {organization_id}",
        f"objects:       {', '.join(summary.entity_types) or '-'}",
        f"last sync:     {last_sync}",
        f"total records: {summary.total_records}",
        f"health:        {summary.health}",
    ]
    lines.extend(f"  {entity}: {error}" for entity, error in summary.failures.items())
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_environment()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        store = build_checkpoint_store(database_uri=parsed_args.database_uri)
        if parsed_args.command == "status":
            summary = checkpoint_status(organization_id=parsed_args.org, store=store)
            print(format_status(parsed_args.org, summary))
        elif parsed_args.command == "reset":
            reset_checkpoint(
                organization_id=parsed_args.org,
                entity_type=parsed_args.entity,
                store=store,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
