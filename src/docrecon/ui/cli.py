from __future__ import annotations

import argparse
import logging
import shlex
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from docrecon.app import (
    BUILTIN_VALIDATOR,
    NO_VALIDATOR,
    build_schema_validator,
    build_store,
    reconcile,
    reconcile_continuously,
)
from docrecon.config import (
    ConfigurationError,
    configure_logging,
    get_graph_store_config,
    get_pipeline_config,
    graph_store_requested,
)
from docrecon.config.pipeline import (
    DEFAULT_AUTO_RESOLVE_THRESHOLD,
    DEFAULT_MAX_SCAN_WORKERS,
    DEFAULT_SCAN_INTERVAL_SECONDS,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from docrecon.domain.pipeline import PipelineState

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Deduplicate and reconcile documentation files across repositories"
    )
    parser.add_argument(
        "--repo",
        action="append",
        default=[],
        metavar="PATH",
        help="Repository to scan (repeatable)",
    )
    parser.add_argument(
        "--daemon",
        action="store_true",
        help="Rerun the pipeline every --interval seconds until interrupted",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_SCAN_INTERVAL_SECONDS,
        help="Seconds between daemon runs (default: %(default)s)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_AUTO_RESOLVE_THRESHOLD,
        help="Minimum rule confidence for automatic resolution (default: %(default)s)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_SCAN_WORKERS,
        help="Repositories scanned concurrently (default: %(default)s)",
    )

    persistence = parser.add_argument_group("persistence")
    persistence.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or a local SQLite file)",
    )
    persistence.add_argument(
        "--arango-url",
        type=str,
        help="Graph store URL; enables the graph store instead of the database (env: ARANGO_URL)",
    )
    persistence.add_argument("--arango-db", type=str, help="Graph store database name")
    persistence.add_argument("--arango-user", type=str, help="Graph store username")
    persistence.add_argument("--arango-password", type=str, help="Graph store password")

    validation = parser.add_argument_group("validation")
    validation.add_argument(
        "--validator",
        choices=(BUILTIN_VALIDATOR, NO_VALIDATOR),
        default=BUILTIN_VALIDATOR,
        help="Schema validator used in the report (default: %(default)s)",
    )
    validation.add_argument(
        "--validator-command",
        type=str,
        help="External validator command line; overrides --validator",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
        help="Logging verbosity (default: %(default)s)",
    )
    return parser.parse_args(list(argv))


def _print_report(state: PipelineState) -> None:
    if state.report:
        print(state.report)  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=parsed_args.log_level)

    try:
        config = get_pipeline_config(
            parsed_args.repo,
            threshold=parsed_args.threshold,
            interval=parsed_args.interval if parsed_args.daemon else None,
            workers=parsed_args.workers,
        )
    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)  # noqa: TRY400
        sys.exit(1)

    try:
        graph_store = (
            get_graph_store_config(
                url=parsed_args.arango_url,
                database=parsed_args.arango_db,
                username=parsed_args.arango_user,
                password=parsed_args.arango_password,
            )
            if graph_store_requested(parsed_args.arango_url)
            else None
        )
        store = build_store(database_uri=parsed_args.database_uri, graph_store=graph_store)
        validator_command = (
            shlex.split(parsed_args.validator_command) if parsed_args.validator_command else None
        )
        schema_validator = build_schema_validator(
            parsed_args.validator, command=validator_command
        )

        if parsed_args.daemon:
            reconcile_continuously(
                config,
                store=store,
                schema_validator=schema_validator,
                on_complete=_print_report,
            )
            return

        state = reconcile(config, store=store, schema_validator=schema_validator)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)

    _print_report(state)
    if state.errors:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
