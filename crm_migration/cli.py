"""Command-line interface for the dry-run engine."""

import argparse
import json
import logging
import os
import sys
from typing import Optional

from .config import Settings, configure_logging, get_settings
from .errors import MigrationError
from .models.dry_run import DateFilter, DryRunOptions, MigrationSource, parse_datetime
from .orchestrator import run_dry_run
from .services.store import InMemoryStore

logger = logging.getLogger(__name__)


def _parse_date(value: Optional[str]):
    try:
        return parse_datetime(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="CRM Migration Dry-Run - preview an import from an external CRM"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Dry run
    dry_parser = subparsers.add_parser("dry-run", help="Preview an import without writing")
    dry_parser.add_argument("--source", required=True, help="Source system (jobnimbus, acculynx)")
    dry_parser.add_argument("--org", required=True, help="Organization id to match against")
    dry_parser.add_argument("--api-key", help="Source API key (or CRM_MIGRATION_SOURCE_API_KEY)")
    dry_parser.add_argument("--access-token", help="Source access token")
    dry_parser.add_argument("--store", help="Path to internal store JSON (defaults to CRM_MIGRATION_STORE_PATH)")
    dry_parser.add_argument("--sample-size", type=int, help="Records to sample per entity (10-500)")
    dry_parser.add_argument("--skip-contacts", action="store_true", help="Do not fetch contacts")
    dry_parser.add_argument("--skip-jobs", action="store_true", help="Do not fetch jobs")
    dry_parser.add_argument("--skip-documents", action="store_true", help="Exclude documents from totals")
    dry_parser.add_argument("--after", type=_parse_date, help="Only records created after this date")
    dry_parser.add_argument("--before", type=_parse_date, help="Only records created before this date")
    dry_parser.add_argument("--output", help="Write the result JSON to this file")

    # API server
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else None)

    if args.command == "dry-run":
        return run_dry_run_command(args)
    elif args.command == "serve":
        return run_server(args)
    else:
        parser.print_help()
        return 0


def run_dry_run_command(args, settings: Optional[Settings] = None) -> int:
    """Run a dry run and print the result."""
    settings = settings or get_settings()

    date_filter = None
    if args.after or args.before:
        date_filter = DateFilter(after=args.after, before=args.before)

    options = DryRunOptions(
        skip_contacts=args.skip_contacts,
        skip_jobs=args.skip_jobs,
        skip_documents=args.skip_documents,
        date_filter=date_filter,
        sample_size=args.sample_size or settings.default_sample_size,
    )

    store_path = args.store or settings.store_path
    try:
        store = InMemoryStore.from_json_file(store_path) if store_path else InMemoryStore()
        result = run_dry_run(
            MigrationSource.parse(args.source),
            args.org,
            store,
            api_key=args.api_key or os.environ.get("CRM_MIGRATION_SOURCE_API_KEY"),
            access_token=args.access_token,
            options=options,
            settings=settings,
        )
    except MigrationError as e:
        print(f"Dry run failed: {e.message}", file=sys.stderr)
        return 1

    output = json.dumps(result.to_dict(), indent=2, default=str)
    if args.output:
        with open(args.output, "w") as f:
            f.write(output)
        print(f"Result saved to {args.output}")
    else:
        print(output)

    summary = result.summary
    print("\n" + "=" * 60, file=sys.stderr)
    print("DRY RUN COMPLETE", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"Total records: {summary.total_records}", file=sys.stderr)
    print(f"Duplicates: {summary.duplicates_found}", file=sys.stderr)
    print(f"Validation errors: {summary.validation_errors}", file=sys.stderr)
    print(f"Estimated duration: {result.estimated_duration}", file=sys.stderr)
    return 0


def run_server(args) -> int:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("crm_migration.api.main:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
