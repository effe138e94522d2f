#!/usr/bin/env python3
"""
Database Sync - CLI Entry Point
===============================
Export selected tables to a dump file, import dumps into another database
with an automatic backup of the tables being overwritten, restore those
backups, and watch the dump directory for changes.
"""

import argparse
import json
import logging
import sys
import time

import yaml

from .config import ConfigLoader
from .database_sync import DatabaseSync
from .errors import DbSyncError
from .presets import CUSTOM_PRESET, PRESETS
from .utils import format_size, setup_logging

DEFAULT_POLL_INTERVAL = 5


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Database Sync - Export, import and restore database tables'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '-i', '--instance',
        default='primary',
        help='Database instance to use (default: primary)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    export_parser = subparsers.add_parser('export', help='Export tables to a dump file')
    export_parser.add_argument(
        '-p', '--preset',
        default=None,
        choices=sorted(PRESETS) + [CUSTOM_PRESET],
        help='Table preset (default: last used preset)'
    )
    export_parser.add_argument(
        '-t', '--tables',
        nargs='+',
        default=None,
        help='Tables to export (names without prefix); implies the custom preset'
    )

    import_parser = subparsers.add_parser('import', help='Back up, then import a dump file')
    import_parser.add_argument('filename')

    restore_parser = subparsers.add_parser('restore', help='Restore a backup file')
    restore_parser.add_argument('filename')

    delete_parser = subparsers.add_parser('delete', help='Delete a dump file')
    delete_parser.add_argument('filename')

    preview_parser = subparsers.add_parser('preview', help='Show what a dump would import')
    preview_parser.add_argument('filename')

    subparsers.add_parser('list', help='List dump files')
    subparsers.add_parser('poll', help='Check the dump directory for changes once, printing JSON')

    watch_parser = subparsers.add_parser('watch', help='Poll the dump directory repeatedly')
    watch_parser.add_argument(
        '--interval',
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        help=f'Seconds between polls (default: {DEFAULT_POLL_INTERVAL})'
    )
    watch_parser.add_argument(
        '--count',
        type=int,
        default=None,
        help='Stop after this many polls'
    )

    return parser


def run_command(sync: DatabaseSync, args: argparse.Namespace) -> None:
    """Run one sub-command."""
    if args.command == 'export':
        preset = args.preset
        tables = args.tables
        if preset is None and tables:
            preset = CUSTOM_PRESET
        elif preset is None:
            preset, last_tables = sync.presets.last_selection()
            if preset == CUSTOM_PRESET:
                tables = last_tables
        result = sync.export(preset, tables)
        logging.info(f"Exported {len(result.tables)} table(s) to {result.filename} ({format_size(result.size)})")

    elif args.command == 'import':
        result = sync.import_file(args.filename)
        logging.info(f"Backup: {result.backup.filename} ({result.backup.tables_backed_up} table(s))")
        logging.info(f"Tables: {result.tables_processed}")
        logging.info(f"Rows: {result.rows_imported}")

    elif args.command == 'restore':
        result = sync.restore(args.filename)
        logging.info(f"Tables: {result.tables_processed}")
        logging.info(f"Rows: {result.rows_imported}")

    elif args.command == 'delete':
        sync.delete(args.filename)

    elif args.command == 'preview':
        preview = sync.preview(args.filename)
        logging.info(f"Source URL: {preview.source_url or 'unknown'}")
        logging.info(f"Target URL: {preview.target_url or 'unknown'}")
        for table, rows in preview.tables.items():
            logging.info(f"  - {table}: {rows} rows")
        logging.info(f"Total rows: {preview.total_rows}")

    elif args.command == 'list':
        for f in sync.list_files():
            kind = 'backup' if f.is_backup else 'dump'
            logging.info(
                f"{f.filename}  {f.human_size}  {f.preset} / {f.environment}  ({kind})"
            )

    elif args.command == 'poll':
        poll = sync.poll()
        logging.info(f"Changed: {poll.changed} ({len(poll.files)} file(s))")
        print(json.dumps(poll.to_dict()))

    elif args.command == 'watch':
        polls = 0
        while args.count is None or polls < args.count:
            poll = sync.poll()
            polls += 1
            if poll.changed:
                logging.info(f"Dump files changed: {', '.join(f.filename for f in poll.files) or '(none)'}")
            if args.count is None or polls < args.count:
                time.sleep(args.interval)


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}")
        sys.exit(1)

    # Setup logging
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    try:
        sync = DatabaseSync(config, instance_name=args.instance)
        run_command(sync, args)
    except DbSyncError as e:
        logging.error(f"{e.kind.value} error: {e.message}")
        sys.exit(1)
    except KeyboardInterrupt:
        logging.info("Interrupted")
        sys.exit(130)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
