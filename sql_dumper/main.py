#!/usr/bin/env python3
"""
SQL Dumper - CLI Entry Point
============================
Dumps a MySQL database into a single re-playable SQL script:
- Optional DROP/CREATE statements for the database and its tables
- Table data as batched INSERT, INSERT IGNORE or REPLACE statements
- Safe mode with IF EXISTS / IF NOT EXISTS guards
- Include/exclude table filters with wildcard support
- Atomic file output with optional gzip compression
"""

import argparse
import logging
import sys

import yaml

from .assembler import DumpAssembler
from .config import ConfigLoader
from .connection import DatabaseConnection
from .errors import DumperError
from .utils import setup_logging


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='SQL Dumper - Generate a re-playable SQL script from a MySQL database'
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
        '-o', '--output',
        help='Write the dump to this file (overrides output.file)'
    )
    parser.add_argument(
        '--stdout',
        action='store_true',
        help='Write the dump to standard output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='List the tables that would be dumped without dumping them'
    )

    args = parser.parse_args()

    # Load configuration
    try:
        config = ConfigLoader(args.config)
        connection_settings = config.get_connection_settings()
        options = config.get_dump_options()
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}")
        sys.exit(1)

    # Setup logging
    log_settings = dict(config.get_logging_settings())
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    # Keep stdout for the dump itself when streaming
    setup_logging(log_settings, stream=sys.stderr if args.stdout else None)

    output_settings = config.get_output_settings()
    output_file = args.output or output_settings.get('file')
    if not args.dry_run and not args.stdout and not output_file:
        logging.error("No output file configured; use --output, --stdout or output.file")
        sys.exit(1)

    try:
        with DatabaseConnection.from_settings(connection_settings) as conn:
            dumper = DumpAssembler(conn)

            # Dry run mode
            if args.dry_run:
                logging.info("DRY RUN MODE - No data will be dumped")
                tables = dumper.select_objects(conn.list_objects(), options)
                logging.info(f"Would dump {len(tables)} table(s) from '{conn.database}'")
                for table in tables:
                    logging.info(f"  - {table}")
                sys.exit(0)

            if args.stdout:
                dumper.dump_to_stream(options, sys.stdout)
            else:
                output_file = dumper.dump_to_file(
                    options, output_file, compress=output_settings.get('compress', False)
                )

        # Print summary
        logging.info("=" * 50)
        logging.info("DUMP COMPLETE")
        logging.info(f"Tables: {dumper.stats.total_tables}")
        logging.info(f"Total Rows: {dumper.stats.total_rows}")
        if not args.stdout:
            logging.info(f"File: {output_file}")

    except DumperError as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
