# =============================================================================
# main.py - CLI entry point
# =============================================================================

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from core.ad_client import ActiveDirectoryClient
from core.directory_client import DirectoryClient
from core.exceptions import InputMissingError, PrerequisiteMissingError, ToolError
from core.graph_client import GraphDirectoryClient
from core.models import ComparisonMode
from core.resolver import GroupResolver
from processors.app_assignments import AppAssignmentProcessor
from processors.group_comparison import GroupComparisonProcessor
from utils.config import Config, BACKEND_GRAPH, BACKEND_LDAP


def setup_logging(level: str = "INFO", log_dir: str = "logs") -> str:
    """Setup logging configuration with both console and file output"""
    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)

    # Generate date-stamped filename
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = log_path / f"group_compare_{timestamp}.log"

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_filename, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized - Console: {level.upper()}, File: DEBUG")
    logger.info(f"Log file: {log_filename}")

    return str(log_filename)


def create_directory_client(config: Config) -> DirectoryClient:
    """Build the directory client for the configured backend"""
    if not config.validate_directory_config():
        missing_vars = config.get_missing_directory_vars()
        raise PrerequisiteMissingError(
            f"Missing required environment variables: {missing_vars}. "
            f"Set them in the environment or a .env file "
            f"(DIRECTORY_BACKEND selects '{BACKEND_GRAPH}' or '{BACKEND_LDAP}')."
        )

    if config.directory_backend == BACKEND_LDAP:
        return ActiveDirectoryClient(
            config.ad_server, config.ad_username,
            config.ad_password, config.base_dn
        )
    return GraphDirectoryClient(config.tenant_id, config.client_id, config.client_secret)


def handle_compare(args, config: Config) -> None:
    """Handle the imported vs compare group report"""
    logger = logging.getLogger(__name__)

    comparison_config = config.build_comparison_config(
        input_path=args.input_file,
        output_path=args.output_file,
        group_column_name=args.column,
        compare_group_names=args.compare_group,
        transitive=False if args.direct else None,
        mode=args.mode,
        sheet_name=args.sheet_name
    )

    directory_client = create_directory_client(config)

    # Fail on a missing input before any directory calls
    if not Path(comparison_config.input_path).exists():
        raise InputMissingError(f"Input file not found: {comparison_config.input_path}")

    with directory_client as client:
        processor = GroupComparisonProcessor(GroupResolver(client), comparison_config)
        result = processor.run()

    logger.info("Processing completed successfully!")
    logger.info(f"Wrote {len(result.rows)} rows to {comparison_config.output_path}")


def handle_app_groups(args, config: Config) -> None:
    """Handle the application group assignment export"""
    logger = logging.getLogger(__name__)

    if config.directory_backend != BACKEND_GRAPH:
        raise PrerequisiteMissingError(
            f"Application assignments require DIRECTORY_BACKEND={BACKEND_GRAPH}"
        )

    directory_client = create_directory_client(config)
    with directory_client as client:
        assignments = AppAssignmentProcessor(client).export(args.app_object_id, args.output_file)

    logger.info("Processing completed successfully!")
    logger.info(f"Wrote {len(assignments)} group assignments to {args.output_file}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Directory Group Membership Comparison")
    subparsers = parser.add_subparsers(dest='command', help='Report type')

    compare_parser = subparsers.add_parser('compare', help='Compare imported groups against two compare groups')
    compare_parser.add_argument('input_file', nargs='?', help='Input CSV or Excel file listing group names')
    compare_parser.add_argument('output_file', nargs='?', help='Output CSV (or .xlsx) report path')
    compare_parser.add_argument('--column', help='Input column holding group display names')
    compare_parser.add_argument('--compare-group', action='append', metavar='NAME',
                                help='Compare group display name (give exactly twice)')
    compare_parser.add_argument('--mode', choices=[mode.value for mode in ComparisonMode],
                                help='Report shape')
    compare_parser.add_argument('--direct', action='store_true',
                                help='Use direct membership only instead of transitive')
    compare_parser.add_argument('--sheet-name', help='Excel sheet name (optional)')

    app_parser = subparsers.add_parser('app-groups', help='Export groups assigned to an application')
    app_parser.add_argument('app_object_id', help='Application object ID')
    app_parser.add_argument('output_file', help='Output CSV (or .xlsx) report path')

    parser.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    return parser


def main():
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    config = Config()

    try:
        if args.command == 'compare':
            handle_compare(args, config)
        elif args.command == 'app-groups':
            handle_app_groups(args, config)
        else:
            logger.error(f"Unknown command: {args.command}")
            sys.exit(1)

    except ToolError as e:
        logger.error(f"Processing failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Processing failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
