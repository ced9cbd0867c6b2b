"""
Parts Search - Main Entry Point

Runs the whole pipeline: fetch every page of a parts search, keep the parts
that carry the required specs, extract the configured columns and write them
to a JSON file (array of arrays) and a CSV file.

Usage:
    python -m parts_etl.main [OPTIONS]

Options:
    --config PATH         Path to search.yml (default: config/search.yml)
    --term TEXT           Override the configured search term
    --max-results INT     Override the configured result cap
    --json-out PATH       Override the JSON output path
    --csv-out PATH        Override the CSV output path
    --mock                Use generated offline data instead of the API
    --verbose             Enable debug logging
    --help                Show this message and exit

Examples:
    # Search with the configured defaults:
    python -m parts_etl.main

    # Different term, smaller cap, verbose logging:
    python -m parts_etl.main --term "P-Ch" --max-results 200 --verbose

Exit Codes:
    0: Success
    1: Fetch incomplete (some or all pages failed; outputs still written)
    2: Configuration error (nothing fetched)
    3: Output file could not be written
    4: Unexpected fatal error
    130: Interrupted
"""

import argparse
import dataclasses
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from .config import ConfigLoadError, PipelineConfig, load_config
from .projector import FileWriteError, project, write_outputs
from .projector.rules import require_paths, rules_from_paths
from .source_extractor import SourceAdapter, fetch_all
from .source_extractor.adapters import MockAdapter

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FETCH_INCOMPLETE = 1
EXIT_CONFIG_ERROR = 2
EXIT_WRITE_ERROR = 3
EXIT_UNEXPECTED = 4
EXIT_INTERRUPTED = 130


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='Search the parts API and export matching parts to JSON and CSV',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--config', type=str, default=None, help='Path to search.yml')
    parser.add_argument('--term', type=str, default=None, help='Override the search term')
    parser.add_argument(
        '--max-results', type=int, default=None, dest='max_results',
        help='Override the maximum number of results to fetch'
    )
    parser.add_argument('--json-out', type=str, default=None, dest='json_out', help='JSON output path')
    parser.add_argument('--csv-out', type=str, default=None, dest='csv_out', help='CSV output path')
    parser.add_argument('--mock', action='store_true', help='Use generated offline data instead of the API')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def apply_overrides(config: PipelineConfig, args: argparse.Namespace) -> PipelineConfig:
    """Return a copy of ``config`` with command-line overrides applied."""
    search_changes = {}
    if args.term:
        search_changes['search_term'] = args.term
    if args.max_results is not None:
        search_changes['max_results'] = args.max_results

    output_changes = {}
    if args.json_out:
        output_changes['json_path'] = args.json_out
    if args.csv_out:
        output_changes['csv_path'] = args.csv_out

    return dataclasses.replace(
        config,
        search=dataclasses.replace(config.search, **search_changes),
        output=dataclasses.replace(config.output, **output_changes),
    )


def run_pipeline(
    config: PipelineConfig,
    adapter: Optional[SourceAdapter] = None,
) -> dict[str, int]:
    """
    Main pipeline logic: fetch → filter → extract → write.

    Args:
        config: Validated pipeline configuration
        adapter: Source adapter (defaults to the Octopart API)

    Returns:
        Dictionary with statistics:
        - pages: Number of page requests issued
        - missing_pages: Number of pages that failed
        - fetched: Number of records after the page failure policy
        - kept: Number of records accepted by the keep predicate
        - failed_cells: Number of cells that fell back to null

    Raises:
        FileWriteError: If an output file cannot be written
    """
    search = config.search
    fetch_result = fetch_all(search.search_term, search, adapter=adapter)

    rules = rules_from_paths(config.projection.rules)
    keep = require_paths(config.projection.keep_require)
    projection = project(
        fetch_result.records,
        rules,
        keep,
        missing_placeholder=config.projection.missing_placeholder,
    )

    write_outputs(projection, config.output.json_path, config.output.csv_path)

    stats = {
        'pages': fetch_result.pages_requested,
        'missing_pages': len(fetch_result.missing_offsets),
        'fetched': len(fetch_result.records),
        'kept': len(projection.rows),
        'failed_cells': projection.failed_cells,
    }
    logger.info("Parts search completed", extra=stats)
    return stats


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the parts search.

    Returns:
        Exit code (see module docstring)
    """
    args = parse_args(argv)
    configure_logging(args.verbose)
    logger.debug("Debug logging enabled")

    try:
        config = apply_overrides(load_config(args.config), args)
    except ConfigLoadError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    adapter = MockAdapter() if args.mock else None

    try:
        stats = run_pipeline(config, adapter=adapter)

        if stats['missing_pages'] > 0:
            logger.warning(
                f"Completed with {stats['missing_pages']} of {stats['pages']} pages missing"
            )
            return EXIT_FETCH_INCOMPLETE

        if stats['kept'] == 0:
            logger.warning("No parts matched the keep criteria")

        return EXIT_OK

    except FileWriteError as e:
        logger.error(f"Output error: {e}")
        return EXIT_WRITE_ERROR

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_INTERRUPTED

    except Exception as e:
        logger.error(
            "Unexpected fatal error",
            extra={
                'error': str(e),
                'error_type': type(e).__name__,
            },
            exc_info=True
        )
        return EXIT_UNEXPECTED


if __name__ == '__main__':
    sys.exit(main())
