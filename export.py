#!/usr/bin/env python3
"""
Google Docs to Markdown Export Tool - Main CLI Entry Point

Fetches one Google Docs document, converts its paragraphs and inline images
to markdown and writes ``<title>.md`` plus one ``<object_id>.jpg`` per image
into an existing output directory.
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional, Sequence

import yaml

from auth import AuthenticationError, ConfigurationError
from config_loader import ConfigLoader, get_nested
from converters import convert_document
from exporters import ExportError, MarkdownExporter
from fetchers import FetcherError, FetcherFactory
from logger import log_config, log_section, setup_logging

__version__ = "1.0.0"

DEFAULT_CONFIG_PATH = 'config.yaml'


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Export a Google Docs document to a markdown file with its images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export using credentials.json and the cached .token
  python export.py

  # Use settings from a YAML file
  python export.py --config config.yaml

  # Verbose logging
  python export.py -vv
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help=f'Path to configuration YAML file (default: {DEFAULT_CONFIG_PATH} when present)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def load_configuration(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the YAML config, falling back to defaults when none is present."""
    if config_path is None:
        if not os.path.exists(DEFAULT_CONFIG_PATH):
            return ConfigLoader.defaults()
        config_path = DEFAULT_CONFIG_PATH

    return ConfigLoader.load(config_path)


def run_export(
    config: Dict[str, Any],
    logger: logging.Logger,
    fetcher=None,
    exporter: Optional[MarkdownExporter] = None
) -> int:
    """Execute fetch, conversion and export for the configured document."""
    document_id = get_nested(config, 'document.id')

    try:
        if fetcher is None:
            fetcher = FetcherFactory.create_fetcher(config, logger)
        raw_document = fetcher.fetch_document(document_id)

        document = convert_document(raw_document, logger=logger)
        logger.debug(f"Parsed document: {document.to_dict()}")

        if exporter is None:
            exporter = MarkdownExporter(config, logger=logger)
        stats = exporter.export_document(document)

    except AuthenticationError as e:
        logger.error(f"Authentication failed: {e}")
        return 1
    except FetcherError as e:
        logger.error(f"Fetch failed: {e}")
        return 1
    except ExportError as e:
        logger.error(f"Export failed: {e}")
        return 1

    logger.info(
        f"Export complete: {stats['markdown_path']} "
        f"({stats['images_downloaded']} images, {stats['images_size_bytes']} bytes)"
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = load_configuration(args.config)
        config = ConfigLoader.merge_with_args(config, args)
        ConfigLoader.validate(config)

        logger = setup_logging(
            verbosity=args.verbose,
            log_file=get_nested(config, 'logging.file'),
            level=get_nested(config, 'logging.level')
        )

        log_section("Google Docs to Markdown Export")
        logger.info(f"Version: {__version__}")
        log_config(config)

        return run_export(config, logger)

    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except (ValueError, yaml.YAMLError) as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nExport interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
