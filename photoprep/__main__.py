#!/usr/bin/env python3
"""photoprep - batch resizing and metadata manifests for travel photography.

This is the main CLI entry point for photoprep. It processes one directory of
source photographs, writes the resized variants next to them, and emits the
metadata manifest.

Usage:
    python -m photoprep <directory>
    python -m photoprep <directory> --manifest manifest.txt
    python -m photoprep <directory> --report run.json --workers 8
    python -m photoprep <directory> --list-tags
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional

from ._version import __version__
from .config import ConfigManager
from .config.manager import ConfigError
from .metadata import describe_tags
from .metadata.exceptions import MetadataError
from .processing import PhotoPipeline, RunReport
from .processing.exceptions import ScanError


def setup_logging(
    verbose: bool = False,
    log_file: Optional[str] = None,
    file_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level_name: str = "INFO"
) -> None:
    """Configure logging for the application.

    Args:
        verbose: If True, enable DEBUG level logging
        log_file: Optional path of a log file (always DEBUG)
        file_format: Format used for the log file
        level_name: Console level when not verbose
    """
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.INFO)

    # Console handler with simpler format
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter('%(levelname)s - %(name)s - %(message)s')
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file else level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_format))
        root_logger.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="photoprep",
        description="photoprep - resize a directory of photos and render their metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resize every photo and print the manifest
  python -m photoprep ~/trips/lisbon

  # Save the manifest and a JSON run report
  python -m photoprep ~/trips/lisbon --manifest lisbon.md --report lisbon.json

  # Inspect the tags read from each photo
  python -m photoprep ~/trips/lisbon --list-tags
"""
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"photoprep {__version__}"
    )

    parser.add_argument(
        "directory",
        metavar="DIRECTORY",
        help="Directory holding the source photographs"
    )

    # Outputs
    parser.add_argument(
        "--manifest",
        metavar="PATH",
        help="Write the metadata manifest to this file (default: stdout)"
    )
    parser.add_argument(
        "--report",
        metavar="PATH",
        help="Write a JSON report of every variant produced or failed"
    )

    # Processing options
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Number of worker threads (default: 4)"
    )
    parser.add_argument(
        "--case-sensitive-extensions",
        action="store_true",
        help="Only accept lower-case .jpg/.jpeg/.heic extensions"
    )
    parser.add_argument(
        "--list-tags",
        action="store_true",
        help="Print every decoded tag for each source"
    )

    # Output control
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write DEBUG logs to this file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose debug logging"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress all output except errors"
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> ConfigManager:
    """Build run configuration from command-line overrides.

    Raises:
        ConfigError: If an override is invalid
    """
    overrides = {"processing": {}, "logging": {}}
    if args.workers is not None:
        overrides["processing"]["workers"] = args.workers
    if args.case_sensitive_extensions:
        overrides["processing"]["case_sensitive_extensions"] = True
    if args.log_file:
        overrides["logging"]["file"] = args.log_file
    return ConfigManager.from_overrides(overrides)


def print_banner() -> None:
    """Print photoprep banner."""
    print()
    print("=" * 70)
    print("  photoprep - Photo Resizing & Metadata Manifests")
    print(f"  Version {__version__}")
    print("=" * 70)
    print()


def print_summary(report: RunReport) -> None:
    """Print run summary.

    Args:
        report: RunReport from the pipeline
    """
    print()
    print("=" * 70)
    print("Run Summary")
    print("=" * 70)
    print()

    print(f"Source images:    {len(report.sources)}")
    print(f"Variants written: {len(report.succeeded)} ✓")

    if report.failed:
        print(f"Variants failed:  {len(report.failed)} ✗")
        for result in report.failed:
            print(f"  - {result.output_path.name}: {result.error}")

    if report.missing_metadata:
        print(f"No metadata:      {len(report.missing_metadata)}")

    print(f"Processing time:  {report.total_time:.1f}s")
    print()

    if report.failed:
        print("⚠️  Some variants failed to process. Check logs for details.")
    elif not report.sources:
        print("ℹ️  No source images found. Generated files are never reprocessed.")
    else:
        print("✓ Run complete!")

    print()


def print_tags(report: RunReport) -> None:
    """Print decoded tags for every source."""
    for source in report.sources:
        print("-" * 70)
        print(source.name)
        print("-" * 70)
        tags = report.tags.get(source)
        print(describe_tags(tags) if tags else "(no metadata)")
        print()


def main(argv=None) -> int:
    """Main entry point for photoprep CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments(argv)
    logger = logging.getLogger(__name__)

    try:
        config = config_from_args(args)

        if not args.quiet:
            setup_logging(
                args.verbose,
                config.get("logging.file"),
                config.get("logging.format"),
                config.get("logging.level"),
            )
            print_banner()
        else:
            logging.basicConfig(level=logging.ERROR)

        pipeline = PhotoPipeline(config=config, keep_tags=args.list_tags)
        report = pipeline.run(args.directory)

        if args.list_tags:
            print_tags(report)

        if args.manifest:
            manifest_path = Path(args.manifest).expanduser()
            manifest_path.parent.mkdir(parents=True, exist_ok=True)
            manifest_path.write_text(report.manifest, encoding="utf-8")
            logger.info(f"Manifest written to: {manifest_path}")
        else:
            print(report.manifest)

        if args.report:
            report.write_json(Path(args.report).expanduser())
            logger.info(f"Report written to: {args.report}")

        if not args.quiet:
            print_summary(report)

        return 1 if report.failed else 0

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        if not args.quiet:
            print()
            print(f"✗ Configuration Error: {e}")
        return 2

    except (ScanError, MetadataError) as e:
        logger.error(f"Run aborted: {e}", exc_info=args.verbose)
        if not args.quiet:
            print()
            print(f"✗ Run aborted: {e}")
            print()
            print("Troubleshooting:")
            print("  - Check that the directory exists and is readable")
            print("  - Check that every .jpg/.jpeg/.heic file is a valid image")
        return 3

    except KeyboardInterrupt:
        if not args.quiet:
            print()
            print()
            print("Processing interrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        if not args.quiet:
            print()
            print(f"✗ Unexpected Error: {e}")
            print()
            if not args.verbose:
                print("Run with --verbose for detailed error information")
        return 1


if __name__ == "__main__":
    sys.exit(main())
