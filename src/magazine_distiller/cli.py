"""Command-line interface for magazine-distiller."""

import argparse
import json
import logging
import sys
from pathlib import Path

from magazine_distiller.config import load_settings
from magazine_distiller.extraction.article_extractor import extract_articles
from magazine_distiller.loaders.xhtml_loader import load_xhtml_export
from magazine_distiller.pipeline.orchestrator import Orchestrator
from schemas.style import StyleRole

DEFAULT_OUTPUT_DIR = Path("./workspace/editions")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def analyze_styles(args: argparse.Namespace) -> int:
    """Execute the analyze-styles command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    xhtml_dir = args.xhtml.resolve()
    if not xhtml_dir.exists():
        logger.error(f"Export directory not found: {xhtml_dir}")
        return 1

    try:
        export = load_xhtml_export(xhtml_dir)
        if export.html_dir is None:
            logger.error(f"HTML directory not found in {xhtml_dir}")
            return 1

        for role in StyleRole:
            classes = export.styles.classes_for(role)
            if not classes:
                continue
            print(f"{role.value}:")
            for class_name in classes:
                print(f"  {class_name}")

        overrides = export.styles.char_overrides
        if overrides:
            print("char-overrides:")
            for class_name, style in overrides.items():
                print(f"  {class_name} (italic={style.italic}, bold={style.bold})")

        return 0

    except Exception as e:
        logger.error(f"Failed to analyze styles: {e}")
        return 1


def extract(args: argparse.Namespace) -> int:
    """Execute the extract-articles command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    xhtml_dir = args.xhtml.resolve()
    if not xhtml_dir.exists():
        logger.error(f"Export directory not found: {xhtml_dir}")
        return 1

    try:
        settings = load_settings(args.config)
        export = load_xhtml_export(xhtml_dir)
        if export.html_dir is None:
            logger.error(f"HTML directory not found in {xhtml_dir}")
            return 1

        result = extract_articles(export, settings)

        if args.output is not None:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            data = [article.model_dump(mode="json") for article in result.articles]
            args.output.write_text(json.dumps(data, indent=2, ensure_ascii=False))
            logger.info(f"Wrote {len(result.articles)} articles to {args.output}")
        else:
            for article in result.articles:
                authors = ", ".join(article.author_names) or "-"
                print(f"p. {article.page_range}\t{article.title}\t{authors}")

        logger.info(f"Extracted {len(result.articles)} articles")
        if export.errors or result.errors:
            errors = export.errors + result.errors
            logger.warning(f"  Warnings: {len(errors)}")
            for error in errors:
                logger.warning(f"    - {error}")

        return 0

    except Exception as e:
        logger.error(f"Failed to extract articles: {e}")
        return 1


def process_edition(args: argparse.Namespace) -> int:
    """Execute the process-edition command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 unless the run failed)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    xhtml_dir = args.xhtml.resolve()
    if not xhtml_dir.exists():
        logger.error(f"Export directory not found: {xhtml_dir}")
        return 1

    output_dir = args.output
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        settings = load_settings(args.config)
        if args.workers is not None:
            settings = settings.model_validate(
                {**settings.model_dump(), "max_workers": args.workers}
            )

        orchestrator = Orchestrator(output_dir, settings=settings)
        result = orchestrator.run(xhtml_dir, edition_id=args.edition_id)

        logger.info(f"Processed edition: {result.edition_id}")
        logger.info(f"  Status: {result.status}")
        logger.info(f"  Articles: {result.stats.articles_saved}")
        logger.info(f"  Authors: {result.stats.authors_saved}")
        logger.info(f"  Images: {result.stats.images_saved}")
        if result.output_path:
            logger.info(f"  Output: {result.output_path}")

        if result.log:
            logger.warning(f"  Warnings: {len(result.warnings)}, errors: {len(result.errors)}")
            for entry in result.log:
                logger.warning(f"    - [{entry.stage}] {entry.message}")

        return 1 if result.status == "failed" else 0

    except Exception as e:
        logger.error(f"Failed to process edition: {e}")
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="magazine-distiller",
        description="Reconstruct articles from InDesign XHTML magazine exports",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    styles_parser = subparsers.add_parser(
        "analyze-styles",
        help="Show how the export's style classes are classified",
        description="Classify the CSS and HTML style classes of an export and print the class to role mapping.",
    )
    styles_parser.add_argument(
        "--xhtml",
        type=Path,
        required=True,
        help="Path to the XHTML export directory",
    )
    styles_parser.set_defaults(func=analyze_styles)

    extract_parser = subparsers.add_parser(
        "extract-articles",
        help="Extract articles from an export",
        description="Extract the articles of an export and print a summary or write them as JSON.",
    )
    extract_parser.add_argument(
        "--xhtml",
        type=Path,
        required=True,
        help="Path to the XHTML export directory",
    )
    extract_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the extracted articles as JSON to this file",
    )
    extract_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with extractor settings",
    )
    extract_parser.set_defaults(func=extract)

    process_parser = subparsers.add_parser(
        "process-edition",
        help="Run the full pipeline and package the edition",
        description="Extract articles, authors and images from an export and write a packaged edition.",
    )
    process_parser.add_argument(
        "--xhtml",
        type=Path,
        required=True,
        help="Path to the XHTML export directory",
    )
    process_parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for packaged editions (default: {DEFAULT_OUTPUT_DIR})",
    )
    process_parser.add_argument(
        "--edition-id",
        type=str,
        default=None,
        help="Identifier of the packaged edition (default: derived from the export)",
    )
    process_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used for per-page extraction",
    )
    process_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with extractor settings",
    )
    process_parser.set_defaults(func=process_edition)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
