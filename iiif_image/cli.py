"""CLI entry point for the image pipeline."""

import argparse
import json
import logging
import sys

from iiif_image import __version__
from iiif_image.core.exceptions import PipelineError
from iiif_image.core.settings import get_settings
from iiif_image.core.utils import get_codec_versions, setup_logging
from iiif_image.models import ImageRequest
from iiif_image.services import LocalStorage, get_image_service

logger = logging.getLogger(__name__)


def main() -> int:
    """
    Main CLI entry point.

    Returns:
        int: Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="IIIF Image Pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Process command
    process_parser = subparsers.add_parser("process", help="Render an image request to a file")
    process_parser.add_argument(
        "request", help="Request path, e.g. demo.jpg/full/max/0/default.jpg"
    )
    process_parser.add_argument("--storage", default=None, help="Source image directory")
    process_parser.add_argument(
        "--output", default=None, help="Output file (default: stdout)"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Parse a request without processing")
    validate_parser.add_argument("request", help="Request path to validate")

    # Info command
    info_parser = subparsers.add_parser("info", help="Print the info.json of a source image")
    info_parser.add_argument("identifier", help="Source image identifier")
    info_parser.add_argument("--storage", default=None, help="Source image directory")
    info_parser.add_argument("--base-uri", default="", help="Service base URI for the id field")

    # Version command
    subparsers.add_parser("version", help="Print package and codec versions")

    args = parser.parse_args()

    if args.command == "process":
        return run_process(args)
    elif args.command == "validate":
        return run_validate(args)
    elif args.command == "info":
        return run_info(args)
    elif args.command == "version":
        return run_version(args)
    else:
        parser.print_help()
        return 0


def run_process(args: argparse.Namespace) -> int:
    """
    Process an image request and write the encoded image.

    Args:
        args (argparse.Namespace): Parsed command line arguments.

    Returns:
        int: Exit code (0 for success, 1 on pipeline errors).
    """
    settings = get_settings()
    setup_logging(settings=settings.logging)

    storage = LocalStorage(args.storage or settings.storage.base_path)
    try:
        request = ImageRequest.parse(args.request)
        result = get_image_service().process(request, storage)
    except PipelineError as e:
        logger.error(f"{type(e).__name__} ({e.status_code}): {e}")
        return 1

    if args.output:
        with open(args.output, "wb") as f:
            f.write(result.data)
        logger.info(f"Wrote {result.width}x{result.height} {result.media_type} to {args.output}")
    else:
        sys.stdout.buffer.write(result.data)
        sys.stdout.buffer.flush()
    return 0


def run_validate(args: argparse.Namespace) -> int:
    """
    Parse a request and print its canonical form and parameters.

    Args:
        args (argparse.Namespace): Parsed command line arguments.

    Returns:
        int: Exit code (0 if the request is valid, 1 otherwise).
    """
    try:
        request = ImageRequest.parse(args.request)
    except PipelineError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(str(request))
    print(request.model_dump_json(indent=2))
    return 0


def run_info(args: argparse.Namespace) -> int:
    """
    Print the information document of a source image.

    Args:
        args (argparse.Namespace): Parsed command line arguments.

    Returns:
        int: Exit code (0 for success, 1 on pipeline errors).
    """
    settings = get_settings()
    setup_logging(settings=settings.logging)

    storage = LocalStorage(args.storage or settings.storage.base_path)
    try:
        info = get_image_service().describe(args.identifier, storage, base_uri=args.base_uri)
    except PipelineError as e:
        logger.error(f"{type(e).__name__} ({e.status_code}): {e}")
        return 1

    print(info.to_json())
    return 0


def run_version(args: argparse.Namespace) -> int:
    """
    Print package and codec library versions.

    Args:
        args (argparse.Namespace): Parsed command line arguments.

    Returns:
        int: Exit code (always 0).
    """
    print(json.dumps({"iiif_image": __version__, **get_codec_versions()}, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
