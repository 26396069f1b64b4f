"""Main module for the img-thumbnailer CLI."""

import argparse
import shutil
import sys
from typing import List, Optional

from . import __version__
from .core import ConfigurationError, ThumbnailerError, get_logger, set_debug
from .core.config import load_config
from .core.factories import ThumbnailServiceFactory
from .core.models import DEFAULT_CONFIG_PATH
from .core.resizer import ImageResizer


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the serve, resize and version commands."""
    parser = argparse.ArgumentParser(
        prog="img-thumbnailer",
        description="Thumbnail service: fetch an image, resize it, upload it to S3",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the HTTP service
  img-thumbnailer serve --config ./etc/img-thumbnailer/server.conf

  # Resize a local file without fetching or uploading
  img-thumbnailer resize photo.png --width 200 --format jpg --compression 85

  # Show version
  img-thumbnailer version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file location (default: {DEFAULT_CONFIG_PATH})",
    )
    serve_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )

    resize_parser = subparsers.add_parser(
        "resize", help="Resize a local image file"
    )
    resize_parser.add_argument("source", help="Source image path")
    resize_parser.add_argument(
        "--width", type=int, default=0, help="Target width (0 derives it from height)"
    )
    resize_parser.add_argument(
        "--height", type=int, default=0, help="Target height (0 derives it from width)"
    )
    resize_parser.add_argument(
        "--format", required=True, help="Output format, e.g. jpg, png, webp"
    )
    resize_parser.add_argument(
        "--compression", type=int, required=True, help="Compression quality 0-100"
    )
    resize_parser.add_argument(
        "--output", default=None, help="Where to write the thumbnail"
    )

    subparsers.add_parser("version", help="Show version information")

    return parser


def serve(config_path: str, debug: bool = False) -> int:
    """Load the configuration and run the HTTP service until interrupted."""
    import uvicorn

    from .server import create_app

    logger = get_logger("img-thumbnailer")
    try:
        config = load_config(config_path)
    except ConfigurationError as exc:
        logger.error(f"Loading configuration failed: {exc}")
        return 1

    if debug or config.debug:
        set_debug()

    service = ThumbnailServiceFactory.create_service(config)
    app = create_app(service)
    logger.info(f"Listening on {config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    return 0


def resize_local(
    source: str,
    width: int,
    height: int,
    output_format: str,
    compression: int,
    output: Optional[str] = None,
) -> int:
    """Resize a local file and print where the thumbnail was written."""
    logger = get_logger("img-thumbnailer")
    try:
        path = ImageResizer().resize(source, output_format, width, height, compression)
    except ThumbnailerError as exc:
        logger.error(f"Resize failed: {exc}")
        return 1

    if output:
        shutil.move(path, output)
        path = output
    print(path)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``img-thumbnailer`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        sys.exit(serve(args.config, args.debug))
    elif args.command == "resize":
        sys.exit(
            resize_local(
                args.source,
                args.width,
                args.height,
                args.format,
                args.compression,
                args.output,
            )
        )
    elif args.command == "version":
        print("img-thumbnailer")
        print(f"Version {__version__}")
        sys.exit(0)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
