"""Command line entry point for wallpp.

Usage::

    wallpp INPUT_DIR OUTPUT_DIR [UPSCALER_MODEL] [options]

Arguments not given on the command line fall back to ``WALLPP_*``
environment variables, then to the defaults in
:class:`~wallpp.core.config.WallppConfig`.

Exit codes: 0 on success, 1 on any fatal run error or invalid
configuration, 2 on malformed arguments (argparse).
"""

import argparse
import logging
import sys
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from wallpp import __version__
from wallpp.core.config import WallppConfig
from wallpp.core.errors import WallppError
from wallpp.core.pipeline import WallpaperGenerator
from wallpp.core.upscaler_adapters import upscaler_registry

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="wallpp",
        description="Combine a folder of photos into fixed-aspect-ratio desktop wallpapers.",
    )
    parser.add_argument("input_dir", help="Folder with source photos (not scanned recursively)")
    parser.add_argument("output_dir", help="Folder receiving wallpapers and database.json")
    parser.add_argument(
        "upscaler_model_path",
        nargs="?",
        default=None,
        help="TorchScript super-resolution model (selects the TorchScript-SR upscaler)",
    )
    parser.add_argument("--minimum-height", type=int, help="Lower edge of the height band (default 1440)")
    parser.add_argument("--maximum-height", type=int, help="Upper edge of the height band (default 2880)")
    parser.add_argument("--desired-ratio-w", type=int, help="Target aspect ratio width (default 16)")
    parser.add_argument("--desired-ratio-h", type=int, help="Target aspect ratio height (default 9)")
    parser.add_argument(
        "--upscaler",
        choices=upscaler_registry.list_available(),
        help="Upscaler adapter to use",
    )
    parser.add_argument("--model-scale", dest="upscaler_model_scale", type=int, choices=(2, 4),
                        help="Native scale of the upscaler model (default 4)")
    parser.add_argument("--device", help="Torch device for model-backed upscalers (default cpu)")
    parser.add_argument("--seed", dest="shuffle_seed", type=int, help="Seed for a reproducible shuffle")
    parser.add_argument("--quality", dest="jpeg_quality", type=int, help="JPEG quality 1-100 (default 95)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> WallppConfig:
    """Build a configuration from parsed arguments.

    Only options given on the command line are passed as overrides so that
    environment variables still apply to the rest.
    """
    overrides: dict[str, Any] = {
        key: value
        for key, value in vars(args).items()
        if key != "verbose" and value is not None
    }
    if args.upscaler_model_path is not None and args.upscaler is None:
        overrides["upscaler"] = "TorchScript-SR"
    return WallppConfig(**overrides)


def configure_logging(verbose: bool = False) -> None:
    """Send log records to standard output."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run wallpp with ``argv`` (defaults to ``sys.argv[1:]``).

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = config_from_args(args)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        summary = WallpaperGenerator(config).run()
    except WallppError as e:
        logger.error(f"Failed to run: {e}")
        return 1

    logger.info(
        f"Processed {summary.regenerated} of {summary.catalog_size} images into "
        f"{summary.composites_written} wallpapers in {config.output_dir}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
