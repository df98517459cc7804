"""Main CLI interface for Photo Check."""

import argparse
import logging
import os
import sys

from ..core.config import Config
from ..core.errors import PhotoCheckError
from ..core.photo_processor import PhotoProcessor
from ..core.report import format_summary
from ..processors.quality.duplicates import compute_dhash, hamming_distance
from ..utils.image_utils import decode_image


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Photo Check - flag blurry, badly exposed, low-resolution and duplicate photos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  photo-check analyze photos/                      # Write output/photo_check.csv
  photo-check analyze photos/ -f json -O out.json  # JSON report to a chosen file
  photo-check analyze photos/ --parallel -w 8      # Analyze with 8 threads
  photo-check hash a.jpg b.jpg                     # Print difference hashes
  photo-check compare 0f0f0f0f0f0f0f0f 0f0f0f0f0f0f0f0e
        """,
    )

    # Global options
    parser.add_argument(
        "--output-dir", "-o", help="Output directory for reports (default: output)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze photo quality of a directory")
    analyze_parser.add_argument("directory", nargs="?", help="Directory containing photos")
    analyze_parser.add_argument("--output", "-O", help="Report file path")
    analyze_parser.add_argument(
        "--format", "-f", choices=["csv", "json"], default="csv", help="Report format"
    )
    analyze_parser.add_argument(
        "--recursive", "-r", action="store_true", help="Include subdirectories"
    )
    analyze_parser.add_argument(
        "--parallel", action="store_true", help="Analyze images on a thread pool"
    )
    analyze_parser.add_argument("--workers", "-w", type=int, help="Number of worker threads")
    analyze_parser.add_argument(
        "--max-dim", type=int, help="Longer side of the analysis buffer in pixels (default: 512)"
    )

    hash_parser = subparsers.add_parser("hash", help="Print difference hashes of images")
    hash_parser.add_argument("images", nargs="+", help="Image files")

    compare_parser = subparsers.add_parser("compare", help="Compare two difference hashes")
    compare_parser.add_argument("hash_a", help="First 16-character hex hash")
    compare_parser.add_argument("hash_b", help="Second 16-character hex hash")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Create config
    config = Config.from_env()

    # Override config with command line arguments
    if args.output_dir:
        config.output_dir = args.output_dir

    try:
        if args.command == "analyze":
            if getattr(args, "parallel", False):
                config.processing.use_parallel_processing = True
            if args.workers:
                config.processing.max_worker_threads = args.workers
            if args.max_dim:
                config.processing.analysis_max_dimension = args.max_dim

            directory = args.directory or config.input_dir
            if not os.path.isdir(directory):
                print(f"Error: Directory not found: {directory}")
                return 1

            processor = PhotoProcessor(config)
            result = processor.process_directory(
                directory, output_path=args.output, fmt=args.format, recursive=args.recursive
            )
            if not result["success"]:
                print(f"Error: {result['error']}")
                return 1

            print()
            print(format_summary(result["summary"]))

        elif args.command == "hash":
            for image_path in args.images:
                decoded = decode_image(image_path, config)
                print(f"{compute_dhash(decoded.hash_grid)}  {image_path}")

        elif args.command == "compare":
            distance = hamming_distance(args.hash_a.lower(), args.hash_b.lower())
            threshold = config.thresholds.duplicate_distance
            verdict = "duplicate" if distance <= threshold else "distinct"
            print(f"Hamming distance: {distance} ({verdict}, threshold {threshold})")

        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 1
    except PhotoCheckError as e:
        print(f"Error: {e}")
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
