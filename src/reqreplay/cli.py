"""
reqreplay CLI

Command-line interface for generating single-request replay scripts from
captured HTTP traffic.

Commands:
    list        - List captured requests with their indexes
    generate    - Generate a replay script for one captured request

Examples:
    # Show what was captured
    reqreplay list session.json

    # Write request_3.py for the fourth capture
    reqreplay generate session.json --index 3

    # Print the script instead of saving it
    reqreplay generate session.json -i 3 --stdout > replay.py
"""

import argparse
import logging
import sys
from typing import List, Optional

from .baseline import CaptureLoader, load_baseline
from .config import GeneratorConfig
from .generator import ScriptGenerator

logger = logging.getLogger("reqreplay.cli")


def _load_config(args) -> GeneratorConfig:
    config = GeneratorConfig.from_yaml(args.config) if args.config else GeneratorConfig()
    if args.log_level:
        config.log_level = args.log_level
    return config


def cmd_list(args):
    """
    List valid captures in a capture log.

    Args:
        args: Parsed command-line arguments
    """
    try:
        captures = CaptureLoader(args.log_file).load_and_validate()
    except (OSError, ValueError) as e:
        print(f"❌ Failed to load captures: {e}")
        sys.exit(1)

    print(f"📂 {args.log_file}: {len(captures)} captures")
    for i, capture in enumerate(captures):
        print(f"  [{i}] {capture['method']} {capture['url']}")


def cmd_generate(args):
    """
    Generate a replay script for one capture.

    Args:
        args: Parsed command-line arguments
    """
    try:
        config = _load_config(args)
        baseline = load_baseline(args.log_file, args.index)
    except (OSError, ValueError) as e:
        print(f"❌ Failed to load capture: {e}")
        sys.exit(1)

    logging.getLogger("reqreplay").setLevel(getattr(logging, config.log_level.upper()))
    logger.debug(f"Capture {args.index} from {args.log_file}: {baseline.method} {baseline.url}")
    generator = ScriptGenerator(config)

    if args.stdout:
        sys.stdout.write(generator.render(baseline))
        return

    try:
        output_path = generator.write(baseline, index=args.index, output_path=args.output)
    except OSError:
        sys.exit(1)

    print(f"✅ Saved replay script for {baseline.method} {baseline.url} → {output_path}")


def build_parser() -> argparse.ArgumentParser:
    """Build the reqreplay argument parser."""
    parser = argparse.ArgumentParser(
        prog='reqreplay',
        description="reqreplay - Generate standalone scripts that replay a captured HTTP request",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List captured requests
  %(prog)s list session.json

  # Generate a replay script for capture 3
  %(prog)s generate session.json --index 3 --output replay.py

  # Run the generated script with overrides
  python3 replay.py -H "X-Debug: 1" -r cookie -q -p
        """
    )
    parser.add_argument('--log-level', choices=['debug', 'info', 'warning', 'error'],
                        help='Log level (default: from config, else info)')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # --- LIST command ---
    list_parser = subparsers.add_parser('list', help='List captured requests')
    list_parser.add_argument('log_file', help='Capture JSON log file')

    # --- GENERATE command ---
    generate_parser = subparsers.add_parser('generate', help='Generate a replay script')
    generate_parser.add_argument('log_file', help='Capture JSON log file')
    generate_parser.add_argument('-i', '--index', type=int, default=0,
                                 help='Index of the capture to replay (default: 0)')
    generate_parser.add_argument('-c', '--config', help='YAML generator config file')
    output_group = generate_parser.add_mutually_exclusive_group()
    output_group.add_argument('-o', '--output', help='Output script path')
    output_group.add_argument('--stdout', action='store_true', help='Write the script to stdout')

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    if args.log_level:
        logging.getLogger("reqreplay").setLevel(getattr(logging, args.log_level.upper()))

    if args.command == 'list':
        cmd_list(args)
    elif args.command == 'generate':
        cmd_generate(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
