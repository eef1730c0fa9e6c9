"""
Command-line entry point: ``quiz-export``.
"""

import argparse
import logging
import sys

import yaml
from dotenv import load_dotenv

from quizexport.cli.export_commands import handle_export, handle_formats, register_export_commands
from quizexport.config import DEFAULT_CONFIG_PATH, load_config

HANDLERS = {
    "export": handle_export,
    "formats": handle_formats,
}


def build_parser():
    parser = argparse.ArgumentParser(description="Quiz export CLI.")
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG_PATH, help=f"Config file (default: {DEFAULT_CONFIG_PATH})."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    register_export_commands(subparsers)
    return parser


def main(argv=None):
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: could not load {args.config}: {e}")
        return 1

    logging.basicConfig(
        level=str(config["logging"]["level"]).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return HANDLERS[args.command](config, args)


if __name__ == "__main__":
    sys.exit(main())
