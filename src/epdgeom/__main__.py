"""
epdgeom — Event Plane Detector tile geometry from the command line

Examples:

  # centre of west tile PP01 TT05
  python -m epdgeom center --tile 105

  # corners of east PP02 TT03, addressed as a triple
  python -m epdgeom corners --tile 2,3,east

  # which east tile a projected track hits
  python -m epdgeom locate --x 12.5 --y -3.0 --side east

  # 10k area-uniform points on a tile, with eta, to CSV
  python -m epdgeom sample --tile -203 --n 10000 --seed 7 --out samples.csv

Defaults for any command can come from a YAML/JSON file passed with
--config, using a "defaults" section and one section per command.
"""


import argparse
import sys
from typing import Optional, Sequence, Set

from epdgeom.epd_commands import COMMANDS
from epdgeom.epd_config import load_config_file, overlay_config_on_namespace
from epdgeom.epd_validation import validate_args
from epdgeom.epd_logging import LOG_LEVELS, get_logger


def _provided_keys(argv: Sequence[str]) -> Set[str]:
    """Option names given explicitly on the command line"""
    keys = set()
    for token in argv:
        if token.startswith("--"):
            keys.add(token[2:].split("=", 1)[0].replace("-", "_"))
    return keys


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for epdgeom"""
    logger = get_logger()

    parser = argparse.ArgumentParser(description="EPD tile geometry queries")
    parser.add_argument("--config", help="Path to YAML/JSON config with defaults", default=None)
    parser.add_argument("--log-level", dest="log_level", default=None,
                        choices=LOG_LEVELS, help="Logging level")

    subparsers = parser.add_subparsers(dest="cmd", help="Available commands")
    for cmd_name, cmd_class in COMMANDS.items():
        subparser = subparsers.add_parser(cmd_name, help=cmd_class.__doc__)
        cmd_class().add_arguments(subparser)

    args = parser.parse_args(argv)
    if not args.cmd:
        parser.print_help()
        return

    if args.config:
        try:
            cfg = load_config_file(args.config)
            provided = _provided_keys(argv if argv is not None else sys.argv[1:])
            overlay_config_on_namespace(args, cfg, subcommand=args.cmd, provided_keys=provided)
        except Exception as e:
            logger.error(f"Failed to load config file: {e}")
            return

    cmd_instance = COMMANDS[args.cmd]()
    args = validate_args(args, parser, required=cmd_instance.required)

    if args.log_level:
        logger.set_level(args.log_level)

    try:
        cmd_instance.execute(args)
    except Exception as e:
        logger.error(f"Command execution failed: {e}")
        raise


if __name__ == "__main__":
    main()
