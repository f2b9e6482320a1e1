"""Entry point: python -m birdstatus."""

from __future__ import annotations

import argparse
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="birdstatus",
        description="Show BIRD routing protocol status",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to configuration YAML file",
        default=None,
    )
    parser.add_argument(
        "-s", "--socket",
        help="BIRD control socket (overrides bird_socket from the config)",
        default=None,
    )
    parser.add_argument(
        "-r", "--real-protocol-names",
        action="store_true",
        help="Use real protocol names",
    )
    parser.add_argument(
        "-b", "--bgp",
        action="store_true",
        help="Only show BGP protocols",
    )
    parser.add_argument(
        "--tags",
        action="store_true",
        help="Show tags column",
    )
    parser.add_argument(
        "-f", "--filter",
        action="append",
        default=[],
        metavar="TAG",
        help="Tags to filter by (repeatable)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    from birdstatus.app import Application, StatusOptions

    options = StatusOptions(
        real_protocol_names=args.real_protocol_names,
        only_bgp=args.bgp,
        show_tags=args.tags,
        filter_tags=args.filter,
        socket=args.socket,
        verbose=args.verbose,
    )
    app = Application(options, config_path=args.config)
    sys.exit(app.run())


if __name__ == "__main__":
    main()
