"""
Entry point for the ``frameforge`` command.

    frameforge info [version|backends|examples] [--kind KIND]
    frameforge validate CONFIG [--quiet]
    frameforge route KIND OPERATION [--backend LABEL] [--config CONFIG]
"""

import sys
import argparse
import traceback
from typing import List, Optional

from . import display
from . import commands


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='frameforge',
        description='Inspect backend registrations and how creation operations are routed.',
    )
    parser.add_argument('--version', action='store_true', help='show version and exit')
    parser.add_argument('--diagram', action='store_true', help='show how dispatch picks a backend')
    parser.add_argument('--debug', action='store_true', help='print tracebacks on failure')

    subparsers = parser.add_subparsers(dest='command')

    info = subparsers.add_parser('info', help='version, registered backends or usage examples')
    info.add_argument('target', nargs='?', default='version',
                      choices=['version', 'backends', 'examples'])
    info.add_argument('--kind', help='only list backends of this collection kind')
    info.set_defaults(handler=commands.show_info)

    validate = subparsers.add_parser('validate', help='check a YAML backend options file')
    validate.add_argument('config', help='options file, nested or dotted keys')
    validate.add_argument('--quiet', '-q', action='store_true', help='only report the verdict')
    validate.set_defaults(handler=commands.validate_config)

    route = subparsers.add_parser('route', help='name the backend that would serve an operation')
    route.add_argument('kind', help='collection kind, e.g. dataframe or array')
    route.add_argument('operation', help='operation name, e.g. read_parquet')
    route.add_argument('--backend', '-b', help='active backend label to route from')
    route.add_argument('--config', '-c', help='YAML options file to apply first')
    route.set_defaults(handler=commands.route_operation)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        commands.print_version()
        return 0
    if args.diagram:
        display.print_diagram()
        return 0
    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.handler(args)
    except KeyboardInterrupt:
        display.print_warning("Interrupted")
        return 1
    except Exception as e:
        display.print_error(f"Unexpected error: {e}")
        if args.debug:
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
