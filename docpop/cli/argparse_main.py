##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
The top-level `docpop` argument parser.

Global options (`--version`, `--level`) live here; each command in
`ALL_COMMANDS` (config, find, info, load) adds its own subparser.
"""

import sys
from argparse import ArgumentParser, RawDescriptionHelpFormatter

from docpop import VERSION
from docpop.cli.commands import ALL_COMMANDS


DEFAULT_LOG_LEVEL = "INFO"
DESCRIPTION = "docpop: populate document references from a document store."


class HelpParser(ArgumentParser):
    """
    An `ArgumentParser` that prints the full usage after a parse error, so a
    mistyped `find` option is followed by the options `find` accepts.

    Methods:
        error: Report the error, print the help, and exit with status 2.
    """

    def error(self, message: str):
        """
        Write `message` and the help text to stderr, then exit with status 2.

        Args:
            message: The error reported by argparse.
        """
        sys.stderr.write(f"error: {message}\n")
        self.print_help(sys.stderr)
        sys.exit(2)


def build_main_parser() -> ArgumentParser:
    """
    Build the parser behind the `docpop` console script.

    Each subparser sets `func` to its command's `process_command`, which
    `docpop.main.main` calls after parsing.

    Returns:
        A `HelpParser` with every docpop command registered.
    """
    parser = HelpParser(
        prog="docpop",
        description=DESCRIPTION,
        formatter_class=RawDescriptionHelpFormatter,
        epilog="Run 'docpop <command> --help' for the options of one command, e.g. 'docpop find --help'.",
    )
    parser.add_argument("-v", "--version", action="version", version=VERSION)
    parser.add_argument(
        "-lvl",
        "--level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        help="Set log level: DEBUG, INFO, WARNING, ERROR [Default: %(default)s]",
    )
    subparsers = parser.add_subparsers(dest="subparsers", required=True)

    for command in ALL_COMMANDS:
        command.add_parser(subparsers)

    return parser
