##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
The `docpop` console script.

`docpop find posts --populate authorId:users` and the other commands all
start here: the arguments are parsed, logging goes to stderr at the
requested level, and the chosen command runs.
"""

import logging
import sys
import traceback

from docpop.cli.argparse_main import build_main_parser
from docpop.log_formatter import setup_logging


LOG = logging.getLogger("docpop")


def main():
    """
    Run one docpop command from the command line.

    With no arguments the help text is printed and 1 is returned. An error
    raised by a command, for instance a `StoreUnavailable` when the store
    can't be reached, is logged with its traceback at DEBUG level and the
    process exits with status 1.
    """
    parser = build_main_parser()
    if len(sys.argv) == 1:
        parser.print_help(sys.stdout)
        return 1
    args = parser.parse_args()

    setup_logging(logger=LOG, log_level=args.level.upper(), colors=True)

    try:
        args.func(args)
        # pylint complains that this exception is too broad - being at the literal top of the program stack, it's ok.
    except Exception as excpt:  # pylint: disable=broad-except
        LOG.debug(traceback.format_exc())
        LOG.error(str(excpt))
        sys.exit(1)

    sys.exit()


if __name__ == "__main__":
    main()
