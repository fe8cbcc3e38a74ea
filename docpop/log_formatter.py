##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Logging for the `docpop` console script.

Records go to stderr so the JSON that `docpop find` prints on stdout can be
piped. At DEBUG level each record also names its module and line, which is
where the resolver reports its per-level query counts.
"""

import logging
import sys

import coloredlogs


FORMATS = {
    "DEFAULT": "[%(asctime)s: %(levelname)s] %(message)s",
    "DEBUG": "[%(asctime)s: %(levelname)s] [%(module)s: %(lineno)d] %(message)s",
}


def setup_logging(logger: logging.Logger, log_level: str = "INFO", colors: bool = True):
    """
    Send `logger`'s records to stderr at `log_level`, colored by coloredlogs.

    Args:
        logger: The `docpop` logger; the library modules log to its children.
        log_level: DEBUG, INFO, WARNING, or ERROR, as given to `docpop -lvl`.
        colors: If True, install coloredlogs on top of the plain handler.
    """
    fmt = FORMATS["DEBUG"] if log_level == "DEBUG" else FORMATS["DEFAULT"]
    formatter = logging.Formatter(fmt)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.setLevel(log_level)
    logger.propagate = False

    if colors is True:
        coloredlogs.install(level=log_level, logger=logger, fmt=fmt, stream=sys.stderr)
