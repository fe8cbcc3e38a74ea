##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
CLI module for displaying configuration and store information.

This module defines the `InfoCommand` class, which handles the `info` subcommand
of the docpop CLI. It shows where the config lives, which store it selects,
the store's version and collections, and the Python environment.
"""


import logging
from argparse import ArgumentParser, Namespace

from docpop.cli.commands.command_entry_point import CommandEntryPoint
from docpop.cli.utils import add_store_arguments, get_config_and_store
from docpop.display import print_info


LOG = logging.getLogger("docpop")


class InfoCommand(CommandEntryPoint):
    """
    Handles `info` CLI command for viewing information about the configured store.

    Methods:
        add_parser: Adds the `info` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `info` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `info` command parser will be added.
        """
        info: ArgumentParser = subparsers.add_parser(
            "info",
            help="display info about the docpop configuration and the python configuration. Useful for debugging.",
        )
        add_store_arguments(info)
        info.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        CLI command to print docpop configuration info.

        A missing config file is reported and the Python information is still shown.

        Args:
            args: Parsed CLI arguments.
        """
        try:
            config, store = get_config_and_store(args)
        except ValueError as exc:
            LOG.warning(str(exc))
            config, store = None, None
        print_info(config, store)
