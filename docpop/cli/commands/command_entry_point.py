##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
The base class of docpop's subcommands.

A command registers its subparser on the `docpop` parser and points the
parser's `func` default at `process_command`. Commands that read or write
documents get their store through `docpop.cli.utils.get_config_and_store`.
"""

from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace


class CommandEntryPoint(ABC):
    """
    One `docpop <command>`, such as `find` or `load`.

    Methods:
        add_parser: Register the command's subparser and its options.
        process_command: Run the command with the parsed arguments.
    """

    @abstractmethod
    def add_parser(self, subparsers: ArgumentParser):
        """Register this command's subparser on the `docpop` parser."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `add_parser` method.")

    @abstractmethod
    def process_command(self, args: Namespace):
        """Run this command; errors propagate to `docpop.main.main`, which logs them."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `process_command` method.")
