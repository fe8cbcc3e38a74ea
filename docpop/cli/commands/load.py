##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
CLI module for loading documents into a store.
"""


import logging
from argparse import ArgumentParser, Namespace

from docpop.cli.commands.command_entry_point import CommandEntryPoint
from docpop.cli.utils import add_store_arguments, get_config_and_store
from docpop.utils import load_documents_file


LOG = logging.getLogger("docpop")


class LoadCommand(CommandEntryPoint):
    """
    Handles the `load` CLI command, which inserts the documents of a JSON file into a collection.

    Methods:
        add_parser: Adds the `load` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `load` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `load` command parser will be added.
        """
        load: ArgumentParser = subparsers.add_parser(
            "load",
            help="Insert the documents of a JSON file (one object or a list of objects) into a collection.",
        )
        load.add_argument("collection", type=str, help="The collection to insert into.")
        load.add_argument("file", type=str, help="The JSON file holding the documents.")
        add_store_arguments(load)
        load.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        CLI command to insert documents into a collection.

        Args:
            args: Parsed CLI arguments.
        """
        documents = load_documents_file(args.file)
        _, store = get_config_and_store(args)
        ids = store.insert(args.collection, documents)
        LOG.info(f"Inserted {len(ids)} document(s) into '{args.collection}'.")
