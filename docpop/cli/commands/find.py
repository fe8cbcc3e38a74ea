##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
CLI module for querying documents and populating their references.

Example:
    ```
    docpop find posts --filter '{"published": true}' --populate authorId:users --populate tagIds:tags
    ```

The resolved documents are printed to stdout as a JSON list; references that
could not be resolved are printed as `null`.
"""


import logging
from argparse import ArgumentParser, Namespace

from docpop.cli.commands.command_entry_point import CommandEntryPoint
from docpop.cli.utils import add_store_arguments, get_config_and_store, parse_populate_args, parse_refs_args
from docpop.populate.query import Query
from docpop.serialize import dumps_document
from docpop.utils import load_json_argument


LOG = logging.getLogger("docpop")


class FindCommand(CommandEntryPoint):
    """
    Handles the `find` CLI command.

    Methods:
        add_parser: Adds the `find` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `find` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `find` command parser will be added.
        """
        find: ArgumentParser = subparsers.add_parser(
            "find",
            help="Query a collection and print the documents with their references populated.",
        )
        find.add_argument("collection", type=str, help="The collection to query.")
        find.add_argument("--filter", type=str, default=None, help="A JSON filter for the root documents.")
        find.add_argument("--select", type=str, default=None, help="Fields to keep, e.g. 'title -_id'.")
        find.add_argument("--sort", type=str, default=None, help="Sort order, e.g. '-createdAt title'.")
        find.add_argument("--limit", type=int, default=None, help="Maximum number of root documents.")
        find.add_argument("--skip", type=int, default=0, help="Number of root documents to skip.")
        find.add_argument(
            "--populate",
            action="append",
            default=None,
            metavar="PATH[:TARGET]",
            help="A field to populate and, optionally, the collection it references. Repeatable.",
        )
        find.add_argument(
            "--populate-json",
            type=str,
            default=None,
            help="A JSON reference spec, or a list of them, for options like select, match, and nested.",
        )
        find.add_argument(
            "--ref",
            action="append",
            default=None,
            metavar="PATH=COLLECTION",
            help="Declare the collection a field references. Repeatable.",
        )
        find.add_argument("--indent", type=int, default=2, help="Indentation of the JSON output.")
        add_store_arguments(find)
        find.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        CLI command to run a query and print the populated documents.

        Args:
            args: Parsed CLI arguments.
        """
        specs = parse_populate_args(args.populate, args.populate_json)
        refs = parse_refs_args(args.ref)
        config, store = get_config_and_store(args)

        query = Query(
            store,
            args.collection,
            id_field=config.populate.id_field,
            refs=refs,
            max_workers=config.populate.max_workers,
            timeout=config.populate.timeout,
        )
        if args.filter:
            query.find(load_json_argument(args.filter, "--filter"))
        if args.select:
            query.select(args.select)
        if args.sort:
            query.sort(args.sort)
        if args.limit is not None:
            query.limit(args.limit)
        if args.skip:
            query.skip(args.skip)
        if specs:
            query.populate(specs)

        documents = query.exec()
        LOG.debug(f"Printing {len(documents)} document(s).")
        print(dumps_document(documents, indent=args.indent))
