##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
CLI command for managing docpop configuration files.

This module defines the `ConfigCommand` class, which provides the CLI interface
to create a template configuration file and to switch between configuration files.
"""


import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, ArgumentTypeError, Namespace

import yaml

from docpop.cli.commands.command_entry_point import CommandEntryPoint
from docpop.config.config_filepaths import DOCPOP_HOME
from docpop.config.configfile import create_template_config, save_config_path


LOG = logging.getLogger("docpop")


class ConfigCommand(CommandEntryPoint):
    """
    CLI command group for managing docpop configuration files.

    Methods:
        add_parser: Adds the `config` command and its subcommands to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `config` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `config` command parser will be added.
        """
        config: ArgumentParser = subparsers.add_parser(
            "config",
            help="Create or select a docpop config file.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        config.set_defaults(func=self.process_command)
        config_subparsers = config.add_subparsers(dest="commands", required=True, help="Subcommands for 'config'")

        create_parser = config_subparsers.add_parser("create", help="Create a template app.yaml file.")
        create_parser.add_argument(
            "-o",
            "--output-dir",
            type=str,
            default=DOCPOP_HOME,
            help=f"Directory to write app.yaml to. Default: {DOCPOP_HOME}",
        )

        use_parser = config_subparsers.add_parser("use", help="Use a different configuration file.")
        use_parser.add_argument("config_file", type=str, help="The path to the configuration file to use.")

    def process_command(self, args: Namespace):
        """
        CLI command to manage docpop configuration files.

        Args:
            args: Parsed command-line arguments.

        Raises:
            ArgumentTypeError: If the file given to `use` is missing or isn't valid YAML.
        """
        if args.commands == "create":
            config_file = create_template_config(args.output_dir)
            save_config_path(config_file)
        elif args.commands == "use":
            try:
                with open(args.config_file, "r") as conf_file:
                    yaml.safe_load(conf_file)
            except FileNotFoundError as fnf_exc:
                raise ArgumentTypeError(f"The file '{args.config_file}' does not exist.") from fnf_exc
            except yaml.YAMLError as yaml_exc:
                raise ArgumentTypeError(f"The file '{args.config_file}' is not a valid YAML file.") from yaml_exc
            save_config_path(args.config_file)
