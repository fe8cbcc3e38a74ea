##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
docpop CLI Commands Package.

Each module encapsulates the logic and argument parsing for one `docpop`
command, built around the `CommandEntryPoint` interface.

Modules:
    command_entry_point: Defines the abstract base class `CommandEntryPoint` for all CLI commands.
    config: Implements the `config` command for creating and selecting configuration files.
    find: Implements the `find` command for querying documents and populating their references.
    info: Implements the `info` command for displaying configuration and store diagnostics.
    load: Implements the `load` command for inserting documents from a JSON file.
"""

from docpop.cli.commands.config import ConfigCommand
from docpop.cli.commands.find import FindCommand
from docpop.cli.commands.info import InfoCommand
from docpop.cli.commands.load import LoadCommand


ALL_COMMANDS = [
    ConfigCommand(),
    FindCommand(),
    InfoCommand(),
    LoadCommand(),
]
