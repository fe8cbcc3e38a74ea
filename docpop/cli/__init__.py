##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
docpop CLI Package.

This package defines the entry point parser for the `docpop` CLI tool, its
subcommands, and helper functions shared across CLI handlers.

Subpackages:
    commands: Contains all command implementations for the docpop CLI.

Modules:
    argparse_main: Sets up the top-level argument parser and integrates all
        registered CLI subcommands into the `docpop` CLI interface.
    utils: Provides shared helpers for loading the config, building the store,
        and parsing populate options.
"""
