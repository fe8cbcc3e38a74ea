##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the `info.py` file of the `cli/commands` folder.
"""

from argparse import Namespace

from pytest_mock import MockerFixture

from docpop.cli.commands.info import InfoCommand
from docpop.config import Config
from tests.fixture_types import FixtureCallable, FixtureMemoryStore


def test_info_parser_sets_func(create_parser: FixtureCallable):
    """
    Ensure the `info` command sets the correct default function.

    Args:
        create_parser: Creates a parser with a command registered.
    """
    command = InfoCommand()
    parser = create_parser(command)
    args = parser.parse_args(["info", "--local"])
    assert args.local is True
    assert args.func.__name__ == command.process_command.__name__


def test_info_process_command_calls_display(mocker: MockerFixture, stores_memory: FixtureMemoryStore):
    """
    Ensure that `process_command` passes the config and store to `print_info`.

    Args:
        mocker: PyTest mocker fixture.
        stores_memory: A `MemoryStore` seeded with blog data.
    """
    config = Config({"store": {"name": "memory"}, "populate": {"id_field": "_id"}})
    mocker.patch("docpop.cli.commands.info.get_config_and_store", return_value=(config, stores_memory))
    mock_print_info = mocker.patch("docpop.cli.commands.info.print_info")

    InfoCommand().process_command(Namespace(local=False, config_dir=None))

    mock_print_info.assert_called_once_with(config, stores_memory)


def test_info_without_config(mocker: MockerFixture):
    """
    Ensure that a missing config file still prints the Python information.

    Args:
        mocker: PyTest mocker fixture.
    """
    mocker.patch(
        "docpop.cli.commands.info.get_config_and_store", side_effect=ValueError("Cannot find a docpop config file!")
    )
    mock_warning = mocker.patch("docpop.cli.commands.info.LOG.warning")
    mock_print_info = mocker.patch("docpop.cli.commands.info.print_info")

    InfoCommand().process_command(Namespace(local=False, config_dir=None))

    mock_warning.assert_called_once_with("Cannot find a docpop config file!")
    mock_print_info.assert_called_once_with(None, None)
