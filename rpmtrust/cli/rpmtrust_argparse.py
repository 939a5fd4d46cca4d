# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Rpmtrust command line interface parsers."""

from __future__ import annotations

import argparse
from argparse import SUPPRESS, RawDescriptionHelpFormatter
from argparse import ArgumentParser as ArgumentParserBase
from importlib import import_module
from logging import getLogger

from .. import __version__
from .main_verify import configure_parser as configure_parser_verify

log = getLogger(__name__)


def generate_parser(**kwargs) -> ArgumentParser:
    parser = ArgumentParser(
        prog="rpmtrust",
        description="rpmtrust checks that the rpms referenced by a Bazel workspace are "
        "signed by the keys of the configured repositories and match their sha256 sums.",
        **kwargs,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"rpmtrust {__version__}",
        help="Show the rpmtrust version number and exit.",
    )

    sub_parsers = parser.add_subparsers(
        metavar="COMMAND",
        title="commands",
        dest="cmd",
        required=True,
    )
    configure_parser_verify(sub_parsers)
    return parser


def do_call(args: argparse.Namespace, parser: ArgumentParser):
    """Import the module named by ``args.func`` and run its function."""
    module_name, func_name = args.func.rsplit(".", 1)
    module = import_module(module_name)
    return getattr(module, func_name)(args, parser)


class ArgumentParser(ArgumentParserBase):
    def __init__(self, *args, **kwargs):
        kwargs.setdefault("formatter_class", RawDescriptionHelpFormatter)
        super().__init__(*args, **kwargs)


def add_parser_verbose(parser: ArgumentParser | argparse._ArgumentGroup) -> None:
    # defaults are None so that unset flags leave configuration files in charge
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        help="Can be used multiple times. Once for INFO logging, thrice for DEBUG logging.",
        dest="verbosity",
        default=None,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help=SUPPRESS,
        default=None,
    )


def add_parser_json(p: ArgumentParser) -> argparse._ArgumentGroup:
    output_options = p.add_argument_group("Output, Prompt, and Flow Control Options")
    output_options.add_argument(
        "--json",
        action="store_true",
        default=None,
        help="Report all output as json. Suitable for using rpmtrust programmatically.",
    )
    add_parser_verbose(output_options)
    return output_options
