# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Entry point for all rpmtrust subcommands."""

import sys


def init_loggers():
    import logging

    from ..base.context import context
    from ..gateways.logging import initialize_logging, set_log_level

    initialize_logging()

    # keep stderr chatter away from JSON output
    logging.getLogger("rpmtrust.stderr").setLevel(
        logging.CRITICAL + 10 if context.json else logging.INFO
    )

    set_log_level(context.log_level)


def main_subshell(*args):
    from ..base.context import reset_context
    from .rpmtrust_argparse import do_call, generate_parser

    args = args or ["--help"]

    parser = generate_parser()
    args = parser.parse_args(args)

    reset_context(argparse_args=args)
    init_loggers()

    exit_code = do_call(args, parser)
    if isinstance(exit_code, int):
        return exit_code
    return 0


def main(*args, **kwargs):
    from ..exception_handler import rpmtrust_exception_handler

    args = args or sys.argv[1:]  # drop executable/script
    return rpmtrust_exception_handler(main_subshell, *args, **kwargs)
