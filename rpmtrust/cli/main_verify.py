# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""CLI implementation for `rpmtrust verify`.

Verify rpms referenced by a Bazel workspace against the gpg keys of a repository file.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from argparse import ArgumentParser, Namespace, _SubParsersAction

log = getLogger(__name__)


def configure_parser(sub_parsers: _SubParsersAction, **kwargs) -> ArgumentParser:
    from ..base.constants import DEFAULT_REPO_FILE, DEFAULT_WORKSPACE
    from .rpmtrust_argparse import add_parser_json

    summary = "Verify RPMs against gpg keys defined in repo.yaml."
    description = (
        "Fetch the gpgkey of every enabled repository of the repository file, then "
        "download every rpm rule of the workspace from its urls and check its "
        "signatures and sha256 sum. Stops at the first package that fails."
    )
    epilog = (
        "Examples:\n"
        "  rpmtrust verify\n"
        "  rpmtrust verify -r repo.yaml -w WORKSPACE --json"
    )

    p = sub_parsers.add_parser(
        "verify",
        help=summary,
        description=description,
        epilog=epilog,
        **kwargs,
    )
    p.add_argument(
        "-r",
        "--repofile",
        dest="repo_file",
        metavar="PATH",
        default=None,
        help=f"Repository file (default: {DEFAULT_REPO_FILE}).",
    )
    p.add_argument(
        "-w",
        "--workspace",
        dest="workspace",
        metavar="PATH",
        default=None,
        help=f"Bazel workspace file (default: {DEFAULT_WORKSPACE}).",
    )

    policy = p.add_argument_group("Verification Policy")
    policy.add_argument(
        "--allow-unsigned",
        dest="allow_unsigned_packages",
        action="store_true",
        default=None,
        help="Accept rpms that carry no OpenPGP signature (their digests are still checked).",
    )
    policy.add_argument(
        "--allow-unreachable",
        dest="allow_unreachable_packages",
        action="store_true",
        default=None,
        help="Do not fail when none of the urls of an rpm can be downloaded.",
    )
    add_parser_json(p)

    p.set_defaults(func="rpmtrust.cli.main_verify.execute")
    return p


def execute(args: Namespace, parser: ArgumentParser) -> int:
    from threading import Event

    from ..base.context import context
    from ..common.signals import signal_handler
    from ..core.verification_run import VerificationRun
    from ..exceptions import VerificationCancelledError
    from ..gateways.disk.repo_file import load_repo_file
    from ..gateways.disk.workspace import load_packages
    from .common import stdout_json_success

    repo_file = load_repo_file(context.repo_file)
    packages = load_packages(context.workspace)
    cancel_event = Event()

    def handler(signum, frame):
        cancel_event.set()
        raise VerificationCancelledError(signum)

    run = VerificationRun(repo_file.repositories, packages, cancel_event=cancel_event)
    with signal_handler(handler):
        verified = run()

    if context.json:
        stdout_json_success(
            keyring=run.trust_set.dump(),
            packages=[outcome.dump() for outcome in verified],
        )
    else:
        stdout = getLogger("rpmtrust.stdout")
        for outcome in verified:
            if outcome.verified:
                stdout.info("%s: OK (%s)", outcome.name, outcome.url)
            else:
                stdout.info("%s: NOT VERIFIED (no reachable url)", outcome.name)
        stdout.info(
            "Verified %d package(s) against %d key(s).", len(verified), len(run.trust_set)
        )
    return 0
