# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Rpmtrust's global configuration object.

The context aggregates all configuration files, environment variables, and command line arguments
into one global stateful object to be used across all of rpmtrust.
"""

from __future__ import annotations

import logging
import platform
import sys
from functools import cached_property
from typing import TYPE_CHECKING

from .. import __version__ as RPMTRUST_VERSION
from ..common.configuration import (
    Configuration,
    MapParameter,
    PrimitiveParameter,
)
from .constants import APP_NAME, DEFAULT_REPO_FILE, DEFAULT_WORKSPACE, SEARCH_PATH

if TYPE_CHECKING:
    from argparse import Namespace
    from collections.abc import Iterable, Mapping


def _positive(value):
    if value < 0:
        return "Value must be a non-negative number."
    return True


class Context(Configuration):
    repo_file = PrimitiveParameter(DEFAULT_REPO_FILE)
    workspace = PrimitiveParameter(DEFAULT_WORKSPACE)

    # network
    remote_connect_timeout_secs = PrimitiveParameter(9.15, validation=_positive)
    remote_read_timeout_secs = PrimitiveParameter(60.0, validation=_positive)
    remote_max_retries = PrimitiveParameter(3, validation=_positive)
    remote_backoff_factor = PrimitiveParameter(1.0, validation=_positive)
    ssl_verify = PrimitiveParameter(True, element_type=(bool, str))
    proxy_servers = MapParameter((str, type(None)))

    # verification policy
    gpg_binary = PrimitiveParameter("gpg")
    allow_unsigned_packages = PrimitiveParameter(False)
    allow_unreachable_packages = PrimitiveParameter(False)

    # output
    verbosity = PrimitiveParameter(0, validation=_positive)
    json = PrimitiveParameter(False)
    debug = PrimitiveParameter(False)

    def __init__(
        self,
        search_path: Iterable[str] = SEARCH_PATH,
        argparse_args: Namespace | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.__dict__.pop("user_agent", None)
        super().__init__(
            search_path=search_path,
            app_name=APP_NAME,
            argparse_args=argparse_args,
            environ=environ,
        )

    @property
    def log_level(self) -> int:
        if self.debug or self.verbosity >= 3:
            return logging.DEBUG
        elif self.verbosity >= 1:
            return logging.INFO
        return logging.WARNING

    @property
    def remote_timeout(self) -> tuple[float, float]:
        return self.remote_connect_timeout_secs, self.remote_read_timeout_secs

    @cached_property
    def user_agent(self) -> str:
        python = ".".join(str(part) for part in sys.version_info[:3])
        return (
            f"{APP_NAME}/{RPMTRUST_VERSION} "
            f"{platform.python_implementation()}/{python} "
            f"{platform.system()}/{platform.release()}"
        )

    @property
    def category_map(self) -> dict[str, tuple[str, ...]]:
        return {
            "Inputs": (
                "repo_file",
                "workspace",
            ),
            "Network Configuration": (
                "proxy_servers",
                "remote_backoff_factor",
                "remote_connect_timeout_secs",
                "remote_max_retries",
                "remote_read_timeout_secs",
                "ssl_verify",
            ),
            "Verification Policy": (
                "allow_unreachable_packages",
                "allow_unsigned_packages",
                "gpg_binary",
            ),
            "Output, Prompt, and Flow Control Configuration": (
                "debug",
                "json",
                "verbosity",
            ),
        }


def reset_context(
    search_path: Iterable[str] = SEARCH_PATH,
    argparse_args: Namespace | None = None,
    environ: Mapping[str, str] | None = None,
) -> Context:
    global context
    context.__init__(search_path, argparse_args, environ)

    # sessions carry proxies, ssl and retry settings read from the context
    from ..gateways.connection.session import RpmTrustSession

    RpmTrustSession.cache_clear()
    return context


context = Context((), None)
