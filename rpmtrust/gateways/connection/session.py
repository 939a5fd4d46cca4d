# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Requests session configured with all accepted scheme adapters."""

from __future__ import annotations

from logging import getLogger
from threading import local

from ...base.context import context
from . import HTTPAdapter, Retry, Session
from .adapters.localfs import LocalFSAdapter

log = getLogger(__name__)

class RpmTrustSessionType(type):
    """
    Takes advice from https://github.com/requests/requests/issues/1871#issuecomment-33327847
    and creates one Session instance per thread.
    """

    def __new__(mcs, name, bases, dct):
        dct["_thread_local"] = local()
        return super().__new__(mcs, name, bases, dct)

    def __call__(cls):
        try:
            return cls._thread_local.session
        except AttributeError:
            session = cls._thread_local.session = super().__call__()
            return session


class RpmTrustSession(Session, metaclass=RpmTrustSessionType):
    def __init__(self):
        super().__init__()

        self.proxies.update(
            {scheme: url for scheme, url in context.proxy_servers.items() if url}
        )
        self.verify = context.ssl_verify

        # retries stay on one mirror, failover to the next mirror is up to the caller
        retry = Retry(
            total=context.remote_max_retries,
            backoff_factor=context.remote_backoff_factor,
            status_forcelist=[413, 429, 503],
            raise_on_status=False,
            respect_retry_after_header=False,
        )
        http_adapter = HTTPAdapter(max_retries=retry)
        self.mount("http://", http_adapter)
        self.mount("https://", http_adapter)
        self.mount("file://", LocalFSAdapter())

        self.headers["User-Agent"] = context.user_agent

    @classmethod
    def cache_clear(cls):
        try:
            session = cls._thread_local.session
        except AttributeError:
            # AttributeError: thread's session has not been initialized
            return
        del cls._thread_local.session
        session.close()


def get_session() -> RpmTrustSession:
    return RpmTrustSession()
