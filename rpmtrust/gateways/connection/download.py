# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Download logic for key sources and package bodies."""

from __future__ import annotations

import warnings
from contextlib import contextmanager
from logging import DEBUG, getLogger
from typing import TYPE_CHECKING

from ...auxlib.ish import dals
from ...base.context import context
from ...exceptions import (
    ProxyError,
    RpmTrustDependencyError,
    RpmTrustHTTPError,
    RpmTrustSSLError,
    VerificationCancelledError,
)
from . import (
    ChunkedEncodingError,
    ConnectionError,
    HTTPError,
    InsecureRequestWarning,
    InvalidSchema,
    RequestsProxyError,
    SSLError,
    Timeout,
)
from .session import get_session

if TYPE_CHECKING:
    from collections.abc import Iterator
    from threading import Event

    from requests import Response, Session

log = getLogger(__name__)


def disable_ssl_verify_warning():
    warnings.simplefilter("ignore", InsecureRequestWarning)


def check_cancelled(cancel_event: Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise VerificationCancelledError()


def _describe(response: Response) -> str:
    return (
        f"{response.request.method if response.request else 'GET'} {response.url} "
        f"-> {response.status_code} {response.reason} "
        f"({response.headers.get('Content-Length', '?')} bytes)"
    )


@contextmanager
def download_http_errors(url: str):
    """Exception translator used around every request."""
    try:
        yield

    except RequestsProxyError:
        raise ProxyError()

    except InvalidSchema as e:
        if "SOCKS" in str(e):
            message = dals(
                """
                Requests has identified that your current working environment is configured
                to use a SOCKS proxy, but pysocks is not installed.  To proceed, remove your
                proxy configuration, install pysocks, and then you can re-enable your proxy
                configuration.
                """
            )
            raise RpmTrustDependencyError(message)
        else:
            raise RpmTrustHTTPError(
                "Unsupported url scheme.\n",
                url,
                None,
                "INVALID SCHEMA",
                None,
                caused_by=e,
            )

    except SSLError as e:
        # SSLError: either an invalid certificate or OpenSSL is unavailable
        raise RpmTrustSSLError(
            dals(
                """
                Encountered an SSL error. Most likely a certificate verification issue.

                Exception: %(exception)s
                """
            ),
            exception=e,
            caused_by=e,
        )

    except (ConnectionError, HTTPError, Timeout, ChunkedEncodingError) as e:
        help_message = dals(
            """
            An HTTP error occurred when trying to retrieve this URL.
            HTTP errors are often intermittent, and a simple retry will get you on your way.
            """
        )
        response = getattr(e, "response", None)
        raise RpmTrustHTTPError(
            help_message,
            url,
            getattr(response, "status_code", None),
            getattr(response, "reason", None) or type(e).__name__,
            getattr(response, "elapsed", None),
            response,
            caused_by=e,
        )


def download_bytes(
    url: str, session: Session | None = None, cancel_event: Event | None = None
) -> bytes:
    """Fetch a small resource (e.g. an armored key ring) fully into memory."""
    check_cancelled(cancel_event)
    if not context.ssl_verify:
        disable_ssl_verify_warning()
    session = session or get_session()
    with download_http_errors(url):
        response = session.get(url, timeout=context.remote_timeout)
        if log.isEnabledFor(DEBUG):
            log.debug(_describe(response))
        response.raise_for_status()
        return response.content


@contextmanager
def open_stream(
    url: str, session: Session | None = None, cancel_event: Event | None = None
) -> Iterator[Response]:
    """Open ``url`` for streaming; the response is closed when the context exits.

    Errors raised while the body is being read are translated as well.
    """
    check_cancelled(cancel_event)
    if not context.ssl_verify:
        disable_ssl_verify_warning()
    session = session or get_session()
    with download_http_errors(url):
        response = session.get(url, stream=True, timeout=context.remote_timeout)
        try:
            if log.isEnabledFor(DEBUG):
                log.debug(_describe(response))
            response.raise_for_status()
            yield response
        finally:
            response.close()
