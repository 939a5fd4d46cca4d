# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Verify one package against its candidate mirrors."""

from __future__ import annotations

import hashlib
from logging import getLogger
from typing import TYPE_CHECKING

from ..base.constants import CHUNK_SIZE, CONTENT_DIGEST_ALGORITHM
from ..base.context import context
from ..exceptions import (
    DigestMismatchError,
    NoReachableSourceError,
    PackageUnreachableError,
    ProxyError,
    RpmTrustHTTPError,
    RpmTrustSSLError,
)
from ..gateways.connection.download import check_cancelled, open_stream
from ..models.outcome import Verified
from ..trust.keyring import TrustSet
from ..trust.rpm_signature import verify_rpm

if TYPE_CHECKING:
    from collections.abc import Iterable
    from threading import Event

    from requests import Response, Session

    from ..models.package import PackageDescriptor

log = getLogger(__name__)


class HashingReader:
    """Read-only file object over a streamed response body.

    Every byte returned by :meth:`read` has been fed to ``hasher`` first.
    """

    def __init__(
        self,
        raw: Iterable[bytes] | Response,
        hasher,
        cancel_event: Event | None = None,
    ):
        if hasattr(raw, "iter_content"):
            raw = raw.iter_content(CHUNK_SIZE)
        self._chunks = iter(raw)
        self._hasher = hasher
        self._cancel_event = cancel_event
        self._buffer = b""
        self._eof = False
        self.bytes_read = 0

    def _next_chunk(self) -> bytes:
        check_cancelled(self._cancel_event)
        for chunk in self._chunks:
            if chunk:
                self._hasher.update(chunk)
                self.bytes_read += len(chunk)
                return chunk
            check_cancelled(self._cancel_event)
        self._eof = True
        return b""

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            parts = [self._buffer]
            self._buffer = b""
            while not self._eof:
                parts.append(self._next_chunk())
            return b"".join(parts)

        while len(self._buffer) < size and not self._eof:
            self._buffer += self._next_chunk()
        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def readable(self) -> bool:
        return True

    def drain(self) -> int:
        """Consume whatever the reader's consumer left behind; returns bytes drained."""
        drained = len(self._buffer)
        self._buffer = b""
        while not self._eof:
            drained += len(self._next_chunk())
        return drained

    def hexdigest(self) -> str:
        return self._hasher.hexdigest()


def _verify_from(
    url: str,
    pkg: PackageDescriptor,
    trust_set: TrustSet,
    session: Session | None,
    cancel_event: Event | None,
) -> Verified:
    with open_stream(url, session=session, cancel_event=cancel_event) as response:
        reader = HashingReader(
            response, hashlib.new(CONTENT_DIGEST_ALGORITHM), cancel_event
        )
        verification = verify_rpm(reader, trust_set)
        leftover = reader.drain()
        if leftover:
            log.debug("%d trailing bytes after the payload of %s", leftover, url)

    actual = reader.hexdigest()
    if not pkg.digest_matches(actual):
        raise DigestMismatchError(
            url, CONTENT_DIGEST_ALGORITHM, pkg.expected_digest_hex, actual
        )
    return Verified(pkg.name, url, actual, verification.signers)


def verify_package(
    pkg: PackageDescriptor,
    trust_set: TrustSet | None = None,
    session: Session | None = None,
    cancel_event: Event | None = None,
) -> Verified:
    """Verify ``pkg`` from the first of its candidate urls that can be downloaded.

    Transport failures move on to the next mirror. Signature and digest failures
    are raised straight away; another mirror serving different bytes does not make
    the package trustworthy.
    """
    if trust_set is None:
        trust_set = TrustSet.empty()

    log.info("Verifying %s", pkg.name)
    errors = []
    for url in pkg.candidate_urls:
        check_cancelled(cancel_event)
        try:
            outcome = _verify_from(url, pkg, trust_set, session, cancel_event)
        except (RpmTrustHTTPError, RpmTrustSSLError, ProxyError) as e:
            error = PackageUnreachableError(pkg.name, url, caused_by=e)
            log.warning("%s", error)
            errors.append(error)
            continue
        log.info("%s verified from %s", pkg.name, url)
        return outcome

    if context.allow_unreachable_packages:
        log.warning(
            "none of the %d candidate urls of %s could be downloaded; "
            "accepting it unverified as configured",
            len(errors),
            pkg.name,
        )
        return Verified(pkg.name, None)
    raise NoReachableSourceError(pkg.name, errors)
