# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Verify every package referenced by a workspace, stopping at the first failure."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ..exceptions import RunAbortedError, VerificationCancelledError
from ..models.outcome import Failed
from ..trust.keyring import build_keyring
from .package_verifier import verify_package

if TYPE_CHECKING:
    from collections.abc import Iterable
    from threading import Event

    from requests import Session

    from ..models.outcome import Verified
    from ..models.package import PackageDescriptor
    from ..models.repository import RepositoryDescriptor
    from ..trust.keyring import TrustSet

log = getLogger(__name__)


def run_verification(
    packages: Iterable[PackageDescriptor],
    trust_set: TrustSet,
    session: Session | None = None,
    cancel_event: Event | None = None,
    outcomes: list | None = None,
) -> tuple[Verified, ...]:
    """Verify ``packages`` in order.

    The first failing package aborts the run with :class:`RunAbortedError`; the
    packages after it are never tried. When ``outcomes`` is given, a
    :class:`Verified` or :class:`Failed` record is appended to it per attempted
    package.
    """
    verified = []
    for pkg in packages:
        try:
            outcome = verify_package(pkg, trust_set, session, cancel_event)
        except VerificationCancelledError:
            raise
        except Exception as e:
            if outcomes is not None:
                outcomes.append(Failed(pkg.name, str(e).strip()))
            log.debug("verification of %s failed", pkg.name, exc_info=True)
            raise RunAbortedError(pkg.name, e) from e
        verified.append(outcome)
        if outcomes is not None:
            outcomes.append(outcome)
    log.info("verified %d package(s)", len(verified))
    return tuple(verified)


class VerificationRun:
    """Keyring build followed by package verification, as driven by the cli."""

    def __init__(
        self,
        repositories: Iterable[RepositoryDescriptor],
        packages: Iterable[PackageDescriptor],
        session: Session | None = None,
        cancel_event: Event | None = None,
    ):
        self.repositories = tuple(repositories)
        self.packages = tuple(packages)
        self.session = session
        self.cancel_event = cancel_event
        self.trust_set: TrustSet | None = None
        self.outcomes: list = []

    def build_keyring(self) -> TrustSet:
        self.trust_set = build_keyring(
            self.repositories, session=self.session, cancel_event=self.cancel_event
        )
        return self.trust_set

    def run(self) -> tuple[Verified, ...]:
        if self.trust_set is None:
            self.build_keyring()
        self.outcomes = []
        return run_verification(
            self.packages,
            self.trust_set,
            session=self.session,
            cancel_event=self.cancel_event,
            outcomes=self.outcomes,
        )

    def __call__(self) -> tuple[Verified, ...]:
        self.build_keyring()
        return self.run()
