# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Thin wrapper around python-gnupg.

Every operation runs against a private, temporary GnuPG home so that the user's own
keyring never takes part in a verification.
"""

from __future__ import annotations

from contextlib import contextmanager
from io import BytesIO
from logging import getLogger
from tempfile import TemporaryDirectory
from typing import TYPE_CHECKING

import gnupg

from ..base.context import context
from ..exceptions import GnuPGUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from os import PathLike

log = getLogger(__name__)


def new_gpg(home: str | PathLike, gpg_binary: str | None = None) -> gnupg.GPG:
    gpg_binary = gpg_binary or context.gpg_binary
    try:
        return gnupg.GPG(gpgbinary=gpg_binary, gnupghome=str(home))
    except (OSError, ValueError) as e:
        # OSError: the executable does not exist or cannot be run
        # ValueError: python-gnupg could not make sense of `gpg --version`
        raise GnuPGUnavailableError(gpg_binary, caused_by=e)


@contextmanager
def gpg_home(
    armored_keys: Iterable[str] = (), gpg_binary: str | None = None
) -> Iterator[gnupg.GPG]:
    """Yield a GPG instance whose public keyring holds exactly ``armored_keys``."""
    with TemporaryDirectory(prefix="rpmtrust-gnupg-", ignore_cleanup_errors=True) as home:
        gpg = new_gpg(home, gpg_binary)
        for armored in armored_keys:
            result = gpg.import_keys(armored)
            if not result.count:
                log.warning("gpg refused a key of the trust set: %s", result.stderr)
        yield gpg


def scan_key_ring(data: bytes, gpg_binary: str | None = None) -> list[dict]:
    """Import an armored key ring into a scratch home and describe every key in it.

    Each dict carries ``fingerprint``, ``keyid``, ``uids`` and ``armored`` (the export
    of that single key). An empty list means gpg found no usable key.
    """
    with gpg_home(gpg_binary=gpg_binary) as gpg:
        result = gpg.import_keys(data)
        log.debug("gpg imported %d key(s): %s", result.count, result.fingerprints)
        if not result.count:
            return []
        keys = []
        for key in gpg.list_keys():
            keys.append(
                {
                    "fingerprint": key["fingerprint"],
                    "keyid": key["keyid"],
                    "uids": tuple(key.get("uids", ())),
                    "armored": gpg.export_keys(key["fingerprint"]),
                }
            )
        return keys


def verify_detached(gpg: gnupg.GPG, signature: bytes, data_path: str | PathLike):
    """Check one binary detached OpenPGP signature over the file at ``data_path``."""
    return gpg.verify_file(BytesIO(signature), data_filename=str(data_path))
