# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Collection of pytest fixtures used in rpmtrust tests."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import gnupg
import pytest

from ..base.context import context, reset_context

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pytest import TempPathFactory

log = getLogger(__name__)


@dataclass
class Signer:
    """A generated OpenPGP key pair living in its own GnuPG home."""

    gpg: gnupg.GPG
    fingerprint: str
    armored: str

    @property
    def key_id(self) -> str:
        return self.fingerprint[-16:]

    def sign(self, data: bytes) -> bytes:
        result = self.gpg.sign(data, keyid=self.fingerprint, detach=True, binary=True)
        if not result.data:
            raise RuntimeError(f"gpg could not sign: {result.stderr}")
        return result.data


def _generate_signer(home, name: str) -> Signer:
    gpg = gnupg.GPG(gnupghome=str(home))
    key_input = gpg.gen_key_input(
        key_type="RSA",
        key_length=2048,
        name_real=name,
        name_email=f"{name.lower().replace(' ', '-')}@example.com",
        no_protection=True,
    )
    key = gpg.gen_key(key_input)
    if not key.fingerprint:
        raise RuntimeError(f"gpg could not generate a key: {key.stderr}")
    return Signer(gpg, key.fingerprint, gpg.export_keys(key.fingerprint))


@pytest.fixture(scope="session")
def gpg_available() -> None:
    if shutil.which(context.gpg_binary) is None:
        pytest.skip("gpg executable not available")


@pytest.fixture(scope="session")
def signer(gpg_available, tmp_path_factory: TempPathFactory) -> Signer:
    """Key whose public half goes into the trust set in tests."""
    return _generate_signer(tmp_path_factory.mktemp("gnupg-trusted"), "Rpmtrust Test")


@pytest.fixture(scope="session")
def foreign_signer(gpg_available, tmp_path_factory: TempPathFactory) -> Signer:
    """Key that no test trusts."""
    return _generate_signer(tmp_path_factory.mktemp("gnupg-foreign"), "Someone Else")


@pytest.fixture
def reset_rpmtrust_context() -> Iterator[None]:
    """Context built from defaults only, unaffected by rc files or RPMTRUST_* variables."""
    reset_context((), environ={})
    yield
    reset_context((), environ={})
