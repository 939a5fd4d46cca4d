# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Check the OpenPGP signatures and digests embedded in an rpm.

:func:`verify_rpm` consumes a byte stream exactly once, to its end. Header-only
signatures (``RSAHEADER``, ``DSAHEADER``, ``OPENPGP``) cover the main header; legacy
signatures (``PGP``, ``GPG``) cover the header plus the payload, which is then spooled
to a scratch file for gpg.

Signatures are only accepted when made by a key of the trust set. An empty trust set
therefore rejects every signed package.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import TYPE_CHECKING

from ..base.constants import CHUNK_SIZE
from ..base.context import context
from ..common.pkg_formats.rpm import (
    PGPHASHALGO,
    RPMTAG_ARCH,
    RPMTAG_EPOCH,
    RPMTAG_NAME,
    RPMTAG_PAYLOADDIGEST,
    RPMTAG_PAYLOADDIGESTALGO,
    RPMTAG_RELEASE,
    RPMTAG_VERSION,
    SIGTAG_DSA,
    SIGTAG_GPG,
    SIGTAG_LONGSIZE,
    SIGTAG_MD5,
    SIGTAG_OPENPGP,
    SIGTAG_PGP,
    SIGTAG_RSA,
    SIGTAG_SHA1,
    SIGTAG_SHA256,
    SIGTAG_SIZE,
    read_header,
    read_lead,
    read_signature_header,
)
from ..exceptions import RpmFormatError, SignatureInvalidError
from .gpg import gpg_home, verify_detached
from .keyring import TrustSet

if TYPE_CHECKING:
    from typing import BinaryIO

    from ..common.pkg_formats.rpm import RpmHeader

log = getLogger(__name__)

HEADER_SIGNATURE_TAGS = (SIGTAG_RSA, SIGTAG_DSA)
HEADER_PAYLOAD_SIGNATURE_TAGS = (SIGTAG_PGP, SIGTAG_GPG)

SIGTAG_NAMES = {
    SIGTAG_DSA: "DSAHEADER",
    SIGTAG_RSA: "RSAHEADER",
    SIGTAG_OPENPGP: "OPENPGP",
    SIGTAG_PGP: "PGP",
    SIGTAG_GPG: "GPG",
}


@dataclass(frozen=True)
class RpmSignature:
    tag: int
    data: bytes

    @property
    def covers_payload(self) -> bool:
        return self.tag in HEADER_PAYLOAD_SIGNATURE_TAGS

    @property
    def kind(self) -> str:
        return SIGTAG_NAMES.get(self.tag, str(self.tag))


@dataclass(frozen=True)
class RpmVerification:
    name: str | None
    version: str | None
    release: str | None
    arch: str | None
    epoch: int | None = None
    #: Key ids of the signers, one per verified signature.
    signers: tuple[str, ...] = field(default=())

    @property
    def nevra(self) -> str:
        epoch = f"{self.epoch}:" if self.epoch else ""
        return f"{self.name}-{epoch}{self.version}-{self.release}.{self.arch}"


def collect_signatures(sigheader: RpmHeader) -> list[RpmSignature]:
    signatures = []
    for tag in HEADER_SIGNATURE_TAGS + HEADER_PAYLOAD_SIGNATURE_TAGS:
        value = sigheader.get(tag)
        if value is None:
            continue
        if not isinstance(value, bytes):
            raise RpmFormatError(f"{SIGTAG_NAMES[tag]} signature is not binary")
        signatures.append(RpmSignature(tag, value))
    for encoded in sigheader.get(SIGTAG_OPENPGP) or ():
        try:
            signatures.append(RpmSignature(SIGTAG_OPENPGP, base64.b64decode(encoded)))
        except (binascii.Error, ValueError):
            raise RpmFormatError("OPENPGP signature is not valid base64")
    return signatures


def _compare(what: str, expected, actual) -> None:
    if expected != actual:
        raise RpmFormatError(
            f"{what} mismatch (expected {expected}, computed {actual})", what=what
        )


def _payload_hasher(header: RpmHeader):
    digests = header.get(RPMTAG_PAYLOADDIGEST)
    if not digests:
        return None, None
    algo = header.get_int(RPMTAG_PAYLOADDIGESTALGO) or 8
    try:
        name = PGPHASHALGO[algo]
    except KeyError:
        log.debug("unsupported payload digest algorithm %d, not checked", algo)
        return None, None
    return hashlib.new(name), digests[0]


def verify_rpm(
    stream: BinaryIO,
    trust_set: TrustSet | None = None,
    allow_unsigned: bool | None = None,
) -> RpmVerification:
    """Verify digests and signatures of the rpm read from ``stream``.

    Raises :class:`SignatureInvalidError` (or its subclass :class:`RpmFormatError`)
    when the package is malformed, a digest does not match, a signature was not made
    by a key of ``trust_set`` or the package carries no signature at all while
    unsigned packages are not allowed.
    """
    if trust_set is None:
        trust_set = TrustSet.empty()
    if allow_unsigned is None:
        allow_unsigned = context.allow_unsigned_packages

    lead = read_lead(stream)
    sigheader = read_signature_header(stream)
    header = read_header(stream)
    name = header.get_string(RPMTAG_NAME) or lead.name
    log.debug("read headers of %s (%d signature tags)", name, len(sigheader))

    signatures = collect_signatures(sigheader)
    spool_payload = any(sig.covers_payload for sig in signatures)

    md5 = None
    if SIGTAG_MD5 in sigheader:
        md5 = hashlib.md5(header.blob, usedforsecurity=False)
    payload_hasher, payload_digest = _payload_hasher(header)
    size = len(header.blob)

    with TemporaryDirectory(prefix="rpmtrust-verify-") as workdir:
        header_path = Path(workdir, "header")
        header_path.write_bytes(header.blob)
        signed_path = Path(workdir, "header+payload")

        with open(signed_path, "wb") if spool_payload else _NullWriter() as signed:
            signed.write(header.blob)
            while chunk := stream.read(CHUNK_SIZE):
                size += len(chunk)
                signed.write(chunk)
                if md5 is not None:
                    md5.update(chunk)
                if payload_hasher is not None:
                    payload_hasher.update(chunk)

        # integrity of the headers and payload
        if SIGTAG_SHA1 in sigheader:
            _compare(
                "header SHA1",
                sigheader.get_string(SIGTAG_SHA1),
                hashlib.sha1(header.blob, usedforsecurity=False).hexdigest(),
            )
        if SIGTAG_SHA256 in sigheader:
            _compare(
                "header SHA256",
                sigheader.get_string(SIGTAG_SHA256),
                hashlib.sha256(header.blob).hexdigest(),
            )
        if md5 is not None:
            _compare("header+payload MD5", sigheader[SIGTAG_MD5].hex(), md5.hexdigest())
        for size_tag in (SIGTAG_SIZE, SIGTAG_LONGSIZE):
            if size_tag in sigheader:
                _compare("header+payload size", sigheader.get_int(size_tag), size)
        if payload_hasher is not None:
            _compare("payload digest", payload_digest, payload_hasher.hexdigest())

        if not signatures:
            if not allow_unsigned:
                raise SignatureInvalidError("package %(name)s is not signed", name=name)
            log.warning("%s is not signed, accepting it as configured", name)
            signers = ()
        else:
            signers = _check_signatures(
                signatures, trust_set, header_path, signed_path, name
            )

    return RpmVerification(
        name=name,
        version=header.get_string(RPMTAG_VERSION),
        release=header.get_string(RPMTAG_RELEASE),
        arch=header.get_string(RPMTAG_ARCH),
        epoch=header.get_int(RPMTAG_EPOCH),
        signers=signers,
    )


def _check_signatures(
    signatures: list[RpmSignature],
    trust_set: TrustSet,
    header_path: Path,
    signed_path: Path,
    name: str,
) -> tuple[str, ...]:
    signers = []
    with gpg_home(trust_set.armored_keys) as gpg:
        for signature in signatures:
            data_path = signed_path if signature.covers_payload else header_path
            result = verify_detached(gpg, signature.data, data_path)
            key_id = result.key_id or result.fingerprint or "unknown"
            if not result.valid:
                if result.status == "no public key":
                    reason = f"key {key_id} is not in the keyring"
                else:
                    reason = result.status or "gpg could not verify it"
                raise SignatureInvalidError(
                    "%(kind)s signature of %(name)s is not valid: %(reason)s",
                    kind=signature.kind,
                    name=name,
                    reason=reason,
                    key_id=key_id,
                )
            log.info("%s signature of %s made by key %s", signature.kind, name, key_id)
            signers.append(key_id)
    return tuple(signers)


class _NullWriter:
    def write(self, data):
        return len(data)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False
