# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Assemble the trust set from the gpgkey locations of the configured repositories."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from ..base.constants import ARMOR_HEADER
from ..exceptions import (
    KeySourceFetchError,
    KeySourceParseError,
    ProxyError,
    RpmTrustHTTPError,
    RpmTrustSSLError,
)
from ..gateways.connection.download import download_bytes
from .gpg import scan_key_ring

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from threading import Event

    from requests import Session

    from ..models.repository import RepositoryDescriptor

log = getLogger(__name__)


@dataclass(frozen=True)
class KeyEntity:
    fingerprint: str
    key_id: str
    armored: str
    uids: tuple[str, ...] = field(default=())
    #: Location the key was fetched from.
    source: str = ""

    def __str__(self):
        uid = self.uids[0] if self.uids else "<no uid>"
        return f"{self.key_id} {uid}"


class TrustSet:
    """Public keys signatures are checked against.

    Immutable once built. Duplicates are kept; they are harmless to gpg.
    """

    __slots__ = ("_entities",)

    def __init__(self, entities: Iterable[KeyEntity] = ()):
        self._entities = tuple(entities)

    @classmethod
    def empty(cls) -> TrustSet:
        return cls()

    def __iter__(self) -> Iterator[KeyEntity]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __bool__(self) -> bool:
        return bool(self._entities)

    def __repr__(self) -> str:
        return f"TrustSet({len(self)} keys)"

    @property
    def fingerprints(self) -> tuple[str, ...]:
        return tuple(entity.fingerprint for entity in self._entities)

    @property
    def armored_keys(self) -> tuple[str, ...]:
        return tuple(entity.armored for entity in self._entities)

    def dump(self):
        return [
            {"fingerprint": e.fingerprint, "uids": list(e.uids), "source": e.source}
            for e in self._entities
        ]


def parse_armored_keyring(data: bytes, source: str) -> tuple[KeyEntity, ...]:
    """Parse an ASCII armored public key ring; one source may hold several keys."""
    if ARMOR_HEADER not in data:
        raise KeySourceParseError(source, "no armored public key block found")
    keys = scan_key_ring(data)
    if not keys:
        raise KeySourceParseError(source, "no public key could be read from the key block")
    return tuple(
        KeyEntity(
            fingerprint=key["fingerprint"],
            key_id=key["keyid"],
            armored=key["armored"],
            uids=key["uids"],
            source=source,
        )
        for key in keys
    )


def build_keyring(
    descriptors: Iterable[RepositoryDescriptor],
    session: Session | None = None,
    cancel_event: Event | None = None,
) -> TrustSet:
    """Fetch and parse the key source of every enabled repository, in order.

    All or nothing: the first key source that cannot be fetched or parsed aborts the
    build, and no partial trust set is returned.
    """
    entities: list[KeyEntity] = []
    for repo in descriptors:
        if not repo.supplies_key:
            if repo.gpgkey:
                log.debug("skipping gpgkey of disabled repository %s", repo.name)
            continue
        url = repo.key_source_url
        log.info("Loading gpgkey %s", url)
        try:
            data = download_bytes(url, session=session, cancel_event=cancel_event)
        except (RpmTrustHTTPError, RpmTrustSSLError, ProxyError) as e:
            raise KeySourceFetchError(url, caused_by=e) from e
        keys = parse_armored_keyring(data, url)
        log.debug("gpgkey %s holds %d key(s)", url, len(keys))
        entities.extend(keys)
    trust_set = TrustSet(entities)
    log.info("keyring holds %d key(s)", len(trust_set))
    return trust_set
