# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Per package verification outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Verified:
    name: str
    #: Mirror the package was verified from; None when no mirror was reachable
    #: and ``allow_unreachable_packages`` let the package through.
    url: str | None
    digest: str | None = None
    #: Key ids of the signers whose signatures were checked.
    signatures: tuple[str, ...] = field(default=())

    @property
    def verified(self) -> bool:
        return self.url is not None

    def dump(self):
        return {
            "name": self.name,
            "url": self.url,
            "sha256": self.digest,
            "signatures": list(self.signatures),
            "verified": self.verified,
        }


@dataclass(frozen=True)
class Failed:
    name: str
    reason: str

    @property
    def verified(self) -> bool:
        return False

    def dump(self):
        return {"name": self.name, "reason": self.reason, "verified": False}
