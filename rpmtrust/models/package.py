# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""A package reference: one logical rpm, its mirrors and its expected digest."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..exceptions import InvalidPackageDescriptor

if TYPE_CHECKING:
    from collections.abc import Iterable

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


@dataclass(frozen=True)
class PackageDescriptor:
    name: str
    #: Mirror urls of the same rpm, in the order they are tried.
    candidate_urls: tuple[str, ...]
    #: Hex encoded sha256 of the whole rpm file; compared case-insensitively.
    expected_digest_hex: str

    def __post_init__(self):
        if isinstance(self.candidate_urls, str):
            raise InvalidPackageDescriptor(self.name, "candidate urls must be a sequence")
        object.__setattr__(self, "candidate_urls", tuple(self.candidate_urls))
        if not self.name:
            raise InvalidPackageDescriptor(self.name, "name must not be empty")
        if not self.candidate_urls:
            raise InvalidPackageDescriptor(self.name, "at least one url is required")
        if any(not url for url in self.candidate_urls):
            raise InvalidPackageDescriptor(self.name, "urls must not be empty")
        if not self.expected_digest_hex or not _HEX_RE.match(self.expected_digest_hex):
            raise InvalidPackageDescriptor(
                self.name, f"sha256 {self.expected_digest_hex!r} is not a hex digest"
            )

    @classmethod
    def create(
        cls, name: str, urls: Iterable[str], sha256: str
    ) -> PackageDescriptor:
        return cls(name=name, candidate_urls=tuple(urls), expected_digest_hex=sha256)

    def digest_matches(self, actual_hex: str) -> bool:
        return self.expected_digest_hex.lower() == actual_hex.lower()
