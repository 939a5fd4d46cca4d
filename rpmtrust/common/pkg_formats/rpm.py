# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Streaming reader for the rpm file format.

An rpm file is laid out as::

    lead (96 bytes) | signature header | padding to 8 bytes | header | payload

Both headers share one structure: an 8 byte magic, the number of index entries and
the size of the data store (two big-endian int32), the index entries (16 bytes each:
tag, type, offset, count) and finally the data store. The reader never seeks, so it
works on a network stream.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...exceptions import RpmFormatError

if TYPE_CHECKING:
    from typing import Any, BinaryIO

LEAD_SIZE = 96
LEAD_MAGIC = b"\xed\xab\xee\xdb"
HEADER_MAGIC = b"\x8e\xad\xe8\x01"
HEADER_INTRO = struct.Struct(">4s4xII")
INDEX_ENTRY = struct.Struct(">iiii")

#: Upper bounds that keep a hostile stream from making us allocate gigabytes.
MAX_INDEX_ENTRIES = 0x10000
MAX_STORE_SIZE = 256 * 1024 * 1024

# header entry types
RPM_NULL_TYPE = 0
RPM_CHAR_TYPE = 1
RPM_INT8_TYPE = 2
RPM_INT16_TYPE = 3
RPM_INT32_TYPE = 4
RPM_INT64_TYPE = 5
RPM_STRING_TYPE = 6
RPM_BIN_TYPE = 7
RPM_STRING_ARRAY_TYPE = 8
RPM_I18NSTRING_TYPE = 9

_INT_FORMATS = {
    RPM_CHAR_TYPE: "B",
    RPM_INT8_TYPE: "B",
    RPM_INT16_TYPE: "H",
    RPM_INT32_TYPE: "I",
    RPM_INT64_TYPE: "Q",
}

# signature header tags
SIGTAG_DSA = 267
SIGTAG_RSA = 268
SIGTAG_SHA1 = 269
SIGTAG_LONGSIZE = 270
SIGTAG_SHA256 = 273
SIGTAG_OPENPGP = 278
SIGTAG_SIZE = 1000
SIGTAG_PGP = 1002
SIGTAG_MD5 = 1004
SIGTAG_GPG = 1005

# main header tags
RPMTAG_NAME = 1000
RPMTAG_VERSION = 1001
RPMTAG_RELEASE = 1002
RPMTAG_EPOCH = 1003
RPMTAG_ARCH = 1022
RPMTAG_PAYLOADDIGEST = 5092
RPMTAG_PAYLOADDIGESTALGO = 5093

#: PGP hash algorithm ids used by rpm for digest tags, mapped to hashlib names.
PGPHASHALGO = {
    1: "md5",
    2: "sha1",
    8: "sha256",
    9: "sha384",
    10: "sha512",
    11: "sha224",
}


@dataclass(frozen=True)
class RpmLead:
    major: int
    minor: int
    type: int
    name: str
    signature_type: int

    @classmethod
    def parse(cls, data: bytes) -> RpmLead:
        if len(data) != LEAD_SIZE:
            raise RpmFormatError("truncated lead")
        magic, major, minor, rpm_type, _arch, name, _os, sig_type = struct.unpack(
            ">4sBBhh66shh16x", data
        )
        if magic != LEAD_MAGIC:
            raise RpmFormatError("not an rpm file (bad lead magic)")
        if major not in (3, 4):
            raise RpmFormatError(f"unsupported rpm lead version {major}.{minor}")
        return cls(
            major=major,
            minor=minor,
            type=rpm_type,
            name=name.split(b"\0", 1)[0].decode("utf-8", "replace"),
            signature_type=sig_type,
        )


class RpmHeader:
    """A decoded header section.

    ``blob`` holds the exact bytes of the section (magic through data store), which is
    what header-only signatures and digests are computed over.
    """

    def __init__(self, blob: bytes, entries: dict[int, tuple[int, int, int]]):
        self.blob = blob
        self._entries = entries
        self._store_offset = HEADER_INTRO.size + INDEX_ENTRY.size * len(entries)

    def __contains__(self, tag: int) -> bool:
        return tag in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def tags(self) -> tuple[int, ...]:
        return tuple(self._entries)

    def get(self, tag: int, default: Any = None) -> Any:
        try:
            return self[tag]
        except KeyError:
            return default

    def __getitem__(self, tag: int) -> Any:
        tag_type, offset, count = self._entries[tag]
        store = memoryview(self.blob)[self._store_offset :]
        if offset < 0 or offset > len(store):
            raise RpmFormatError(f"tag {tag} points outside the data store")

        if tag_type in _INT_FORMATS:
            fmt = f">{count}{_INT_FORMATS[tag_type]}"
            size = struct.calcsize(fmt)
            if offset + size > len(store):
                raise RpmFormatError(f"tag {tag} overruns the data store")
            return struct.unpack_from(fmt, store, offset)
        elif tag_type == RPM_BIN_TYPE:
            if offset + count > len(store):
                raise RpmFormatError(f"tag {tag} overruns the data store")
            return bytes(store[offset : offset + count])
        elif tag_type in (RPM_STRING_TYPE, RPM_STRING_ARRAY_TYPE, RPM_I18NSTRING_TYPE):
            strings = []
            position = offset
            number = 1 if tag_type == RPM_STRING_TYPE else count
            raw = bytes(store)
            for _ in range(number):
                end = raw.find(b"\0", position)
                if end < 0:
                    raise RpmFormatError(f"unterminated string in tag {tag}")
                strings.append(raw[position:end].decode("utf-8", "replace"))
                position = end + 1
            return strings[0] if tag_type == RPM_STRING_TYPE else tuple(strings)
        elif tag_type == RPM_NULL_TYPE:
            return None
        raise RpmFormatError(f"unknown type {tag_type} for tag {tag}")

    def get_string(self, tag: int) -> str | None:
        value = self.get(tag)
        if isinstance(value, tuple):
            return value[0] if value and isinstance(value[0], str) else None
        return value

    def get_int(self, tag: int) -> int | None:
        value = self.get(tag)
        if isinstance(value, tuple) and value and isinstance(value[0], int):
            return value[0]
        return None


def _read_exactly(stream: BinaryIO, size: int, what: str) -> bytes:
    chunks = []
    remaining = size
    while remaining:
        chunk = stream.read(remaining)
        if not chunk:
            raise RpmFormatError(f"unexpected end of file in {what}")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_lead(stream: BinaryIO) -> RpmLead:
    return RpmLead.parse(_read_exactly(stream, LEAD_SIZE, "lead"))


def read_header(stream: BinaryIO, what: str = "header", pad: bool = False) -> RpmHeader:
    """Read one header section; ``pad`` consumes the alignment after a signature header."""
    intro = _read_exactly(stream, HEADER_INTRO.size, what)
    magic, index_count, store_size = HEADER_INTRO.unpack(intro)
    if magic != HEADER_MAGIC:
        raise RpmFormatError(f"bad {what} magic")
    if not 0 < index_count <= MAX_INDEX_ENTRIES:
        raise RpmFormatError(f"{what} has {index_count} index entries")
    if store_size > MAX_STORE_SIZE:
        raise RpmFormatError(f"{what} data store of {store_size} bytes is too large")

    index = _read_exactly(stream, INDEX_ENTRY.size * index_count, what)
    store = _read_exactly(stream, store_size, what)

    entries = {}
    for position in range(index_count):
        tag, tag_type, offset, count = INDEX_ENTRY.unpack_from(
            index, position * INDEX_ENTRY.size
        )
        if offset < 0 or offset > store_size or count < 0:
            raise RpmFormatError(f"{what} entry for tag {tag} is out of range")
        # the first occurrence of a tag wins
        entries.setdefault(tag, (tag_type, offset, count))

    if pad and store_size % 8:
        _read_exactly(stream, 8 - store_size % 8, f"{what} padding")
    return RpmHeader(intro + index + store, entries)


def read_signature_header(stream: BinaryIO) -> RpmHeader:
    return read_header(stream, "signature header", pad=True)
