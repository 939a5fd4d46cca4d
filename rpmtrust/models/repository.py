# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Repository definitions as they appear in a repository file."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING

from ..common.url import is_url
from ..exceptions import RepoFileLoadError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any


@dataclass(frozen=True)
class RepositoryDescriptor:
    """One repository entry.

    Only ``disabled`` and ``gpgkey`` matter for verification; the remaining fields are
    carried so that a repository file round-trips through this model unchanged.
    """

    name: str = ""
    disabled: bool = False
    #: Location of the armored public key ring; empty when the repository has none.
    gpgkey: str = ""
    arch: str = ""
    baseurl: str = ""
    metalink: str = ""
    mirrors: tuple[str, ...] = field(default=())

    @property
    def key_source_url(self) -> str | None:
        """The gpgkey as a url; plain paths become file:// urls."""
        if not self.gpgkey:
            return None
        if is_url(self.gpgkey):
            return self.gpgkey
        return Path(self.gpgkey).expanduser().resolve().as_uri()

    @property
    def supplies_key(self) -> bool:
        return not self.disabled and bool(self.gpgkey)

    @classmethod
    def from_map(
        cls, mapping: Mapping[str, Any], source: str = "<map>"
    ) -> RepositoryDescriptor:
        if not hasattr(mapping, "items"):
            raise RepoFileLoadError(
                source, f"repository entry must be a mapping, not {type(mapping).__name__}"
            )
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in mapping.items():
            if key not in known:
                # unknown keys (e.g. 'priority') are tolerated and dropped
                continue
            if key == "mirrors":
                if value is None:
                    value = ()
                elif isinstance(value, str) or not isinstance(value, (list, tuple)):
                    raise RepoFileLoadError(
                        source,
                        f"'mirrors' of repository {mapping.get('name')!r} must be a list",
                    )
                values[key] = tuple(str(v) for v in value)
            elif key == "disabled":
                if not isinstance(value, bool):
                    raise RepoFileLoadError(
                        source,
                        f"'disabled' of repository {mapping.get('name')!r} must be a boolean",
                    )
                values[key] = value
            elif value is None:
                values[key] = ""
            elif isinstance(value, (str, int, float)) and not isinstance(value, bool):
                values[key] = str(value)
            else:
                raise RepoFileLoadError(
                    source,
                    f"{key!r} of repository {mapping.get('name')!r} must be a string",
                )
        return cls(**values)

    def dump(self) -> dict[str, Any]:
        result = {"name": self.name}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name != "name" and value:
                result[f.name] = list(value) if f.name == "mirrors" else value
        return result
