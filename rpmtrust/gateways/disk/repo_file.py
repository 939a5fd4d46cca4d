# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Load repository definitions from a yaml repository file."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from ...common.serialize import YAMLError, yaml_safe_load
from ...exceptions import RepoFileLoadError
from ...models.repository import RepositoryDescriptor

if TYPE_CHECKING:
    from os import PathLike

log = getLogger(__name__)


@dataclass(frozen=True)
class RepoFile:
    path: str
    repositories: tuple[RepositoryDescriptor, ...] = field(default=())

    def dump(self):
        return {"repositories": [repo.dump() for repo in self.repositories]}


def load_repo_file(path: str | PathLike) -> RepoFile:
    """Read ``path`` and return its repositories in file order.

    Expects a mapping with a ``repositories`` list at the top level. An empty
    file, or one without that key, holds no repositories.
    """
    path = Path(path)
    try:
        text = path.read_text()
    except FileNotFoundError:
        raise RepoFileLoadError(path, "file does not exist")
    except OSError as e:
        raise RepoFileLoadError(path, e.strerror or str(e))

    try:
        data = yaml_safe_load(text)
    except YAMLError as e:
        raise RepoFileLoadError(path, f"invalid yaml: {e}")

    if data is None:
        data = {}
    if not hasattr(data, "items"):
        raise RepoFileLoadError(path, "the top level of the file must be a mapping")

    entries = data.get("repositories")
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise RepoFileLoadError(path, "'repositories' must be a list")

    repositories = tuple(
        RepositoryDescriptor.from_map(entry, str(path)) for entry in entries
    )
    log.debug("loaded %d repositories from %s", len(repositories), path)
    return RepoFile(str(path), repositories)
