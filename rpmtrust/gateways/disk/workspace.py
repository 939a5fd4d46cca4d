# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Extract ``rpm`` rules from a Bazel workspace file.

Starlark is close enough to Python syntax that :mod:`ast` parses workspace files.
Only top-level calls are considered, and rule arguments must be literals::

    rpm(
        name = "bash-0__5.1.8-2.fc35.x86_64",
        sha256 = "...",
        urls = ["https://mirror.example/bash-5.1.8-2.fc35.x86_64.rpm"],
    )
"""

from __future__ import annotations

import ast
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from ...base.constants import RPM_RULE_NAME
from ...exceptions import WorkspaceParseError
from ...models.package import PackageDescriptor

if TYPE_CHECKING:
    from os import PathLike

log = getLogger(__name__)


def load_workspace(path: str | PathLike) -> ast.Module:
    path = Path(path)
    try:
        source = path.read_text()
    except FileNotFoundError:
        raise WorkspaceParseError(path, "file does not exist")
    except OSError as e:
        raise WorkspaceParseError(path, e.strerror or str(e))
    try:
        return ast.parse(source, filename=str(path))
    except SyntaxError as e:
        raise WorkspaceParseError(path, f"syntax error on line {e.lineno}: {e.msg}")


def _rule_calls(module: ast.Module, rule_name: str):
    for statement in module.body:
        if not isinstance(statement, ast.Expr):
            continue
        call = statement.value
        if (
            isinstance(call, ast.Call)
            and isinstance(call.func, ast.Name)
            and call.func.id == rule_name
        ):
            yield call


def _literal_argument(call: ast.Call, name: str, source: str):
    for keyword in call.keywords:
        if keyword.arg == name:
            try:
                return ast.literal_eval(keyword.value)
            except ValueError:
                raise WorkspaceParseError(
                    source,
                    f"'{name}' of the rpm rule on line {call.lineno} is not a literal",
                )
    raise WorkspaceParseError(
        source, f"the rpm rule on line {call.lineno} has no '{name}' attribute"
    )


def get_rpms(module: ast.Module, source: str = "WORKSPACE") -> list[PackageDescriptor]:
    """Return one PackageDescriptor per top-level ``rpm`` rule, in file order."""
    packages = []
    for call in _rule_calls(module, RPM_RULE_NAME):
        name = _literal_argument(call, "name", source)
        sha256 = _literal_argument(call, "sha256", source)
        urls = _literal_argument(call, "urls", source)
        if not isinstance(name, str) or not isinstance(sha256, str):
            raise WorkspaceParseError(
                source, f"'name' and 'sha256' on line {call.lineno} must be strings"
            )
        if not isinstance(urls, (list, tuple)) or not all(isinstance(u, str) for u in urls):
            raise WorkspaceParseError(
                source, f"'urls' of {name} must be a list of strings"
            )
        packages.append(PackageDescriptor.create(name, urls, sha256))
    log.debug("found %d rpm rules in %s", len(packages), source)
    return packages


def load_packages(path: str | PathLike) -> list[PackageDescriptor]:
    return get_rpms(load_workspace(path), str(path))
