# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""
This file should hold most string literals and magic numbers used throughout the code base.
The exception is if a literal is specifically meant to be private to and isolated within a module.
Think of this as a "more static" source of configuration information.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Final

APP_NAME: Final = "rpmtrust"

SEARCH_PATH: Final = (
    "/etc/rpmtrust/rpmtrustrc",
    "$XDG_CONFIG_HOME/rpmtrust/rpmtrustrc",
    "~/.config/rpmtrust/rpmtrustrc",
    "~/.rpmtrustrc",
    "$RPMTRUST_RC",
)

DEFAULT_REPO_FILE: Final = "repo.yaml"
DEFAULT_WORKSPACE: Final = "WORKSPACE"

#: Algorithm of the expected content digest carried by every package descriptor.
CONTENT_DIGEST_ALGORITHM: Final = "sha256"

CHUNK_SIZE: Final = 1 << 14

#: Name of the workspace rule that declares an rpm.
RPM_RULE_NAME: Final = "rpm"

ARMOR_HEADER: Final = b"-----BEGIN PGP PUBLIC KEY BLOCK-----"
