# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
from __future__ import annotations

import pytest

pytest_plugins = (
    # Add testing fixtures and internal pytest plugins here
    "rpmtrust.testing.fixtures",
)


@pytest.fixture(autouse=True)
def clean_context(reset_rpmtrust_context) -> None:
    """Every test starts from a default context and a fresh session."""
