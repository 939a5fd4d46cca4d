# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Common utilities for rpmtrust command line tools."""

from logging import getLogger

from ..common.serialize import json_dump


def stdout_json(d):
    getLogger("rpmtrust.stdout").info(json_dump(d))


def stdout_json_success(success=True, **kwargs):
    result = {"success": success}
    result.update(kwargs)
    stdout_json(result)
