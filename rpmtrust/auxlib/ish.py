# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
from textwrap import dedent


def dals(string):
    """dedent and left-strip"""
    return dedent(string).lstrip()
