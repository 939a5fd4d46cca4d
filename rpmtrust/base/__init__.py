# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Code that is used throughout rpmtrust: constants and the global context."""
