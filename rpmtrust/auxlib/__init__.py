# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Small auxiliary helpers shared across rpmtrust."""
