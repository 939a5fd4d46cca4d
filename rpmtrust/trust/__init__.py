# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Trust material (keyrings) and signature verification of rpm packages."""
