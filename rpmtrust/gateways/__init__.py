# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""
Gateways isolate interaction of rpmtrust code with the outside world: the network, the disk
and logging. Gateways should be "stupid" and hold no verification logic.
"""
