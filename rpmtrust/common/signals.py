# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Signal handling for long running network operations."""

import signal
from contextlib import contextmanager
from logging import getLogger

log = getLogger(__name__)

INTERRUPT_SIGNALS = (
    "SIGABRT",
    "SIGINT",
    "SIGTERM",
    "SIGQUIT",
    "SIGBREAK",
)


def get_signal_name(signum):
    """
    Examples:
        >>> from signal import SIGINT
        >>> get_signal_name(SIGINT)
        'SIGINT'

    """
    return next(
        (
            k
            for k, v in signal.__dict__.items()
            if v == signum and k.startswith("SIG") and not k.startswith("SIG_")
        ),
        None,
    )


@contextmanager
def signal_handler(handler):
    previous_handlers = []
    for signame in INTERRUPT_SIGNALS:
        sig = getattr(signal, signame, None)
        if sig:
            log.debug("registering handler for %s", signame)
            prev_handler = signal.signal(sig, handler)
            previous_handlers.append((sig, prev_handler))
    try:
        yield
    finally:
        for sig, previous_handler in previous_handlers:
            log.debug("de-registering handler for %s", get_signal_name(sig))
            signal.signal(sig, previous_handler)
