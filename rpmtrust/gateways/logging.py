# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Configure logging for rpmtrust."""

import sys
from functools import cache
from logging import (
    DEBUG,
    INFO,
    WARN,
    Filter,
    Formatter,
    StreamHandler,
    getLogger,
)
from threading import RLock

from ..common.url import mask_url_credentials

log = getLogger(__name__)

_FORMATTER = Formatter("%(levelname)s %(name)s:%(funcName)s(%(lineno)d): %(message)s")
_logger_lock = RLock()


class CredentialURLFilter(Filter):
    """Strip ``user:password@`` from URLs before a record is emitted.

    Mirror and key URLs may embed basic auth credentials.
    """

    def filter(self, record):
        if not isinstance(record.msg, str):
            return True
        if record.args:
            record.msg = record.msg % record.args
            record.args = None
        record.msg = mask_url_credentials(record.msg)
        return True


class StdStreamHandler(StreamHandler):
    """Log StreamHandler that always writes to the current sys stream."""

    terminator = "\n"

    def __init__(self, sys_stream):
        """
        Args:
            sys_stream: stream name, either "stdout" or "stderr" (attribute of module sys)
        """
        super().__init__(getattr(sys, sys_stream))
        self.sys_stream = sys_stream
        del self.stream

    def __getattr__(self, attr):
        # always get current sys.stdout/sys.stderr, unless self.stream has been set explicitly
        if attr == "stream":
            return getattr(sys, self.sys_stream)
        return super().__getattribute__(attr)

    def emit(self, record):
        try:
            msg = self.format(record)
            stream = self.stream
            stream.write(msg)
            terminator = getattr(record, "terminator", self.terminator)
            stream.write(terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def attach_stderr_handler(
    level=WARN, logger_name=None, propagate=False, formatter=None, filters=None
):
    # get old stderr logger
    logr = getLogger(logger_name)
    old_stderr_handler = next(
        (handler for handler in logr.handlers if handler.name == "stderr"), None
    )

    # create new stderr logger
    new_stderr_handler = StdStreamHandler("stderr")
    new_stderr_handler.name = "stderr"
    new_stderr_handler.setLevel(level)
    new_stderr_handler.setFormatter(formatter or _FORMATTER)
    for filter_ in filters or ():
        new_stderr_handler.addFilter(filter_)

    # do the switch
    with _logger_lock:
        if old_stderr_handler:
            logr.removeHandler(old_stderr_handler)
        logr.addHandler(new_stderr_handler)
        logr.setLevel(level)
        logr.propagate = propagate


@cache
def initialize_logging():
    # 'rpmtrust' gets level WARN and does not propagate to root.
    getLogger("rpmtrust").setLevel(WARN)
    set_rpmtrust_log_level()
    initialize_std_loggers()


def initialize_std_loggers():
    # Set up special loggers 'rpmtrust.stdout'/'rpmtrust.stderr' which output directly to the
    # corresponding sys streams, filter credential urls and don't propagate.
    formatter = Formatter("%(message)s")

    for stream in ("stdout", "stderr"):
        logger = getLogger(f"rpmtrust.{stream}")
        logger.handlers = []
        logger.setLevel(INFO)
        handler = StdStreamHandler(stream)
        handler.setLevel(INFO)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.addFilter(CredentialURLFilter())
        logger.propagate = False


def set_rpmtrust_log_level(level=WARN):
    attach_stderr_handler(
        level=level, logger_name="rpmtrust", filters=[CredentialURLFilter()]
    )


def set_log_level(log_level: int):
    set_rpmtrust_log_level(log_level)
    if log_level <= DEBUG:
        # 'urllib3' gets its own handler so retries and connection pool activity show up
        attach_stderr_handler(
            log_level, "urllib3", filters=[CredentialURLFilter()]
        )
    log.debug("log_level set to %d", log_level)
