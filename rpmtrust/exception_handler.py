# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Error handling and error reporting."""

import sys
from logging import getLogger

log = getLogger(__name__)


class ExceptionHandler:
    def __call__(self, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BaseException:
            _, exc_val, exc_tb = sys.exc_info()
            return self.handle_exception(exc_val, exc_tb)

    def write_out(self, *content):
        from .cli.main import init_loggers

        init_loggers()
        getLogger("rpmtrust.stderr").info("\n".join(content))

    def handle_exception(self, exc_val, exc_tb):
        from . import RpmTrustError
        from .exceptions import VerificationCancelledError

        if isinstance(exc_val, RpmTrustError):
            return self.handle_application_exception(exc_val, exc_tb)
        if isinstance(exc_val, KeyboardInterrupt):
            return self.handle_application_exception(VerificationCancelledError(), exc_tb)
        if isinstance(exc_val, SystemExit):
            return exc_val.code
        return self.handle_unexpected_exception(exc_val, exc_tb)

    def handle_application_exception(self, exc_val, exc_tb):
        self._print_rpmtrust_exception(exc_val, exc_tb)
        return exc_val.return_code

    def _print_rpmtrust_exception(self, exc_val, exc_tb):
        from .exceptions import print_rpmtrust_exception

        print_rpmtrust_exception(exc_val, exc_tb)

    def handle_unexpected_exception(self, exc_val, exc_tb):
        error_report = self.get_error_report(exc_val, exc_tb)
        self.print_unexpected_error_report(error_report)
        rc = getattr(exc_val, "return_code", None)
        return rc if rc is not None else 1

    def get_error_report(self, exc_val, exc_tb):
        from . import __version__
        from .exceptions import _format_exc

        return {
            "error": repr(exc_val),
            "exception_name": exc_val.__class__.__name__,
            "exception_type": str(exc_val.__class__),
            "command": " ".join(sys.argv),
            "traceback": _format_exc(exc_val, exc_tb),
            "rpmtrust_version": __version__,
        }

    def print_unexpected_error_report(self, error_report):
        from .base.context import context

        if context.json:
            from .cli.common import stdout_json

            stdout_json(error_report)
        else:
            message_builder = []
            message_builder.append("")
            message_builder.append(
                "# >>>>>>>>>>>>>>>>>>>>>> ERROR REPORT <<<<<<<<<<<<<<<<<<<<<<"
            )
            message_builder.append("")
            message_builder.extend(
                "    " + line for line in error_report["traceback"].splitlines()
            )
            message_builder.append("")
            message_builder.append("`$ %s`" % error_report["command"])
            message_builder.append("")
            message_builder.append(
                "    rpmtrust version : %s" % error_report["rpmtrust_version"]
            )
            message_builder.extend(
                [
                    "",
                    "An unexpected error has occurred. "
                    "Rpmtrust has prepared the above report.",
                    "",
                ]
            )
            self.write_out(*message_builder)


def rpmtrust_exception_handler(func, *args, **kwargs):
    exception_handler = ExceptionHandler()
    return_value = exception_handler(func, *args, **kwargs)
    return return_value
