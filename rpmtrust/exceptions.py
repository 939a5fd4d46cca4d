# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Rpmtrust exceptions."""

from __future__ import annotations

import json
import sys
from datetime import timedelta
from logging import getLogger
from traceback import format_exception, format_exception_only
from typing import TYPE_CHECKING

from requests.exceptions import JSONDecodeError

from . import RpmTrustError, RpmTrustMultiError
from .auxlib.ish import dals
from .common.serialize import EntityEncoder
from .common.url import maybe_unquote

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)


class VerificationCancelledError(RpmTrustError):
    return_code = 130

    def __init__(self, signum=None):
        from .common.signals import get_signal_name

        if signum is None:
            message = "Verification cancelled."
            signal_name = None
        else:
            signal_name = get_signal_name(signum) or str(signum)
            message = "Verification cancelled by signal %(signal_name)s."
        super().__init__(message, signal_name=signal_name)


class ConfigurationError(RpmTrustError):
    pass


class ConfigurationLoadError(ConfigurationError):
    def __init__(self, path, message_addition="", **kwargs):
        message = "Unable to load configuration file.\n  path: %(path)s\n"
        super().__init__(message + message_addition, path=path, **kwargs)


class ValidationError(ConfigurationError):
    def __init__(self, parameter_name, parameter_value, source, msg=None, **kwargs):
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value
        self.source = source
        super().__init__(msg, **kwargs)


class InvalidTypeError(ValidationError):
    def __init__(self, parameter_name, parameter_value, source, wrong_type, valid_types):
        msg = (
            f"Parameter {parameter_name} = {parameter_value!r} declared in {source} "
            f"has type {wrong_type}.\nValid types:\n"
            + "\n".join(f"  - {t}" for t in valid_types)
        )
        super().__init__(parameter_name, parameter_value, source, msg=msg)


class RepoFileLoadError(ConfigurationError):
    def __init__(self, path, reason):
        message = dals(
            """
            Unable to load repository file.
              path: %(path)s
              reason: %(reason)s
            """
        )
        super().__init__(message, path=str(path), reason=reason)


class WorkspaceParseError(ConfigurationError):
    def __init__(self, path, reason):
        message = dals(
            """
            Unable to extract rpm rules from workspace.
              path: %(path)s
              reason: %(reason)s
            """
        )
        super().__init__(message, path=str(path), reason=reason)


class InvalidPackageDescriptor(ConfigurationError, ValueError):
    def __init__(self, name, reason):
        message = "Invalid package descriptor %(name)r: %(reason)s"
        super().__init__(message, name=name, reason=reason)


class RpmTrustHTTPError(RpmTrustError):
    def __init__(
        self,
        message,
        url,
        status_code,
        reason,
        elapsed_time,
        response=None,
        caused_by=None,
    ):
        # standardize arguments
        url = maybe_unquote(url)
        status_code = status_code or "000"
        reason = reason or "CONNECTION FAILED"
        if isinstance(reason, str):
            reason = reason.upper()
        elapsed_time = elapsed_time or "-"
        if isinstance(elapsed_time, timedelta):
            elapsed_time = str(elapsed_time).split(":", 1)[-1]

        try:
            body = response.json()
        except (AttributeError, JSONDecodeError, ValueError):
            body = {}

        super().__init__(
            dals(
                """
                HTTP %(status_code)s %(reason)s for url <%(url)s>
                Elapsed: %(elapsed_time)s
                """
            )
            # message is literal text, keep it out of the interpolation
            + message.replace("%", "%%"),
            url=url,
            status_code=status_code,
            reason=reason,
            elapsed_time=elapsed_time,
            json=body,
            caused_by=caused_by,
        )


class RpmTrustSSLError(RpmTrustError):
    pass


class ProxyError(RpmTrustError):
    def __init__(self):
        message = dals(
            """
            Rpmtrust cannot proceed due to an error in your proxy configuration.
            Check for typos and other configuration errors in any '.netrc' file in your home
            directory, any environment variables ending in '_PROXY', and any other
            'proxy_servers' configuration.
            """
        )
        super().__init__(message)


class RpmTrustDependencyError(RpmTrustError):
    pass


class GnuPGUnavailableError(RpmTrustDependencyError):
    def __init__(self, gpg_binary, caused_by=None):
        message = dals(
            """
            Unable to run the GnuPG executable required for signature verification.
              gpg_binary: %(gpg_binary)s
            Install GnuPG or point the 'gpg_binary' setting at an existing executable.
            """
        )
        super().__init__(message, gpg_binary=gpg_binary, caused_by=caused_by)


class KeySourceError(RpmTrustError):
    pass


class KeySourceFetchError(KeySourceError):
    def __init__(self, url, caused_by=None):
        message = "could not fetch gpgkey %(url)s: %(cause)s"
        super().__init__(
            message,
            url=maybe_unquote(url),
            cause=str(caused_by).strip() if caused_by else "unknown error",
            caused_by=caused_by,
        )


class KeySourceParseError(KeySourceError):
    def __init__(self, url, reason):
        message = "could not load gpgkey %(url)s: %(reason)s"
        super().__init__(message, url=maybe_unquote(url), reason=reason)


class PackageUnreachableError(RpmTrustError):
    def __init__(self, name, url, caused_by=None):
        message = "failed to download %(name)s from %(url)s: %(cause)s"
        super().__init__(
            message,
            name=name,
            url=maybe_unquote(url),
            cause=_first_line(caused_by),
            caused_by=caused_by,
        )


class NoReachableSourceError(RpmTrustMultiError):
    def __init__(self, name, errors: Iterable[PackageUnreachableError]):
        self.name = name
        super().__init__(errors)

    def __str__(self) -> str:
        failures = "\n".join(f"  - {e}" for e in self.errors)
        return f"no candidate url of {self.name} could be downloaded:\n{failures}"


class SignatureInvalidError(RpmTrustError):
    pass


class RpmFormatError(SignatureInvalidError):
    def __init__(self, reason, **kwargs):
        super().__init__("malformed rpm: %(reason)s", reason=reason, **kwargs)


class DigestMismatchError(RpmTrustError):
    def __init__(self, url, checksum_type, expected_checksum, actual_checksum):
        message = (
            "Expected %(checksum_type)s sum %(expected_checksum)s, "
            "but got %(actual_checksum)s"
        )
        super().__init__(
            message,
            url=maybe_unquote(url),
            checksum_type=checksum_type,
            expected_checksum=expected_checksum,
            actual_checksum=actual_checksum,
        )


class RunAbortedError(RpmTrustError):
    def __init__(self, package_name, caused_by):
        self.package_name = package_name
        super().__init__(
            "Could not verify %(package_name)s: %(cause)s",
            package_name=package_name,
            cause=str(caused_by).strip(),
            caused_by=caused_by,
        )

    @property
    def cause(self):
        return self._caused_by


def print_rpmtrust_exception(exc_val, exc_tb=None):
    from .base.context import context

    if context.debug:
        print(_format_exc(exc_val, exc_tb), file=sys.stderr)
    elif context.json:
        logger = getLogger("rpmtrust.stdout")
        exc_json = json.dumps(
            exc_val.dump_map(), indent=2, sort_keys=True, cls=EntityEncoder
        )
        logger.info("%s\n", exc_json)
    else:
        stderrlog = getLogger("rpmtrust.stderr")
        stderrlog.error("\n%r\n", exc_val)


def _format_exc(exc_val=None, exc_tb=None):
    if exc_val is None:
        exc_type, exc_val, exc_tb = sys.exc_info()
    else:
        exc_type = type(exc_val)
    if exc_tb:
        formatted_exception = format_exception(exc_type, exc_val, exc_tb)
    else:
        formatted_exception = format_exception_only(exc_type, exc_val)
    return "".join(formatted_exception)


def _first_line(error):
    lines = str(error).strip().splitlines() if error is not None else ()
    return lines[0] if lines else "unknown error"
