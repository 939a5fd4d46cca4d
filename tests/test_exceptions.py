# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
import json
import signal

from rpmtrust import RpmTrustError
from rpmtrust.base.context import context
from rpmtrust.exceptions import (
    DigestMismatchError,
    KeySourceFetchError,
    NoReachableSourceError,
    PackageUnreachableError,
    RpmTrustHTTPError,
    RunAbortedError,
    VerificationCancelledError,
    print_rpmtrust_exception,
)
from rpmtrust.gateways.logging import initialize_std_loggers


def test_rpmtrust_error_interpolation():
    err = RpmTrustError("package %(name)s failed", name="foo")
    assert str(err) == "package foo failed"
    assert repr(err) == "RpmTrustError: package foo failed"
    dump = err.dump_map()
    assert dump["name"] == "foo"
    assert dump["exception_name"] == "RpmTrustError"


def test_digest_mismatch():
    err = DigestMismatchError("https://example.com/foo.rpm", "sha256", "aa", "bb")
    assert str(err) == "Expected sha256 sum aa, but got bb"
    assert err.dump_map()["expected_checksum"] == "aa"
    assert err.dump_map()["actual_checksum"] == "bb"


def test_run_aborted_names_package():
    cause = DigestMismatchError("https://example.com/foo.rpm", "sha256", "aa", "bb")
    err = RunAbortedError("foo", cause)
    assert str(err) == "Could not verify foo: Expected sha256 sum aa, but got bb"
    assert err.package_name == "foo"
    assert err.cause is cause
    assert err.return_code == 1


def test_http_error_message_with_percent():
    err = RpmTrustHTTPError("100% broken\n", "https://example.com/a%20b", 500, "boom", None)
    text = str(err)
    assert "HTTP 500 BOOM for url <https://example.com/a b>" in text
    assert "100% broken" in text


def test_unreachable_errors_list_every_mirror():
    errors = [
        PackageUnreachableError("foo", "https://a/foo.rpm", ConnectionError("refused\nmore")),
        PackageUnreachableError("foo", "https://b/foo.rpm"),
    ]
    err = NoReachableSourceError("foo", errors)
    assert str(err) == (
        "no candidate url of foo could be downloaded:\n"
        "  - failed to download foo from https://a/foo.rpm: refused\n"
        "  - failed to download foo from https://b/foo.rpm: unknown error"
    )


def test_key_fetch_error():
    err = KeySourceFetchError("https://user:pw@example.com/key", caused_by=OSError("nope"))
    assert str(err) == "could not fetch gpgkey https://example.com/key: nope"


def test_cancelled():
    assert str(VerificationCancelledError()) == "Verification cancelled."
    err = VerificationCancelledError(signal.SIGINT)
    assert str(err) == "Verification cancelled by signal SIGINT."
    assert err.return_code == 130


def test_print_exception(capsys):
    initialize_std_loggers()
    print_rpmtrust_exception(RpmTrustError("something %(what)s", what="broke"))
    assert "RpmTrustError: something broke" in capsys.readouterr().err


def test_print_exception_json(capsys):
    initialize_std_loggers()
    context.override("json", True)
    print_rpmtrust_exception(RpmTrustError("something %(what)s", what="broke"))
    out = json.loads(capsys.readouterr().out)
    assert out["message"] == "something broke"
    assert out["what"] == "broke"
