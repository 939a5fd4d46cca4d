# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
from argparse import Namespace

import pytest
from frozendict import frozendict

from rpmtrust.auxlib.ish import dals
from rpmtrust.common.configuration import (
    CMD_LINE_SOURCE,
    DEFAULT_SOURCE,
    ENV_VARS_SOURCE,
    Configuration,
    MapParameter,
    MultiValidationError,
    PrimitiveParameter,
    load_file_configs,
    raise_errors,
)
from rpmtrust.exceptions import ConfigurationLoadError, InvalidTypeError, ValidationError


def _non_negative(value):
    return value >= 0 or "must not be negative"


class SampleConfiguration(Configuration):
    always_yes = PrimitiveParameter(False)
    retries = PrimitiveParameter(3, validation=_non_negative)
    timeout = PrimitiveParameter(9.15)
    name = PrimitiveParameter("default")
    ssl_verify = PrimitiveParameter(True, element_type=(bool, str))
    proxy_servers = MapParameter((str, type(None)))


@pytest.fixture
def rc_files(tmp_path):
    first = tmp_path / "first.yml"
    first.write_text(
        dals(
            """
            always_yes: false
            retries: 5
            proxy_servers:
              http: taz
              https: sly
            unknown_key: ignored
            """
        )
    )
    second = tmp_path / "second.yml"
    second.write_text(
        dals(
            """
            always_yes: true
            proxy_servers:
              http: marv
            """
        )
    )
    return str(first), str(second)


def test_defaults():
    config = SampleConfiguration(environ={})
    assert config.always_yes is False
    assert config.retries == 3
    assert config.proxy_servers == frozendict()
    assert config.source_of("retries") == DEFAULT_SOURCE
    assert SampleConfiguration.list_parameters() == (
        "always_yes",
        "name",
        "proxy_servers",
        "retries",
        "ssl_verify",
        "timeout",
    )


def test_later_files_win(rc_files):
    config = SampleConfiguration(search_path=rc_files, environ={})
    assert config.always_yes is True
    assert config.retries == 5
    # maps are replaced, not merged
    assert config.proxy_servers == {"http": "marv"}
    assert config.source_of("always_yes") == rc_files[1]


def test_missing_files_are_skipped(tmp_path):
    config = SampleConfiguration(
        search_path=(str(tmp_path / "nope.yml"), "$UNSET_VARIABLE_FOR_TEST/rc"), environ={}
    )
    assert config.retries == 3


def test_env_vars_override_files(rc_files):
    environ = {"APP_RETRIES": "7", "APP_ALWAYS_YES": "no", "APP_TIMEOUT": "2", "OTHER": "x"}
    config = SampleConfiguration(search_path=rc_files, app_name="app", environ=environ)
    assert config.retries == 7
    assert config.always_yes is False
    assert config.timeout == 2.0
    assert config.source_of("retries") == ENV_VARS_SOURCE


def test_argparse_overrides_env(rc_files):
    args = Namespace(retries=1, always_yes=None, func="ignored")
    config = SampleConfiguration(
        search_path=rc_files,
        app_name="app",
        argparse_args=args,
        environ={"APP_RETRIES": "7"},
    )
    assert config.retries == 1
    assert config.source_of("retries") == CMD_LINE_SOURCE
    # None means the flag was not given
    assert config.always_yes is True


def test_bool_or_str():
    config = SampleConfiguration(app_name="app", environ={"APP_SSL_VERIFY": "/etc/ca.pem"})
    assert config.ssl_verify == "/etc/ca.pem"
    config = SampleConfiguration(app_name="app", environ={"APP_SSL_VERIFY": "false"})
    assert config.ssl_verify is False


def test_invalid_type(tmp_path):
    rc = tmp_path / "rc.yml"
    rc.write_text("retries: many\n")
    with pytest.raises(InvalidTypeError, match="retries"):
        SampleConfiguration(search_path=(str(rc),), environ={})


def test_validation(tmp_path):
    rc = tmp_path / "rc.yml"
    rc.write_text("retries: -1\n")
    with pytest.raises(ValidationError, match="must not be negative"):
        SampleConfiguration(search_path=(str(rc),), environ={})


def test_several_errors_reported_together(tmp_path):
    rc = tmp_path / "rc.yml"
    rc.write_text("retries: -1\nalways_yes: 3\n")
    with pytest.raises(MultiValidationError) as exc_info:
        SampleConfiguration(search_path=(str(rc),), environ={})
    assert len(exc_info.value.errors) == 2


def test_raise_errors():
    assert raise_errors([]) is True
    error = ValidationError("x", 1, "here", msg="bad")
    with pytest.raises(ValidationError):
        raise_errors([error])


@pytest.mark.parametrize(
    "content,reason",
    [("key: [\n", "invalid yaml"), ("- a\n- b\n", "must be a mapping")],
)
def test_unloadable_file(tmp_path, content, reason):
    rc = tmp_path / "rc.yml"
    rc.write_text(content)
    with pytest.raises(ConfigurationLoadError, match=reason):
        load_file_configs((str(rc),))


def test_override():
    config = SampleConfiguration(environ={})
    config.override("retries", 0)
    assert config.retries == 0
    assert config.source_of("retries") == CMD_LINE_SOURCE
    with pytest.raises(ValidationError):
        config.override("retries", -5)
