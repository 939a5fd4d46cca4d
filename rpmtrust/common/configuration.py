# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""
A generalized application configuration utility.

Features include:
  - parameters declared once, as class attributes, with a default value
  - yaml configuration files read from a search path
  - environment variables with an application specific prefix
  - command line arguments from an argparse Namespace

Sources are merged in that order; later sources override earlier ones.
Values coming from text sources (environment variables) are coerced into
the declared type of the parameter.
"""

from __future__ import annotations

import os
from logging import getLogger
from os.path import expanduser, expandvars, isfile
from pathlib import Path
from typing import TYPE_CHECKING

from frozendict import frozendict

from .. import RpmTrustMultiError
from ..auxlib.type_coercion import TypeCoercionError, boolify, numberify
from ..exceptions import (
    ConfigurationError,
    ConfigurationLoadError,
    InvalidTypeError,
    ValidationError,
)
from .serialize import YAMLError, yaml_safe_load

if TYPE_CHECKING:
    from argparse import Namespace
    from collections.abc import Iterable, Mapping
    from typing import Any

log = getLogger(__name__)

DEFAULT_SOURCE = "<<default>>"
ENV_VARS_SOURCE = "envvars"
CMD_LINE_SOURCE = "cmd_line"


class MultiValidationError(RpmTrustMultiError, ConfigurationError):
    def __init__(self, errors, *args, **kwargs):
        super().__init__(errors)


def raise_errors(errors):
    if not errors:
        return True
    elif len(errors) == 1:
        raise errors[0]
    else:
        raise MultiValidationError(errors)


class Parameter:
    """A typed configuration value declared on a Configuration subclass."""

    def __init__(self, default, element_type=None, validation=None):
        self._default = default
        self._element_type = element_type
        self._validation = validation
        self.name = None

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        try:
            return instance._cache[self.name]
        except KeyError:
            return self.default

    @property
    def default(self):
        return self._default

    @property
    def valid_types(self) -> tuple[type, ...]:
        element_type = self._element_type or type(self._default)
        if isinstance(element_type, tuple):
            return element_type
        return (element_type,)

    def typify(self, value, source: str):
        raise NotImplementedError()

    def validate(self, value, source: str):
        if self._validation is None:
            return value
        result = self._validation(value)
        if result is True or result is None:
            return value
        raise ValidationError(
            self.name,
            value,
            source,
            msg=f"Parameter {self.name} = {value!r} declared in {source} is invalid.\n"
            f"{result}",
        )


class PrimitiveParameter(Parameter):
    """Parameter type for a configuration value that is a single bool, number or str."""

    def typify(self, value, source: str):
        valid_types = self.valid_types
        if isinstance(value, str) and bool in valid_types and source in (
            ENV_VARS_SOURCE,
            CMD_LINE_SOURCE,
        ):
            try:
                return boolify(value)
            except TypeCoercionError:
                pass
        if isinstance(value, valid_types) and not (
            isinstance(value, bool) and bool not in valid_types
        ):
            return value
        if isinstance(value, str) and source in (ENV_VARS_SOURCE, CMD_LINE_SOURCE):
            for element_type in valid_types:
                try:
                    if element_type is bool:
                        return boolify(value)
                    elif element_type in (int, float):
                        return element_type(numberify(value))
                    elif element_type is str:
                        return value
                except TypeCoercionError:
                    continue
        if isinstance(value, int) and float in valid_types and not isinstance(value, bool):
            return float(value)
        raise InvalidTypeError(
            self.name,
            value,
            source,
            type(value).__name__,
            [t.__name__ for t in valid_types],
        )


class MapParameter(Parameter):
    """Parameter type for a configuration value that maps str to a primitive."""

    def __init__(self, element_type, default=frozendict(), validation=None):
        super().__init__(frozendict(default), element_type, validation)

    @property
    def valid_types(self) -> tuple[type, ...]:
        if isinstance(self._element_type, tuple):
            return self._element_type
        return (self._element_type,)

    def typify(self, value, source: str):
        if not hasattr(value, "items"):
            raise InvalidTypeError(
                self.name, value, source, type(value).__name__, ["dict"]
            )
        result = {}
        for key, element in value.items():
            if element is not None and not isinstance(element, self.valid_types):
                raise InvalidTypeError(
                    f"{self.name}.{key}",
                    element,
                    source,
                    type(element).__name__,
                    [t.__name__ for t in self.valid_types],
                )
            result[str(key)] = element
        return frozendict(result)


def load_file_configs(search_path: Iterable[str]) -> dict[str, Mapping[str, Any]]:
    """Read every existing yaml file on the search path, in order."""
    configs = {}
    for search in search_path:
        expanded = expandvars(expanduser(search))
        if not expanded or "$" in expanded or not isfile(expanded):
            continue
        path = Path(expanded)
        log.debug("loading configuration file %s", path)
        try:
            data = yaml_safe_load(path.read_text())
        except YAMLError as err:
            raise ConfigurationLoadError(
                str(path), "  reason: invalid yaml at %(location)s\n", location=str(err)
            )
        except OSError as err:
            raise ConfigurationLoadError(
                str(path), "  reason: %(reason)s\n", reason=err.strerror
            )
        if data is None:
            data = {}
        if not hasattr(data, "items"):
            raise ConfigurationLoadError(
                str(path), "  reason: the top level of the file must be a mapping\n"
            )
        configs[str(path)] = data
    return configs


class Configuration:
    """Base class for a layered, typed configuration object.

    Subclasses declare their parameters as class attributes. Instances merge
    defaults, configuration files, environment variables and argparse
    arguments, in increasing order of precedence.
    """

    #: Prefix of environment variables consulted for parameters, e.g. ``APP_``.
    _env_prefix: str = ""

    def __init__(
        self,
        search_path: Iterable[str] = (),
        app_name: str | None = None,
        argparse_args: Namespace | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self._cache: dict[str, Any] = {}
        self._sources: dict[str, str] = {}
        self._search_path = tuple(search_path)
        if app_name is not None:
            self._env_prefix = f"{app_name.upper()}_"
        self._environ = os.environ if environ is None else environ
        self._argparse_args = argparse_args
        self._reset_cache()

    @classmethod
    def list_parameters(cls) -> tuple[str, ...]:
        return tuple(
            sorted(
                name
                for klass in cls.__mro__
                for name, value in vars(klass).items()
                if isinstance(value, Parameter)
            )
        )

    @classmethod
    def _parameter(cls, name: str) -> Parameter:
        return getattr(cls, name)

    def _raw_sources(self) -> Iterable[tuple[str, Mapping[str, Any]]]:
        yield from load_file_configs(self._search_path).items()

        prefix = self._env_prefix
        env_values = {
            key[len(prefix) :].lower(): value
            for key, value in self._environ.items()
            if prefix and key.startswith(prefix)
        }
        yield ENV_VARS_SOURCE, env_values

        if self._argparse_args is not None:
            yield CMD_LINE_SOURCE, {
                key: value
                for key, value in vars(self._argparse_args).items()
                if value is not None
            }

    def _reset_cache(self):
        parameters = set(self.list_parameters())
        cache, sources, errors = {}, {}, []
        for source, raw in self._raw_sources():
            for key, value in raw.items():
                key = str(key).replace("-", "_")
                if key not in parameters:
                    if source not in (ENV_VARS_SOURCE, CMD_LINE_SOURCE):
                        log.debug("ignoring unknown parameter %s in %s", key, source)
                    continue
                parameter = self._parameter(key)
                try:
                    cache[key] = parameter.validate(parameter.typify(value, source), source)
                except ValidationError as err:
                    errors.append(err)
                else:
                    sources[key] = source
        raise_errors(errors)
        self._cache = cache
        self._sources = sources
        return self

    def source_of(self, name: str) -> str:
        return self._sources.get(name, DEFAULT_SOURCE)

    def override(self, name: str, value: Any):
        """Set one parameter for the lifetime of this instance (used by tests)."""
        parameter = self._parameter(name)
        typed = parameter.typify(value, CMD_LINE_SOURCE)
        self._cache[name] = parameter.validate(typed, CMD_LINE_SOURCE)
        self._sources[name] = CMD_LINE_SOURCE
