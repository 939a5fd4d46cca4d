# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""YAML and JSON serialization and deserialization functions."""

import json
from functools import cache
from logging import getLogger

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError  # noqa: F401

log = getLogger(__name__)


@cache
def _yaml_safe():
    parser = YAML(typ="safe", pure=True)
    return parser


def yaml_safe_load(string):
    """
    Examples:
        >>> yaml_safe_load("key: value")
        {'key': 'value'}

    """
    return _yaml_safe().load(string)


class EntityEncoder(json.JSONEncoder):
    def default(self, obj):
        if hasattr(obj, "dump"):
            return obj.dump()
        elif isinstance(obj, (frozenset, set)):
            return list(obj)
        elif hasattr(obj, "__json__"):
            return obj.__json__()
        return super().default(obj)


def json_dump(object):
    return json.dumps(
        object, indent=2, sort_keys=True, separators=(",", ": "), cls=EntityEncoder
    )
