# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
from requests import ConnectionError, HTTPError, Session  # noqa: F401
from requests.adapters import BaseAdapter, HTTPAdapter  # noqa: F401
from requests.exceptions import (  # noqa: F401
    ChunkedEncodingError,
    InvalidSchema,
    SSLError,
    Timeout,
)
from requests.exceptions import ProxyError as RequestsProxyError  # noqa: F401
from requests.models import Response  # noqa: F401
from requests.structures import CaseInsensitiveDict  # noqa: F401
from urllib3.exceptions import InsecureRequestWarning  # noqa: F401
from urllib3.util.retry import Retry  # noqa: F401
