# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Async access to the local live client data API."""

from riftcoach.liveclient.client import LiveClient
from riftcoach.liveclient.exceptions import (
    LiveClientConnectionError,
    LiveClientError,
    LiveClientHTTPError,
    LiveClientInvalidResponseError,
    LiveClientTimeoutError,
)

__all__ = [
    "LiveClient",
    "LiveClientConnectionError",
    "LiveClientError",
    "LiveClientHTTPError",
    "LiveClientInvalidResponseError",
    "LiveClientTimeoutError",
]
