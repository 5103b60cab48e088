# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for live client operations."""


class LiveClientError(Exception):
    """Base exception for live client operations."""

    pass


class LiveClientConnectionError(LiveClientError):
    """Failed to connect to the live client (usually: no game running)."""

    pass


class LiveClientTimeoutError(LiveClientError):
    """Live client request timed out."""

    pass


class LiveClientHTTPError(LiveClientError):
    """Live client answered with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class LiveClientInvalidResponseError(LiveClientError):
    """Invalid or malformed response from the live client."""

    pass
