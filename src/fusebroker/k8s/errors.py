# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/k8s/errors.py
from __future__ import annotations

from kubernetes.client.exceptions import ApiException


def is_not_found(exc: BaseException) -> bool:
    """
    True for a 404 from the API server.

    An ApiException is judged by its status alone. Errors without a status
    fall back to the message text.
    """
    if isinstance(exc, ApiException):
        return exc.status == 404
    return "not found" in str(exc).lower()


def is_already_exists(exc: BaseException) -> bool:
    """True for a 409 conflict on create (text match only when there is no status)."""
    if isinstance(exc, ApiException):
        return exc.status == 409
    return "already exists" in str(exc).lower()
