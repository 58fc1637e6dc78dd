# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/broker/errors.py
from __future__ import annotations

from http import HTTPStatus
from typing import Optional

from .models import CreateServiceInstanceResponse


class BrokerError(RuntimeError):
    """Base class for deployer failures reported to the broker host."""


class ProvisioningError(BrokerError):
    """
    A provisioning step failed.

    Carries the HTTP-style response the host should send back. The remote
    error that caused it is chained as ``__cause__``.
    """

    code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, step: Optional[str] = None):
        super().__init__(message)
        self.step = step

    @property
    def response(self) -> CreateServiceInstanceResponse:
        return CreateServiceInstanceResponse(code=int(self.code))


class InvalidParametersError(ProvisioningError):
    """Raised before any remote call when provisioning parameters are unusable."""

    code = HTTPStatus.BAD_REQUEST


class RemovalError(BrokerError):
    """Raised when an instance namespace could not be deleted."""


def wrap(exc: BaseException, message: str) -> BrokerError:
    """Return a BrokerError reading ``message: exc`` chained to ``exc``."""
    err = BrokerError(f"{message}: {exc}")
    err.__cause__ = exc
    return err
