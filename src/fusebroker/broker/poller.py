# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/broker/poller.py
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .models import LastOperationResponse

log = logging.getLogger("fusebroker")


def wait_for_operation(
    poll: Callable[[], LastOperationResponse],
    *,
    interval_seconds: float = 5.0,
    timeout_seconds: float = 600.0,
    on_poll: Optional[Callable[[LastOperationResponse], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> LastOperationResponse:
    """
    Call ``poll`` until it reports a terminal state.

    This is the caller side of the last-operation contract: every call is
    independent, so the only thing carried between polls is the deadline.

    Args:
        poll: returns the current LastOperationResponse
        interval_seconds: pause between polls
        timeout_seconds: max time to wait
        on_poll: optional callback fed every intermediate response
    """
    end = clock() + timeout_seconds
    while True:
        resp = poll()
        if on_poll:
            on_poll(resp)
        if resp.state.terminal:
            return resp
        if clock() >= end:
            raise TimeoutError(
                f"Timeout waiting for operation: last state={resp.state.value} ({resp.description})"
            )
        log.debug("operation still in progress: %s", resp.description)
        sleep(interval_seconds)
