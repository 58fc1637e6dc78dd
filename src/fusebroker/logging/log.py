# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

#src/fusebroker/logging/log.py

from __future__ import annotations

import logging
from pathlib import Path
from datetime import datetime, timezone
import uuid

DEFAULT_LOG_DIR = Path.home() / ".fusebroker" / "logs"

# client libraries that chatter at DEBUG on every API call
_NOISY = ("kubernetes", "urllib3")


def _prune_runs(base_dir: Path, name: str, keep: int) -> None:
    runs = sorted(base_dir.glob(f"{name}-[0-9]*.log"), key=lambda p: p.stat().st_mtime)
    for old in runs[:-keep] if keep > 0 else runs:
        old.unlink(missing_ok=True)


def init_logging(
    *,
    base_dir: Path | None = None,
    name: str = "fusebroker",
    verbose: bool = False,
    keep_runs: int | None = None,
) -> tuple[logging.Logger, str, Path]:
    """
    Set up broker logging for one CLI run.

    Every run gets its own DEBUG file under ``base_dir`` (``~/.fusebroker/logs``
    unless the broker config names another directory). The console shows INFO,
    or DEBUG with ``verbose``. When ``keep_runs`` is set, older run files for
    the same logger name beyond that count are deleted before the new one is
    opened.

    Returns ``(logger, run_id, log_path)``; observers reuse the run id.
    """
    run_id = str(uuid.uuid4())

    base_dir = Path(base_dir).expanduser() if base_dir is not None else DEFAULT_LOG_DIR
    base_dir.mkdir(parents=True, exist_ok=True)
    if keep_runs is not None:
        _prune_runs(base_dir, name, keep_runs - 1)

    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_path = base_dir / f"{name}-{ts}-{run_id}.log"

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | run=%(run_id)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        defaults={"run_id": run_id[:8]},
    )

    fh = logging.FileHandler(log_path)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(formatter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    for lib in _NOISY:
        logging.getLogger(lib).setLevel(logging.DEBUG if verbose else logging.WARNING)

    logger.debug("fusebroker run %s logging to %s", run_id, log_path)

    return logger, run_id, log_path
