# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/utils/serialize.py

from dataclasses import is_dataclass, fields
from enum import Enum
from typing import Any
from pydantic import BaseModel

def to_jsonable(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)}

    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")

    if isinstance(obj, dict):
        return {k: to_jsonable(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]

    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, BaseException):
        return str(obj)

    return obj
