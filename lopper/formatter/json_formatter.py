"""JSON report output with camelCase keys."""

from __future__ import annotations

import dataclasses
import enum
import json
from datetime import datetime, timezone
from typing import Any

from lopper.formatter.base import BaseFormatter
from lopper.models import Report


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_jsonable(value: Any) -> Any:
    """Convert report dataclasses into plain JSON types.

    ``None`` fields are dropped so optional sections simply disappear.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = {}
        for f in dataclasses.fields(value):
            if f.name.startswith("_"):
                continue
            item = getattr(value, f.name)
            if item is None:
                continue
            result[camel_case(f.name)] = to_jsonable(item)
        return result
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def report_to_dict(report: Report) -> dict[str, Any]:
    return to_jsonable(report)


class JsonFormatter(BaseFormatter):
    name = "json"

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, report: Report) -> str:
        return json.dumps(report_to_dict(report), indent=self.indent) + "\n"
