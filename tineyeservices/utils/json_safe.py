from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from pathlib import PurePath
from typing import Any, Mapping


def to_jsonable(obj: Any) -> Any:
    """
    Convert image metadata values to JSON-serializable equivalents.

    Metadata documents are opaque to this package, but callers commonly build
    them from dates, paths and dataclasses. Those are converted; anything else
    that json cannot encode is rejected instead of stringified.
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj

    # datetime/date -> ISO 8601
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()

    if isinstance(obj, Decimal):
        return float(obj)

    if isinstance(obj, PurePath):
        return str(obj)

    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))

    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_jsonable(x) for x in obj]

    raise TypeError(f"value of type {type(obj).__name__} is not JSON serializable")


def dumps_field(obj: Any) -> str:
    """Render a metadata document as the JSON text of a form field.

    Strings are assumed to already hold JSON and are passed through untouched.
    """
    if isinstance(obj, str):
        return obj
    return json.dumps(to_jsonable(obj), ensure_ascii=False)
