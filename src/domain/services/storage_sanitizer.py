"""
Domain service: turn a snippet payload into a plain JSON tree for the store.

Rules, applied recursively:
- str/int/float/bool/None pass through unchanged
- lists/tuples drop None entries, then map each remaining entry
- mappings drop any key named "id" and any callable value, then map the rest
- dataclass instances are treated as mappings; datetimes become ISO strings
- anything else becomes None

The output never carries an identity field; the store owns identifiers.
"""
from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Any, Dict, Mapping

IDENTITY_KEY = "id"

_PRIMITIVES = (str, int, float, bool, type(None))


def sanitize_for_storage(value: Any) -> Any:
    if isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, (list, tuple)):
        return [sanitize_for_storage(v) for v in value if v is not None]
    if isinstance(value, Mapping):
        out: Dict[str, Any] = {}
        for key, item in value.items():
            if key == IDENTITY_KEY or callable(item):
                continue
            out[str(key)] = sanitize_for_storage(item)
        return out
    return None
