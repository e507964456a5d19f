"""JSON Schema validation for exported solve traces."""

from __future__ import annotations

import copy
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import jsonschema

from .trace import TraceValidationError

_SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"
SOLVE_TRACE_SCHEMA = "solve_trace.schema.json"


@lru_cache(maxsize=None)
def _load_schema_cached(name: str) -> Dict[str, Any]:
    resolved = (_SCHEMA_ROOT / name).resolve()
    if resolved.parent != _SCHEMA_ROOT:
        raise ValueError("Schema path escapes the schemas directory")
    return json.loads(resolved.read_text("utf-8"))


def load_schema(name: str = SOLVE_TRACE_SCHEMA) -> Dict[str, Any]:
    """Return a private copy of a bundled schema."""

    return copy.deepcopy(_load_schema_cached(name))


@lru_cache(maxsize=None)
def _validator(name: str) -> Any:
    schema = _load_schema_cached(name)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _json_path(error: jsonschema.ValidationError) -> str:
    components: List[str] = ["$"]
    for part in error.absolute_path:
        if isinstance(part, int):
            components.append(f"[{part}]")
        else:
            components.append(f".{part}")
    return "".join(components)


def validate_trace(payload: Dict[str, Any]) -> None:
    """Validate a :meth:`SolveTrace.to_payload` document.

    Raises :class:`TraceValidationError` naming the first offending location.
    """

    validator = _validator(SOLVE_TRACE_SCHEMA)
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        first = errors[0]
        raise TraceValidationError(f"{_json_path(first)}: {first.message}")


__all__ = ["SOLVE_TRACE_SCHEMA", "load_schema", "validate_trace"]
