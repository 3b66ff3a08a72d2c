"""
Declarative request validation for gateway operations.

Each operation owns a ``Schema``: the fields it requires, how presence is
judged, and how each field is coerced. ``RequestValidator`` evaluates every
schema the same way, so sibling endpoints such as add/update record cannot
drift apart. Provider identity is injected after validation succeeds.
"""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from shared.errors import ValidationError
from .models import Operation, ProviderIdentity

_STRICT_INT = re.compile(r"^\s*[+-]?(0|[1-9][0-9]*)\s*$")
_INT_PREFIX = re.compile(r"^\s*[+-]?[0-9]+")


def is_empty(value: Any) -> bool:
    """Loose emptiness: None, False, 0, 0.0, "", "0" and empty containers."""
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (list, dict)):
        return not value
    return False


def to_int_permissive(value: Any) -> int:
    """Coerce anything to an int, falling back to 0 for non-numeric input."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        return int(match.group(0)) if match else 0
    if isinstance(value, (list, dict)):
        return 1 if value else 0
    return 0


def to_int_strict(value: Any) -> int:
    """Accept ints, integral floats and integer-looking strings only."""
    if isinstance(value, bool):
        raise ValueError("booleans are not integers")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _STRICT_INT.match(value):
        return int(value.strip())
    raise ValueError(f"not an integer: {value!r}")


def to_json_string(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


@dataclass(frozen=True)
class FieldRule:
    """One required field and its coercion."""
    name: str
    coerce: Optional[Callable[[Any], Any]] = None
    invalid_message: Optional[str] = None


@dataclass(frozen=True)
class Schema:
    """Validation rules for one operation.

    ``presence`` is ``"non_empty"`` (loose emptiness fails) or ``"not_null"``
    (only absent or null fails). ``missing_message`` replaces the per-field
    "Missing field: <name>" message when set. ``passthrough`` forwards the
    caller's other fields; ``enrich`` injects the provider identity.
    """
    fields: Tuple[FieldRule, ...] = ()
    presence: str = "non_empty"
    missing_message: Optional[str] = None
    passthrough: bool = True
    enrich: bool = False


_TTL = FieldRule("record_ttl", to_int_strict, "Invalid record_ttl")

SCHEMAS: Mapping[Operation, Schema] = {
    Operation.INSTALL: Schema(passthrough=False),
    Operation.UNINSTALL: Schema(passthrough=False),
    Operation.CREATE_DOMAIN: Schema(
        fields=(
            FieldRule("client_id", to_int_permissive),
            FieldRule("config", to_json_string),
        ),
        presence="not_null",
        missing_message="Missing parameters: client_id and config are required",
        passthrough=False,
    ),
    Operation.DELETE_DOMAIN: Schema(
        fields=(FieldRule("config", to_json_string),),
    ),
    Operation.ADD_RECORD: Schema(
        fields=(
            FieldRule("domain_name"),
            FieldRule("record_name"),
            FieldRule("record_type"),
            FieldRule("record_value"),
            _TTL,
        ),
        enrich=True,
    ),
    Operation.UPDATE_RECORD: Schema(
        fields=(
            FieldRule("domain_name"),
            FieldRule("record_id"),
            FieldRule("record_name"),
            FieldRule("record_type"),
            FieldRule("record_value"),
            _TTL,
        ),
        enrich=True,
    ),
    Operation.DELETE_RECORD: Schema(
        fields=(
            FieldRule("domain_name"),
            FieldRule("record_id"),
        ),
        enrich=True,
    ),
}


class RequestValidator:
    """Applies the operation schemas and the provider-identity enrichment."""

    def __init__(self, identity: ProviderIdentity, schemas: Mapping[Operation, Schema] = SCHEMAS):
        missing = set(Operation) - set(schemas)
        if missing:
            raise ValueError(f"No schema for operations: {sorted(op.value for op in missing)}")
        self.identity = identity
        self.schemas = schemas

    def validate(self, operation: Operation, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Return the normalized payload for ``operation`` or raise ValidationError."""
        schema = self.schemas[operation]

        for rule in schema.fields:
            if self._is_missing(schema, payload.get(rule.name)):
                raise ValidationError(
                    schema.missing_message or f"Missing field: {rule.name}",
                    details={"field": rule.name},
                )

        result: Dict[str, Any] = dict(payload) if schema.passthrough else {}
        for rule in schema.fields:
            value = payload[rule.name]
            if rule.coerce is not None:
                try:
                    value = rule.coerce(value)
                except (TypeError, ValueError):
                    raise ValidationError(
                        rule.invalid_message or f"Invalid {rule.name}",
                        details={"field": rule.name},
                    )
            result[rule.name] = value

        if schema.enrich:
            self._enrich(result)
        return result

    def _enrich(self, payload: Dict[str, Any]) -> None:
        # Caller-supplied provider/apikey never survive
        payload["provider"] = self.identity.provider
        payload["apikey"] = self.identity.apikey

    @staticmethod
    def _is_missing(schema: Schema, value: Any) -> bool:
        if schema.presence == "not_null":
            return value is None
        return is_empty(value)
