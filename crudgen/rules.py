# File: crudgen/rules.py
"""
crudgen - Validation Rule & Fake Data Mapper
==============================================
Maps a field's abstract type to the Laravel validation rule used in the
generated FormRequests and to the Faker expression used in the generated
factory.

Both tables are keyed by the closed ``FieldType`` enum; a type token that
does not resolve takes the explicit fallback entry.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from crudgen.models import FieldSpec, FieldType, resolve_field_type

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.rules")

# ---------------------------------------------------------------------------
# Validation rules
# ---------------------------------------------------------------------------

_RULE_MAP: Dict[FieldType, str] = {
    FieldType.STRING: "string|max:255",
    FieldType.TEXT: "string",
    FieldType.INTEGER: "integer",
    FieldType.BOOLEAN: "boolean",
    FieldType.DATE: "date",
    FieldType.EMAIL: "email",
    FieldType.JSON: "json",
    FieldType.DECIMAL: "numeric",
    FieldType.FLOAT: "numeric",
}
_FALLBACK_RULE: str = "string"

# ---------------------------------------------------------------------------
# Fake data
# ---------------------------------------------------------------------------

# Checked in order against the field name before the type table.
_NAME_HEURISTICS: Tuple[Tuple[str, str], ...] = (
    ("email", "fake()->email()"),
    ("phone", "fake()->phoneNumber()"),
    ("name", "fake()->name()"),
)

_FAKE_MAP: Dict[FieldType, str] = {
    FieldType.STRING: "fake()->word()",
    FieldType.TEXT: "fake()->paragraph()",
    FieldType.INTEGER: "fake()->numberBetween(1, 100)",
    FieldType.BOOLEAN: "fake()->boolean()",
    FieldType.DATE: "fake()->date()",
    FieldType.EMAIL: "fake()->email()",
    FieldType.DECIMAL: "fake()->randomFloat(2, 0, 1000)",
    FieldType.FLOAT: "fake()->randomFloat(2, 0, 1000)",
}
_FALLBACK_FAKE: str = "fake()->word()"


def rule_for(type_name: str) -> str:
    """Base validation rule for a type token, e.g. ``"string|max:255"``."""
    field_type: Optional[FieldType] = resolve_field_type(type_name)
    if field_type is None:
        return _FALLBACK_RULE
    return _RULE_MAP[field_type]


def store_rule(field: FieldSpec) -> str:
    """Rule for the create request: ``required|`` or ``nullable|`` + base rule."""
    prefix: str = "nullable" if field.nullable else "required"
    return f"{prefix}|{rule_for(field.type)}"


def update_rule(field: FieldSpec) -> str:
    """Rule for the update request; updates are partial, so always ``sometimes|``."""
    return f"sometimes|{rule_for(field.type)}"


def fake_for(type_name: str, field_name: str) -> str:
    """
    Faker expression for one factory attribute.

    The name heuristics win over the declared type:
    ``fake_for("string", "user_email")`` is ``fake()->email()``.
    """
    for needle, expression in _NAME_HEURISTICS:
        if needle in field_name:
            return expression

    field_type: Optional[FieldType] = resolve_field_type(type_name)
    if field_type is None:
        return _FALLBACK_FAKE
    return _FAKE_MAP.get(field_type, _FALLBACK_FAKE)


__all__: List[str] = [
    "rule_for",
    "store_rule",
    "update_rule",
    "fake_for",
]
