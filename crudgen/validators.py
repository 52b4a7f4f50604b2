# File: crudgen/validators.py
"""
crudgen - Input Linter
========================
Cross-checks a parsed scaffolding request and reports anything that will
render into suspicious PHP: a missing relation target, an unknown field
type, a duplicate column, and so on.

The linter never changes what the templates render.  Parsing already
degraded bad tokens to defaults or blanks; this module only makes that
visible.  Everything it reports is a warning, and the orchestrator decides
whether warnings abort the run.

Usage by downstream modules:
    from crudgen.validators import lint_request
    result = lint_request(names, fields, relations)
    for warning in result.warnings:
        ...
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence, Set

from crudgen.models import FieldSpec, FieldType, RelationSpec, RelationType, ResourceNames
from crudgen.utils import to_pascal_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight warning descriptor (no Pydantic overhead)."""

    __slots__ = ("code", "message", "context")

    def __init__(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"[WARNING] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` instances produced by the lint checks."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError(code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def warnings(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_warnings(self) -> bool:
        return bool(self._items)

    def summary(self) -> str:
        return f"Lint: {len(self._items)} warning(s)."

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_PASCAL_CASE_RE: re.Pattern[str] = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_COLUMN_NAME_RE: re.Pattern[str] = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# Columns the generated migration always creates itself
_RESERVED_COLUMNS: FrozenSet[str] = frozenset({"id", "created_at", "updated_at"})

_KNOWN_FIELD_TYPES: FrozenSet[str] = frozenset(t.value for t in FieldType)
_KNOWN_RELATION_TYPES: FrozenSet[str] = frozenset(t.value for t in RelationType)


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def lint_resource_name(names: ResourceNames) -> ValidationResult:
    """The resource name is used verbatim as a PHP class name."""
    result: ValidationResult = ValidationResult()
    name: str = names.class_name
    if not _PASCAL_CASE_RE.match(name):
        result.add_warning(
            "RESOURCE_NOT_PASCAL_CASE",
            f"Resource name '{name}' is not PascalCase; it is used as the class "
            f"name unchanged (did you mean '{to_pascal_case(name)}'?).",
            {"resource": name, "suggestion": to_pascal_case(name)},
        )
    return result


def lint_fields(fields: Sequence[FieldSpec]) -> ValidationResult:
    """
    Check each field for:
    - Empty or non-identifier names
    - Duplicates (all copies are still rendered)
    - Clashes with id / timestamps columns
    - Types outside the rule table (rendered verbatim, rules fall back)
    """
    result: ValidationResult = ValidationResult()
    seen: Set[str] = set()

    for index, field in enumerate(fields):
        if not field.name:
            result.add_warning(
                "FIELD_NAME_EMPTY",
                f"Field #{index + 1} has an empty name.",
                {"position": index},
            )
        elif not _COLUMN_NAME_RE.match(field.name):
            result.add_warning(
                "FIELD_NAME_INVALID",
                f"Field name '{field.name}' is not a valid column identifier.",
                {"field": field.name},
            )

        if field.name and field.name in seen:
            result.add_warning(
                "FIELD_DUPLICATE",
                f"Field '{field.name}' is declared more than once.",
                {"field": field.name},
            )
        seen.add(field.name)

        if field.name in _RESERVED_COLUMNS:
            result.add_warning(
                "FIELD_RESERVED",
                f"Field '{field.name}' clashes with a column the migration "
                f"already creates.",
                {"field": field.name},
            )

        if field.type not in _KNOWN_FIELD_TYPES:
            result.add_warning(
                "FIELD_TYPE_UNKNOWN",
                f"Field '{field.name}' has type '{field.type}'; it is emitted as "
                f"is and validated/faked as a plain string.",
                {"field": field.name, "type": field.type},
            )

    return result


def lint_relations(relations: Sequence[RelationSpec]) -> ValidationResult:
    """Flag relations that will render blank or not at all."""
    result: ValidationResult = ValidationResult()

    for relation in relations:
        if relation.relation_type not in _KNOWN_RELATION_TYPES:
            result.add_warning(
                "RELATION_TYPE_UNKNOWN",
                f"Relation type '{relation.relation_type}' is not supported; "
                f"no accessor or foreign key is generated for it.",
                {"relation": relation.relation_type},
            )
        if not relation.target_model:
            result.add_warning(
                "RELATION_TARGET_MISSING",
                f"Relation '{relation.relation_type}' has no target model; the "
                f"generated code will contain a blank class name.",
                {"relation": relation.relation_type},
            )
        elif not _PASCAL_CASE_RE.match(relation.target_model):
            result.add_warning(
                "RELATION_TARGET_NOT_PASCAL_CASE",
                f"Relation target '{relation.target_model}' is not PascalCase.",
                {"target": relation.target_model},
            )

    return result


def lint_foreign_key_collisions(
    fields: Sequence[FieldSpec], relations: Sequence[RelationSpec]
) -> ValidationResult:
    """A declared field named like a belongsTo foreign key creates the column twice."""
    result: ValidationResult = ValidationResult()
    field_names: Set[str] = {f.name for f in fields}
    for relation in relations:
        if relation.kind != RelationType.BELONGS_TO or not relation.target_model:
            continue
        if relation.foreign_key in field_names:
            result.add_warning(
                "FOREIGN_KEY_DUPLICATES_FIELD",
                f"Field '{relation.foreign_key}' duplicates the foreign key added "
                f"for belongsTo:{relation.target_model}.",
                {"field": relation.foreign_key},
            )
    return result


# ---------------------------------------------------------------------------
# Composite entry point
# ---------------------------------------------------------------------------


def lint_request(
    names: ResourceNames,
    fields: Sequence[FieldSpec],
    relations: Sequence[RelationSpec],
) -> ValidationResult:
    """
    **Master lint entry point.**

    Runs every check and returns one merged ``ValidationResult``.
    """
    result: ValidationResult = ValidationResult()

    checks: List[Callable[[], ValidationResult]] = [
        lambda: lint_resource_name(names),
        lambda: lint_fields(fields),
        lambda: lint_relations(relations),
        lambda: lint_foreign_key_collisions(fields, relations),
    ]
    for check in checks:
        result.merge(check())

    logger.info("Input lint complete for '%s': %s", names.class_name, result.summary())
    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "lint_resource_name",
    "lint_fields",
    "lint_relations",
    "lint_foreign_key_collisions",
    "lint_request",
]

logger.debug("crudgen.validators loaded — %d public symbols.", len(__all__))
