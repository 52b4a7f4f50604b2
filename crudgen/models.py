# File: crudgen/models.py
"""
crudgen - Core Data Models
============================
Pydantic V2 models describing one scaffolding request and its output.
These models are the single source of truth for the whole pipeline:
Spec Parsing → Naming → Rendering → Export.

Nothing here persists across runs; every generation is a fresh, stateless
transformation.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

from crudgen.utils import (
    count_lines,
    to_camel_case,
    to_kebab_case,
    to_plural,
    to_snake_case,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.models")

_TIMESTAMP_RE: re.Pattern[str] = re.compile(r"^\d{4}_\d{2}_\d{2}_\d{6}$")

# ---------------------------------------------------------------------------
# Enums: closed sets the rule mapper and templates switch over
# ---------------------------------------------------------------------------


class FieldType(str, Enum):
    """Abstract field types with a known validation rule and fake generator."""

    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    DATE = "date"
    EMAIL = "email"
    JSON = "json"
    DECIMAL = "decimal"
    FLOAT = "float"


class RelationType(str, Enum):
    """Eloquent relation kinds that produce generated code."""

    BELONGS_TO = "belongsTo"
    HAS_MANY = "hasMany"


def resolve_field_type(type_name: str) -> Optional[FieldType]:
    """Return the ``FieldType`` for *type_name*, or ``None`` when unknown."""
    try:
        return FieldType(type_name)
    except ValueError:
        return None


def resolve_relation_type(type_name: str) -> Optional[RelationType]:
    """Return the ``RelationType`` for *type_name*, or ``None`` when unknown."""
    try:
        return RelationType(type_name)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Mixin: shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    extra="forbid",
)

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    extra="forbid",
    frozen=True,
)


# ---------------------------------------------------------------------------
# Parsed input
# ---------------------------------------------------------------------------


class FieldSpec(BaseModel):
    """
    One declared attribute of the resource.

    ``type`` keeps the raw token verbatim, so an unknown type such as
    ``uuid`` still reaches the migration as ``$table->uuid(...)`` even though
    the rule mapper falls back to string defaults for it.
    """

    model_config = _FROZEN_CONFIG

    name: str = Field(..., description="Column / attribute name (may be empty).")
    type: str = Field(default=FieldType.STRING.value, description="Raw type token.")
    nullable: bool = Field(default=False, description="Column allows NULL.")

    @property
    def field_type(self) -> Optional[FieldType]:
        return resolve_field_type(self.type)

    def __repr__(self) -> str:
        null_flag: str = " NULL" if self.nullable else ""
        return f"<Field {self.name}:{self.type}{null_flag}>"


class RelationSpec(BaseModel):
    """One declared association, e.g. ``belongsTo:Author``."""

    model_config = _FROZEN_CONFIG

    relation_type: str = Field(..., description="Raw relation token (belongsTo, hasMany, ...).")
    target_model: str = Field(
        default="",
        description="Related model class name; empty when the token omitted it.",
    )

    @property
    def kind(self) -> Optional[RelationType]:
        return resolve_relation_type(self.relation_type)

    @property
    def foreign_key(self) -> str:
        """Foreign-key column a ``belongsTo`` relation adds to the migration."""
        return f"{to_snake_case(self.target_model)}_id"

    def __repr__(self) -> str:
        return f"<Relation {self.relation_type} → {self.target_model or '?'}>"


# ---------------------------------------------------------------------------
# Derived names
# ---------------------------------------------------------------------------


class ResourceNames(BaseModel):
    """
    Every naming variant the templates need, derived from one identifier.

    The resource name is assumed to already be PascalCase and is used as the
    class name unchanged. All plural forms come from the same ``to_plural``
    call so they stay mutually consistent.
    """

    model_config = _FROZEN_CONFIG

    class_name: str
    plural_class_name: str
    snake_singular: str
    snake_plural: str
    camel_singular: str
    camel_plural: str
    kebab_plural: str

    @classmethod
    def from_name(cls, name: str) -> "ResourceNames":
        plural: str = to_plural(name)
        return cls(
            class_name=name,
            plural_class_name=plural,
            snake_singular=to_snake_case(name),
            snake_plural=to_snake_case(plural),
            camel_singular=to_camel_case(name),
            camel_plural=to_camel_case(plural),
            kebab_plural=to_kebab_case(plural),
        )

    @property
    def table_name(self) -> str:
        return self.snake_plural

    @property
    def route_segment(self) -> str:
        return self.kebab_plural


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class RenderedArtifact(BaseModel):
    """A single generated file: where it goes and what it contains."""

    model_config = _FROZEN_CONFIG

    kind: str = Field(..., min_length=1, description="Artifact kind, e.g. 'migration'.")
    path: str = Field(..., description="Path relative to the application base path.")
    content: str = Field(..., description="Full file content.")

    @computed_field  # type: ignore[misc]
    @property
    def line_count(self) -> int:
        return count_lines(self.content)

    def __repr__(self) -> str:
        return f"<Artifact {self.kind} {self.path} ({self.line_count} lines)>"


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Settings that control where artifacts are written.

    Directory fields are relative to ``base_path`` and follow the default
    Laravel application layout.
    """

    model_config = _SHARED_CONFIG

    base_path: str = Field(default=".", description="Laravel application root.")
    app_dir: str = Field(default="app", description="Application source directory.")
    database_dir: str = Field(
        default="database", description="Migrations / factories / seeders root."
    )
    routes_dir: str = Field(
        default="routes/api", description="Directory for per-resource route files."
    )
    tests_dir: str = Field(default="tests/Feature", description="Feature test directory.")
    api_prefix: str = Field(
        default="/api", description="URL prefix the generated tests call."
    )
    migration_timestamp: Optional[str] = Field(
        default=None,
        description="Fixed 'Y_m_d_His' migration timestamp (current time when unset).",
    )
    force: bool = Field(
        default=False,
        description="Accepted for command compatibility; files are always overwritten.",
    )
    atomic_writes: bool = Field(
        default=True, description="Write each file via temp file + rename."
    )

    @field_validator("migration_timestamp")
    @classmethod
    def _valid_timestamp(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _TIMESTAMP_RE.match(v):
            raise ValueError(
                f"migration_timestamp must look like 'YYYY_MM_DD_HHMMSS', got {v!r}."
            )
        return v

    @field_validator("api_prefix")
    @classmethod
    def _normalise_prefix(cls, v: str) -> str:
        return "/" + v.strip("/") if v.strip("/") else ""


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FieldType",
    "RelationType",
    "resolve_field_type",
    "resolve_relation_type",
    "FieldSpec",
    "RelationSpec",
    "ResourceNames",
    "RenderedArtifact",
    "GenerationConfig",
]

logger.debug("crudgen.models loaded — %d public symbols.", len(__all__))
