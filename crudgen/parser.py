# File: crudgen/parser.py
"""
crudgen - Field & Relation Spec Parser
========================================
Turns the two option strings of the command into structured descriptors::

    --fields="title:string,price:decimal:nullable,body:text"
    --relations="belongsTo:Author,hasMany:Comment"

Parsing never fails.  Missing tokens degrade to defaults (field type
``string``, not nullable) or to blanks (relation target ``""``); the
linter in ``crudgen.validators`` is what reports them.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from crudgen.models import FieldSpec, FieldType, RelationSpec

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.parser")

ENTRY_SEPARATOR: str = ","
TOKEN_SEPARATOR: str = ":"
NULLABLE_TOKEN: str = "nullable"


def _split_entries(raw: Optional[str]) -> List[List[str]]:
    if not raw:
        return []
    return [
        [token.strip() for token in entry.strip().split(TOKEN_SEPARATOR)]
        for entry in raw.split(ENTRY_SEPARATOR)
    ]


def parse_fields(raw: Optional[str]) -> List[FieldSpec]:
    """
    Parse a ``name[:type[:nullable]]`` list.

    Order is preserved and duplicates are kept.  An empty entry (``"a,,b"``)
    yields a field with an empty name.

    Examples:
        >>> parse_fields("age:integer:nullable")
        [<Field age:integer NULL>]
        >>> parse_fields("title")
        [<Field title:string>]
    """
    fields: List[FieldSpec] = []
    for tokens in _split_entries(raw):
        name: str = tokens[0]
        field_type: str = tokens[1] if len(tokens) > 1 else FieldType.STRING.value
        nullable: bool = len(tokens) > 2 and tokens[2] == NULLABLE_TOKEN
        fields.append(FieldSpec(name=name, type=field_type, nullable=nullable))

    logger.debug("Parsed %d field(s) from %r.", len(fields), raw)
    return fields


def parse_relations(raw: Optional[str]) -> List[RelationSpec]:
    """Parse a ``type:Model`` list; a missing model becomes an empty string."""
    relations: List[RelationSpec] = []
    for tokens in _split_entries(raw):
        target: str = tokens[1] if len(tokens) > 1 else ""
        relations.append(RelationSpec(relation_type=tokens[0], target_model=target))

    logger.debug("Parsed %d relation(s) from %r.", len(relations), raw)
    return relations


__all__: List[str] = [
    "parse_fields",
    "parse_relations",
]
