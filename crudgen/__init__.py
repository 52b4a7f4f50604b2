# File: crudgen/__init__.py
"""
crudgen — Laravel CRUD API Scaffolding Generator
==================================================

Generates the full CRUD surface of one Laravel resource (migration, model,
API controller, form requests, API resource, route file, factory, seeder
and feature test) from a resource name and two compact option strings.

Architecture overview::

    ┌──────────────┐     ┌───────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ CrudGenerator │────▶│ TemplateGenerator│
    │   (cli.py)   │     │(generator.py) │     │  (templates.py)  │
    └──────────────┘     └───────┬───────┘     └────────┬─────────┘
                                 │                      │
              ┌──────────┬───────┼──────────┐           ▼
              ▼          ▼       ▼          ▼      ┌─────────┐
         ┌────────┐ ┌────────┐ ┌──────┐ ┌─────────┐│  rules  │
         │ parser │ │validat.│ │models│ │exporters││  (.py)  │
         └────────┘ └────────┘ └──────┘ └─────────┘└─────────┘

Usage::

    # As a library
    from crudgen import CrudGenerator, GenerationConfig
    report = CrudGenerator().generate(
        "Product",
        fields_raw="title:string,price:decimal:nullable",
        config=GenerationConfig(base_path="./shop"),
    )

    # From the command line
    crudgen Product --fields="title:string,price:decimal:nullable"

Public API:
    - CrudGenerator      — Pipeline orchestrator
    - GenerationConfig   — Output layout settings
    - TemplateGenerator  — Code template engine
    - ProjectExporter    — File-system writer
    - lint_request       — Input linter entry point
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from crudgen.models import (
    FieldSpec,
    FieldType,
    GenerationConfig,
    RelationSpec,
    RelationType,
    RenderedArtifact,
    ResourceNames,
)
from crudgen.parser import parse_fields, parse_relations
from crudgen.rules import fake_for, rule_for, store_rule, update_rule
from crudgen.validators import ValidationResult, lint_request
from crudgen.utils import (
    Timer,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
    to_snake_case,
)
from crudgen.templates import TemplateGenerator
from crudgen.exporters import ExportResult, FileRecord, ProjectExporter
from crudgen.generator import CrudGenerator, GenerationReport, build_config

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Core orchestrator
    "CrudGenerator",
    "GenerationReport",
    "build_config",
    # Models
    "FieldSpec",
    "FieldType",
    "GenerationConfig",
    "RelationSpec",
    "RelationType",
    "RenderedArtifact",
    "ResourceNames",
    # Parsing & rules
    "parse_fields",
    "parse_relations",
    "rule_for",
    "store_rule",
    "update_rule",
    "fake_for",
    # Validation
    "lint_request",
    "ValidationResult",
    # Templates
    "TemplateGenerator",
    # Exporters
    "ProjectExporter",
    "ExportResult",
    "FileRecord",
    # Utilities
    "Timer",
    "to_snake_case",
    "to_pascal_case",
    "to_camel_case",
    "to_kebab_case",
    "to_plural",
]
