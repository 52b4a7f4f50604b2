"""
tests/conftest.py
Shared fixtures for the crudgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Any, Dict, Iterator, List

import pytest
import yaml

from crudgen.models import (
    FieldSpec,
    GenerationConfig,
    RelationSpec,
    ResourceNames,
)
from crudgen.parser import parse_fields, parse_relations
from crudgen.templates import TemplateGenerator


FIXED_TIMESTAMP: str = "2024_01_31_120000"


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """``--quiet`` calls logging.disable(); undo it after every test."""
    yield
    logging.disable(logging.NOTSET)
    crudgen_logger = logging.getLogger("crudgen")
    crudgen_logger.handlers.clear()
    crudgen_logger.propagate = True
    crudgen_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Parsed input fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def product_names() -> ResourceNames:
    return ResourceNames.from_name("Product")


@pytest.fixture()
def product_fields() -> List[FieldSpec]:
    """``title:string,price:decimal:nullable``"""
    return parse_fields("title:string,price:decimal:nullable")


@pytest.fixture()
def category_names() -> ResourceNames:
    return ResourceNames.from_name("Category")


@pytest.fixture()
def category_fields() -> List[FieldSpec]:
    return parse_fields("name:string,description:text:nullable,position:integer")


@pytest.fixture()
def category_relations() -> List[RelationSpec]:
    return parse_relations("belongsTo:Author,hasMany:Post")


# ---------------------------------------------------------------------------
# Config / generator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def laravel_root(tmp_path: pathlib.Path) -> pathlib.Path:
    """An empty directory standing in for a Laravel application root."""
    root = tmp_path / "laravel-app"
    root.mkdir()
    return root


@pytest.fixture()
def fixed_timestamp() -> str:
    return FIXED_TIMESTAMP


@pytest.fixture()
def config(laravel_root: pathlib.Path) -> GenerationConfig:
    return GenerationConfig(
        base_path=str(laravel_root),
        migration_timestamp=FIXED_TIMESTAMP,
    )


@pytest.fixture()
def template_gen(config: GenerationConfig) -> TemplateGenerator:
    return TemplateGenerator(config)


# ---------------------------------------------------------------------------
# Config file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config_dict(laravel_root: pathlib.Path) -> Dict[str, Any]:
    return {
        "base_path": str(laravel_root),
        "api_prefix": "/api/v1",
        "migration_timestamp": FIXED_TIMESTAMP,
    }


@pytest.fixture()
def config_yaml_path(config_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the config under a ``crudgen:`` key to a temporary YAML file."""
    path = tmp_path / "crudgen.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump({"crudgen": config_dict}, fh, default_flow_style=False)
    return path
