# File: crudgen/generator.py
"""
crudgen - Generation Pipeline (Orchestrator)
==============================================

Connects every phase of one scaffolding run:

    Option strings → Parsing → Naming → Lint → Rendering → Export

The ``CrudGenerator`` class is both the programmatic API and the backend
for the CLI.

Workflow::

    1. Load an optional JSON/YAML config file into ``GenerationConfig``.
    2. Parse ``--fields`` / ``--relations`` into descriptors (parser.py).
    3. Derive every naming variant from the resource name (models.py).
    4. Lint the request (validators.py).
    5. Render all artifacts (templates.py).
    6. Hand off to ``ProjectExporter`` (exporters.py), unless dry-running.
    7. Return a ``GenerationReport`` with metrics and status.

Error handling strategy:
    - Malformed field/relation tokens never raise; they degrade and the
      linter reports them as warnings.
    - Warnings abort the run only with ``fail_on_warnings``.
    - Export errors stop the export and are recorded on the report.
    - Config file problems raise ``FileNotFoundError`` / ``ValueError``.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from crudgen.exporters import ExportResult, FileRecord, ProjectExporter
from crudgen.models import (
    FieldSpec,
    GenerationConfig,
    RelationSpec,
    RenderedArtifact,
    ResourceNames,
)
from crudgen.parser import parse_fields, parse_relations
from crudgen.templates import TemplateGenerator
from crudgen.utils import Timer
from crudgen.validators import ValidationResult, lint_request

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.generator")


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``CrudGenerator.generate()``.

    ``artifacts`` holds everything rendered; ``written_files`` only what
    actually reached the disk (empty on a dry run).
    """

    success: bool = False
    resource_name: str = ""
    base_path: str = ""
    dry_run: bool = False
    aborted_on_warnings: bool = False

    # Metrics
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    total_elapsed_seconds: float = 0.0

    # Sub-reports
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    lint_warnings: List[str] = field(default_factory=list)
    export_errors: List[str] = field(default_factory=list)
    artifacts: List[RenderedArtifact] = field(default_factory=list)
    written_files: List[FileRecord] = field(default_factory=list)

    def artifact_path(self, kind: str) -> Optional[str]:
        """Relative path of the rendered artifact of *kind*, if any."""
        for artifact in self.artifacts:
            if artifact.kind == kind:
                return artifact.path
        return None

    def next_steps(self) -> List[str]:
        """Follow-up actions for the user after a successful run."""
        steps: List[str] = ["Don't forget to run: php artisan migrate"]
        routes: Optional[str] = self.artifact_path("routes")
        hint: str = (
            "Add the routes to your api.php if not using automatic registration"
        )
        steps.append(f"{hint} ({routes})" if routes else hint)
        return steps

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        if self.success:
            status: str = "✅ DRY RUN" if self.dry_run else "✅ SUCCESS"
        else:
            status = "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  crudgen — Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Resource:         {self.resource_name}")
        lines.append(f"  Base path:        {self.base_path}")
        lines.append(f"  Files:            {self.total_files}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total bytes:      {self.total_bytes:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<22s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        if self.artifacts:
            lines.append(f"{'─'*60}")
            label: str = "Would write" if self.dry_run else "Artifacts"
            lines.append(f"  {label} ({len(self.artifacts)}):")
            written: Set[str] = {r.relative_path for r in self.written_files}
            for artifact in self.artifacts:
                if self.dry_run:
                    mark: str = "·"
                else:
                    mark = "✓" if artifact.path in written else "⊘"
                lines.append(f"    {mark} {artifact.path}")

        if self.lint_warnings:
            lines.append(f"{'─'*60}")
            lines.append(f"  Warnings ({len(self.lint_warnings)}):")
            for warn in self.lint_warnings:
                lines.append(f"    ⚠ {warn}")

        if self.export_errors:
            lines.append(f"{'─'*60}")
            lines.append(f"  Export Errors ({len(self.export_errors)}):")
            for err in self.export_errors:
                lines.append(f"    ✗ {err}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Config loader helpers
# ---------------------------------------------------------------------------

_CONFIG_KEYS: Tuple[str, ...] = ("crudgen", "config", "generation_config")


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. An empty document is an empty mapping."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a generation config file (JSON or YAML).

    Dispatches on file extension.  Settings may sit at the top level or
    under a ``crudgen`` / ``config`` / ``generation_config`` key.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Config path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        raw: Dict[str, Any] = _load_yaml_file(path)
    elif suffix == ".json":
        raw = _load_json_file(path)
    else:
        logger.info("Unknown extension '%s' — trying JSON then YAML.", suffix)
        try:
            raw = _load_json_file(path)
        except ValueError:
            raw = _load_yaml_file(path)

    for key in _CONFIG_KEYS:
        if key in raw:
            section: Any = raw[key]
            if not isinstance(section, dict):
                raise ValueError(
                    f"Config section '{key}' in {path} must be a mapping."
                )
            return dict(section)
    return raw


def build_config(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GenerationConfig:
    """
    Build a ``GenerationConfig`` from an optional file plus overrides.

    Overrides (typically CLI options) win over file values.

    Raises:
        FileNotFoundError: If *config_path* doesn't exist.
        ValueError: If the file can't be parsed or values are invalid.
    """
    data: Dict[str, Any] = {}
    if config_path is not None:
        data.update(load_config_file(config_path))
        logger.info("Loaded config file: %s (%d keys).", config_path, len(data))
    if overrides:
        data.update(overrides)

    try:
        return GenerationConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc


# ---------------------------------------------------------------------------
# CrudGenerator: pipeline orchestrator
# ---------------------------------------------------------------------------


class CrudGenerator:
    """
    Pipeline orchestrator for one CRUD scaffold.

    Usage::

        generator = CrudGenerator()
        report = generator.generate(
            "Product",
            fields_raw="title:string,price:decimal:nullable",
            config=GenerationConfig(base_path="./my-app"),
        )
        print(report.summary())

    The generator is reusable — create once, call generate() many times.
    """

    def __init__(
        self,
        *,
        fail_on_warnings: bool = False,
        dry_run: bool = False,
    ) -> None:
        """
        Args:
            fail_on_warnings: Abort before rendering if the linter warns.
            dry_run: Render and report, but write nothing.
        """
        self._fail_on_warnings: bool = fail_on_warnings
        self._dry_run: bool = dry_run

        logger.debug(
            "CrudGenerator initialised: fail_on_warnings=%s, dry_run=%s.",
            fail_on_warnings,
            dry_run,
        )

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def generate(
        self,
        name: str,
        fields_raw: Optional[str] = None,
        relations_raw: Optional[str] = None,
        config: Optional[GenerationConfig] = None,
    ) -> GenerationReport:
        """
        Full pipeline: parse → derive → lint → render → export.

        Raises:
            ValueError: If *name* is empty.
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Resource name must not be empty.")

        cfg: GenerationConfig = config or GenerationConfig()
        report: GenerationReport = GenerationReport(
            resource_name=name,
            base_path=str(Path(cfg.base_path).resolve()),
            dry_run=self._dry_run,
        )
        pipeline_start: float = time.perf_counter()
        logger.info("Generating CRUD for: %s", name)

        names, fields, relations = self._step_parse(
            name, fields_raw, relations_raw, report
        )

        if not self._step_lint(names, fields, relations, report):
            report.aborted_on_warnings = True
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        report.artifacts = self._step_render(names, fields, relations, cfg, report)

        if self._dry_run:
            logger.info("Dry-run mode: %d file(s) not written.", len(report.artifacts))
        else:
            self._step_export(report.artifacts, cfg, report)

        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    # -----------------------------------------------------------------
    # Pipeline step: Parse
    # -----------------------------------------------------------------

    def _step_parse(
        self,
        name: str,
        fields_raw: Optional[str],
        relations_raw: Optional[str],
        report: GenerationReport,
    ) -> Tuple[ResourceNames, List[FieldSpec], List[RelationSpec]]:
        with Timer("parse") as t:
            fields: List[FieldSpec] = parse_fields(fields_raw)
            relations: List[RelationSpec] = parse_relations(relations_raw)
            names: ResourceNames = ResourceNames.from_name(name)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Parse Input",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=(
                f"{len(fields)} field(s), {len(relations)} relation(s), "
                f"table '{names.table_name}'"
            ),
        ))
        return names, fields, relations

    # -----------------------------------------------------------------
    # Pipeline step: Lint
    # -----------------------------------------------------------------

    def _step_lint(
        self,
        names: ResourceNames,
        fields: Sequence[FieldSpec],
        relations: Sequence[RelationSpec],
        report: GenerationReport,
    ) -> bool:
        """
        Run the input linter.

        Returns False only when warnings exist and ``fail_on_warnings`` is set.
        """
        with Timer("lint") as t:
            result: ValidationResult = lint_request(names, fields, relations)

        report.lint_warnings.extend(str(w) for w in result.warnings)
        blocked: bool = result.has_warnings and self._fail_on_warnings

        report.step_metrics.append(GenerationStepMetric(
            step_name="Lint Input",
            success=not blocked,
            elapsed_seconds=t.elapsed,
            detail=(
                f"{len(result.warnings)} warning(s)"
                if result.has_warnings
                else "all checks passed"
            ),
        ))

        for warn in result.warnings:
            logger.warning("  ⚠ %s", warn)

        if blocked:
            logger.error(
                "Aborting: %d lint warning(s) with fail_on_warnings set.",
                len(result.warnings),
            )
            return False
        return True

    # -----------------------------------------------------------------
    # Pipeline step: Render
    # -----------------------------------------------------------------

    def _step_render(
        self,
        names: ResourceNames,
        fields: Sequence[FieldSpec],
        relations: Sequence[RelationSpec],
        config: GenerationConfig,
        report: GenerationReport,
    ) -> List[RenderedArtifact]:
        with Timer("render") as t:
            template_gen: TemplateGenerator = TemplateGenerator(config)
            artifacts: List[RenderedArtifact] = template_gen.generate_all(
                names, fields, relations
            )

        report.step_metrics.append(GenerationStepMetric(
            step_name="Render Templates",
            success=True,
            elapsed_seconds=t.elapsed,
            detail=(
                f"{len(artifacts)} files, "
                f"~{sum(a.line_count for a in artifacts):,} lines"
            ),
        ))
        return artifacts

    # -----------------------------------------------------------------
    # Pipeline step: Export
    # -----------------------------------------------------------------

    def _step_export(
        self,
        artifacts: Sequence[RenderedArtifact],
        config: GenerationConfig,
        report: GenerationReport,
    ) -> None:
        """Write all rendered artifacts to the filesystem."""
        exporter: ProjectExporter = ProjectExporter(config)
        result: ExportResult = exporter.export(artifacts)

        report.written_files = list(result.manifest.files)
        report.export_errors.extend(result.errors)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Export to Filesystem",
            success=result.success,
            elapsed_seconds=result.elapsed_seconds,
            detail=(
                f"{result.manifest.total_files} files, "
                f"{result.manifest.total_bytes:,} bytes"
            ),
        ))

    # -----------------------------------------------------------------
    # Internal: finalise report
    # -----------------------------------------------------------------

    def _finalise_report(
        self,
        report: GenerationReport,
        total_elapsed: float,
    ) -> GenerationReport:
        """Set final status, totals and timing on the report."""
        report.total_elapsed_seconds = total_elapsed

        if report.dry_run:
            counted: List[Tuple[int, int]] = [
                (len(a.content.encode("utf-8")), a.line_count)
                for a in report.artifacts
            ]
        else:
            counted = [(r.size_bytes, r.line_count) for r in report.written_files]
        report.total_files = len(counted)
        report.total_bytes = sum(size for size, _ in counted)
        report.total_lines = sum(lines for _, lines in counted)

        report.success = not report.aborted_on_warnings and not report.export_errors

        if report.success:
            logger.info(
                "CRUD generated successfully for %s in %.3fs.",
                report.resource_name,
                total_elapsed,
            )
        return report


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CrudGenerator",
    "GenerationReport",
    "GenerationStepMetric",
    "load_config_file",
    "build_config",
]

logger.debug("crudgen.generator loaded.")
