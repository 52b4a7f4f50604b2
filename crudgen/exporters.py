# File: crudgen/exporters.py
"""
crudgen - Artifact Exporter (File-System Manager)
===================================================

Responsible for:
    1. Resolving each artifact's target path under the application root.
    2. Creating missing parent directories.
    3. Writing files atomically (write-to-temp then rename).
    4. Recording what was written, with checksums, in an export manifest.

Existing files are overwritten without prompting.  The first failed write
stops the export; files written before it stay on disk (each individual
file is atomic, the batch is not).
"""

from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from crudgen.models import GenerationConfig, RenderedArtifact
from crudgen.utils import Timer, count_lines, sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.exporters")


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    kind: str
    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=False, slots=True)
class ExportManifest:
    """Everything written during one export."""

    generator_version: str = ""
    export_timestamp: str = ""
    base_path: str = ""
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    files: List[FileRecord] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ExportResult:
    """
    Final result returned by ``ProjectExporter.export()``.

    ``failed_path`` names the artifact whose write stopped the export.
    """

    success: bool
    manifest: ExportManifest
    errors: Tuple[str, ...]
    elapsed_seconds: float
    failed_path: Optional[str] = None


# ---------------------------------------------------------------------------
# ProjectExporter class
# ---------------------------------------------------------------------------


class ProjectExporter:
    """
    Writes rendered artifacts into a Laravel application tree.

    Usage::

        exporter = ProjectExporter(config)
        result = exporter.export(artifacts)
        for record in result.manifest.files:
            print(record.relative_path)

    Thread-safety: NOT thread-safe.  Use one exporter per export.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config
        self._base_path: Path = Path(config.base_path).resolve()
        self._atomic_writes: bool = config.atomic_writes

        self._errors: List[str] = []
        self._file_records: List[FileRecord] = []
        self._failed_path: Optional[str] = None

        logger.debug(
            "ProjectExporter initialised: base_path=%s, atomic=%s.",
            self._base_path,
            self._atomic_writes,
        )

    @property
    def base_path(self) -> Path:
        return self._base_path

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def export(self, artifacts: Sequence[RenderedArtifact]) -> ExportResult:
        """
        Write every artifact in order, stopping at the first failure.

        Args:
            artifacts: Rendered files with paths relative to ``base_path``.

        Returns:
            ExportResult with success flag, manifest, and error details.
        """
        with Timer("export") as timer:
            for artifact in artifacts:
                full_path: Path = self._base_path / artifact.path
                try:
                    record: FileRecord = self._write_single_file(
                        full_path, artifact
                    )
                except OSError as exc:
                    error_msg: str = (
                        f"Failed to write {artifact.path}: "
                        f"{type(exc).__name__}: {exc}"
                    )
                    self._errors.append(error_msg)
                    self._failed_path = artifact.path
                    logger.error(error_msg)
                    break
                self._file_records.append(record)
                logger.info("%s created: %s", artifact.kind, artifact.path)

        manifest: ExportManifest = self._build_manifest()
        success: bool = len(self._errors) == 0

        if success:
            logger.info(
                "Export completed successfully: %d files, %d bytes, %.3fs.",
                manifest.total_files,
                manifest.total_bytes,
                timer.elapsed,
            )
        else:
            logger.error(
                "Export stopped after %d of %d file(s) in %.3fs.",
                manifest.total_files,
                len(artifacts),
                timer.elapsed,
            )

        return ExportResult(
            success=success,
            manifest=manifest,
            errors=tuple(self._errors),
            elapsed_seconds=timer.elapsed,
            failed_path=self._failed_path,
        )

    # -----------------------------------------------------------------
    # Internal: file writing
    # -----------------------------------------------------------------

    def _write_single_file(
        self,
        full_path: Path,
        artifact: RenderedArtifact,
    ) -> FileRecord:
        """Write one artifact and return its FileRecord."""
        full_path.parent.mkdir(parents=True, exist_ok=True)

        encoded: bytes = artifact.content.encode("utf-8")

        if self._atomic_writes:
            self._atomic_write(full_path, encoded)
        else:
            full_path.write_bytes(encoded)

        logger.debug(
            "Wrote file: %s (%d bytes).", artifact.path, len(encoded)
        )

        return FileRecord(
            kind=artifact.kind,
            relative_path=artifact.path,
            absolute_path=str(full_path),
            size_bytes=len(encoded),
            line_count=count_lines(artifact.content),
            sha256=sha256_hex(artifact.content),
        )

    @staticmethod
    def _atomic_write(target_path: Path, data: bytes) -> None:
        """
        Write data to target_path atomically using a temporary file.

        The temp file lives in the target directory so ``os.replace`` stays
        on one filesystem.  On failure the temp file is removed and the
        original error propagates.
        """
        fd: int = -1
        tmp_path: str = ""
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(target_path.parent),
                prefix=f".{target_path.name}.",
                suffix=".tmp",
            )
            os.write(fd, data)
            os.fsync(fd)
            os.close(fd)
            fd = -1

            os.replace(tmp_path, str(target_path))
        except OSError:
            if fd >= 0:
                try:
                    os.close(fd)
                except OSError:
                    logger.debug("Could not close temp fd for %s.", target_path)
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.debug("Could not remove temp file %s.", tmp_path)
            raise

    # -----------------------------------------------------------------
    # Internal: manifest
    # -----------------------------------------------------------------

    def _build_manifest(self) -> ExportManifest:
        """Build the export manifest from collected file records."""
        import crudgen

        return ExportManifest(
            generator_version=crudgen.__version__,
            export_timestamp=time.strftime("%Y-%m-%dT%H:%M:%S%z"),
            base_path=str(self._base_path),
            total_files=len(self._file_records),
            total_bytes=sum(r.size_bytes for r in self._file_records),
            total_lines=sum(r.line_count for r in self._file_records),
            files=list(self._file_records),
        )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ProjectExporter",
    "ExportManifest",
    "ExportResult",
    "FileRecord",
]

logger.debug("crudgen.exporters loaded.")
