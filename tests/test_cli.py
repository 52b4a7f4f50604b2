"""
tests/test_cli.py
End-to-end tests for the crudgen command-line interface.

``cli_main`` always ends in ``sys.exit``; every test asserts on the exit code.
"""

from __future__ import annotations

import pathlib
from typing import List

import pytest

from crudgen.cli import (
    EXIT_EXPORT_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_LINT_FAILURE,
    EXIT_SUCCESS,
    cli_main,
)


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


# ===========================================================================
# Success paths
# ===========================================================================


class TestCliSuccess:

    def test_generates_files(
        self,
        laravel_root: pathlib.Path,
        fixed_timestamp: str,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run([
            "Product",
            "--fields=title:string,price:decimal:nullable",
            "-p", str(laravel_root),
            "--timestamp", fixed_timestamp,
        ])
        assert code == EXIT_SUCCESS
        assert (laravel_root / "app/Models/Product.php").exists()
        assert (
            laravel_root
            / f"database/migrations/{fixed_timestamp}_create_products_table.php"
        ).exists()

        out = capsys.readouterr().out
        assert "SUCCESS" in out
        assert "php artisan migrate" in out

    def test_relations_option(self, laravel_root: pathlib.Path) -> None:
        code = _run([
            "Comment",
            "--fields", "body:text",
            "--relations", "belongsTo:Post,hasMany:Reaction",
            "--base-path", str(laravel_root),
        ])
        assert code == EXIT_SUCCESS
        model = (laravel_root / "app/Models/Comment.php").read_text(encoding="utf-8")
        assert "public function post()" in model
        assert "public function reactions()" in model

    def test_force_is_accepted(self, laravel_root: pathlib.Path) -> None:
        args = ["Product", "--fields=title", "-p", str(laravel_root), "--force"]
        assert _run(args) == EXIT_SUCCESS
        assert _run(args) == EXIT_SUCCESS

    def test_dry_run_writes_nothing(
        self, laravel_root: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(["Product", "--fields=title", "-p", str(laravel_root), "--dry-run"])
        assert code == EXIT_SUCCESS
        assert list(laravel_root.iterdir()) == []
        out = capsys.readouterr().out
        assert "DRY RUN" in out
        assert "php artisan migrate" not in out

    def test_config_file(
        self,
        config_yaml_path: pathlib.Path,
        laravel_root: pathlib.Path,
        fixed_timestamp: str,
    ) -> None:
        code = _run(["Product", "--fields=title", "-c", str(config_yaml_path)])
        assert code == EXIT_SUCCESS
        test_file = laravel_root / "tests/Feature/Product/ProductApiTest.php"
        assert "'/api/v1/products'" in test_file.read_text(encoding="utf-8")
        assert (
            laravel_root
            / f"database/migrations/{fixed_timestamp}_create_products_table.php"
        ).exists()

    def test_api_prefix_overrides_config(
        self, config_yaml_path: pathlib.Path, laravel_root: pathlib.Path
    ) -> None:
        code = _run([
            "Product", "-c", str(config_yaml_path), "--api-prefix", "/v3",
        ])
        assert code == EXIT_SUCCESS
        test_file = laravel_root / "tests/Feature/Product/ProductApiTest.php"
        assert "'/v3/products'" in test_file.read_text(encoding="utf-8")

    def test_quiet_prints_nothing(
        self, laravel_root: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(["Product", "--fields=title", "-p", str(laravel_root), "-q"])
        assert code == EXIT_SUCCESS
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_verbose_logs_to_stderr(
        self, laravel_root: pathlib.Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(["Product", "--fields=title", "-p", str(laravel_root), "-v"])
        assert code == EXIT_SUCCESS
        err = capsys.readouterr().err
        assert "crudgen" in err
        assert "Generating CRUD for: Product" in err

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["--version"]) == 0
        assert "crudgen v" in capsys.readouterr().out


# ===========================================================================
# Failure paths
# ===========================================================================


class TestCliFailures:

    def test_fail_on_warnings(self, laravel_root: pathlib.Path) -> None:
        code = _run([
            "Product",
            "--fields=title",
            "--relations=belongsTo",
            "-p", str(laravel_root),
            "--fail-on-warnings",
        ])
        assert code == EXIT_LINT_FAILURE
        assert list(laravel_root.iterdir()) == []

    def test_warnings_without_flag_succeed(self, laravel_root: pathlib.Path) -> None:
        code = _run([
            "Product", "--relations=belongsTo", "-p", str(laravel_root),
        ])
        assert code == EXIT_SUCCESS

    def test_missing_config_file(self, tmp_path: pathlib.Path) -> None:
        code = _run(["Product", "-c", str(tmp_path / "missing.yaml")])
        assert code == EXIT_INPUT_ERROR

    def test_bad_timestamp(self, laravel_root: pathlib.Path) -> None:
        code = _run(["Product", "-p", str(laravel_root), "--timestamp", "today"])
        assert code == EXIT_INPUT_ERROR
        assert list(laravel_root.iterdir()) == []

    def test_empty_name(self, laravel_root: pathlib.Path) -> None:
        assert _run(["", "-p", str(laravel_root)]) == EXIT_INPUT_ERROR

    def test_export_error(self, laravel_root: pathlib.Path) -> None:
        (laravel_root / "app").write_text("not a directory", encoding="utf-8")
        code = _run(["Product", "--fields=title", "-p", str(laravel_root)])
        assert code == EXIT_EXPORT_ERROR

    def test_missing_name_is_usage_error(self) -> None:
        assert _run([]) == 2
