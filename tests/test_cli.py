from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from ffigen import __version__
from ffigen.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_types_lists_table(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["types"])

    assert result.exit_code == 0
    assert "int32" in result.output
    assert "ffi.Int32" in result.output


def test_resolve_pointer(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["resolve", "*int32"])

    assert result.exit_code == 0
    assert "ffi.Pointer<ffi.Int32>" in result.output
    assert "import 'dart:ffi' as ffi;" in result.output


def test_resolve_unknown(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["resolve", "MyStruct"])

    assert result.exit_code == 0
    assert "MyStruct" in result.output
    assert "(none)" in result.output


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])
    assert __version__ in result.output


def test_generate(
    runner: CliRunner, tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    path = write_description("geometry.yaml", geometry_yaml)
    output_dir = tmp_path / "out"

    result = runner.invoke(cli, ["generate", "-i", str(path), "-o", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert (output_dir / "geometry.dart").exists()


def test_generate_with_config(
    runner: CliRunner, tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    path = write_description("geometry.yaml", geometry_yaml)
    config = tmp_path / "config.yaml"
    config.write_text(
        f"generator:\n  output_dir: {tmp_path / 'configured'}\n  output_suffix: .g.dart\n",
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["generate", "-i", str(path), "-c", str(config)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "configured" / "geometry.g.dart").exists()


def test_generate_failure_exit_code(
    runner: CliRunner, tmp_path: Path, write_description: Callable[[str, str], Path]
) -> None:
    path = write_description("broken.yaml", "structs: {}\n")

    result = runner.invoke(cli, ["generate", "-i", str(path), "-o", str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "missing library name" in " ".join(result.output.split())


def test_generate_dry_run(
    runner: CliRunner, tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    path = write_description("geometry.yaml", geometry_yaml)
    output_dir = tmp_path / "out"

    result = runner.invoke(cli, ["generate", "-i", str(path), "-o", str(output_dir), "--dry-run"])

    assert result.exit_code == 0
    assert not output_dir.exists()


def test_generate_reads_default_config_from_working_directory(
    runner: CliRunner, tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    path = write_description("geometry.yaml", geometry_yaml)
    configured = tmp_path / "configured"

    with runner.isolated_filesystem(temp_dir=tmp_path):
        Path("config").mkdir()
        Path("config", "config.yaml").write_text(
            f"generator:\n  output_dir: {configured}\n  output_suffix: .cfg.dart\n",
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["generate", "-i", str(path)])

    assert result.exit_code == 0, result.output
    assert (configured / "geometry.cfg.dart").exists()
