from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from ffigen.core.models.description import FunctionDescription, LibraryDescription, StructDescription
from ffigen.core.models.generation_result import GenerationIssueType, GenerationResult, GenerationStatus
from ffigen.orchestrator.generation_orchestrator import GenerationOrchestrator


def test_generates_file(
    tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    path = write_description("geometry.yaml", geometry_yaml)
    output_dir = tmp_path / "out"

    orchestrator = GenerationOrchestrator()
    report = orchestrator.generate_all(str(path), str(output_dir))

    target = output_dir / "geometry.dart"
    assert target.read_text(encoding="utf-8").startswith("// generated\n\nimport 'dart:ffi' as ffi;\n")
    assert report.total_files == 1
    assert report.generated_files == 1
    assert report.failed_files == 0
    assert report.results[0].target_file == str(target)
    assert report.results[0].status == GenerationStatus.SUCCESS
    assert report.total_declarations == 2


def test_failed_pass_does_not_stop_run(
    tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    broken = write_description("a_broken.yaml", "structs: {}\n")
    write_description("geometry.yaml", geometry_yaml)
    output_dir = tmp_path / "out"

    orchestrator = GenerationOrchestrator({"output_dir": str(output_dir)})
    report = orchestrator.generate_all(str(broken.parent))

    assert report.total_files == 2
    assert report.generated_files == 1
    assert report.failed_files == 1
    assert (output_dir / "geometry.dart").exists()

    failed = orchestrator.get_failed_results()
    assert [result.source_file for result in failed] == [str(broken)]
    assert failed[0].issues[0].type == GenerationIssueType.DESCRIPTION_ERROR


def test_dry_run_writes_nothing(
    tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    path = write_description("geometry.yaml", geometry_yaml)
    output_dir = tmp_path / "out"

    orchestrator = GenerationOrchestrator({"dry_run": True, "output_dir": str(output_dir)})
    report = orchestrator.generate_all(str(path))

    assert report.generated_files == 1
    assert "class Point extends ffi.Struct" in report.results[0].source_text
    assert not output_dir.exists()


def test_output_suffix_and_preamble_config(
    tmp_path: Path, write_description: Callable[[str, str], Path]
) -> None:
    path = write_description("plain.yaml", "name: plain\nopaque: [Handle]\n")
    output_dir = tmp_path / "out"

    orchestrator = GenerationOrchestrator({"output_suffix": ".g.dart", "preamble": "// custom"})
    orchestrator.generate_all(str(path), str(output_dir))

    assert (output_dir / "plain.g.dart").read_text(encoding="utf-8").startswith("// custom\n")


def test_empty_directory(tmp_path: Path) -> None:
    report = GenerationOrchestrator().generate_all(str(tmp_path), str(tmp_path / "out"))

    assert report.total_files == 0
    assert report.calculate_success_rate() == 0.0
    assert "Files: 0/0 generated" in report.get_summary()


def test_report_to_dict(
    tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    path = write_description("geometry.yaml", geometry_yaml)
    report = GenerationOrchestrator({"dry_run": True}).generate_all(str(path))
    data = report.to_dict()

    assert data["summary"]["generated"] == 1
    assert data["summary"]["success_rate"] == 100.0
    assert data["results"][0]["library"] == "geometry"
    assert data["results"][0]["metrics"]["structs"] == 1


def test_malformed_docs_fail_only_their_pass(
    tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    bad = write_description("a_bad.yaml", "name: bad\nstructs: {P: {docs: 5, fields: {x: int32}}}\n")
    write_description("b_good.yaml", geometry_yaml)
    output_dir = tmp_path / "out"

    orchestrator = GenerationOrchestrator({"output_dir": str(output_dir)})
    report = orchestrator.generate_all(str(bad.parent))

    assert report.generated_files == 1
    assert report.failed_files == 1
    assert (output_dir / "geometry.dart").exists()
    assert not (output_dir / "bad.dart").exists()
    assert orchestrator.get_failed_results()[0].issues[0].type == GenerationIssueType.DESCRIPTION_ERROR


def test_unexpected_error_fails_only_its_pass(
    tmp_path: Path,
    write_description: Callable[[str, str], Path],
    geometry_yaml: str,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    first = write_description("a_first.yaml", "name: first\nopaque: [Handle]\n")
    write_description("b_good.yaml", geometry_yaml)
    output_dir = tmp_path / "out"

    orchestrator = GenerationOrchestrator({"output_dir": str(output_dir)})
    generate = orchestrator.generator.generate

    def failing_generate(description: LibraryDescription, result: GenerationResult | None = None) -> str:
        if description.name == "first":
            raise AttributeError("'int' object has no attribute 'strip'")
        return generate(description, result)

    monkeypatch.setattr(orchestrator.generator, "generate", failing_generate)
    report = orchestrator.generate_all(str(first.parent))

    assert report.generated_files == 1
    assert report.failed_files == 1
    assert (output_dir / "geometry.dart").exists()

    failed = orchestrator.get_failed_results()[0]
    assert failed.status == GenerationStatus.FAILED
    assert failed.issues[0].type == GenerationIssueType.INTERNAL_ERROR
    assert "AttributeError" in failed.issues[0].message


def test_same_library_name_is_not_overwritten(
    tmp_path: Path, write_description: Callable[[str, str], Path]
) -> None:
    first = write_description("a.yaml", "name: lib\nopaque: [First]\n")
    second = write_description("b.yaml", "name: lib\nopaque: [Second]\n")
    output_dir = tmp_path / "out"

    orchestrator = GenerationOrchestrator({"output_dir": str(output_dir)})
    report = orchestrator.generate_all(str(first.parent))

    assert report.generated_files == 1
    assert report.failed_files == 1
    assert "class First" in (output_dir / "lib.dart").read_text(encoding="utf-8")

    failed = orchestrator.get_failed_results()
    assert [result.source_file for result in failed] == [str(second)]
    issue = failed[0].issues[0]
    assert issue.type == GenerationIssueType.WRITE_ERROR
    assert str(first) in issue.message
    assert str(second) in issue.message


def test_collision_tracking_resets_between_runs(
    tmp_path: Path, write_description: Callable[[str, str], Path], geometry_yaml: str
) -> None:
    path = write_description("geometry.yaml", geometry_yaml)
    orchestrator = GenerationOrchestrator({"dry_run": True})

    assert orchestrator.generate_all(str(path)).generated_files == 1
    assert orchestrator.generate_all(str(path)).generated_files == 1


def test_failed_pass_adds_no_declarations(
    tmp_path: Path,
    write_description: Callable[[str, str], Path],
    geometry_yaml: str,
    make_library: Callable[..., LibraryDescription],
    make_struct: Callable[..., StructDescription],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    broken = write_description("a_broken.yaml", "name: broken\n")
    write_description("b_good.yaml", geometry_yaml)

    orchestrator = GenerationOrchestrator({"dry_run": True})
    load_file = orchestrator.loader.load_file
    partial = make_library(
        "broken",
        structs=[make_struct("Point", x="int32"), make_struct("Size", w="int32")],
        functions=[FunctionDescription("broken", return_type=None)],
    )

    def load(path: Path) -> LibraryDescription:
        return partial if path == broken else load_file(path)

    monkeypatch.setattr(orchestrator.loader, "load_file", load)
    report = orchestrator.generate_all(str(broken.parent))

    failed = orchestrator.get_failed_results()[0]
    assert failed.issues[0].type == GenerationIssueType.INVALID_ARGUMENT
    assert failed.metrics.declarations == 0
    assert failed.metrics.lines_generated == 0
    assert report.total_declarations == 2
    assert report.to_dict()["metrics"]["total_declarations"] == 2


def test_pass_status_moves_from_in_progress(
    tmp_path: Path,
    write_description: Callable[[str, str], Path],
    geometry_yaml: str,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = write_description("geometry.yaml", geometry_yaml)
    orchestrator = GenerationOrchestrator({"dry_run": True})
    generate = orchestrator.generator.generate
    seen: list[GenerationStatus] = []

    def recording_generate(description: LibraryDescription, result: GenerationResult | None = None) -> str:
        seen.append(result.status)
        return generate(description, result)

    monkeypatch.setattr(orchestrator.generator, "generate", recording_generate)
    result = orchestrator.generate_file(path, str(tmp_path / "out"))

    assert seen == [GenerationStatus.IN_PROGRESS]
    assert result.status == GenerationStatus.SUCCESS
