"""
Generation Orchestrator - Drive load → generate → write for every description
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from datetime import datetime
import time

from ..core.models.generation_result import (
    GenerationResult,
    GenerationReport,
    GenerationIssueType,
    GenerationStatus,
)
from ..errors import DescriptionError, InvalidArgumentError
from ..generator.bindings_generator import BindingsGenerator, DEFAULT_PREAMBLE
from ..generator.description_loader import DescriptionLoader


class GenerationOrchestrator:
    """
    Main orchestrator for a generation run

    Workflow:
    1. Find description files
    2. For each file (an independent pass): load → generate → write
    3. Collect a GenerationReport

    A failing pass is recorded in the report and the run moves on.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize orchestrator

        Args:
            config: Configuration overrides, merged over the defaults
        """
        self.config = self._default_config()
        if config:
            self.config.update({k: v for k, v in config.items() if v is not None})
        self.logger = logging.getLogger(__name__)

        self.loader = DescriptionLoader()
        self.generator = BindingsGenerator(preamble=self.config["preamble"])

        self.report: GenerationReport = GenerationReport()
        # Target path -> description file that produced it, for the current run
        self._targets: Dict[Path, str] = {}

    def _default_config(self) -> Dict[str, Any]:
        """Default configuration"""
        return {
            "output_dir": "output",
            "output_suffix": ".dart",
            "preamble": DEFAULT_PREAMBLE,
            "dry_run": False,
        }

    def generate_all(
        self,
        input_path: str,
        output_dir: Optional[str] = None
    ) -> GenerationReport:
        """
        Generate bindings for every description under input_path

        Args:
            input_path: Description file or directory
            output_dir: Output directory (defaults to config)

        Returns:
            GenerationReport with the results
        """
        start_time = time.time()
        self.report = GenerationReport(started_at=datetime.now())
        self._targets = {}
        output_dir = output_dir or self.config["output_dir"]

        self.logger.info("=" * 70)
        self.logger.info("Starting FFI bindings generation")
        self.logger.info("=" * 70)

        try:
            files = self.loader.find_description_files(input_path)
            self.report.total_files = len(files)
            if not files:
                self.logger.warning(f"No description files found in {input_path}")

            for idx, path in enumerate(files, 1):
                self.logger.info(f"[{idx}/{len(files)}] {path}")
                result = self.generate_file(path, output_dir)
                self.report.add_result(result)
                if result.get_error_count():
                    self.logger.error(f"✗ {path}: {result.get_summary()}")
                else:
                    self.logger.info(f"✓ {path}: {result.get_summary()}")
        finally:
            self.report.completed_at = datetime.now()
            self.report.total_duration_seconds = time.time() - start_time
            self.logger.info(self.report.get_summary())

        return self.report

    def generate_file(self, path: Path, output_dir: str) -> GenerationResult:
        """
        Run one generation pass

        Args:
            path: Description file
            output_dir: Directory for the generated file

        Returns:
            GenerationResult
        """
        result = GenerationResult(library_name=path.stem, source_file=str(path))
        result.started_at = datetime.now()
        result.status = GenerationStatus.IN_PROGRESS
        start_time = time.time()

        try:
            description = self.loader.load_file(path)
            result.library_name = description.name

            result.source_text = self.generator.generate(description, result)

            target = Path(output_dir) / f"{description.name}{self.config['output_suffix']}"
            result.target_file = str(target)
            previous = self._targets.get(target)
            if previous is not None:
                message = f"{target} was already generated from {previous}, not overwriting it with {path}"
                self.logger.error(f"  ✗ {message}")
                result.mark_failed(message, GenerationIssueType.WRITE_ERROR)
            else:
                self._targets[target] = str(path)
                if self.config["dry_run"]:
                    self.logger.info(f"  (dry run) would write {target}")
                else:
                    self._write_output(target, result.source_text)
                result.mark_success()

        except DescriptionError as e:
            self.logger.error(f"  ✗ {e}")
            result.mark_failed(str(e), GenerationIssueType.DESCRIPTION_ERROR)
        except InvalidArgumentError as e:
            self.logger.error(f"  ✗ {e}")
            result.mark_failed(str(e), GenerationIssueType.INVALID_ARGUMENT)
        except OSError as e:
            self.logger.error(f"  ✗ Cannot write output: {e}")
            result.mark_failed(str(e), GenerationIssueType.WRITE_ERROR)
        except Exception as e:
            self.logger.exception(f"  ✗ Unexpected error generating {path}: {e}")
            result.mark_failed(f"{type(e).__name__}: {e}", GenerationIssueType.INTERNAL_ERROR)

        result.metrics.duration_seconds = time.time() - start_time
        return result

    def _write_output(self, target: Path, source: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source, encoding="utf-8")
        self.logger.debug(f"  Wrote {target}")

    def get_failed_results(self) -> List[GenerationResult]:
        return [result for result in self.report.results if result.get_error_count()]
