"""
Generation result models
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime
from enum import Enum


class GenerationStatus(Enum):
    """Status of a single generation pass"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"


class GenerationIssueType(Enum):
    """Kind of issue found during a pass"""
    DESCRIPTION_ERROR = "description_error"
    DUPLICATE_DECLARATION = "duplicate_declaration"
    INVALID_ARGUMENT = "invalid_argument"
    WRITE_ERROR = "write_error"
    INTERNAL_ERROR = "internal_error"


@dataclass
class GenerationIssue:
    """An issue raised while generating one file"""
    type: GenerationIssueType
    severity: str  # "error", "warning"
    message: str
    source_location: Optional[str] = None

    def __str__(self) -> str:
        loc = f" at {self.source_location}" if self.source_location else ""
        return f"[{self.severity.upper()}] {self.type.value}{loc}: {self.message}"


@dataclass
class GenerationMetrics:
    """Counters for one generation pass"""
    constants: int = 0
    opaques: int = 0
    structs: int = 0
    functions: int = 0
    imports: int = 0
    lines_generated: int = 0
    duration_seconds: float = 0.0

    @property
    def declarations(self) -> int:
        return self.constants + self.opaques + self.structs + self.functions

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "constants": self.constants,
            "opaques": self.opaques,
            "structs": self.structs,
            "functions": self.functions,
            "imports": self.imports,
            "lines": self.lines_generated,
            "duration": round(self.duration_seconds, 3),
        }


@dataclass
class GenerationResult:
    """Result of generating one bindings file"""
    library_name: str
    status: GenerationStatus = GenerationStatus.PENDING

    source_file: str = ""
    target_file: str = ""
    source_text: str = ""

    issues: List[GenerationIssue] = field(default_factory=list)
    metrics: GenerationMetrics = field(default_factory=GenerationMetrics)

    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def add_issue(
        self,
        issue_type: GenerationIssueType,
        severity: str,
        message: str,
        location: Optional[str] = None
    ) -> None:
        self.issues.append(GenerationIssue(
            type=issue_type,
            severity=severity,
            message=message,
            source_location=location
        ))

    def get_error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    def get_warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "warning")

    def mark_success(self) -> None:
        self.status = GenerationStatus.SUCCESS
        self.completed_at = datetime.now()

    def mark_failed(
        self,
        error_message: str,
        issue_type: GenerationIssueType = GenerationIssueType.INTERNAL_ERROR
    ) -> None:
        self.status = GenerationStatus.FAILED
        # A failed pass contributes no counts
        self.metrics = GenerationMetrics()
        self.add_issue(issue_type, "error", error_message, self.source_file or None)
        self.completed_at = datetime.now()

    def get_summary(self) -> str:
        """One-line summary"""
        warnings = self.get_warning_count()
        if self.status == GenerationStatus.SUCCESS:
            summary = f"✓ Generated {self.metrics.declarations} declarations"
            if warnings > 0:
                summary += f" ({warnings} warnings)"
        else:
            summary = f"✗ Generation failed: {self.get_error_count()} errors"
            if warnings > 0:
                summary += f", {warnings} warnings"
        return summary

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "library": self.library_name,
            "status": self.status.value,
            "source_file": self.source_file,
            "target_file": self.target_file,
            "issues": {
                "errors": self.get_error_count(),
                "warnings": self.get_warning_count(),
                "details": [str(issue) for issue in self.issues]
            },
            "metrics": self.metrics.to_dict(),
            "summary": self.get_summary()
        }


@dataclass
class GenerationReport:
    """Aggregated report over every description processed in a run"""
    total_files: int = 0
    generated_files: int = 0
    failed_files: int = 0

    results: List[GenerationResult] = field(default_factory=list)

    total_declarations: int = 0
    total_lines: int = 0

    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    total_duration_seconds: float = 0.0

    def add_result(self, result: GenerationResult) -> None:
        """Record the result of one pass"""
        self.results.append(result)
        self.total_declarations += result.metrics.declarations
        self.total_lines += result.metrics.lines_generated

        if result.status == GenerationStatus.SUCCESS:
            self.generated_files += 1
        elif result.status == GenerationStatus.FAILED:
            self.failed_files += 1

    def calculate_success_rate(self) -> float:
        if self.total_files == 0:
            return 0.0
        return (self.generated_files / self.total_files) * 100

    def get_summary(self) -> str:
        """Multi-line summary text"""
        return f"""
Generation Summary
==================
Files: {self.generated_files}/{self.total_files} generated ({self.calculate_success_rate():.1f}%)
Failed: {self.failed_files}
Declarations: {self.total_declarations}
Lines Generated: {self.total_lines}
Duration: {self.total_duration_seconds:.2f} seconds
        """.strip()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "summary": {
                "total_files": self.total_files,
                "generated": self.generated_files,
                "failed": self.failed_files,
                "success_rate": round(self.calculate_success_rate(), 2),
            },
            "metrics": {
                "total_declarations": self.total_declarations,
                "total_lines": self.total_lines,
            },
            "duration_seconds": round(self.total_duration_seconds, 2),
            "results": [result.to_dict() for result in self.results]
        }
