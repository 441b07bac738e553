"""Dependency validation with detailed findings.

This module checks a roadmap's task relations and reports problems as data:
a dependency cycle, references to tasks that do not exist, and ``blocks``
entries that are not mirrored by a ``depends-on`` entry. Nothing here
raises; the command layer decides what a finding means for the exit status.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

import structlog

from prt.graph.cycles import detect_circular, format_cycle
from prt.models import Roadmap, Task

logger = structlog.get_logger(__name__)


class FindingType(str, Enum):
    """Category of a dependency finding."""

    CIRCULAR = "circular"
    INVALID_REFERENCE = "invalid-reference"
    MISSING_TASK = "missing-task"


@dataclass(frozen=True)
class DependencyFinding:
    """A single dependency problem.

    Attributes:
        task_id: Task where the problem was found
        type: Finding category
        message: Human-readable description
        related_task_ids: Other IDs involved (the cycle, or the referenced ID)
    """

    task_id: str
    type: FindingType
    message: str
    related_task_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Serialize with the roadmap file's key names."""
        return {
            "taskId": self.task_id,
            "type": self.type.value,
            "message": self.message,
            "relatedTaskIds": list(self.related_task_ids),
        }


def check_references(tasks: Sequence[Task]) -> list[DependencyFinding]:
    """Report every depends-on or blocks entry that names an unknown task.

    All tasks are checked; the scan does not stop at the first problem.

    Args:
        tasks: Tasks in roadmap order

    Returns:
        One missing-task finding per dangling reference, in task order
    """
    known_ids = {task.id for task in tasks}
    findings: list[DependencyFinding] = []

    for task in tasks:
        for dep_id in task.depends_on:
            if dep_id not in known_ids:
                findings.append(
                    DependencyFinding(
                        task_id=task.id,
                        type=FindingType.MISSING_TASK,
                        message=f"Task {task.id} depends on non-existent task {dep_id}",
                        related_task_ids=[dep_id],
                    ),
                )

        for blocked_id in task.blocks:
            if blocked_id not in known_ids:
                findings.append(
                    DependencyFinding(
                        task_id=task.id,
                        type=FindingType.MISSING_TASK,
                        message=f"Task {task.id} blocks non-existent task {blocked_id}",
                        related_task_ids=[blocked_id],
                    ),
                )

    if findings:
        logger.debug("missing_references_found", count=len(findings))

    return findings


def check_consistency(tasks: Sequence[Task]) -> list[DependencyFinding]:
    """Report blocks entries that the blocked task does not mirror.

    If A blocks B, B is expected to list A in depends-on. The two relations
    may legitimately be used on their own, so these findings are advisory.
    References to unknown tasks are left to ``check_references``.

    Args:
        tasks: Tasks in roadmap order

    Returns:
        One invalid-reference finding per asymmetric blocks entry
    """
    by_id = {task.id: task for task in tasks}
    findings: list[DependencyFinding] = []

    for task in tasks:
        for blocked_id in task.blocks:
            blocked = by_id.get(blocked_id)
            if blocked is None or task.id in blocked.depends_on:
                continue
            findings.append(
                DependencyFinding(
                    task_id=task.id,
                    type=FindingType.INVALID_REFERENCE,
                    message=(
                        f"Task {task.id} blocks {blocked_id}, "
                        f"but {blocked_id} does not depend on {task.id}"
                    ),
                    related_task_ids=[blocked_id],
                ),
            )

    return findings


def validate_dependencies(roadmap: Roadmap) -> list[DependencyFinding]:
    """Run every dependency check on a roadmap.

    Findings come back in a fixed order: the cycle (at most one), then
    missing tasks, then advisory asymmetries. Repeated calls on an unchanged
    roadmap return equal lists.

    Args:
        roadmap: Roadmap to validate

    Returns:
        All findings; empty when the dependencies are sound
    """
    tasks = roadmap.tasks
    findings: list[DependencyFinding] = []

    circular = detect_circular(tasks)
    if circular is not None:
        findings.append(
            DependencyFinding(
                task_id=circular.cycle[0],
                type=FindingType.CIRCULAR,
                message=circular.message,
                related_task_ids=list(circular.cycle),
            ),
        )

    findings.extend(check_references(tasks))
    findings.extend(check_consistency(tasks))

    logger.info(
        "dependency_validation_complete",
        task_count=len(tasks),
        finding_count=len(findings),
    )
    return findings


@dataclass
class ValidationReport:
    """Validation findings split into failures and advisories.

    Attributes:
        findings: Every finding in validation order
        strict_consistency: Treat invalid-reference findings as failures
    """

    findings: list[DependencyFinding] = field(default_factory=list)
    strict_consistency: bool = False

    def _is_error(self, finding: DependencyFinding) -> bool:
        if finding.type == FindingType.INVALID_REFERENCE:
            return self.strict_consistency
        return True

    @property
    def errors(self) -> list[DependencyFinding]:
        """Findings that fail validation."""
        return [finding for finding in self.findings if self._is_error(finding)]

    @property
    def warnings(self) -> list[DependencyFinding]:
        """Advisory findings that do not fail validation."""
        return [finding for finding in self.findings if not self._is_error(finding)]

    @property
    def is_valid(self) -> bool:
        """Whether the roadmap passed validation."""
        return not self.errors

    @property
    def cycle(self) -> list[str] | None:
        """The reported cycle, if any."""
        for finding in self.findings:
            if finding.type == FindingType.CIRCULAR:
                return list(finding.related_task_ids)
        return None

    @property
    def has_circular(self) -> bool:
        return self.cycle is not None

    @property
    def has_missing(self) -> bool:
        return any(finding.type == FindingType.MISSING_TASK for finding in self.findings)

    def format_lines(self) -> list[str]:
        """Render the findings for terminal output."""
        count = len(self.findings)
        lines = [f"Found {count} dependency {'issue' if count == 1 else 'issues'}:", ""]

        for finding in self.findings:
            if finding.type == FindingType.CIRCULAR:
                lines.append("CIRCULAR DEPENDENCY DETECTED")
                lines.append(f"   {finding.message}")
                lines.append(f"   Cycle path: {format_cycle(finding.related_task_ids)}")
                lines.append("")
            elif self._is_error(finding):
                lines.append(f"ERROR: {finding.message}")
            else:
                lines.append(f"WARNING: {finding.message}")

        return lines

    def summary(self) -> str:
        """Generate a human-readable summary of the validation report."""
        lines = [
            f"Validation Status: {'PASS' if self.is_valid else 'FAIL'}",
            f"Errors: {len(self.errors)}",
            f"Warnings: {len(self.warnings)}",
        ]
        if self.findings:
            lines.append("")
            lines.extend(self.format_lines())
        return "\n".join(lines)


class DependencyValidator:
    """Runs dependency validation and logs the outcome.

    Holds only its configuration; construct one per use.
    """

    def __init__(self, strict_consistency: bool = False):
        """Initialize the validator.

        Args:
            strict_consistency: Fail validation on blocks/depends-on asymmetry
        """
        self.strict_consistency = strict_consistency

    def validate(self, roadmap: Roadmap) -> ValidationReport:
        """Validate a roadmap and build a report.

        Args:
            roadmap: Roadmap to validate

        Returns:
            ValidationReport with every finding
        """
        logger.info("starting_dependency_validation", task_count=len(roadmap.tasks))

        report = ValidationReport(
            findings=validate_dependencies(roadmap),
            strict_consistency=self.strict_consistency,
        )

        for finding in report.errors:
            logger.error(
                "validation_error",
                task_id=finding.task_id,
                finding_type=finding.type.value,
                message=finding.message,
            )
        for finding in report.warnings:
            logger.warning(
                "validation_warning",
                task_id=finding.task_id,
                finding_type=finding.type.value,
                message=finding.message,
            )

        logger.info(
            "dependency_validation_report",
            is_valid=report.is_valid,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
        )
        return report
