"""Unit tests for dependency validation.

Tests cover:
- Missing reference detection
- Blocks/depends-on consistency findings
- Combined validation order and idempotence
- ValidationReport error/warning split and rendering
- DependencyValidator logging
"""

import logging

from prt.graph.validator import (
    DependencyFinding,
    DependencyValidator,
    FindingType,
    ValidationReport,
    check_consistency,
    check_references,
    validate_dependencies,
)
from prt.log_config import configure_logging
from prt.models import Roadmap, Task


def make_roadmap(*tasks: Task) -> Roadmap:
    return Roadmap(tasks=list(tasks))


class TestCheckReferences:
    """Test detection of references to unknown tasks."""

    def test_no_findings_for_complete_graph(self):
        """Test that resolvable references produce nothing."""
        tasks = [Task(id="F-001", blocks=["F-002"]), Task(id="F-002", depends_on=["F-001"])]

        assert check_references(tasks) == []

    def test_missing_dependency(self):
        """Test a single dangling depends-on entry."""
        tasks = [Task(id="F-001", depends_on=["B-999"])]

        findings = check_references(tasks)

        assert findings == [
            DependencyFinding(
                task_id="F-001",
                type=FindingType.MISSING_TASK,
                message="Task F-001 depends on non-existent task B-999",
                related_task_ids=["B-999"],
            ),
        ]

    def test_missing_blocked_task(self):
        """Test a dangling blocks entry."""
        tasks = [Task(id="F-001", blocks=["R-404"])]

        findings = check_references(tasks)

        assert len(findings) == 1
        assert findings[0].message == "Task F-001 blocks non-existent task R-404"
        assert findings[0].related_task_ids == ["R-404"]

    def test_all_missing_references_collected(self):
        """Test that the scan does not stop at the first problem."""
        tasks = [
            Task(id="F-001", depends_on=["B-001", "F-002"], blocks=["B-002"]),
            Task(id="F-002", depends_on=["B-003"]),
        ]

        findings = check_references(tasks)

        assert [(f.task_id, f.related_task_ids[0]) for f in findings] == [
            ("F-001", "B-001"),
            ("F-001", "B-002"),
            ("F-002", "B-003"),
        ]
        assert all(f.type == FindingType.MISSING_TASK for f in findings)


class TestCheckConsistency:
    """Test the advisory blocks/depends-on symmetry check."""

    def test_mirrored_relation_is_consistent(self):
        """Test that A blocks B with B depends-on A is fine."""
        tasks = [Task(id="F-001", blocks=["F-002"]), Task(id="F-002", depends_on=["F-001"])]

        assert check_consistency(tasks) == []

    def test_unmirrored_block(self):
        """Test that A blocks B without B depends-on A is reported."""
        tasks = [Task(id="F-001", blocks=["F-002"]), Task(id="F-002")]

        findings = check_consistency(tasks)

        assert len(findings) == 1
        finding = findings[0]
        assert finding.type == FindingType.INVALID_REFERENCE
        assert finding.task_id == "F-001"
        assert finding.related_task_ids == ["F-002"]
        assert "F-002 does not depend on F-001" in finding.message

    def test_depends_on_without_block_is_allowed(self):
        """Test that depends-on alone never needs a blocks entry."""
        tasks = [Task(id="F-001"), Task(id="F-002", depends_on=["F-001"])]

        assert check_consistency(tasks) == []

    def test_missing_blocked_task_skipped(self):
        """Test that unknown blocked tasks are left to check_references."""
        tasks = [Task(id="F-001", blocks=["B-999"])]

        assert check_consistency(tasks) == []


class TestValidateDependencies:
    """Test the combined validation entry point."""

    def test_valid_chain(self):
        """Test that a sound roadmap has no findings."""
        roadmap = make_roadmap(Task(id="F-001"), Task(id="F-002", depends_on=["F-001"]))

        assert validate_dependencies(roadmap) == []

    def test_empty_roadmap(self):
        """Test that an empty roadmap has no findings."""
        assert validate_dependencies(Roadmap()) == []

    def test_missing_task_without_cycle(self):
        """Test a dangling reference yields one missing-task finding only."""
        roadmap = make_roadmap(Task(id="F-001", depends_on=["B-999"]))

        findings = validate_dependencies(roadmap)

        assert len(findings) == 1
        assert findings[0].type == FindingType.MISSING_TASK
        assert findings[0].task_id == "F-001"
        assert findings[0].related_task_ids == ["B-999"]
        assert not any(f.type == FindingType.CIRCULAR for f in findings)

    def test_circular_finding(self):
        """Test that a cycle becomes a circular finding carrying the path."""
        roadmap = make_roadmap(
            Task(id="F-001", depends_on=["F-002"]),
            Task(id="F-002", depends_on=["F-001"]),
        )

        findings = validate_dependencies(roadmap)

        assert len(findings) == 1
        assert findings[0].type == FindingType.CIRCULAR
        assert findings[0].task_id == "F-001"
        assert findings[0].related_task_ids == ["F-001", "F-002", "F-001"]
        assert findings[0].message == "Circular dependency detected: F-001 -> F-002 -> F-001"

    def test_advisory_asymmetry(self):
        """Test that an unmirrored block is one invalid-reference finding."""
        roadmap = make_roadmap(Task(id="F-001", blocks=["F-002"]), Task(id="F-002"))

        findings = validate_dependencies(roadmap)

        assert [f.type for f in findings] == [FindingType.INVALID_REFERENCE]

    def test_finding_order(self):
        """Test circular, then missing-task, then invalid-reference."""
        roadmap = make_roadmap(
            Task(id="F-001", blocks=["F-003"], depends_on=["B-999"]),
            Task(id="F-002", depends_on=["F-002"]),
            Task(id="F-003"),
        )

        findings = validate_dependencies(roadmap)

        assert [f.type for f in findings] == [
            FindingType.CIRCULAR,
            FindingType.MISSING_TASK,
            FindingType.INVALID_REFERENCE,
        ]
        assert findings[0].related_task_ids == ["F-002"]

    def test_idempotent(self):
        """Test that repeated validation gives identical lists."""
        roadmap = make_roadmap(
            Task(id="F-001", depends_on=["F-002", "B-001"], blocks=["F-003"]),
            Task(id="F-002", depends_on=["F-001"]),
            Task(id="F-003", blocks=["I-404"]),
        )

        first = validate_dependencies(roadmap)
        second = validate_dependencies(roadmap)

        assert first == second
        assert len(first) == 4

    def test_roadmap_is_not_modified(self):
        """Test that validation leaves the tasks untouched."""
        roadmap = make_roadmap(Task(id="F-001", blocks=["F-002"]), Task(id="F-002"))
        before = roadmap.model_dump()

        validate_dependencies(roadmap)

        assert roadmap.model_dump() == before

    def test_finding_to_dict(self):
        """Test serialization uses the roadmap key names."""
        finding = DependencyFinding(
            task_id="F-001",
            type=FindingType.MISSING_TASK,
            message="Task F-001 depends on non-existent task B-999",
            related_task_ids=["B-999"],
        )

        assert finding.to_dict() == {
            "taskId": "F-001",
            "type": "missing-task",
            "message": "Task F-001 depends on non-existent task B-999",
            "relatedTaskIds": ["B-999"],
        }


class TestValidationReport:
    """Test ValidationReport functionality."""

    def test_empty_report_is_valid(self):
        """Test that a report without findings passes."""
        report = ValidationReport()

        assert report.is_valid
        assert report.errors == []
        assert report.warnings == []
        assert report.cycle is None
        assert "Validation Status: PASS" in report.summary()

    def test_advisory_only_is_valid(self):
        """Test that invalid-reference findings alone do not fail validation."""
        finding = DependencyFinding("F-001", FindingType.INVALID_REFERENCE, "asymmetric", ["F-002"])
        report = ValidationReport(findings=[finding])

        assert report.is_valid
        assert report.warnings == [finding]
        assert report.errors == []

    def test_strict_consistency_fails(self):
        """Test that strict mode promotes invalid-reference to an error."""
        finding = DependencyFinding("F-001", FindingType.INVALID_REFERENCE, "asymmetric", ["F-002"])
        report = ValidationReport(findings=[finding], strict_consistency=True)

        assert not report.is_valid
        assert report.errors == [finding]
        assert report.format_lines()[-1] == "ERROR: asymmetric"

    def test_missing_task_fails(self):
        """Test that missing-task findings fail validation."""
        finding = DependencyFinding("F-001", FindingType.MISSING_TASK, "missing", ["B-999"])
        report = ValidationReport(findings=[finding])

        assert not report.is_valid
        assert report.has_missing
        assert not report.has_circular

    def test_circular_details(self):
        """Test cycle accessors and rendering."""
        finding = DependencyFinding(
            "F-001",
            FindingType.CIRCULAR,
            "Circular dependency detected: F-001 -> F-002 -> F-001",
            ["F-001", "F-002", "F-001"],
        )
        report = ValidationReport(findings=[finding])

        assert report.has_circular
        assert report.cycle == ["F-001", "F-002", "F-001"]

        lines = report.format_lines()
        assert lines[0] == "Found 1 dependency issue:"
        assert "CIRCULAR DEPENDENCY DETECTED" in lines
        assert "   Cycle path: F-001 -> F-002 -> F-001" in lines

        summary = report.summary()
        assert "Validation Status: FAIL" in summary
        assert "Errors: 1" in summary

    def test_warning_rendering(self):
        """Test advisory findings render as warnings."""
        finding = DependencyFinding("F-001", FindingType.INVALID_REFERENCE, "asymmetric", ["F-002"])
        lines = ValidationReport(findings=[finding]).format_lines()

        assert "WARNING: asymmetric" in lines


class TestDependencyValidator:
    """Test the validator facade."""

    def test_validate_builds_report(self):
        """Test that the validator wraps validate_dependencies."""
        roadmap = make_roadmap(Task(id="F-001", blocks=["F-002"]), Task(id="F-002"))

        report = DependencyValidator().validate(roadmap)

        assert report.is_valid
        assert len(report.warnings) == 1

    def test_strict_validator(self):
        """Test strict_consistency flows into the report."""
        roadmap = make_roadmap(Task(id="F-001", blocks=["F-002"]), Task(id="F-002"))

        report = DependencyValidator(strict_consistency=True).validate(roadmap)

        assert not report.is_valid

    def test_findings_are_logged(self, caplog):
        """Test that errors are logged at error level."""
        configure_logging(level="DEBUG", json_logs=True)
        caplog.set_level(logging.DEBUG)
        roadmap = make_roadmap(Task(id="F-001", depends_on=["B-999"]))

        DependencyValidator().validate(roadmap)

        assert any(
            record.levelno == logging.ERROR and "validation_error" in record.getMessage()
            for record in caplog.records
        )
