"""Graph module for roadmap dependency integrity.

This module builds dependency graphs from roadmap tasks, detects cycles,
validates references and answers relationship queries.
"""

from prt.graph.cycles import CircularDependency, detect_circular
from prt.graph.dependency_graph import DependencyGraph, build_graph, build_unified_graph
from prt.graph.query import dependencies_of, dependents_of
from prt.graph.sorter import topological_sort
from prt.graph.validator import (
    DependencyFinding,
    DependencyValidator,
    FindingType,
    ValidationReport,
    check_consistency,
    check_references,
    validate_dependencies,
)

__all__ = [
    "CircularDependency",
    "DependencyFinding",
    "DependencyGraph",
    "DependencyValidator",
    "FindingType",
    "ValidationReport",
    "build_graph",
    "build_unified_graph",
    "check_consistency",
    "check_references",
    "dependencies_of",
    "dependents_of",
    "detect_circular",
    "topological_sort",
    "validate_dependencies",
]
