"""Adjacency structures built from a roadmap's task list.

Two relations are read from each task: ``depends-on`` (this task needs the
referenced task first) and ``blocks`` (this task holds the referenced task
back). ``build_graph`` keeps them apart; ``build_unified_graph`` folds both
into one ordering-constraint graph.

Graphs are rebuilt on every call and never cached.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from prt.models import Task

logger = structlog.get_logger(__name__)


@dataclass
class DependencyGraph:
    """Both task relations as adjacency lists.

    Every task in the input has an entry in both mappings, possibly empty.
    IDs referenced but not defined have no entry of their own; they are
    leaves with no outgoing edges.

    Attributes:
        depends_on: Task ID -> IDs it depends on
        blocks: Task ID -> IDs it blocks
    """

    depends_on: dict[str, list[str]] = field(default_factory=dict)
    blocks: dict[str, list[str]] = field(default_factory=dict)

    @property
    def task_ids(self) -> list[str]:
        """Task IDs in input order."""
        return list(self.depends_on)

    @property
    def edge_count(self) -> int:
        """Total number of depends-on and blocks references."""
        return sum(len(ids) for ids in self.depends_on.values()) + sum(
            len(ids) for ids in self.blocks.values()
        )

    def get_stats(self) -> dict[str, int]:
        """Get statistics about the graph.

        Returns:
            Dictionary with total_tasks, depends_on_edges and blocks_edges
        """
        return {
            "total_tasks": len(self.depends_on),
            "depends_on_edges": sum(len(ids) for ids in self.depends_on.values()),
            "blocks_edges": sum(len(ids) for ids in self.blocks.values()),
        }


def build_graph(tasks: Sequence[Task]) -> DependencyGraph:
    """Build the depends-on and blocks adjacency lists.

    Args:
        tasks: Tasks in roadmap order

    Returns:
        DependencyGraph with one entry per task

    Example:
        >>> graph = build_graph([Task(id="F-001"), Task(id="F-002", depends_on=["F-001"])])
        >>> graph.depends_on["F-002"]
        ['F-001']
    """
    graph = DependencyGraph()
    for task in tasks:
        # Copies, so later edits to the task never leak into the graph
        graph.depends_on[task.id] = list(task.depends_on)
        graph.blocks[task.id] = list(task.blocks)

    logger.debug("dependency_graph_built", **graph.get_stats())
    return graph


def build_unified_graph(tasks: Sequence[Task]) -> dict[str, list[str]]:
    """Fold both relations into a single adjacency mapping.

    ``A depends-on B`` adds the edge A -> B. ``A blocks B`` is the same
    constraint seen from the other side and adds the edge B -> A.

    Args:
        tasks: Tasks in roadmap order

    Returns:
        Mapping of task ID to the IDs that must come before it. Keys are
        exactly the input task IDs; a blocked ID missing from the input adds
        no edge, so unknown IDs stay leaves.
    """
    unified: dict[str, list[str]] = {task.id: [] for task in tasks}

    for task in tasks:
        unified[task.id].extend(task.depends_on)

    for task in tasks:
        for blocked_id in task.blocks:
            if blocked_id in unified:
                unified[blocked_id].append(task.id)

    logger.debug(
        "unified_graph_built",
        node_count=len(unified),
        edge_count=sum(len(ids) for ids in unified.values()),
    )
    return unified
