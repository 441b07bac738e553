"""Cycle detection over the unified task graph.

Three-color depth-first search: a node is unvisited, in progress (on the
current path) or fully explored. Reaching an in-progress node again is a
back edge, which closes a cycle.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import structlog

from prt.graph.dependency_graph import build_unified_graph
from prt.models import Task

logger = structlog.get_logger(__name__)


def format_cycle(cycle: Sequence[str]) -> str:
    """Render a cycle path as ``A -> B -> A``.

    A one-element cycle (a task that depends on itself) is shown closed as
    ``A -> A``.
    """
    path = list(cycle) if len(cycle) > 1 else [*cycle, *cycle]
    return " -> ".join(path)


@dataclass(frozen=True)
class CircularDependency:
    """The first cycle found in a task graph.

    Attributes:
        cycle: Task IDs along the cycle, closed with the repeated ID; a
            self-dependency is the single ID
        message: Human-readable description
    """

    cycle: list[str]
    message: str

    @classmethod
    def from_cycle(cls, cycle: list[str]) -> "CircularDependency":
        """Build the result with the standard message for ``cycle``."""
        return cls(cycle=cycle, message=f"Circular dependency detected: {format_cycle(cycle)}")


def detect_circular(tasks: Sequence[Task]) -> CircularDependency | None:
    """Find the first dependency cycle among ``tasks``.

    Roots are tried in input order. The explored set is shared by every
    root, so a node finished from one root is never searched again and the
    whole scan stays O(V + E).

    Args:
        tasks: Tasks in roadmap order

    Returns:
        The first cycle found, or None when the graph is acyclic

    Example:
        >>> tasks = [Task(id="F-001", depends_on=["F-002"]), Task(id="F-002", depends_on=["F-001"])]
        >>> detect_circular(tasks).cycle
        ['F-001', 'F-002', 'F-001']
    """
    graph = build_unified_graph(tasks)
    explored: set[str] = set()

    for task in tasks:
        if task.id in explored:
            continue

        cycle = _search_from(task.id, graph, explored)
        if cycle is not None:
            result = CircularDependency.from_cycle(cycle)
            logger.info("cycle_detected", root=task.id, cycle=cycle)
            return result

    logger.debug("no_cycle_found", task_count=len(tasks), explored_count=len(explored))
    return None


def _search_from(
    root: str,
    graph: dict[str, list[str]],
    explored: set[str],
) -> list[str] | None:
    """Iterative DFS from ``root``.

    Args:
        root: Node to start from
        graph: Unified adjacency mapping
        explored: Fully explored nodes; updated in place and kept by the caller

    Returns:
        The cycle path if a back edge is found, None otherwise
    """
    path: list[str] = [root]
    in_progress: set[str] = {root}
    neighbors: list[Iterator[str]] = [iter(graph.get(root, ()))]

    while neighbors:
        neighbor = next(neighbors[-1], None)

        if neighbor is None:
            # All edges out of the top node are done
            finished = path.pop()
            in_progress.discard(finished)
            explored.add(finished)
            neighbors.pop()
            continue

        if neighbor in in_progress:
            if neighbor == path[-1]:
                return [neighbor]
            start = path.index(neighbor)
            return [*path[start:], neighbor]

        if neighbor in explored:
            continue

        path.append(neighbor)
        in_progress.add(neighbor)
        neighbors.append(iter(graph.get(neighbor, ())))

    return None
