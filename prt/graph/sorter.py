"""Topological ordering of roadmap tasks.

Every task comes after the tasks it must wait for: its depends-on entries,
and any task that lists it under blocks. Independent tasks keep their
roadmap order.
"""

import heapq
from collections.abc import Sequence

import structlog

from prt.errors import CircularDependencyError
from prt.graph.cycles import detect_circular
from prt.graph.dependency_graph import build_unified_graph
from prt.models import Task

logger = structlog.get_logger(__name__)


def topological_sort(tasks: Sequence[Task]) -> list[Task]:
    """Order tasks so that prerequisites come first.

    Kahn's algorithm with a min-heap on roadmap position: whenever several
    tasks are ready, the one earliest in the roadmap goes next. References
    to tasks that do not exist impose no ordering.

    Args:
        tasks: Tasks in roadmap order

    Returns:
        A new list with the same tasks in dependency order

    Raises:
        CircularDependencyError: If the tasks contain a cycle

    Example:
        >>> tasks = [Task(id="F-002", depends_on=["F-001"]), Task(id="F-001")]
        >>> [task.id for task in topological_sort(tasks)]
        ['F-001', 'F-002']
    """
    circular = detect_circular(tasks)
    if circular is not None:
        logger.error("topological_sort_cycle", cycle=circular.cycle)
        raise CircularDependencyError(circular.cycle, circular.message)

    positions: dict[str, list[int]] = {}
    for position, task in enumerate(tasks):
        positions.setdefault(task.id, []).append(position)

    unified = build_unified_graph(tasks)
    successors: list[list[int]] = [[] for _ in tasks]
    in_degree = [0] * len(tasks)

    for position, task in enumerate(tasks):
        for prerequisite_id in unified[task.id]:
            for prerequisite_position in positions.get(prerequisite_id, ()):
                successors[prerequisite_position].append(position)
                in_degree[position] += 1

    ready = [position for position, degree in enumerate(in_degree) if degree == 0]
    heapq.heapify(ready)
    ordered: list[Task] = []

    while ready:
        position = heapq.heappop(ready)
        ordered.append(tasks[position])
        for successor in successors[position]:
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                heapq.heappush(ready, successor)

    logger.debug("tasks_sorted", task_count=len(ordered))
    return ordered
