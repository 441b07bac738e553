"""Direct relationship lookups for a single task."""

from collections.abc import Sequence

from prt.models import Task


def dependencies_of(task: Task, all_tasks: Sequence[Task]) -> list[Task]:
    """Resolve the tasks that ``task`` depends on.

    IDs that do not match any task are dropped; ``check_references`` is
    where those are reported.

    Args:
        task: Task whose depends-on list is resolved
        all_tasks: Every task in the roadmap

    Returns:
        Tasks in depends-on order
    """
    by_id = {candidate.id: candidate for candidate in all_tasks}
    return [by_id[dep_id] for dep_id in task.depends_on if dep_id in by_id]


def dependents_of(task: Task, all_tasks: Sequence[Task]) -> list[Task]:
    """Find the tasks that list ``task`` in their depends-on.

    Args:
        task: Task to look up
        all_tasks: Every task in the roadmap

    Returns:
        Dependent tasks in roadmap order
    """
    return [candidate for candidate in all_tasks if task.id in candidate.depends_on]
