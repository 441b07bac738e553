"""Roadmap file loading and task-level structure checks."""

from pathlib import Path
from typing import Any

import pydantic
import structlog

from prt.errors import InvalidTaskError, RoadmapNotFoundError, TaskNotFoundError, ValidationError
from prt.models import Roadmap, Task

logger = structlog.get_logger(__name__)


def load_roadmap(path: str | Path) -> Roadmap:
    """Read and parse a roadmap JSON file.

    Args:
        path: Path to the roadmap file

    Returns:
        The parsed Roadmap

    Raises:
        RoadmapNotFoundError: If the file does not exist
        ValidationError: If the file is not valid JSON or not a roadmap
    """
    roadmap_path = Path(path)
    if not roadmap_path.is_file():
        raise RoadmapNotFoundError(str(roadmap_path))

    try:
        roadmap = Roadmap.model_validate_json(roadmap_path.read_text(encoding="utf-8"))
    except pydantic.ValidationError as e:
        logger.exception("roadmap_parse_error", path=str(roadmap_path), error_count=e.error_count())
        details = [
            {
                "type": "structure",
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in e.errors()
        ]
        raise ValidationError(details) from e

    logger.info("roadmap_loaded", path=str(roadmap_path), task_count=len(roadmap.tasks))
    return roadmap


def find_task(roadmap: Roadmap, task_id: str) -> Task:
    """Look up a task by ID.

    Raises:
        TaskNotFoundError: If no task has that ID
    """
    for task in roadmap.tasks:
        if task.id == task_id:
            return task
    raise TaskNotFoundError(task_id)


def check_task(task: Task) -> None:
    """Validate a single task's non-graph fields.

    Raises:
        InvalidTaskError: If the ID is malformed or details are empty
    """
    if not task.has_valid_id:
        msg = f"task ID {task.id} is not valid. Must match format: [B|F|I|P|R]-[000-999]"
        raise InvalidTaskError(msg, task.id, "id")

    if not task.details.strip():
        raise InvalidTaskError(f"task ID {task.id} must have details", task.id, "details")


def check_tasks(roadmap: Roadmap) -> list[dict[str, Any]]:
    """Collect task-level problems across the whole roadmap.

    Reports malformed tasks and duplicate IDs. Dependency problems are the
    graph validator's concern.

    Args:
        roadmap: Roadmap to check

    Returns:
        Problem details as ``{"type", "message", "task_id"}`` dictionaries
    """
    problems: list[dict[str, Any]] = []
    seen: set[str] = set()

    for task in roadmap.tasks:
        try:
            check_task(task)
        except InvalidTaskError as e:
            problems.append({"type": "task", "message": e.message, "task_id": task.id})

        if task.id in seen:
            problems.append(
                {"type": "duplicate-id", "message": f"Duplicate task ID: {task.id}", "task_id": task.id},
            )
        seen.add(task.id)

    return problems


def ensure_valid_tasks(roadmap: Roadmap) -> None:
    """Raise if ``check_tasks`` finds anything.

    Raises:
        ValidationError: Carrying every problem found
    """
    problems = check_tasks(roadmap)
    if problems:
        logger.error("task_validation_failed", problem_count=len(problems))
        raise ValidationError(problems)
