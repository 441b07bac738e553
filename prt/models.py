"""Roadmap and task models.

The models mirror the on-disk roadmap JSON (``prt.json``). Field aliases keep
the file's spelling (``depends-on``, ``passes-tests``, ``createdAt``) while
Python code uses snake_case names.
"""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

TASK_ID_PATTERN = r"^(B|F|I|P|R)-\d{3}$"
TASK_ID_REGEX = re.compile(TASK_ID_PATTERN)


class TaskType(str, Enum):
    """Kind of work a task represents."""

    BUG = "bug"
    FEATURE = "feature"
    IMPROVEMENT = "improvement"
    PLANNING = "planning"
    RESEARCH = "research"


class Status(str, Enum):
    """Progress state of a task."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Priority(str, Enum):
    """Priority level of a task."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


TASK_TYPE_LETTERS: dict[TaskType, str] = {
    TaskType.BUG: "B",
    TaskType.FEATURE: "F",
    TaskType.IMPROVEMENT: "I",
    TaskType.PLANNING: "P",
    TaskType.RESEARCH: "R",
}


def validate_task_id(task_id: str) -> bool:
    """Check whether a task ID matches the ``<letter>-<3 digits>`` format.

    Args:
        task_id: Task identifier to check

    Returns:
        True if the ID is well formed, False otherwise
    """
    return bool(TASK_ID_REGEX.match(task_id))


class Task(BaseModel):
    """A single roadmap task.

    Only ``id``, ``depends_on`` and ``blocks`` matter to the dependency
    engine. The remaining attributes are carried through unchanged.

    The ID format is deliberately not enforced here so that graph code can
    work on any identifiers; use ``has_valid_id`` or ``validate_task_id``
    for the format check.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1, description="Task identifier, e.g. F-001")
    title: str = ""
    details: str = ""
    type: TaskType = TaskType.FEATURE
    status: Status = Status.NOT_STARTED
    priority: Priority = Priority.MEDIUM
    depends_on: list[str] = Field(default_factory=list, alias="depends-on")
    blocks: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    passes_tests: bool = Field(default=False, alias="passes-tests")
    notes: str | None = None
    assigned_to: str | None = Field(default=None, alias="assignedTo")
    due_date: str | None = Field(default=None, alias="dueDate")
    effort: float | None = None
    github_refs: list[str] | None = Field(default=None, alias="github-refs")
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    @property
    def has_valid_id(self) -> bool:
        """Whether the ID matches the expected format."""
        return validate_task_id(self.id)

    @property
    def expected_id_letter(self) -> str:
        """ID prefix letter implied by the task type."""
        return TASK_TYPE_LETTERS[self.type]


class RoadmapMetadata(BaseModel):
    """Descriptive metadata stored alongside the tasks."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    description: str = ""
    created_by: str = Field(default="", alias="createdBy")
    created_at: str = Field(default="", alias="createdAt")


class Roadmap(BaseModel):
    """An ordered collection of tasks plus metadata.

    Task order is significant: it is the root order for cycle search and the
    tie-break order for topological sorting.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    schema_url: str = Field(default="", alias="$schema")
    metadata: RoadmapMetadata = Field(default_factory=RoadmapMetadata)
    tasks: list[Task] = Field(default_factory=list)

    def task_ids(self) -> list[str]:
        """Return task IDs in roadmap order."""
        return [task.id for task in self.tasks]


__all__ = [
    "TASK_ID_PATTERN",
    "TASK_TYPE_LETTERS",
    "Priority",
    "Roadmap",
    "RoadmapMetadata",
    "Status",
    "Task",
    "TaskType",
    "validate_task_id",
]
