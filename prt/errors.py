"""Error hierarchy and exit-code mapping for the roadmap tools.

Every error raised by the roadmap layer derives from ``PrtError`` and carries
an ``ErrorCode`` plus a context dictionary. The command layer turns errors
into process exit codes with ``exit_code_for``.
"""

import json
import traceback
from enum import Enum, IntEnum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    PRT_FILE_CONFIG_NOT_FOUND = "PRT_FILE_CONFIG_NOT_FOUND"
    PRT_FILE_ROADMAP_NOT_FOUND = "PRT_FILE_ROADMAP_NOT_FOUND"
    PRT_TASK_ID_INVALID = "PRT_TASK_ID_INVALID"
    PRT_TASK_INVALID = "PRT_TASK_INVALID"
    PRT_TASK_NOT_FOUND = "PRT_TASK_NOT_FOUND"
    PRT_VALIDATION_FAILED = "PRT_VALIDATION_FAILED"
    PRT_VALIDATION_CIRCULAR_DEPENDENCY = "PRT_VALIDATION_CIRCULAR_DEPENDENCY"
    PRT_UNKNOWN = "PRT_UNKNOWN"


class ExitCode(IntEnum):
    """Process exit codes used by the CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    DEPENDENCY_ERROR = 4


class PrtError(Exception):
    """Base exception for all roadmap errors.

    Attributes:
        message: Human-readable description
        code: ErrorCode classifying the failure
        context: Extra structured details for verbose output and logging
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PRT_UNKNOWN,
        context: dict[str, Any] | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Description of the error
            code: Error code, defaults to PRT_UNKNOWN
            context: Optional structured context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context or {}


class CircularDependencyError(PrtError):
    """Raised when tasks form a dependency cycle."""

    def __init__(self, cycle: list[str], message: str | None = None):
        self.cycle = list(cycle)
        default_message = f"Circular dependency detected: {' -> '.join(self.cycle)}"
        super().__init__(
            message or default_message,
            ErrorCode.PRT_VALIDATION_CIRCULAR_DEPENDENCY,
            {"cycle": self.cycle, "cycle_length": len(self.cycle)},
        )


class ConfigNotFoundError(PrtError):
    """Raised when the configuration file cannot be found."""

    def __init__(self, file_path: str = ".prtrc.json"):
        self.file_path = file_path
        super().__init__(
            f"Config file not found: {file_path}",
            ErrorCode.PRT_FILE_CONFIG_NOT_FOUND,
            {"file_path": file_path},
        )


class RoadmapNotFoundError(PrtError):
    """Raised when the roadmap file cannot be found."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__(
            f"Roadmap file not found: {file_path}",
            ErrorCode.PRT_FILE_ROADMAP_NOT_FOUND,
            {"file_path": file_path},
        )


class InvalidTaskError(PrtError):
    """Raised when a task fails validation."""

    def __init__(self, message: str, task_id: str | None = None, field: str | None = None):
        self.task_id = task_id
        self.field = field
        context: dict[str, Any] = {}
        if task_id:
            context["task_id"] = task_id
        if field:
            context["field"] = field
        code = ErrorCode.PRT_TASK_ID_INVALID if field == "id" else ErrorCode.PRT_TASK_INVALID
        super().__init__(message, code, context)


class TaskNotFoundError(PrtError):
    """Raised when a task ID does not exist in the roadmap."""

    def __init__(self, task_id: str, roadmap_path: str | None = None):
        self.task_id = task_id
        context: dict[str, Any] = {"task_id": task_id}
        if roadmap_path:
            context["roadmap_path"] = roadmap_path
        super().__init__(f"Task not found: {task_id}", ErrorCode.PRT_TASK_NOT_FOUND, context)


class ValidationError(PrtError):
    """Raised when validation fails with one or more issues.

    Args:
        details: List of ``{"type", "message", "task_id"}`` dictionaries
    """

    def __init__(self, details: list[dict[str, Any]]):
        self.details = list(details)
        count = len(self.details)
        error_types = sorted({detail.get("type", "unknown") for detail in self.details})
        super().__init__(
            f"Validation failed with {count} error{'' if count == 1 else 's'}",
            ErrorCode.PRT_VALIDATION_FAILED,
            {"error_count": count, "error_types": error_types, "errors": self.details},
        )


_EXIT_CODES: dict[ErrorCode, ExitCode] = {
    ErrorCode.PRT_FILE_CONFIG_NOT_FOUND: ExitCode.NOT_FOUND,
    ErrorCode.PRT_FILE_ROADMAP_NOT_FOUND: ExitCode.NOT_FOUND,
    ErrorCode.PRT_TASK_NOT_FOUND: ExitCode.NOT_FOUND,
    ErrorCode.PRT_TASK_ID_INVALID: ExitCode.VALIDATION_ERROR,
    ErrorCode.PRT_TASK_INVALID: ExitCode.VALIDATION_ERROR,
    ErrorCode.PRT_VALIDATION_FAILED: ExitCode.VALIDATION_ERROR,
    ErrorCode.PRT_VALIDATION_CIRCULAR_DEPENDENCY: ExitCode.DEPENDENCY_ERROR,
}


def exit_code_for(error: BaseException) -> ExitCode:
    """Map an exception to the CLI exit code.

    Args:
        error: Any exception raised while running a command

    Returns:
        The matching ExitCode; GENERAL_ERROR for non-roadmap errors
    """
    if isinstance(error, PrtError):
        return _EXIT_CODES.get(error.code, ExitCode.GENERAL_ERROR)
    return ExitCode.GENERAL_ERROR


def format_error_message(error: BaseException, verbose: bool = False) -> str:
    """Format an error for terminal output.

    Args:
        error: The exception to format
        verbose: Include context and traceback when True

    Returns:
        Multi-line error description
    """
    parts = [f"Error: {error}"]
    if isinstance(error, PrtError):
        parts.append(f"Code: {error.code.value}")
        if verbose and error.context:
            parts.extend(["", "Context:", json.dumps(error.context, indent=2, default=str)])

    if verbose and error.__traceback__ is not None:
        parts.extend(["", "Stack trace:", "".join(traceback.format_tb(error.__traceback__))])

    return "\n".join(parts)


__all__ = [
    "CircularDependencyError",
    "ConfigNotFoundError",
    "ErrorCode",
    "ExitCode",
    "InvalidTaskError",
    "PrtError",
    "RoadmapNotFoundError",
    "TaskNotFoundError",
    "ValidationError",
    "exit_code_for",
    "format_error_message",
]
