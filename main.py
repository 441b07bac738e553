#!/usr/bin/env python3
"""Main Entry Point and CLI Integration.

This module provides the command-line interface for the roadmap dependency
tools. It loads configuration, reads the roadmap, runs the dependency engine
and maps the outcome to a process exit code.
"""

import argparse
import sys

import structlog

from prt.config import PrtConfig, load_config
from prt.errors import (
    ConfigNotFoundError,
    ExitCode,
    PrtError,
    ValidationError,
    exit_code_for,
    format_error_message,
)
from prt.graph import (
    DependencyValidator,
    dependencies_of,
    dependents_of,
    topological_sort,
)
from prt.log_config import bind_context, clear_context, configure_logging
from prt.models import Task
from prt.roadmap import ensure_valid_tasks, find_task, load_roadmap

logger = structlog.get_logger(__name__)


def resolve_config(args: argparse.Namespace) -> PrtConfig:
    """Load the configuration named on the command line or found on disk.

    Without ``--config`` the default ``.prtrc`` files are tried. When none
    exists but ``--roadmap`` was given, built-in defaults are used.

    Args:
        args: Parsed command-line arguments

    Returns:
        The effective configuration
    """
    if args.config:
        return PrtConfig.from_file(args.config)

    try:
        return load_config()
    except ConfigNotFoundError:
        if args.roadmap:
            logger.debug("no_config_file_using_defaults")
            return PrtConfig()
        raise


def _describe(task: Task) -> str:
    return f"{task.id}  {task.title}" if task.title else task.id


def cmd_validate(args: argparse.Namespace, config: PrtConfig, roadmap_path: str) -> int:
    """Validate task data and dependencies.

    Returns:
        Exit code: cycles map to DEPENDENCY_ERROR, dangling references to
        NOT_FOUND, strict consistency failures to VALIDATION_ERROR
    """
    print(f"validating roadmap at {roadmap_path}...")
    roadmap = load_roadmap(roadmap_path)

    if not roadmap.tasks:
        print("roadmap contains no tasks to validate")
        print("roadmap validation complete")
        return ExitCode.SUCCESS

    ensure_valid_tasks(roadmap)

    print("validating task dependencies...")
    strict = args.strict or config.validation.strict_consistency
    report = DependencyValidator(strict_consistency=strict).validate(roadmap)

    if report.findings:
        for line in report.format_lines():
            print(line)

    if report.has_circular:
        print("Dependency validation failed")
        return ExitCode.DEPENDENCY_ERROR
    if report.has_missing:
        print("Dependency validation failed")
        return ExitCode.NOT_FOUND
    if not report.is_valid:
        print("Dependency validation failed")
        return ExitCode.VALIDATION_ERROR

    print("all task dependencies are valid")
    print("roadmap validation complete")
    return ExitCode.SUCCESS


def cmd_deps(args: argparse.Namespace, _config: PrtConfig, roadmap_path: str) -> int:
    """Show a task's direct dependencies and dependents."""
    roadmap = load_roadmap(roadmap_path)
    task = find_task(roadmap, args.task_id)

    dependencies = dependencies_of(task, roadmap.tasks)
    dependents = dependents_of(task, roadmap.tasks)

    print(f"{task.id} depends on:")
    for dependency in dependencies:
        print(f"  {_describe(dependency)}")
    if not dependencies:
        print("  (none)")

    print(f"{task.id} is required by:")
    for dependent in dependents:
        print(f"  {_describe(dependent)}")
    if not dependents:
        print("  (none)")

    return ExitCode.SUCCESS


def cmd_order(_args: argparse.Namespace, _config: PrtConfig, roadmap_path: str) -> int:
    """Print tasks in dependency order."""
    roadmap = load_roadmap(roadmap_path)
    for index, task in enumerate(topological_sort(roadmap.tasks), 1):
        print(f"{index}. {_describe(task)}")
    return ExitCode.SUCCESS


COMMANDS = {
    "validate": cmd_validate,
    "deps": cmd_deps,
    "order": cmd_order,
}


def run(args: argparse.Namespace) -> int:
    """Run the selected command and return its exit code.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    configure_logging(args.log_level)
    clear_context()
    bind_context(command=args.command)

    try:
        config = resolve_config(args)
        if args.log_level_explicit is None and config.logging_level != args.log_level:
            configure_logging(config.logging_level)

        roadmap_path = args.roadmap or config.path
        bind_context(roadmap=roadmap_path)
        return int(COMMANDS[args.command](args, config, roadmap_path))

    except PrtError as e:
        logger.exception("command_failed", error=e.message, code=e.code.value)
        print(format_error_message(e, verbose=args.verbose), file=sys.stderr)
        if isinstance(e, ValidationError):
            for detail in e.details:
                print(f"  - {detail['message']}", file=sys.stderr)
        return int(exit_code_for(e))

    except ValueError as e:
        logger.exception("configuration_validation_error", error=str(e))
        print(format_error_message(e, verbose=args.verbose), file=sys.stderr)
        return int(ExitCode.GENERAL_ERROR)

    finally:
        clear_context()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list, defaults to sys.argv[1:]

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Validate and query roadmap task dependencies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate the roadmap named in .prtrc.json
  python main.py validate

  # Treat blocks/depends-on asymmetry as an error
  python main.py validate --strict

  # Show what F-002 needs and what needs it
  python main.py --roadmap prt.json deps F-002

  # Print tasks in dependency order
  python main.py order
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: .prtrc.json)",
    )
    parser.add_argument(
        "--roadmap",
        type=str,
        default=None,
        help="Path to roadmap file (overrides the configured path)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (default: from config, else WARNING)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show error context and stack traces",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Validate roadmap dependencies")
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on blocks entries not mirrored by depends-on",
    )

    deps_parser = subparsers.add_parser("deps", help="Show a task's dependencies and dependents")
    deps_parser.add_argument("task_id", help="Task ID, e.g. F-001")

    subparsers.add_parser("order", help="Print tasks in dependency order")

    args = parser.parse_args(argv)

    # Remember whether the level was given so the config can supply one
    args.log_level_explicit = args.log_level
    if args.log_level is None:
        args.log_level = "WARNING"

    return args


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Parses arguments, runs the command and exits with its code.
    """
    args = parse_args(argv)
    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
