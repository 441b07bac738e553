"""Roadmap dependency-integrity tools.

Builds dependency graphs from roadmap tasks, detects cycles, validates
references and orders tasks so that prerequisites come first.
"""

__version__ = "0.1.0"
