"""
Errors raised by course-creation steps.
"""

from typing import Any


class CourseCreationError(Exception):
    """Base exception for course-creation step failures."""

    pass


class AuthenticationError(CourseCreationError):
    """The caller could not be resolved to a known user."""

    pass


class CourseValidationError(CourseCreationError):
    """The submitted course form is invalid."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []
