"""
Course-creation pipeline built on the event orchestrator.
"""

from studyhub.pipeline.create_course import (
    build_create_course_graph,
    build_create_course_nodes,
    create_course_entry,
)

__all__ = ["build_create_course_graph", "build_create_course_nodes", "create_course_entry"]
