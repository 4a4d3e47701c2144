"""
Database helper utilities shared by the API routes and pipeline steps.
"""

import logging
from typing import Any

from fastapi import HTTPException
from supabase import Client

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """A write returned no row."""

    pass


def insert_one(supabase: Client, table: str, row: dict[str, Any]) -> dict[str, Any]:
    """
    Insert a single row and return it as stored.

    Raises:
        PersistenceError: If Supabase returns no data for the insert
    """
    response = supabase.table(table).insert(row).execute()

    if not response.data:
        raise PersistenceError(f"Insert into {table} returned no row")

    return response.data[0]


def insert_many(supabase: Client, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Bulk insert; an empty batch is a no-op."""
    if not rows:
        return []

    response = supabase.table(table).insert(rows).execute()

    if not response.data or len(response.data) != len(rows):
        raise PersistenceError(
            f"Insert into {table} stored {len(response.data or [])} of {len(rows)} rows"
        )

    return response.data


def get_user_id_from_clerk(supabase: Client, clerk_user_id: str) -> str:
    """
    Get Supabase user_id from Clerk user_id.

    Raises:
        HTTPException: If user not found
    """
    user_response = supabase.table("User").select("id").eq("clerk_user_id", clerk_user_id).execute()

    if not user_response.data:
        raise HTTPException(status_code=404, detail="User not found")

    return user_response.data[0]["id"]


def verify_course_access(supabase: Client, course_id: str, user_id: str) -> dict[str, Any]:
    """
    Return the course if the user is enrolled in it.

    Raises:
        HTTPException: If the course does not exist or the user has no access
    """
    link_response = (
        supabase.table("UserCourse")
        .select("course_id")
        .eq("course_id", course_id)
        .eq("user_id", user_id)
        .execute()
    )
    if not link_response.data:
        raise HTTPException(status_code=404, detail="Course not found")

    course_response = supabase.table("Course").select("*").eq("id", course_id).execute()
    if not course_response.data:
        raise HTTPException(status_code=404, detail="Course not found")

    return course_response.data[0]


def load_accessible_module(supabase: Client, module_id: str, user_id: str) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Return ``(module, course)`` if the user is enrolled in the module's course.

    An existing module in someone else's course is reported exactly like a
    missing one.

    Raises:
        HTTPException: 404 if the module is missing or not accessible
    """
    module_response = supabase.table("Module").select("*").eq("id", module_id).execute()
    if not module_response.data:
        raise HTTPException(status_code=404, detail="Module not found")

    module = module_response.data[0]
    course = verify_course_access(supabase, module["course_id"], user_id)
    return module, course
