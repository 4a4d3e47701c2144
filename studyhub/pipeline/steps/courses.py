import asyncio
import logging

from studyhub.core.supabase_client import get_supabase_client
from studyhub.pipeline.models import CreateCourseRequest
from studyhub.utils.db_helpers import insert_one

logger = logging.getLogger(__name__)


async def create_db_course(data: CreateCourseRequest) -> dict:
    """Insert the Course row and return it."""
    supabase = get_supabase_client()
    row = {
        "name": data.name,
        "description": data.description or "",
        "current_level": data.current_level,
        "outcome": data.outcome,
        "teaching_style": data.teaching_style,
    }

    course = await asyncio.to_thread(insert_one, supabase, "Course", row)
    logger.info(f"💾 Created course '{course['name']}' (course_id={course['id']})")
    return course


async def create_user_course(course_id: str, user_id: str) -> dict:
    """Enroll the creator in the course."""
    supabase = get_supabase_client()

    link = await asyncio.to_thread(
        insert_one, supabase, "UserCourse", {"course_id": course_id, "user_id": user_id}
    )
    logger.info(f"💾 Linked user_id={user_id} to course_id={course_id}")
    return link
