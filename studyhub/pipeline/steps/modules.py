import asyncio
import logging

from studyhub.core.supabase_client import get_supabase_client
from studyhub.pipeline.models import CourseOutline
from studyhub.utils.db_helpers import insert_many

logger = logging.getLogger(__name__)


async def upload_modules(outline: CourseOutline, course_id: str, user_id: str) -> dict:
    """
    Persist one Module row per generated subtopic, keeping the outline order.

    Returns:
        {"count": int, "modules": list of stored rows}
    """
    rows = [
        {
            "course_id": course_id,
            "created_by": user_id,
            "name": subtopic.title,
            "description": subtopic.description,
            "prerequisites": subtopic.prerequisites,
            "difficulty": subtopic.difficulty,
            "module_type": subtopic.format,
            "order_index": index,
        }
        for index, subtopic in enumerate(outline.subtopics)
    ]

    if not rows:
        logger.warning(f"⚠️  No subtopics to store for course_id={course_id}")
        return {"count": 0, "modules": []}

    modules = await asyncio.to_thread(insert_many, get_supabase_client(), "Module", rows)
    logger.info(f"💾 Stored {len(modules)} modules for course_id={course_id}")
    return {"count": len(modules), "modules": modules}
