import asyncio
import logging

from studyhub.core.supabase_client import get_supabase_client
from studyhub.utils.db_helpers import insert_one

logger = logging.getLogger(__name__)


async def send_course_ready_notification(user_id: str, course_name: str) -> dict:
    """Create the in-app notification telling the user the course is ready."""
    notification = await asyncio.to_thread(
        insert_one,
        get_supabase_client(),
        "Notification",
        {
            "user_id": user_id,
            "title": "Course created",
            "message": f"Your course \"{course_name}\" is ready. Start with the first module!",
            "read": False,
        },
    )
    logger.info(f"🔔 Notified user_id={user_id} about course '{course_name}'")
    return notification
