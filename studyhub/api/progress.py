"""
API routes for module progress tracking.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from supabase import Client
from datetime import datetime, timezone
import logging

from studyhub.core.supabase_client import get_supabase_client
from studyhub.utils.clerk_auth import verify_clerk_token
from studyhub.utils.db_helpers import get_user_id_from_clerk, load_accessible_module, verify_course_access

router = APIRouter()
logger = logging.getLogger(__name__)


class UpdateModuleProgressRequest(BaseModel):
    completed: bool


def update_module_progress(supabase: Client, module_id: str, completed: bool) -> dict:
    """
    Upsert the progress row of a module.

    ``completed_at`` is stamped when the module is completed and cleared when
    it is reopened.
    """
    row = {
        "module_id": module_id,
        "completed": completed,
        "completed_at": datetime.now(timezone.utc).isoformat() if completed else None,
    }
    response = supabase.table("ModuleProgress").upsert(row, on_conflict="module_id").execute()
    return response.data[0] if response.data else row


@router.put("/modules/{module_id}")
async def set_module_progress(
    module_id: str,
    request: UpdateModuleProgressRequest,
    user_info: dict = Depends(verify_clerk_token),
    supabase: Client = Depends(get_supabase_client)
):
    """
    Mark a module as completed or not completed.
    """
    try:
        user_id = get_user_id_from_clerk(supabase, user_info["clerk_user_id"])

        load_accessible_module(supabase, module_id, user_id)

        progress = update_module_progress(supabase, module_id, request.completed)
        logger.info(f"📈 Module {module_id} marked {'completed' if request.completed else 'not completed'}")

        return {"success": True, "progress": progress}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating module progress: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update module progress")


@router.get("/courses/{course_id}")
async def get_course_progress(
    course_id: str,
    user_info: dict = Depends(verify_clerk_token),
    supabase: Client = Depends(get_supabase_client)
):
    """
    Completion summary for every module of a course.
    """
    try:
        user_id = get_user_id_from_clerk(supabase, user_info["clerk_user_id"])
        verify_course_access(supabase, course_id, user_id)

        modules_response = supabase.table("Module").select("id").eq("course_id", course_id).execute()
        module_ids = [m["id"] for m in (modules_response.data or [])]

        progress = {}
        if module_ids:
            progress_response = supabase.table("ModuleProgress").select("*").in_("module_id", module_ids).execute()
            progress = {p["module_id"]: p for p in (progress_response.data or [])}

        completed = sum(1 for p in progress.values() if p.get("completed"))

        return {
            "success": True,
            "total_modules": len(module_ids),
            "completed_modules": completed,
            "module_progress": progress,
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching course progress: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to fetch progress: {str(e)}")
