from fastapi import APIRouter, HTTPException, Depends
from supabase import Client
import asyncio
import logging
import time

from studyhub.core.supabase_client import get_supabase_client
from studyhub.events import StepFailedError
from studyhub.pipeline import create_course_entry
from studyhub.pipeline.errors import AuthenticationError, CourseValidationError
from studyhub.pipeline.models import CreateCourseRequest
from studyhub.services.vector_store import get_vector_store
from studyhub.utils.clerk_auth import verify_clerk_token
from studyhub.utils.db_helpers import get_user_id_from_clerk, verify_course_access

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/create")
async def create_course(
    course_data: CreateCourseRequest,
    user_info: dict = Depends(verify_clerk_token),
):
    """
    Create a course and everything that comes with it.

    Flow:
    1. Verify Clerk token (route dependency)
    2. Run the course-creation workflow (auth, validate, course row,
       enrollment, notes upload + embedding, AI modules, module rows,
       notification)
    3. Return the created course with generation summary
    """
    api_start_time = time.time()
    logger.info(f"Creating course '{course_data.name}' for user: {user_info.get('clerk_user_id')}")

    try:
        data = await create_course_entry(course_data, user_info)
    except StepFailedError as e:
        cause = e.error
        if isinstance(cause, AuthenticationError):
            raise HTTPException(status_code=401, detail=str(cause))
        if isinstance(cause, CourseValidationError):
            raise HTTPException(status_code=422, detail=cause.errors or str(cause))
        logger.error(f"Error creating course at step '{e.node_id}': {cause}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to create course: {str(cause)}")
    except Exception as e:
        logger.error(f"Error creating course: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to create course: {str(e)}")

    logger.info(f"⏱️  [TIMING] Course created in {time.time() - api_start_time:.3f}s (course_id={data['course']['id']})")
    return {"success": True, "data": data}


@router.get("/user/list")
async def list_user_courses(
    user_info: dict = Depends(verify_clerk_token),
    supabase: Client = Depends(get_supabase_client)
):
    """
    List all courses the authenticated user is enrolled in
    """
    try:
        user_id = get_user_id_from_clerk(supabase, user_info["clerk_user_id"])

        links = supabase.table("UserCourse").select("course_id").eq("user_id", user_id).execute()
        course_ids = [link["course_id"] for link in (links.data or [])]
        if not course_ids:
            return {"success": True, "courses": []}

        courses = (
            supabase.table("Course")
            .select("*")
            .in_("id", course_ids)
            .order("created_at", desc=True)
            .execute()
        )

        return {"success": True, "courses": courses.data or []}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing courses: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to list courses: {str(e)}")


@router.get("/{course_id}")
async def get_course(
    course_id: str,
    user_info: dict = Depends(verify_clerk_token),
    supabase: Client = Depends(get_supabase_client)
):
    """
    Get course details with its modules in learning order
    """
    try:
        user_id = get_user_id_from_clerk(supabase, user_info["clerk_user_id"])
        course = verify_course_access(supabase, course_id, user_id)

        modules = (
            supabase.table("Module")
            .select("*")
            .eq("course_id", course_id)
            .order("order_index")
            .execute()
        )

        return {"success": True, "course": course, "modules": modules.data or []}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching course: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to fetch course: {str(e)}")


@router.delete("/{course_id}")
async def delete_course(
    course_id: str,
    user_info: dict = Depends(verify_clerk_token),
    supabase: Client = Depends(get_supabase_client)
):
    """
    Delete a course, its rows (cascade) and its note embeddings in Qdrant.
    """
    try:
        user_id = get_user_id_from_clerk(supabase, user_info["clerk_user_id"])
        course = verify_course_access(supabase, course_id, user_id)

        logger.info(f"🗑️  Deleting course '{course.get('name')}' (course_id={course_id})")

        try:
            await asyncio.to_thread(get_vector_store().delete_course_points, course_id)
        except Exception as e:
            logger.warning(f"⚠️  Failed to delete note embeddings (continuing with course deletion): {e}")

        supabase.table("Course").delete().eq("id", course_id).execute()
        logger.info(f"✅ Deleted course_id={course_id}")

        return {"success": True, "message": "Course deleted successfully", "course_id": course_id}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting course: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to delete course: {str(e)}")
