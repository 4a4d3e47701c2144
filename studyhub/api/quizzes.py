from fastapi import APIRouter, HTTPException, Depends
from supabase import Client
import logging

from studyhub.core.supabase_client import get_supabase_client
from studyhub.services.quiz_generation import ModuleRecordNotFoundError, generate_quiz_for_module
from studyhub.utils.clerk_auth import verify_clerk_token
from studyhub.utils.db_helpers import get_user_id_from_clerk, load_accessible_module

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/modules/{module_id}")
async def create_module_quiz(
    module_id: str,
    user_info: dict = Depends(verify_clerk_token),
    supabase: Client = Depends(get_supabase_client)
):
    """
    Generate a quiz for a module of one of the caller's courses and store it.
    """
    try:
        user_id = get_user_id_from_clerk(supabase, user_info["clerk_user_id"])
        load_accessible_module(supabase, module_id, user_id)

        quiz = await generate_quiz_for_module(module_id)
        return {"success": True, "quiz": quiz}

    except HTTPException:
        raise
    except ModuleRecordNotFoundError:
        raise HTTPException(status_code=404, detail="Module not found")
    except Exception as e:
        logger.error(f"Error generating quiz: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate quiz. Please try again later.")
