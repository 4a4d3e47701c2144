"""
API routes for module notes and teacher-mode chat.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from supabase import Client
from typing import List, Optional
import logging

from studyhub.core.supabase_client import get_supabase_client
from studyhub.services.groq_service import GroqAPIError
from studyhub.services.module_tutor import generate_module_notes, reply_as_student
from studyhub.utils.clerk_auth import verify_clerk_token
from studyhub.utils.db_helpers import get_user_id_from_clerk, load_accessible_module

router = APIRouter()
logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10


class ChatMessage(BaseModel):
    role: str = Field(..., description="Message role: 'user' (the teacher) or 'assistant' (the student)")
    content: str = Field(..., description="Message content")


class TeacherChatRequest(BaseModel):
    message: str = Field(..., description="The teacher's explanation or answer", min_length=1, max_length=2000)
    conversation_history: Optional[List[ChatMessage]] = Field(
        default=[],
        description="Previous conversation messages for context"
    )


class TeacherChatResponse(BaseModel):
    response: str = Field(..., description="The AI student's reply")


@router.post("/{module_id}/notes")
async def create_module_notes(
    module_id: str,
    user_info: dict = Depends(verify_clerk_token),
    supabase: Client = Depends(get_supabase_client)
):
    """
    Generate markdown notes for a module and store them as its content.
    """
    try:
        user_id = get_user_id_from_clerk(supabase, user_info["clerk_user_id"])
        module, course = load_accessible_module(supabase, module_id, user_id)

        updated = await generate_module_notes(module, course)
        return {"success": True, "module": updated}

    except HTTPException:
        raise
    except GroqAPIError as e:
        logger.error(f"❌ Notes generation failed for module {module_id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate notes. Please try again later.")
    except Exception as e:
        logger.error(f"Error generating module notes: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to generate notes: {str(e)}")


@router.post("/{module_id}/teacher-chat", response_model=TeacherChatResponse)
async def teacher_chat(
    module_id: str,
    chat_request: TeacherChatRequest,
    user_info: dict = Depends(verify_clerk_token),
    supabase: Client = Depends(get_supabase_client)
):
    """
    Teacher mode: the user explains the module, the model answers as a student.

    Flow:
    1. Resolve the caller and check they are enrolled in the module's course
    2. Validate the conversation history roles
    3. Keep the last 10 messages and ask for the student's next turn
    """
    try:
        user_id = get_user_id_from_clerk(supabase, user_info["clerk_user_id"])
        module, course = load_accessible_module(supabase, module_id, user_id)

        conversation_history = []
        for msg in chat_request.conversation_history or []:
            if msg.role not in ["user", "assistant"]:
                raise HTTPException(
                    status_code=400,
                    detail=f"Invalid message role: {msg.role}. Must be 'user' or 'assistant'"
                )
            conversation_history.append({"role": msg.role, "content": msg.content})

        if len(conversation_history) > HISTORY_LIMIT:
            conversation_history = conversation_history[-HISTORY_LIMIT:]
            logger.debug(f"   Limited conversation history to last {HISTORY_LIMIT} messages")

        logger.info(f"🎓 Teacher-mode message for module {module_id}: {chat_request.message[:100]}")
        reply = await reply_as_student(module, course, chat_request.message, conversation_history)

        return TeacherChatResponse(response=reply)

    except HTTPException:
        raise
    except GroqAPIError as e:
        logger.error(f"❌ Student reply failed for module {module_id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate response. Please try again later.")
    except Exception as e:
        logger.error(f"Error in teacher chat endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Chat request failed: {str(e)}")
