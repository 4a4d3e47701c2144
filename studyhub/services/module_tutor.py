"""
Module-level LLM features: markdown notes for a module, and the teacher-mode
chat where the user explains the module and the model answers as a student.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional

from studyhub.core.supabase_client import get_supabase_client
from studyhub.pipeline.prompts import (
    MODULE_NOTES_PROMPT,
    STUDENT_CHAT_SYSTEM_PROMPT,
    module_notes_system_prompt,
)
from studyhub.services.groq_service import get_groq_service

logger = logging.getLogger(__name__)

# Module content beyond this is left out of the student's context
STUDENT_CONTEXT_LIMIT = 3000


def save_module_notes(module_id: str, content: str) -> Optional[dict]:
    """Store generated markdown as the module's content; returns the updated row."""
    supabase = get_supabase_client()
    response = supabase.table("Module").update({"content": content}).eq("id", module_id).execute()
    return response.data[0] if response.data else None


async def generate_module_notes(module: dict, course: dict) -> dict:
    """
    Write markdown notes for a module in the course's teaching style and store them.

    Returns:
        The module row with its new ``content``
    """
    start_time = time.time()
    logger.info(f"📝 Generating notes for module: {module['name']}")

    notes = await get_groq_service().generate_text(
        MODULE_NOTES_PROMPT.format(
            module_name=module["name"],
            module_type=module.get("module_type") or "TEXT",
            module_description=module.get("description") or "",
        ),
        system_prompt=module_notes_system_prompt(course.get("teaching_style")),
        temperature=0.3,
        max_tokens=4000,
    )
    notes = notes.strip()

    updated = await asyncio.to_thread(save_module_notes, module["id"], notes)
    logger.info(f"✅ Stored {len(notes)} chars of notes for module {module['id']} in {time.time() - start_time:.2f}s")

    return updated or {**module, "content": notes}


async def reply_as_student(
    module: dict,
    course: dict,
    message: str,
    history: Optional[List[Dict[str, str]]] = None,
) -> str:
    """Next student turn of a teacher-mode conversation about ``module``."""
    system_prompt = STUDENT_CHAT_SYSTEM_PROMPT.format(
        module_name=module["name"],
        module_description=module.get("description") or "No description provided",
        course_name=course.get("name") or "",
        course_description=course.get("description") or "No description provided",
        module_content=(module.get("content") or "No content provided")[:STUDENT_CONTEXT_LIMIT],
    )

    return await get_groq_service().generate_text(
        message,
        system_prompt=system_prompt,
        temperature=0.7,
        max_tokens=1000,
        history=history,
    )
