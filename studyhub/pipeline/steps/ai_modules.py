import logging
import time

from studyhub.pipeline.models import CourseOutline
from studyhub.pipeline.prompts import (
    COURSE_MODULES_PROMPT,
    COURSE_MODULES_SYSTEM_PROMPT,
    teaching_style_guide,
)
from studyhub.services.groq_service import GroqAPIError, get_groq_service

logger = logging.getLogger(__name__)


async def create_ai_modules(
    name: str,
    current_level: str = "",
    outcome: str = "",
    teaching_style: str = "general",
) -> CourseOutline:
    """
    Ask the LLM for the ordered list of course subtopics.

    When Groq rejects its own JSON-mode output (``json_validate_failed``) the
    course still gets created, just with an empty outline.
    """
    start_time = time.time()
    logger.info(f"🧠 Generating AI modules for '{name}' (style={teaching_style})")

    prompt = COURSE_MODULES_PROMPT.format(
        name=name,
        current_level=current_level or "any",
        outcome=outcome or f"learn {name}",
        style_guide=teaching_style_guide(teaching_style),
    )

    try:
        payload = await get_groq_service().generate_json(
            prompt,
            system_prompt=COURSE_MODULES_SYSTEM_PROMPT,
        )
    except GroqAPIError as e:
        if e.code == "json_validate_failed" or "json_validate_failed" in str(e):
            logger.error(f"❌ Model produced invalid JSON for '{name}'; continuing with an empty outline")
            return CourseOutline(name=name, subtopics=[])
        raise

    payload.setdefault("name", name)
    outline = CourseOutline.model_validate(payload)

    logger.info(f"✅ Generated {len(outline.subtopics)} subtopics for '{name}' in {time.time() - start_time:.2f}s")
    return outline
