"""
Quiz generation for course modules.

Strategy, in order:
1. Full quiz (15-20 questions) from the module content and course context
2. Shorter quiz from a simpler prompt
3. Fixed three-question knowledge check, so every module ends up with a quiz
"""

import asyncio
import logging
import time
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from studyhub.core.supabase_client import get_supabase_client
from studyhub.pipeline.prompts import (
    QUIZ_FALLBACK_PROMPT,
    QUIZ_PROMPT,
    QUIZ_SYSTEM_PROMPT,
)
from studyhub.services.groq_service import GroqAPIError, get_groq_service
from studyhub.utils.db_helpers import insert_many, insert_one

logger = logging.getLogger(__name__)

MODULE_CONTENT_LIMIT = 1500
FALLBACK_CONTENT_LIMIT = 1000


class QuizOptionModel(BaseModel):
    text: str
    is_correct: bool


class QuizQuestionModel(BaseModel):
    question: str
    options: list[QuizOptionModel] = Field(..., min_length=3, max_length=3)

    @field_validator("options")
    @classmethod
    def exactly_one_correct(cls, v: list[QuizOptionModel]) -> list[QuizOptionModel]:
        if sum(1 for option in v if option.is_correct) != 1:
            raise ValueError("Each question needs exactly one correct option")
        return v


class QuizModel(BaseModel):
    title: str
    description: Optional[str] = None
    questions: list[QuizQuestionModel] = Field(..., min_length=3, max_length=20)


class ModuleRecordNotFoundError(LookupError):
    pass


def basic_quiz(module_name: str) -> QuizModel:
    """Last-resort quiz used when the LLM cannot produce a valid one."""
    return QuizModel.model_validate({
        "title": f"Quiz on {module_name}",
        "description": "Basic knowledge check for this module",
        "questions": [
            {
                "question": "What is this module about?",
                "options": [
                    {"text": module_name, "is_correct": True},
                    {"text": "Something else", "is_correct": False},
                    {"text": "None of the above", "is_correct": False},
                ],
            },
            {
                "question": "Have you completed studying this module?",
                "options": [
                    {"text": "Yes", "is_correct": True},
                    {"text": "No", "is_correct": False},
                    {"text": "Not sure", "is_correct": False},
                ],
            },
            {
                "question": "What will you do next?",
                "options": [
                    {"text": "Continue to the next module", "is_correct": True},
                    {"text": "Skip ahead", "is_correct": False},
                    {"text": "Quit the course", "is_correct": False},
                ],
            },
        ],
    })


async def build_quiz(module: dict, course: dict) -> tuple[QuizModel, str]:
    """
    Produce a validated quiz for the module.

    Returns:
        (quiz, source) where source is "llm", "llm_fallback" or "basic"
    """
    groq = get_groq_service()
    content = module.get("content") or ""

    try:
        payload = await groq.generate_json(
            QUIZ_PROMPT.format(
                module_name=module["name"],
                module_type=module.get("module_type") or "TEXT",
                module_description=module.get("description") or "",
                module_content=content[:MODULE_CONTENT_LIMIT],
                course_name=course.get("name") or "",
                course_description=course.get("description") or "",
                course_outcome=course.get("outcome") or "",
            ),
            system_prompt=QUIZ_SYSTEM_PROMPT,
            temperature=0.1,
            max_tokens=2500,
        )
        return QuizModel.model_validate(payload), "llm"
    except (GroqAPIError, ValidationError) as e:
        logger.warning(f"⚠️  First quiz attempt failed for module '{module['name']}', trying fallback: {e}")

    try:
        payload = await groq.generate_json(
            QUIZ_FALLBACK_PROMPT.format(
                module_name=module["name"],
                module_content=content[:FALLBACK_CONTENT_LIMIT],
            ),
            system_prompt=QUIZ_SYSTEM_PROMPT,
            temperature=0.1,
            max_tokens=2000,
        )
        return QuizModel.model_validate(payload), "llm_fallback"
    except (GroqAPIError, ValidationError) as e:
        logger.error(f"❌ Fallback quiz attempt failed for module '{module['name']}': {e}")

    return basic_quiz(module["name"]), "basic"


def save_quiz(quiz: QuizModel, module_id: str) -> dict:
    """Persist quiz, questions and options; returns the quiz row with nested questions."""
    supabase = get_supabase_client()

    quiz_row = insert_one(supabase, "Quiz", {
        "module_id": module_id,
        "title": quiz.title,
        "description": quiz.description or "",
    })

    question_rows = insert_many(supabase, "QuizQuestion", [
        {"quiz_id": quiz_row["id"], "question": q.question, "order_index": index}
        for index, q in enumerate(quiz.questions)
    ])

    option_rows = insert_many(supabase, "QuizOption", [
        {"question_id": row["id"], "option": option.text, "correct": option.is_correct}
        for row, q in zip(question_rows, quiz.questions)
        for option in q.options
    ])

    options_by_question: dict[str, list[dict]] = {}
    for option in option_rows:
        options_by_question.setdefault(option["question_id"], []).append(option)

    return {
        **quiz_row,
        "questions": [
            {**row, "options": options_by_question.get(row["id"], [])}
            for row in question_rows
        ],
    }


def _load_module_and_course(module_id: str) -> tuple[dict, dict]:
    supabase = get_supabase_client()

    module_response = supabase.table("Module").select("*").eq("id", module_id).execute()
    if not module_response.data:
        raise ModuleRecordNotFoundError(f"Module {module_id} not found")
    module = module_response.data[0]

    course_response = supabase.table("Course").select("*").eq("id", module["course_id"]).execute()
    course = course_response.data[0] if course_response.data else {}
    return module, course


async def generate_quiz_for_module(module_id: str) -> dict:
    """
    Generate and store a quiz for one module.

    Raises:
        ModuleRecordNotFoundError: If the module does not exist
    """
    start_time = time.time()
    module, course = await asyncio.to_thread(_load_module_and_course, module_id)
    logger.info(f"📝 Generating quiz for module: {module['name']}")

    quiz, source = await build_quiz(module, course)
    stored = await asyncio.to_thread(save_quiz, quiz, module_id)

    logger.info(
        f"✅ Created quiz {stored['id']} ({len(quiz.questions)} questions, source={source}) "
        f"in {time.time() - start_time:.2f}s"
    )
    return {**stored, "source": source}
