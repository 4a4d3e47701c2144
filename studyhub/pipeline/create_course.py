"""
Course-creation workflow.

Flow:
1. auth                 - resolve the caller to a User row
2. validate-data        - validate the submitted form
3. create-db-course     - insert the Course row
4. in parallel, once the course exists:
   a. create-user-course  - enroll the creator
   b. upload-notes        - upload notes, then embed each one (best effort)
   c. create-ai-modules   - generate the subtopic outline with the LLM
5. upload-modules       - store one Module per subtopic
6. send-notification    - tell the user the course is ready

Every node is built once with its final operation. Inputs come from
``context.inputs`` and predecessor outputs from ``context.result(...)``;
the graph guarantees a predecessor has completed before it is read.
"""

import logging
from typing import Any

from studyhub.events import DependencyGraph, EventOrchestrator, RunContext, TaskNode
from studyhub.pipeline.models import CreateCourseRequest
from studyhub.pipeline.steps import (
    authenticate_user,
    create_ai_modules,
    create_db_course,
    create_user_course,
    send_course_ready_notification,
    upload_and_embed_notes,
    upload_modules,
    validate_course_data,
)

logger = logging.getLogger(__name__)

AUTH = "auth"
VALIDATE_DATA = "validate-data"
CREATE_DB_COURSE = "create-db-course"
CREATE_USER_COURSE = "create-user-course"
UPLOAD_NOTES = "upload-notes"
CREATE_AI_MODULES = "create-ai-modules"
UPLOAD_MODULES = "upload-modules"
SEND_NOTIFICATION = "send-notification"


async def _authenticate(ctx: RunContext):
    return await authenticate_user(ctx.inputs.get("user_info"))


async def _validate(ctx: RunContext):
    return await validate_course_data(ctx.inputs["form"])


async def _create_course(ctx: RunContext):
    return await create_db_course(ctx.result(VALIDATE_DATA))


async def _create_user_course(ctx: RunContext):
    return await create_user_course(
        course_id=ctx.result(CREATE_DB_COURSE)["id"],
        user_id=ctx.result(AUTH)["id"],
    )


async def _upload_notes(ctx: RunContext):
    return await upload_and_embed_notes(
        notes=ctx.result(VALIDATE_DATA).notes,
        course_id=ctx.result(CREATE_DB_COURSE)["id"],
        user_id=ctx.result(AUTH)["id"],
    )


async def _create_ai_modules(ctx: RunContext):
    course = ctx.result(CREATE_DB_COURSE)
    return await create_ai_modules(
        name=course["name"],
        current_level=course.get("current_level") or "",
        outcome=course.get("outcome") or "",
        teaching_style=ctx.result(VALIDATE_DATA).teaching_style,
    )


async def _upload_modules(ctx: RunContext):
    return await upload_modules(
        outline=ctx.result(CREATE_AI_MODULES),
        course_id=ctx.result(CREATE_DB_COURSE)["id"],
        user_id=ctx.result(AUTH)["id"],
    )


async def _send_notification(ctx: RunContext):
    return await send_course_ready_notification(
        user_id=ctx.result(AUTH)["id"],
        course_name=ctx.result(CREATE_DB_COURSE)["name"],
    )


def build_create_course_nodes() -> dict[str, TaskNode]:
    nodes = [
        TaskNode(AUTH, "Authenticate", "Resolve the signed-in user", _authenticate),
        TaskNode(VALIDATE_DATA, "Validate Data", "Validate the course form", _validate),
        TaskNode(CREATE_DB_COURSE, "Create Course", "Insert the course record", _create_course),
        TaskNode(CREATE_USER_COURSE, "Create User Course", "Enroll the creator in the course", _create_user_course),
        TaskNode(UPLOAD_NOTES, "Upload Notes", "Upload and embed course notes", _upload_notes),
        TaskNode(CREATE_AI_MODULES, "Create AI Modules", "Generate the course outline", _create_ai_modules),
        TaskNode(UPLOAD_MODULES, "Upload Modules", "Store generated modules", _upload_modules),
        TaskNode(SEND_NOTIFICATION, "Send Notification", "Notify the user", _send_notification),
    ]
    return {node.node_id: node for node in nodes}


def build_create_course_graph() -> DependencyGraph:
    n = build_create_course_nodes()
    # Pairs, not a dict: a repeated id must reach the graph to be rejected
    return DependencyGraph([
        (n[AUTH], [n[VALIDATE_DATA]]),
        (n[VALIDATE_DATA], [n[CREATE_DB_COURSE]]),
        (n[CREATE_DB_COURSE], [n[CREATE_USER_COURSE], n[UPLOAD_NOTES], n[CREATE_AI_MODULES]]),
        (n[CREATE_USER_COURSE], []),
        (n[UPLOAD_NOTES], []),
        (n[CREATE_AI_MODULES], [n[UPLOAD_MODULES]]),
        (n[UPLOAD_MODULES], [n[SEND_NOTIFICATION]]),
        (n[SEND_NOTIFICATION], []),
    ])


async def create_course_entry(form: CreateCourseRequest | dict[str, Any], user_info: dict | None) -> dict:
    """
    Run the whole course-creation workflow for one request.

    Rows written before a failing step are not rolled back.

    Raises:
        StepFailedError: If any step fails; ``__cause__`` is the step's error
    """
    orchestrator = EventOrchestrator(build_create_course_graph(), name="create-course")
    report = await orchestrator.run({"form": form, "user_info": user_info})

    outline = report.result(CREATE_AI_MODULES)
    notes = report.result(UPLOAD_NOTES)

    return {
        "course": report.result(CREATE_DB_COURSE),
        "user_course": report.result(CREATE_USER_COURSE),
        "ai_modules": {
            "name": outline.name,
            "subtopics": [subtopic.model_dump() for subtopic in outline.subtopics],
        } if outline else None,
        "modules_count": report.result(UPLOAD_MODULES)["count"],
        "attachments": notes.attachments,
        "embedding_errors": [
            {"note": error.item, "error": error.message} for error in notes.embedding_errors
        ],
    }
