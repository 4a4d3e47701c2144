"""
Tests for the course-creation workflow graph and entry point
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from studyhub.events import ItemError, NodeState, StepFailedError
from studyhub.pipeline import build_create_course_graph, create_course_entry
from studyhub.pipeline.errors import AuthenticationError
from studyhub.pipeline.models import CourseOutline, CreateCourseRequest, Subtopic, UploadNotesResult

MODULE = "studyhub.pipeline.create_course"

USER = {"id": "user-uuid", "email": "test@example.com", "name": "Test User"}
COURSE = {
    "id": "course-uuid",
    "name": "Intro to Python",
    "current_level": "beginner",
    "outcome": "write small automation scripts",
}
OUTLINE = CourseOutline(
    name="Intro to Python",
    subtopics=[
        Subtopic(title="Variables", description="Names and values"),
        Subtopic(title="Functions", description="Reusable code", difficulty="Intermediate"),
    ],
)


@pytest.fixture
def steps(course_form):
    """Patch every step function used by the workflow."""
    validated = CreateCourseRequest.model_validate(course_form)
    attachments = [{"id": "att-1", "name": "week1.md"}, {"id": "att-2", "name": "week2.md"}]

    mocks = {
        "authenticate_user": AsyncMock(return_value=USER),
        "validate_course_data": AsyncMock(return_value=validated),
        "create_db_course": AsyncMock(return_value=COURSE),
        "create_user_course": AsyncMock(return_value={"course_id": COURSE["id"], "user_id": USER["id"]}),
        "upload_and_embed_notes": AsyncMock(return_value=UploadNotesResult(attachments=attachments)),
        "create_ai_modules": AsyncMock(return_value=OUTLINE),
        "upload_modules": AsyncMock(return_value={"count": 2, "modules": []}),
        "send_course_ready_notification": AsyncMock(return_value={"id": "notification-1"}),
    }

    patchers = [patch(f"{MODULE}.{name}", mock) for name, mock in mocks.items()]
    for patcher in patchers:
        patcher.start()
    yield mocks
    for patcher in patchers:
        patcher.stop()


class TestCreateCourseGraph:
    """Test cases for the workflow wiring"""

    def test_wave_plan(self):
        graph = build_create_course_graph()

        assert graph.waves() == [
            {"auth"},
            {"validate-data"},
            {"create-db-course"},
            {"create-user-course", "upload-notes", "create-ai-modules"},
            {"upload-modules"},
            {"send-notification"},
        ]

    def test_every_step_is_registered(self):
        graph = build_create_course_graph()

        assert len(graph) == 8
        assert graph.predecessors("upload-modules") == ["create-ai-modules"]
        assert graph.successors("create-ai-modules") == ["upload-modules"]
        assert graph.successors("upload-modules") == ["send-notification"]

    def test_each_build_creates_an_independent_graph(self):
        assert build_create_course_graph() is not build_create_course_graph()


class TestCreateCourseEntry:
    """Test cases for create_course_entry"""

    @pytest.mark.asyncio
    async def test_success_returns_combined_result(self, steps, course_form, mock_clerk_user):
        result = await create_course_entry(course_form, mock_clerk_user)

        assert result["course"] == COURSE
        assert result["user_course"]["user_id"] == "user-uuid"
        assert result["modules_count"] == 2
        assert result["ai_modules"]["name"] == "Intro to Python"
        assert [s["title"] for s in result["ai_modules"]["subtopics"]] == ["Variables", "Functions"]
        assert len(result["attachments"]) == 2
        assert result["embedding_errors"] == []

    @pytest.mark.asyncio
    async def test_steps_receive_predecessor_outputs(self, steps, course_form, mock_clerk_user):
        await create_course_entry(course_form, mock_clerk_user)

        steps["authenticate_user"].assert_awaited_once_with(mock_clerk_user)
        steps["validate_course_data"].assert_awaited_once_with(course_form)
        steps["create_db_course"].assert_awaited_once_with(steps["validate_course_data"].return_value)
        steps["create_user_course"].assert_awaited_once_with(course_id="course-uuid", user_id="user-uuid")
        steps["create_ai_modules"].assert_awaited_once_with(
            name="Intro to Python",
            current_level="beginner",
            outcome="write small automation scripts",
            teaching_style="feynman",
        )
        # Only the user id is forwarded, never the whole auth result
        steps["upload_modules"].assert_awaited_once_with(outline=OUTLINE, course_id="course-uuid", user_id="user-uuid")
        steps["send_course_ready_notification"].assert_awaited_once_with(
            user_id="user-uuid", course_name="Intro to Python"
        )

        notes_call = steps["upload_and_embed_notes"].await_args
        assert notes_call.kwargs["course_id"] == "course-uuid"
        assert notes_call.kwargs["user_id"] == "user-uuid"
        assert [note.name for note in notes_call.kwargs["notes"]] == ["week1.md", "week2.md"]

    @pytest.mark.asyncio
    async def test_parallel_steps_overlap(self, steps, course_form, mock_clerk_user):
        in_flight = {"current": 0, "peak": 0}

        def tracked(value):
            async def side_effect(*args, **kwargs):
                in_flight["current"] += 1
                in_flight["peak"] = max(in_flight["peak"], in_flight["current"])
                await asyncio.sleep(0.01)
                in_flight["current"] -= 1
                return value

            return side_effect

        steps["create_user_course"].side_effect = tracked({"course_id": "course-uuid"})
        steps["upload_and_embed_notes"].side_effect = tracked(UploadNotesResult())
        steps["create_ai_modules"].side_effect = tracked(OUTLINE)

        await create_course_entry(course_form, mock_clerk_user)

        assert in_flight["peak"] == 3

    @pytest.mark.asyncio
    async def test_ai_module_failure_stops_downstream_steps(self, steps, course_form, mock_clerk_user):
        steps["create_ai_modules"].side_effect = RuntimeError("Groq unavailable")

        with pytest.raises(StepFailedError) as exc_info:
            await create_course_entry(course_form, mock_clerk_user)

        error = exc_info.value
        assert error.node_id == "create-ai-modules"
        assert isinstance(error.__cause__, RuntimeError)

        report = error.report
        assert report.state("create-user-course") is NodeState.COMPLETED
        assert report.state("upload-notes") is NodeState.COMPLETED
        assert report.state("upload-modules") is NodeState.SKIPPED
        assert report.state("send-notification") is NodeState.SKIPPED
        steps["upload_modules"].assert_not_awaited()
        steps["send_course_ready_notification"].assert_not_awaited()

    @pytest.mark.asyncio
    async def test_auth_failure_runs_nothing_else(self, steps, course_form):
        steps["authenticate_user"].side_effect = AuthenticationError("Unauthorized")

        with pytest.raises(StepFailedError) as exc_info:
            await create_course_entry(course_form, None)

        assert isinstance(exc_info.value.error, AuthenticationError)
        assert exc_info.value.report.nodes_in_state(NodeState.SKIPPED) == {
            "validate-data",
            "create-db-course",
            "create-user-course",
            "upload-notes",
            "create-ai-modules",
            "upload-modules",
            "send-notification",
        }
        steps["validate_course_data"].assert_not_awaited()

    @pytest.mark.asyncio
    async def test_embedding_errors_are_reported(self, steps, course_form, mock_clerk_user):
        steps["upload_and_embed_notes"].return_value = UploadNotesResult(
            attachments=[{"id": "att-1", "name": "week1.md"}],
            embedding_errors=[ItemError(index=0, item="Embedding note 'week1.md'", error=ValueError("empty"))],
        )

        result = await create_course_entry(course_form, mock_clerk_user)

        assert result["embedding_errors"] == [
            {"note": "Embedding note 'week1.md'", "error": "ValueError: empty"}
        ]
        steps["send_course_ready_notification"].assert_awaited_once()
