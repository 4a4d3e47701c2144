"""
Pytest configuration and shared fixtures
"""
import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset singleton clients before each test"""
    import studyhub.core.supabase_client
    monkeypatch.setattr(studyhub.core.supabase_client, "_supabase_client", None)

    import studyhub.services.vector_store
    monkeypatch.setattr(studyhub.services.vector_store, "_qdrant_client", None)
    monkeypatch.setattr(studyhub.services.vector_store, "_vector_store_instance", None)

    import studyhub.services.groq_service
    monkeypatch.setattr(studyhub.services.groq_service, "_groq_service_instance", None)


@pytest.fixture(autouse=True)
def mock_groq_service_default(monkeypatch, request):
    """Prevent real Groq API calls during tests."""
    if "test_groq_service.py" in request.node.nodeid:
        return

    class DummyGroqService:
        async def generate_json(self, prompt, system_prompt="", temperature=0.2, max_tokens=4000):
            if "quiz" in (system_prompt or "").lower():
                return {
                    "title": "Sample Quiz",
                    "description": "Sample",
                    "questions": [
                        {
                            "question": f"Question {i}",
                            "options": [
                                {"text": "A", "is_correct": True},
                                {"text": "B", "is_correct": False},
                                {"text": "C", "is_correct": False},
                            ],
                        }
                        for i in range(3)
                    ],
                }
            return {
                "name": "Sample Course",
                "subtopics": [
                    {"title": "Basics", "description": "Sample description", "difficulty": "Beginner", "format": "TEXT"}
                ],
            }

        async def generate_text(self, prompt, system_prompt="", temperature=0.7, max_tokens=2000, history=None):
            if "student" in (system_prompt or "").lower():
                return "Could you give me an example?"
            return "# Sample Notes\n\nSample content"

    dummy_service = DummyGroqService()

    # Patch all modules that import get_groq_service directly
    monkeypatch.setattr("studyhub.services.groq_service.get_groq_service", lambda: dummy_service)
    monkeypatch.setattr("studyhub.pipeline.steps.ai_modules.get_groq_service", lambda: dummy_service)
    monkeypatch.setattr("studyhub.services.quiz_generation.get_groq_service", lambda: dummy_service)
    monkeypatch.setattr("studyhub.services.module_tutor.get_groq_service", lambda: dummy_service)


@pytest.fixture
def client():
    """FastAPI test client with the API routers"""
    from fastapi import FastAPI
    from studyhub.api.courses import router as courses_router
    from studyhub.api.modules import router as modules_router
    from studyhub.api.progress import router as progress_router
    from studyhub.api.quizzes import router as quizzes_router
    from studyhub.api.routes import router
    from studyhub.config import settings

    test_app = FastAPI(title=settings.app_name, debug=settings.debug)
    test_app.include_router(router, prefix="/api")
    test_app.include_router(courses_router, prefix="/api/courses", tags=["courses"])
    test_app.include_router(modules_router, prefix="/api/modules", tags=["modules"])
    test_app.include_router(progress_router, prefix="/api/progress", tags=["progress"])
    test_app.include_router(quizzes_router, prefix="/api/quizzes", tags=["quizzes"])

    return TestClient(test_app)


@pytest.fixture
def mock_supabase_client(monkeypatch):
    """Mock Supabase client"""
    mock_client = Mock()

    def create_query_chain():
        chain = Mock()
        chain.select = Mock(return_value=chain)
        chain.eq = Mock(return_value=chain)
        chain.in_ = Mock(return_value=chain)
        chain.order = Mock(return_value=chain)
        chain.insert = Mock(return_value=chain)
        chain.update = Mock(return_value=chain)
        chain.upsert = Mock(return_value=chain)
        chain.delete = Mock(return_value=chain)
        chain.execute = Mock(return_value=Mock(data=[]))
        return chain

    mock_table = Mock()
    mock_table.select = Mock(return_value=create_query_chain())
    mock_table.insert = Mock(return_value=create_query_chain())
    mock_table.update = Mock(return_value=create_query_chain())
    mock_table.upsert = Mock(return_value=create_query_chain())
    mock_table.delete = Mock(return_value=create_query_chain())

    mock_client.table = Mock(return_value=mock_table)

    monkeypatch.setattr("studyhub.core.supabase_client._supabase_client", mock_client)

    return mock_client


@pytest.fixture
def mock_clerk_user():
    """Mock Clerk user info"""
    return {
        "clerk_user_id": "user_123",
        "email": "test@example.com",
        "name": "Test User"
    }


@pytest.fixture
def auth_override(client, mock_clerk_user):
    """Bypass Clerk verification for API tests"""
    from studyhub.utils.clerk_auth import verify_clerk_token

    async def mock_verify_token(authorization=None):
        return mock_clerk_user

    client.app.dependency_overrides[verify_clerk_token] = mock_verify_token
    yield mock_clerk_user
    client.app.dependency_overrides.clear()


@pytest.fixture
def course_form():
    """Valid course creation payload"""
    return {
        "name": "Intro to Python",
        "description": "Learn Python from scratch",
        "current_level": "beginner",
        "outcome": "write small automation scripts",
        "teaching_style": "feynman",
        "notes": [
            {"name": "week1.md", "content_type": "text/markdown", "text": "Variables and types"},
            {"name": "week2.md", "content_type": "text/markdown", "text": "Functions and modules"},
        ],
    }
