import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studyhub.api.courses import router as courses_router
from studyhub.api.modules import router as modules_router
from studyhub.api.progress import router as progress_router
from studyhub.api.quizzes import router as quizzes_router
from studyhub.api.routes import router
from studyhub.config import settings

# Configure logging from settings
logging.basicConfig(level=settings.log_level)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logging.info("=" * 60)
    logging.info(f"🚀 {settings.app_name} starting up...")
    logging.info("=" * 60)

    logging.info("📋 App Configuration:")
    logging.info(f"  Environment: {settings.environment}")
    logging.info(f"  Debug mode: {settings.debug}")
    logging.info(f"  Log level: {settings.log_level}")
    logging.info(f"  CORS Origins: {settings.cors_origins}")

    logging.info("💾 Storage Configuration:")
    logging.info(f"  Supabase URL: {'✓ Configured' if settings.supabase_url else '✗ Not set'}")
    logging.info(f"  Notes bucket: {settings.notes_bucket}")
    logging.info(f"  Qdrant URL: {'✓ Configured' if settings.qdrant_url else '✗ Not set'}")
    logging.info(f"  Notes collection: {settings.notes_collection}")

    logging.info("🤖 LLM Configuration:")
    logging.info(f"  Groq API: {'✓ Configured' if settings.groq_api_key else '✗ Not set'}")
    logging.info(f"  Groq Model: {settings.groq_model}")
    logging.info(f"  Embedding Model: {settings.embedding_model_name}")

    logging.info("🔐 Authentication Configuration:")
    logging.info(f"  Clerk Secret Key: {'✓ Configured' if settings.clerk_secret_key else '✗ Not set'}")

    logging.info("✅ Startup complete - Ready to accept requests")

    yield

    logging.info("🛑 App is shutting down...")


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")
app.include_router(courses_router, prefix="/api/courses", tags=["courses"])
app.include_router(modules_router, prefix="/api/modules", tags=["modules"])
app.include_router(progress_router, prefix="/api/progress", tags=["progress"])
app.include_router(quizzes_router, prefix="/api/quizzes", tags=["quizzes"])


def run():
    """Serve the API with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run("studyhub.main:app", host=settings.host, port=settings.port, reload=settings.environment == "development")


if __name__ == "__main__":
    run()
