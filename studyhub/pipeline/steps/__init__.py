"""
Course-creation step implementations.
"""

from studyhub.pipeline.steps.auth import authenticate_user
from studyhub.pipeline.steps.validate_data import validate_course_data
from studyhub.pipeline.steps.courses import create_db_course, create_user_course
from studyhub.pipeline.steps.notes import upload_and_embed_notes, upload_notes
from studyhub.pipeline.steps.ai_modules import create_ai_modules
from studyhub.pipeline.steps.modules import upload_modules
from studyhub.pipeline.steps.send_notification import send_course_ready_notification

__all__ = [
    "authenticate_user",
    "create_ai_modules",
    "create_db_course",
    "create_user_course",
    "send_course_ready_notification",
    "upload_and_embed_notes",
    "upload_modules",
    "upload_notes",
    "validate_course_data",
]
