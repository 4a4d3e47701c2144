import logging
from typing import Any

from pydantic import ValidationError

from studyhub.pipeline.errors import CourseValidationError
from studyhub.pipeline.models import CreateCourseRequest

logger = logging.getLogger(__name__)


async def validate_course_data(form: CreateCourseRequest | dict[str, Any]) -> CreateCourseRequest:
    """Validate the submitted course form; raises CourseValidationError."""
    raw = form.model_dump() if isinstance(form, CreateCourseRequest) else form

    try:
        data = CreateCourseRequest.model_validate(raw)
    except ValidationError as e:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in e.errors())
        logger.warning(f"⚠️  Course form rejected (fields: {fields})")
        raise CourseValidationError(
            f"Invalid course data: {fields}",
            errors=e.errors(include_url=False, include_context=False),
        ) from e

    logger.info(f"✅ Course form valid: '{data.name}' ({len(data.notes)} notes, style={data.teaching_style})")
    return data
