import asyncio
import logging
import re
import time
import uuid
from typing import List

from studyhub.config import settings
from studyhub.core.supabase_client import get_notes_bucket, get_supabase_client
from studyhub.events import run_best_effort
from studyhub.pipeline.models import NoteUpload, UploadNotesResult
from studyhub.services.notes_embedding import embed_note
from studyhub.utils.db_helpers import insert_one

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _file_key(user_id: str, course_id: str, name: str) -> str:
    safe_name = _UNSAFE_KEY_CHARS.sub("-", name).strip("-") or "note"
    return f"{user_id}/{course_id}/{uuid.uuid4().hex}-{safe_name}"


def _store_note(note: NoteUpload, course_id: str, user_id: str) -> dict:
    supabase = get_supabase_client()
    bucket = get_notes_bucket()
    file_key = _file_key(user_id, course_id, note.name)

    bucket.upload(
        path=file_key,
        file=note.text.encode("utf-8"),
        file_options={"content-type": note.content_type},
    )

    return insert_one(supabase, "CourseAttachment", {
        "course_id": course_id,
        "user_id": user_id,
        "name": note.name,
        "file_key": file_key,
        "url": bucket.get_public_url(file_key),
        "content_type": note.content_type,
    })


async def upload_notes(notes: List[NoteUpload], course_id: str, user_id: str) -> List[dict]:
    """
    Upload every note to storage and create its CourseAttachment row.

    Any upload failure fails the step. Attachments come back in note order.
    """
    if not notes:
        return []

    logger.info(f"📤 Uploading {len(notes)} notes to bucket '{settings.notes_bucket}' for course_id={course_id}")
    upload_start = time.time()

    attachments = await asyncio.gather(
        *(asyncio.to_thread(_store_note, note, course_id, user_id) for note in notes)
    )

    logger.info(f"✅ Uploaded {len(attachments)} notes in {time.time() - upload_start:.2f}s")
    return list(attachments)


async def upload_and_embed_notes(notes: List[NoteUpload], course_id: str, user_id: str) -> UploadNotesResult:
    """
    Upload the notes, then embed each one concurrently on a best-effort basis.

    A note whose embedding fails is reported in ``embedding_errors``; the
    attachment itself is kept and the step still succeeds.
    """
    attachments = await upload_notes(notes, course_id, user_id)
    if not attachments:
        return UploadNotesResult()

    async def embed(pair):
        attachment, note = pair
        return await embed_note(course_id=course_id, attachment_id=attachment["id"], text=note.text)

    fan_out = await run_best_effort(
        list(zip(attachments, notes)),
        embed,
        describe=lambda pair: f"Embedding note '{pair[0]['name']}'",
    )

    if not fan_out.ok:
        logger.warning(f"⚠️  {len(fan_out.errors)}/{len(attachments)} notes could not be embedded for course_id={course_id}")

    return UploadNotesResult(attachments=attachments, embedding_errors=fan_out.errors)
