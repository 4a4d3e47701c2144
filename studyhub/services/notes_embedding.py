import asyncio
import logging
import time

from studyhub.services.embedding_service import get_embedding_service
from studyhub.services.vector_store import get_vector_store
from studyhub.utils.text_chunking import chunk_note

logger = logging.getLogger(__name__)


async def embed_note(course_id: str, attachment_id: str, text: str) -> int:
    """
    Chunk, embed and index one uploaded note.

    The model and Qdrant calls block, so they run in worker threads.

    Returns:
        Number of vectors written for the note
    """
    start_time = time.time()
    logger.info(f"🧮 Embedding note attachment_id={attachment_id} (course_id={course_id})")

    chunks = chunk_note(attachment_id=attachment_id, content=text)
    if not chunks:
        logger.warning(f"⚠️  Note attachment_id={attachment_id} has no text to embed")
        return 0

    embedding_service = get_embedding_service()
    embeddings = await asyncio.to_thread(embedding_service.embed_texts, [c["content"] for c in chunks])

    vector_store = get_vector_store()
    stored = await asyncio.to_thread(
        vector_store.upsert_note_chunks,
        course_id,
        attachment_id,
        chunks,
        embeddings,
    )

    logger.info(
        f"✅ Embedded note attachment_id={attachment_id}: {len(chunks)} chunks, "
        f"{sum(c['token_count'] for c in chunks):,} tokens in {time.time() - start_time:.2f}s"
    )
    return stored
