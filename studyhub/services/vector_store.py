"""
Qdrant-backed storage for course note embeddings.
"""

import logging
import time
import uuid
from typing import Dict, List

from qdrant_client import QdrantClient
from qdrant_client.http.models import FieldCondition, Filter, FilterSelector, MatchValue, PointStruct

from studyhub.config import settings

logger = logging.getLogger(__name__)

VECTOR_SIZE = 384  # all-MiniLM-L6-v2

_qdrant_client: QdrantClient | None = None
_vector_store_instance = None


def get_qdrant_client() -> QdrantClient:
    """
    Get or create singleton Qdrant client instance
    """
    global _qdrant_client

    if _qdrant_client is None:
        if not settings.qdrant_url:
            raise ValueError("QDRANT_URL is not configured. Please set it in your .env file.")

        _qdrant_client = QdrantClient(
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key if settings.qdrant_api_key else None,
        )
        logger.info("Qdrant client initialized successfully")

    return _qdrant_client


def get_vector_store() -> 'NoteVectorStore':
    """
    Get or create singleton NoteVectorStore (collection is checked once).
    """
    global _vector_store_instance

    if _vector_store_instance is None:
        logger.info(f"🔍 Initializing NoteVectorStore (first use)...")
        _vector_store_instance = NoteVectorStore(get_qdrant_client())
        logger.info(f"✅ NoteVectorStore ready (will reuse for future requests)")

    return _vector_store_instance


class NoteVectorStore:
    def __init__(self, client: QdrantClient, collection_name: str | None = None, ensure_collection: bool = True):
        self.client = client
        self.collection_name = collection_name or settings.notes_collection
        if ensure_collection:
            self._ensure_collection()

    def _ensure_collection(self):
        collections = self.client.get_collections().collections
        if self.collection_name in [c.name for c in collections]:
            logger.debug(f"✅ Collection '{self.collection_name}' already exists")
            return

        logger.info(f"📦 Creating new Qdrant collection: {self.collection_name}")
        self.client.create_collection(
            collection_name=self.collection_name,
            vectors_config={
                "size": VECTOR_SIZE,
                "distance": "Cosine",
            },
        )
        # Filters and deletes go through these payload fields
        for field_name in ("course_id", "attachment_id"):
            self.client.create_payload_index(
                collection_name=self.collection_name,
                field_name=field_name,
                field_schema="keyword",
            )
        logger.info(f"✅ Collection '{self.collection_name}' created with course/attachment indexes")

    def upsert_note_chunks(
        self,
        course_id: str,
        attachment_id: str,
        chunks: List[Dict],
        embeddings: List[List[float]],
    ) -> int:
        """
        Store one vector per chunk of a note. Returns the number of points written.
        """
        if not chunks:
            logger.warning(f"⚠️  No chunks to upsert for attachment_id={attachment_id}")
            return 0

        if len(chunks) != len(embeddings):
            raise ValueError(f"Mismatched lengths: chunks={len(chunks)}, embeddings={len(embeddings)}")

        points = [
            PointStruct(
                # Deterministic ids make re-embedding a note overwrite its old points
                id=str(uuid.uuid5(uuid.NAMESPACE_URL, f"{attachment_id}:{chunk['chunk_index']}")),
                vector=embedding,
                payload={
                    "course_id": course_id,
                    "attachment_id": attachment_id,
                    "chunk_index": chunk["chunk_index"],
                    "content": chunk["content"],
                    "token_count": chunk["token_count"],
                },
            )
            for chunk, embedding in zip(chunks, embeddings)
        ]

        upsert_start = time.time()
        self.client.upsert(collection_name=self.collection_name, points=points)
        logger.info(
            f"✅ Upserted {len(points)} note vectors for attachment_id={attachment_id} "
            f"in {time.time() - upsert_start:.2f}s"
        )
        return len(points)

    def delete_course_points(self, course_id: str) -> None:
        self.client.delete(
            collection_name=self.collection_name,
            points_selector=FilterSelector(
                filter=Filter(must=[FieldCondition(key="course_id", match=MatchValue(value=course_id))])
            ),
        )
        logger.info(f"🗑️  Deleted note vectors for course_id={course_id}")
