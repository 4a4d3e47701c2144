"""
Sentence-transformers wrapper used to embed note chunks.
"""

import logging
import time
from typing import List, TYPE_CHECKING

from studyhub.config import settings

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)

ENCODE_BATCH_SIZE = 32

_embedding_service_instance = None


def get_embedding_service() -> 'EmbeddingService':
    """
    Return the shared EmbeddingService, loading the model on first call.

    Loading takes a few seconds, so it happens once per process and not at
    import time.
    """
    global _embedding_service_instance

    if _embedding_service_instance is None:
        from sentence_transformers import SentenceTransformer

        load_start = time.time()
        logger.info(f"🤖 Loading embedding model '{settings.embedding_model_name}'...")
        _embedding_service_instance = EmbeddingService(SentenceTransformer(settings.embedding_model_name))
        logger.info(
            f"✅ Embedding model loaded in {time.time() - load_start:.2f}s "
            f"(dim={_embedding_service_instance.dimension})"
        )

    return _embedding_service_instance


class EmbeddingService:
    def __init__(self, model: 'SentenceTransformer'):
        self.model = model

    @property
    def dimension(self) -> int:
        return self.model.get_sentence_embedding_dimension()

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        """Unit-length embeddings, one per text, in input order."""
        if not texts:
            return []

        encode_start = time.time()
        vectors = self.model.encode(
            texts,
            batch_size=ENCODE_BATCH_SIZE,
            show_progress_bar=False,
            normalize_embeddings=True,
        )
        logger.debug(f"   Encoded {len(texts)} chunks in {time.time() - encode_start:.2f}s")

        return vectors.tolist()
