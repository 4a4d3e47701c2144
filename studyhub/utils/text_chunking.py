from functools import lru_cache
from typing import List, Dict
import tiktoken
from studyhub.config import settings


@lru_cache(maxsize=1)
def get_tokenizer() -> tiktoken.Encoding:
    # cl100k_base works well for most modern LLMs
    return tiktoken.get_encoding("cl100k_base")


def chunk_note(
    *,
    attachment_id: str,
    content: str,
    chunk_size: int | None = None,
    chunk_overlap: int | None = None,
) -> List[Dict]:
    """
    Split one uploaded note into overlapping token windows.

    Returns chunk dicts (attachment_id, chunk_index, content, token_count)
    ready for embedding.
    """
    chunk_size = chunk_size or settings.chunk_size
    chunk_overlap = settings.chunk_overlap if chunk_overlap is None else chunk_overlap

    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be smaller than chunk_size")

    tokenizer = get_tokenizer()
    tokens = tokenizer.encode(content)
    total_tokens = len(tokens)

    chunks: List[Dict] = []
    start = 0

    while start < total_tokens:
        window = tokens[start:start + chunk_size]

        chunks.append({
            "attachment_id": attachment_id,
            "chunk_index": len(chunks),
            "content": tokenizer.decode(window),
            "token_count": len(window),
        })

        if len(chunks) > settings.max_chunks_per_note:
            raise ValueError("Maximum chunk limit exceeded")

        if start + chunk_size >= total_tokens:
            break
        start += chunk_size - chunk_overlap

    return chunks
