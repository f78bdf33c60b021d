"""
Chunked Generation Driver
Splits a large selection into small generation calls, sends them one after
another and folds the results into a running total for progress display
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterator, List, Optional, Sequence

from app.config import settings
from app.logging_config import get_logger

logger = get_logger("BATCH")

SendChunk = Callable[[str, list], Awaitable[dict]]
ProgressCallback = Callable[["BatchProgress"], None]


def chunk_rows(rows: Sequence, size: int) -> Iterator[list]:
    """Successive slices of at most `size` rows"""
    if size < 1:
        raise ValueError("chunk size must be at least 1")
    for start in range(0, len(rows), size):
        yield list(rows[start:start + size])


@dataclass
class BatchProgress:
    total_chunks: int = 0
    current_chunk: int = 0
    generated: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.generated > 0

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    def add(self, chunk_result: dict):
        self.generated += int(chunk_result.get("generated", 0))
        self.failed += int(chunk_result.get("failed", 0))
        self.errors.extend(chunk_result.get("errors") or [])


async def run_chunked_generation(
    event_id: str,
    rows: Sequence,
    send_chunk: SendChunk,
    chunk_size: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> BatchProgress:
    """
    Drive generation for all rows, one chunk per call

    Args:
        event_id: Target event
        rows: Selected rows ({"data": ..., "isValid": true})
        send_chunk: Coroutine performing one generation call and returning
            {"generated", "failed", "errors"}
        chunk_size: Rows per call (defaults to CLIENT_CHUNK_SIZE)
        on_progress: Called after every completed chunk

    Returns:
        Accumulated progress. A failing call stops the run and is re-raised;
        chunks already sent stay committed.
    """
    chunks = list(chunk_rows(rows, chunk_size or settings.CLIENT_CHUNK_SIZE))
    progress = BatchProgress(total_chunks=len(chunks))

    for number, chunk in enumerate(chunks, start=1):
        progress.current_chunk = number
        try:
            chunk_result = await send_chunk(event_id, chunk)
        except Exception:
            logger.error("Chunk failed, stopping", extra={"data": {
                "chunk": number,
                "totalChunks": progress.total_chunks,
                "generated": progress.generated,
            }})
            raise
        progress.add(chunk_result)
        if on_progress:
            on_progress(progress)

    logger.info("Chunked generation finished", extra={"data": {
        "generated": progress.generated,
        "failed": progress.failed,
    }})
    return progress
