"""
Batch processing module for running a per-chunk operation under a concurrency ceiling.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence, TypeVar, Union

from . import config
from .data_models import ChunkOutput, ChunkResult
from .models import DocumentChunk, ProcessingOptions
from .processors import ChunkProcessor

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProcessingFunction = Callable[[DocumentChunk], Awaitable[Any]]


class PacingPolicy(ABC):
    """Decides how long to wait between consecutive batches."""

    @abstractmethod
    async def wait(self, batch_index: int) -> None:
        """Suspend after batch ``batch_index`` before the next one starts."""
        pass


class FixedDelayPacing(PacingPolicy):
    """Sleeps a fixed number of seconds between batches."""

    def __init__(self, delay_seconds: float = config.BATCH_DELAY_SECONDS):
        self.delay_seconds = delay_seconds

    async def wait(self, batch_index: int) -> None:
        logger.debug(f"Cooling down {self.delay_seconds}s after batch {batch_index + 1}")
        await asyncio.sleep(self.delay_seconds)


class NoPacing(PacingPolicy):
    """Starts the next batch immediately."""

    async def wait(self, batch_index: int) -> None:
        return None


class BatchProcessor:
    """
    Creates batches of chunks and processes them one batch at a time.

    Chunks inside a batch run concurrently; a failure in one chunk is
    recorded on its result and never stops the batch or later batches.
    """

    def __init__(self, batch_size: int = config.DEFAULT_MAX_CONCURRENCY, pacing: Optional[PacingPolicy] = None):
        """
        Initialize the batch processor.

        Args:
            batch_size: Number of chunks in flight at once (default: 3)
            pacing: Wait policy between batches (default: fixed 1 second delay)
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.batch_size = batch_size
        self.pacing = pacing or FixedDelayPacing()

    def create_batches(self, items: Sequence[T]) -> List[List[T]]:
        """
        Split items into consecutive batches of the specified size.

        Args:
            items: Ordered items to batch

        Returns:
            List of batches, where each batch is a list of items
        """
        batches = []

        for i in range(0, len(items), self.batch_size):
            batch = list(items[i:i+self.batch_size])
            batches.append(batch)

        return batches

    async def process(
        self,
        chunks: Sequence[DocumentChunk],
        processing_function: ProcessingFunction,
        progress: Optional[ChunkProcessor] = None,
    ) -> List[ChunkResult]:
        """
        Run processing_function over every chunk, batch by batch.

        Args:
            chunks: Ordered chunks to process
            processing_function: Async per-chunk operation
            progress: Optional tracker notified once per finished chunk

        Returns:
            Results aligned with the input order
        """
        batches = self.create_batches(chunks)
        results: List[Optional[ChunkResult]] = [None] * len(chunks)
        logger.info(f"Processing {len(chunks)} chunks in {len(batches)} batches of up to {self.batch_size}")

        offset = 0
        for batch_idx, batch in enumerate(batches):
            logger.info(f"Processing batch {batch_idx+1}/{len(batches)}")

            batch_results = await asyncio.gather(*(
                self._process_chunk(chunk, offset + position, processing_function, progress)
                for position, chunk in enumerate(batch)
            ))

            for chunk_result in batch_results:
                results[chunk_result.chunk_index] = chunk_result
            offset += len(batch)

            if batch_idx < len(batches) - 1:
                await self.pacing.wait(batch_idx)

        failed = sum(1 for r in results if not r.success)
        if failed:
            logger.warning(f"{failed} of {len(results)} chunks failed")
        return results

    async def _process_chunk(
        self,
        chunk: DocumentChunk,
        chunk_index: int,
        processing_function: ProcessingFunction,
        progress: Optional[ChunkProcessor],
    ) -> ChunkResult:
        try:
            output = ChunkOutput.from_value(await processing_function(chunk))
            chunk_result = ChunkResult(chunk_index=chunk_index, result=output, success=True)
        except Exception as e:
            logger.error(f"Error processing chunk {chunk.id}: {str(e)}")
            chunk_result = ChunkResult(
                chunk_index=chunk_index,
                result=ChunkOutput(extracted_text=chunk.content),
                success=False,
                error=str(e) or type(e).__name__,
            )

        if progress is not None:
            progress.report_progress(chunk_index)
        return chunk_result


async def process_document_chunks(
    chunks: Sequence[DocumentChunk],
    processing_function: ProcessingFunction,
    options: Union[ProcessingOptions, Mapping[str, Any], None] = None,
    pacing: Optional[PacingPolicy] = None,
    progress: Optional[ChunkProcessor] = None,
) -> List[ChunkResult]:
    """Process document chunks in parallel batches with rate limiting."""
    opts = ProcessingOptions.resolve(options)
    processor = BatchProcessor(batch_size=opts.max_concurrency, pacing=pacing)
    return await processor.process(chunks, processing_function, progress=progress)
