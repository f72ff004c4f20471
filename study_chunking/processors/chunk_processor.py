"""
Progress tracking for chunk processing.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, int], None]


class ChunkProcessor:
    """
    Counts completed chunks and reports percentage progress.

    The tracker is handed to the batch scheduler explicitly; it is not safe
    for use across threads, only across coroutines on one event loop.
    """

    def __init__(self, total_chunks: int, on_progress: Optional[ProgressCallback] = None):
        """
        Initialize the tracker.

        Args:
            total_chunks: Number of chunks that make up 100%
            on_progress: Called with (percent_complete, chunk_index) after each report
        """
        if total_chunks < 0:
            raise ValueError(f"total_chunks must be non-negative, got {total_chunks}")
        self.total_chunks = total_chunks
        self.on_progress = on_progress
        self._processed_chunks = 0

    @property
    def processed_chunks(self) -> int:
        return self._processed_chunks

    @property
    def is_complete(self) -> bool:
        return self._processed_chunks >= self.total_chunks

    def report_progress(self, chunk_index: int) -> None:
        """Record one finished chunk and notify the callback."""
        self._processed_chunks += 1
        progress = self.get_progress()
        logger.debug(f"Chunk {chunk_index} done ({progress:.1f}%)")
        if self.on_progress is not None:
            self.on_progress(progress, chunk_index)

    def get_progress(self) -> float:
        # An empty document has nothing left to do
        if self.total_chunks == 0:
            return 100.0
        return (self._processed_chunks / self.total_chunks) * 100
