"""
Core chunking implementation for large extracted-text documents.
"""

import re
import logging
from typing import Any, List, Mapping, Optional, Union

from . import config
from .detection import ContentFeatureDetector, detect_content_features
from .models import DocumentChunk, ProcessingOptions

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def count_words(content: str) -> int:
    """
    Whitespace token count.

    Empty strings count as one token and leading or trailing whitespace adds
    an empty token on that side.
    """
    return len(_WHITESPACE.split(content))


class TextChunker:
    """
    Splits a document into overlapping, context-preserving chunks.

    Each chunk's primary span ends on the rightmost paragraph, line or
    sentence break found in the last 30% of the window, and its content is
    prefixed with up to ``overlap_size`` characters of the preceding text.
    """

    def __init__(
        self,
        options: Union[ProcessingOptions, Mapping[str, Any], None] = None,
        detector: Optional[ContentFeatureDetector] = None,
    ):
        """
        Initialize the chunker.

        Args:
            options: Chunk size, overlap and detection settings
            detector: Content feature detection strategy (default: regex heuristics)
        """
        self.options = ProcessingOptions.resolve(options)
        self.detector = detector

    def chunk(self, text: str) -> List[DocumentChunk]:
        """
        Split text into an ordered, non-empty list of chunks.

        Args:
            text: Full document text

        Returns:
            Chunks whose primary spans exactly cover the text
        """
        chunk_size = self.options.chunk_size

        if len(text) <= chunk_size:
            return [self._build_chunk(0, text, 0, len(text))]

        chunks = []
        start_index = 0

        while start_index < len(text):
            end_index = min(start_index + chunk_size, len(text))

            actual_end_index = end_index
            if end_index < len(text):
                break_point = self._find_break_point(text, start_index, end_index)
                if break_point is not None:
                    actual_end_index = break_point + 1

            # Every chunk after the first carries trailing context of its predecessor
            overlap = self.options.overlap_size if chunks else 0
            content_start = max(0, start_index - overlap)

            chunks.append(
                self._build_chunk(
                    len(chunks),
                    text[content_start:actual_end_index],
                    start_index,
                    actual_end_index,
                )
            )
            start_index = actual_end_index

        logger.info(f"Split {len(text)} characters into {len(chunks)} chunks")
        return chunks

    def _find_break_point(self, text: str, start_index: int, end_index: int) -> Optional[int]:
        """
        Find the rightmost acceptable break point at or before end_index.

        Returns:
            Position of the separator's first character, or None for a hard cut
        """
        threshold = start_index + self.options.chunk_size * config.MIN_BREAK_RATIO
        candidates = [
            text.rfind(separator, 0, end_index + len(separator))
            for separator in config.BREAK_SEPARATORS
        ]
        acceptable = [position for position in candidates if position > threshold]
        if not acceptable:
            logger.debug(f"No break point after offset {start_index}; cutting at {end_index}")
            return None
        return max(acceptable)

    def _build_chunk(self, index: int, content: str, start_index: int, end_index: int) -> DocumentChunk:
        features = detect_content_features(
            content,
            enabled=self.options.enable_math_detection,
            detector=self.detector,
        )
        return DocumentChunk(
            id=f"chunk-{index}",
            content=content,
            start_index=start_index,
            end_index=end_index,
            word_count=count_words(content),
            has_equations=features.has_equations,
            has_chemical=features.has_chemical,
            has_supersub=features.has_supersub,
        )


def create_text_chunks(
    text: str,
    options: Union[ProcessingOptions, Mapping[str, Any], None] = None,
    detector: Optional[ContentFeatureDetector] = None,
) -> List[DocumentChunk]:
    """Split large text into manageable chunks while preserving context."""
    return TextChunker(options, detector).chunk(text)
