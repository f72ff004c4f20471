"""
Processing time and complexity estimation.
"""

import math
import logging
from typing import Any, Mapping, Optional, Union

from . import config
from .chunker import create_text_chunks
from .data_models import ProcessingEstimate
from .detection import ContentFeatureDetector, detect_content_features
from .models import ProcessingOptions

logger = logging.getLogger(__name__)


def should_chunk(
    text: str,
    options: Union[ProcessingOptions, Mapping[str, Any], None] = None,
) -> bool:
    """True when the text is longer than a single chunk."""
    return len(text) > ProcessingOptions.resolve(options).chunk_size


def estimate_processing_time(
    text: str,
    options: Union[ProcessingOptions, Mapping[str, Any], None] = None,
    detector: Optional[ContentFeatureDetector] = None,
) -> ProcessingEstimate:
    """
    Estimate processing time based on document length and complexity.

    Feature detection always runs over the full text here, regardless of
    ``enable_math_detection``.

    Args:
        text: Raw document text
        options: Chunking options used for sizing and concurrency
        detector: Content feature detection strategy

    Returns:
        ProcessingEstimate with seconds, chunk count and complexity tier
    """
    opts = ProcessingOptions.resolve(options)
    chunks_required = len(create_text_chunks(text, opts, detector))

    complexity_multiplier = 1.0
    complexity = "low"

    if detect_content_features(text, detector=detector).any():
        complexity_multiplier = config.FEATURE_COMPLEXITY_MULTIPLIER
        complexity = "medium"

    if len(text) > config.LARGE_DOCUMENT_CHARACTERS or chunks_required > config.LARGE_DOCUMENT_CHUNKS:
        complexity_multiplier *= config.SIZE_COMPLEXITY_MULTIPLIER
        complexity = "high"

    estimated_time_seconds = math.ceil(
        (chunks_required * config.BASE_SECONDS_PER_CHUNK * complexity_multiplier) / opts.max_concurrency
    )

    estimate = ProcessingEstimate(
        estimated_time_seconds=estimated_time_seconds,
        chunks_required=chunks_required,
        complexity=complexity,
        recommend_chunking=len(text) > opts.chunk_size or chunks_required > 1,
    )
    logger.info(
        f"Estimated {estimate.estimated_time_seconds}s for {chunks_required} chunks "
        f"({complexity} complexity)"
    )
    return estimate
