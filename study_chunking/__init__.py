"""
Study Document Chunking
=======================

This package splits large extracted-text documents into overlapping chunks,
runs an AI operation over them in paced batches, and merges the per-chunk
summaries, explanations and quiz questions into one document-level result.
"""

__version__ = "0.1.0"

from .models import ContentFeatures, DocumentChunk, ProcessingOptions
from .data_models import (
    ChunkedProcessingResult,
    ChunkOutput,
    ChunkResult,
    ProcessingEstimate,
    QuizQuestion,
)
from .chunker import create_text_chunks
from .detection import detect_content_features
from .batch import process_document_chunks
from .post_processor import merge_chunk_results
from .estimator import estimate_processing_time
from .processors import ChunkProcessor

__all__ = [
    "ChunkedProcessingResult",
    "ChunkOutput",
    "ChunkProcessor",
    "ChunkResult",
    "ContentFeatures",
    "DocumentChunk",
    "ProcessingEstimate",
    "ProcessingOptions",
    "QuizQuestion",
    "create_text_chunks",
    "detect_content_features",
    "estimate_processing_time",
    "merge_chunk_results",
    "process_document_chunks",
]
