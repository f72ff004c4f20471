import os
import json
import asyncio
import logging
from typing import Any, Mapping, Optional, Union
from tqdm import tqdm

from . import config
from .batch import PacingPolicy, ProcessingFunction, process_document_chunks
from .chunker import create_text_chunks
from .data_models import ChunkedProcessingResult
from .detection import ContentFeatureDetector
from .estimator import estimate_processing_time, should_chunk
from .models import ProcessingOptions
from .post_processor import build_study_report, merge_chunk_results
from .preprocessing import preprocess_document_text
from .processors import ChunkProcessor, ProgressCallback

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class StudyDocumentProcessor:
    """
    Runs the full chunked pipeline over one document's text.

    This class orchestrates the process:
    1. Optionally normalizes the OCR text
    2. Splits it into overlapping chunks
    3. Runs the per-chunk operation in paced batches
    4. Merges per-chunk outputs into one result
    """

    def __init__(
        self,
        processing_function: ProcessingFunction,
        options: Union[ProcessingOptions, Mapping[str, Any], None] = None,
        pacing: Optional[PacingPolicy] = None,
        detector: Optional[ContentFeatureDetector] = None,
    ):
        """
        Initialize the processor.

        Args:
            processing_function: Async per-chunk operation (e.g. an LLM call)
            options: Chunking and scheduling options
            pacing: Wait policy between batches (default: fixed 1 second delay)
            detector: Content feature detection strategy
        """
        self.processing_function = processing_function
        self.options = ProcessingOptions.resolve(options)
        self.pacing = pacing
        self.detector = detector

    async def process(
        self,
        text: str,
        preprocess: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ChunkedProcessingResult:
        """
        Process document text into a merged result.

        Args:
            text: Extracted document text
            preprocess: Normalize the text before chunking
            on_progress: Called with (percent_complete, chunk_index) per finished chunk

        Returns:
            The merged ChunkedProcessingResult
        """
        if preprocess:
            text = preprocess_document_text(text)

        if not should_chunk(text, self.options):
            logger.info(f"Document fits in a single chunk ({len(text)} characters)")

        chunks = create_text_chunks(text, self.options, self.detector)
        logger.info(f"Created {len(chunks)} chunks")

        tracker = ChunkProcessor(len(chunks), on_progress)
        chunk_results = await process_document_chunks(
            chunks,
            self.processing_function,
            self.options,
            pacing=self.pacing,
            progress=tracker,
        )

        merged = merge_chunk_results(chunks, chunk_results)
        if merged.partial_failure_count:
            logger.warning(f"{merged.partial_failure_count} chunks failed: {', '.join(merged.failed_chunk_ids)}")
        return merged


def process_text_file(
    input_path: str,
    output_path: str,
    processing_function: ProcessingFunction,
    options: Union[ProcessingOptions, Mapping[str, Any], None] = None,
    preprocess: bool = False,
    pacing: Optional[PacingPolicy] = None,
    explanation_level: str = "intermediate",
) -> str:
    """
    Main orchestration function to process a text document into study material.

    Args:
        input_path: Path to the extracted text file
        output_path: Path to save the output JSON file
        processing_function: Async per-chunk operation
        options: Chunking and scheduling options
        preprocess: Normalize the text before chunking
        pacing: Wait policy between batches
        explanation_level: Difficulty label for the explanation section

    Returns:
        Path to the generated output file
    """
    logger.info(f"Starting processing of document: {input_path}")

    with open(input_path, 'r', encoding='utf-8') as f:
        text = f.read()

    if preprocess:
        text = preprocess_document_text(text)

    options = ProcessingOptions.resolve(options)
    estimate = estimate_processing_time(text, options)

    processor = StudyDocumentProcessor(processing_function, options, pacing=pacing)

    with tqdm(total=estimate.chunks_required, desc="Processing chunks") as progress_bar:
        merged = asyncio.run(
            processor.process(text, on_progress=lambda _percent, _index: progress_bar.update(1))
        )

    report = build_study_report(merged, text, explanation_level=explanation_level)

    result_dict = {
        "document_name": os.path.basename(input_path),
        "estimate": estimate.to_dict(),
        "report": report.to_dict(),
        "result": merged.to_dict(),
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(result_dict, f, indent=2, ensure_ascii=False)

    logger.info(f"Processing complete. Merged {merged.total_chunks} chunks into {len(merged.quiz)} quiz questions.")
    logger.info(f"Output saved to {output_path}")

    return output_path
