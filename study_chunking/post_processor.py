import re
import math
import time
import logging
from typing import List, Optional, Sequence

from . import config
from .data_models import ChunkedProcessingResult, ChunkResult, QuizQuestion, StudyReport
from .detection import analyze_math_content
from .models import DocumentChunk

logger = logging.getLogger(__name__)

SUMMARY_HEADING = "## Document Summary"
EXPLANATION_HEADING = "## Detailed Explanation"


class ResultMerger:
    """
    Combines per-chunk outputs into one document-level result.
    """

    def __init__(self, max_quiz_questions: int = config.MAX_QUIZ_QUESTIONS):
        """
        Initialize the merger.

        Args:
            max_quiz_questions: Cap on the merged quiz length
        """
        self.max_quiz_questions = max_quiz_questions

    def merge(self, chunks: Sequence[DocumentChunk], chunk_results: Sequence[Optional[ChunkResult]]) -> ChunkedProcessingResult:
        """
        Merge chunk results into a cohesive document.

        The extracted text is the chunk contents joined by blank lines with
        their overlaps left in place, so overlapped text appears twice.

        Args:
            chunks: Chunks in their original order
            chunk_results: Results aligned with chunks; None entries are ignored

        Returns:
            The merged ChunkedProcessingResult
        """
        start_time = time.perf_counter()

        extracted_text = "\n\n".join(chunk.content for chunk in chunks)
        results = [r for r in chunk_results if r is not None]

        summary = self._join_section(SUMMARY_HEADING, [r.result.summary for r in results])
        explanation = self._join_section(EXPLANATION_HEADING, [r.result.explanation for r in results])
        quiz = self._merge_quiz(results)
        failed_chunk_ids = [self._chunk_id(chunks, r.chunk_index) for r in results if not r.success]

        processing_time = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"Merged {len(results)} chunk results: {len(quiz)} quiz questions, "
            f"{len(failed_chunk_ids)} failed chunks"
        )
        return ChunkedProcessingResult(
            chunks=list(chunks),
            total_chunks=len(chunks),
            total_characters=len(extracted_text),
            processing_time=processing_time,
            extracted_text=extracted_text,
            summary=summary,
            explanation=explanation,
            quiz=quiz,
            failed_chunk_ids=failed_chunk_ids,
        )

    def _join_section(self, heading: str, parts: List[Optional[str]]) -> Optional[str]:
        parts = [part for part in parts if part]
        if not parts:
            return None
        return f"{heading}\n\n" + "\n\n".join(parts)

    def _merge_quiz(self, results: List[ChunkResult]) -> List[QuizQuestion]:
        seen = set()
        unique = []
        for chunk_result in results:
            for question in chunk_result.result.quiz or []:
                if question.question in seen:
                    continue
                seen.add(question.question)
                unique.append(question)
        if len(unique) > self.max_quiz_questions:
            logger.debug(f"Truncating quiz from {len(unique)} to {self.max_quiz_questions} questions")
        return unique[:self.max_quiz_questions]

    @staticmethod
    def _chunk_id(chunks: Sequence[DocumentChunk], chunk_index: int) -> str:
        if 0 <= chunk_index < len(chunks):
            return chunks[chunk_index].id
        return f"chunk-{chunk_index}"


def merge_chunk_results(
    chunks: Sequence[DocumentChunk],
    chunk_results: Sequence[Optional[ChunkResult]],
) -> ChunkedProcessingResult:
    """Merge chunk results into a cohesive document."""
    return ResultMerger().merge(chunks, chunk_results)


_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_CONCEPT_PATTERNS = [
    re.compile(r"concept of ([^.!?]+)", re.IGNORECASE),
    re.compile(r"definition of ([^.!?]+)", re.IGNORECASE),
    re.compile(r"theory of ([^.!?]+)", re.IGNORECASE),
    re.compile(r"principle of ([^.!?]+)", re.IGNORECASE),
]
COMMON_TOPICS = (
    "mathematics",
    "physics",
    "chemistry",
    "biology",
    "history",
    "literature",
    "science",
    "economics",
    "psychology",
    "philosophy",
)
WORDS_PER_MINUTE = 200
MINUTES_PER_QUESTION = 1.5


def extract_key_points(summary: str, limit: int = 5) -> List[str]:
    """Return the first sentences of a summary."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(summary) if s.strip()]
    return sentences[:limit]


def extract_concepts(explanation: str, limit: int = 10) -> List[str]:
    """Collect phrases following 'concept of', 'definition of', 'theory of' and 'principle of'."""
    concepts = []
    for pattern in _CONCEPT_PATTERNS:
        concepts.extend(match.group(1).strip() for match in pattern.finditer(explanation))
    return concepts[:limit]


def extract_topics(text: str, limit: int = 5) -> List[str]:
    lowered = text.lower()
    return [topic for topic in COMMON_TOPICS if topic in lowered][:limit]


def build_study_report(
    merged: ChunkedProcessingResult,
    source_text: str,
    explanation_level: str = "intermediate",
) -> StudyReport:
    """
    Shape a merged result into the study-session sections the UI consumes.

    Args:
        merged: Output of merge_chunk_results
        source_text: Text the chunks were cut from, used for math analysis
        explanation_level: Difficulty label attached to the explanation

    Returns:
        StudyReport with summary, explanation and quiz sections where present
    """
    summary_section = None
    if merged.summary:
        word_count = len(re.split(r"\s+", merged.summary))
        summary_section = {
            "summary": merged.summary,
            "key_points": extract_key_points(merged.summary),
            "word_count": word_count,
            "reading_time_minutes": math.ceil(word_count / WORDS_PER_MINUTE),
        }

    explanation_section = None
    if merged.explanation:
        explanation_section = {
            "explanation": merged.explanation,
            "concepts_explained": extract_concepts(merged.explanation),
            "difficulty_level": explanation_level,
            "related_topics": extract_topics(merged.explanation),
        }

    quiz_section = None
    if merged.quiz:
        quiz_section = {
            "questions": merged.quiz,
            "total_questions": len(merged.quiz),
            "estimated_time_minutes": math.ceil(len(merged.quiz) * MINUTES_PER_QUESTION),
            "topics_covered": list(dict.fromkeys(q.topic for q in merged.quiz if q.topic)),
        }

    return StudyReport(
        is_chunked=merged.total_chunks > 1,
        chunk_count=merged.total_chunks,
        total_characters=merged.total_characters,
        math_content=analyze_math_content(source_text),
        summary=summary_section,
        explanation=explanation_section,
        quiz=quiz_section,
        failed_chunk_ids=list(merged.failed_chunk_ids),
    )
