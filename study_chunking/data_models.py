from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional

from .models import DocumentChunk


QuestionType = Literal["multiple_choice", "short_answer", "true_false", "fill_in_blank"]
Difficulty = Literal["easy", "medium", "hard"]
Complexity = Literal["low", "medium", "high"]

QUESTION_TYPES = ("multiple_choice", "short_answer", "true_false", "fill_in_blank")
DIFFICULTIES = ("easy", "medium", "hard")


@dataclass
class QuizQuestion:
    """One assessment item produced for a chunk."""
    question: str
    question_type: QuestionType
    correct_answer: str
    difficulty: Difficulty = "medium"
    options: Optional[List[str]] = None
    explanation: Optional[str] = None
    topic: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuizQuestion":
        options = data.get("options")
        return cls(
            question=data["question"],
            question_type=data["question_type"],
            correct_answer=data["correct_answer"],
            difficulty=data.get("difficulty", "medium"),
            options=list(options) if options is not None else None,
            explanation=data.get("explanation"),
            topic=data.get("topic"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "question": self.question,
            "question_type": self.question_type,
            "correct_answer": self.correct_answer,
            "difficulty": self.difficulty,
        }
        if self.options is not None:
            data["options"] = self.options
        if self.explanation is not None:
            data["explanation"] = self.explanation
        if self.topic is not None:
            data["topic"] = self.topic
        return data


@dataclass
class ChunkOutput:
    """What the per-chunk operation produced for one chunk."""
    summary: Optional[str] = None
    explanation: Optional[str] = None
    quiz: Optional[List[QuizQuestion]] = None
    extracted_text: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any) -> "ChunkOutput":
        """
        Coerce a per-chunk return value into a ChunkOutput.

        Accepts None, a ChunkOutput, or a mapping with snake_case or
        camelCase keys. Quiz entries may be QuizQuestion objects or mappings.
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise TypeError(f"Chunk operation returned unsupported type: {type(value).__name__}")

        quiz = value.get("quiz")
        if quiz is not None:
            quiz = [q if isinstance(q, QuizQuestion) else QuizQuestion.from_dict(q) for q in quiz]

        extracted_text = value.get("extracted_text", value.get("extractedText"))
        return cls(
            summary=value.get("summary"),
            explanation=value.get("explanation"),
            quiz=quiz,
            extracted_text=extracted_text,
        )

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {}
        if self.summary is not None:
            data["summary"] = self.summary
        if self.explanation is not None:
            data["explanation"] = self.explanation
        if self.quiz is not None:
            data["quiz"] = [q.to_dict() for q in self.quiz]
        if self.extracted_text is not None:
            data["extractedText"] = self.extracted_text
        return data


@dataclass
class ChunkResult:
    """Outcome of running the per-chunk operation on one chunk."""
    chunk_index: int
    result: ChunkOutput
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "chunkIndex": self.chunk_index,
            "result": self.result.to_dict(),
            "success": self.success,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class ChunkedProcessingResult:
    """Merged, document-level output of a chunked processing run."""
    chunks: List[DocumentChunk]
    total_chunks: int
    total_characters: int
    processing_time: float
    extracted_text: str
    summary: Optional[str] = None
    explanation: Optional[str] = None
    quiz: List[QuizQuestion] = field(default_factory=list)
    failed_chunk_ids: List[str] = field(default_factory=list)

    @property
    def partial_failure_count(self) -> int:
        return len(self.failed_chunk_ids)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "chunks": [chunk.to_dict() for chunk in self.chunks],
            "totalChunks": self.total_chunks,
            "totalCharacters": self.total_characters,
            "processingTime": self.processing_time,
            "quiz": [q.to_dict() for q in self.quiz],
            "extractedText": self.extracted_text,
            "failedChunkIds": self.failed_chunk_ids,
            "partialFailureCount": self.partial_failure_count,
        }
        if self.summary is not None:
            data["summary"] = self.summary
        if self.explanation is not None:
            data["explanation"] = self.explanation
        return data


@dataclass
class ProcessingEstimate:
    """Predicted duration and complexity tier for a document."""
    estimated_time_seconds: int
    chunks_required: int
    complexity: Complexity
    recommend_chunking: bool

    def to_dict(self) -> dict:
        return {
            "estimatedTimeSeconds": self.estimated_time_seconds,
            "chunksRequired": self.chunks_required,
            "complexity": self.complexity,
            "recommendChunking": self.recommend_chunking,
        }


@dataclass
class MathContentAnalysis:
    """Counts and samples of mathematical notation found in a text."""
    detected: bool
    equations_count: int
    chemical_formulas: List[str] = field(default_factory=list)
    superscript_subscript_usage: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "detected": self.detected,
            "equations_count": self.equations_count,
            "chemical_formulas": self.chemical_formulas,
            "superscript_subscript_usage": self.superscript_subscript_usage,
        }


@dataclass
class StudyReport:
    """Study-session view of a merged result, shaped for the UI layer."""
    is_chunked: bool
    chunk_count: int
    total_characters: int
    math_content: MathContentAnalysis
    summary: Optional[Dict[str, Any]] = None
    explanation: Optional[Dict[str, Any]] = None
    quiz: Optional[Dict[str, Any]] = None
    failed_chunk_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {
            "is_chunked": self.is_chunked,
            "chunk_count": self.chunk_count,
            "total_characters": self.total_characters,
            "math_content": self.math_content.to_dict(),
            "failed_chunk_ids": self.failed_chunk_ids,
        }
        if self.summary is not None:
            data["summary"] = self.summary
        if self.explanation is not None:
            data["explanation"] = self.explanation
        if self.quiz is not None:
            data["quiz"] = {
                **self.quiz,
                "questions": [q.to_dict() for q in self.quiz["questions"]],
            }
        return data
