"""
Offline per-chunk operation that builds study material from the chunk text itself.
"""

import re
import asyncio
import logging
from typing import List

from .data_models import ChunkOutput, QuizQuestion
from .models import DocumentChunk

logger = logging.getLogger(__name__)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
BLANK = "______"


class HeuristicChunkAnalyzer:
    """
    Extractive stand-in for an AI backend.

    The summary is the chunk's opening sentence and quiz questions are
    fill-in-the-blank items cut from its first sentences. Useful offline
    and as a deterministic backend in tests.
    """

    def __init__(self, latency_seconds: float = 0.0, questions_per_chunk: int = 2, min_word_length: int = 4):
        """
        Initialize the analyzer.

        Args:
            latency_seconds: Simulated processing delay per chunk
            questions_per_chunk: Maximum fill-in-the-blank questions per chunk
            min_word_length: Shortest word eligible as a blank or distractor
        """
        self.latency_seconds = latency_seconds
        self.questions_per_chunk = questions_per_chunk
        self.min_word_length = min_word_length

    async def __call__(self, chunk: DocumentChunk) -> ChunkOutput:
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)

        sentences = self._sentences(chunk.content)
        opening = sentences[0] if sentences else "Content summary"

        return ChunkOutput(
            summary=f"Summary for chunk {chunk.id}: {opening}...",
            explanation=f"Detailed explanation of concepts in chunk {chunk.id}: " + ". ".join(sentences[:3]),
            quiz=self.generate_quiz(chunk),
        )

    def generate_quiz(self, chunk: DocumentChunk) -> List[QuizQuestion]:
        """Generate fill-in-the-blank questions from the chunk's first sentences."""
        sentences = self._sentences(chunk.content)
        chunk_words = self._long_words(chunk.content)
        questions = []

        for sentence in sentences[:self.questions_per_chunk]:
            sentence_words = self._long_words(sentence)
            if len(sentence_words) < 3:
                continue

            key_word = sentence_words[len(sentence_words) // 2]
            distractors = [w for w in dict.fromkeys(chunk_words) if w != key_word][:3]

            questions.append(QuizQuestion(
                question=f"Fill in the blank: {sentence.replace(key_word, BLANK, 1)}",
                question_type="fill_in_blank",
                options=[key_word] + distractors,
                correct_answer=key_word,
                explanation=f'The correct answer is "{key_word}" based on the context.',
                difficulty="medium",
                topic=f"Content from {chunk.id}",
            ))

        logger.debug(f"Generated {len(questions)} questions for {chunk.id}")
        return questions

    @staticmethod
    def _sentences(text: str) -> List[str]:
        return [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]

    def _long_words(self, text: str) -> List[str]:
        return [w for w in text.split() if len(w) >= self.min_word_length]
