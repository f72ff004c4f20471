import re
import logging
from typing import List, Optional

from .data_models import DIFFICULTIES, QUESTION_TYPES, ChunkOutput, QuizQuestion

logger = logging.getLogger(__name__)


class ChunkParser:
    """
    Parses tagged LLM output for one chunk into a ChunkOutput.
    """

    def __init__(self):
        """Initialize the chunk parser."""
        self.summary_pattern = re.compile(r'\[SUMMARY\](.*?)\[/SUMMARY\]', re.DOTALL)
        self.explanation_pattern = re.compile(r'\[EXPLANATION\](.*?)\[/EXPLANATION\]', re.DOTALL)
        self.question_pattern = re.compile(r'\[QUESTION\](.*?)\[/QUESTION\]', re.DOTALL)
        self.field_patterns = {
            name: re.compile(rf'\[{name}\](.*?)\[/{name}\]', re.DOTALL)
            for name in ("TYPE", "PROMPT", "OPTIONS", "ANSWER", "RATIONALE", "DIFFICULTY", "TOPIC")
        }

    def parse_llm_response(self, llm_response: str, chunk_id: str = "") -> ChunkOutput:
        """
        Parse the raw LLM response into a ChunkOutput.

        Args:
            llm_response: Raw text response from the LLM
            chunk_id: Chunk identifier, used for logging only

        Returns:
            ChunkOutput with whatever sections could be recovered
        """
        summary = self._section(self.summary_pattern, llm_response)
        explanation = self._section(self.explanation_pattern, llm_response)

        questions = []
        for i, match in enumerate(self.question_pattern.finditer(llm_response)):
            question = self._parse_question(match.group(1), i, chunk_id)
            if question is not None:
                questions.append(question)

        if summary is None and explanation is None and not questions:
            logger.warning(f"No tagged sections found in LLM response for {chunk_id}. Response format may be incorrect.")
            logger.debug(f"Response preview: {llm_response[:200]}...")

        logger.info(f"Parsed response for {chunk_id}: {len(questions)} questions")
        return ChunkOutput(
            summary=summary,
            explanation=explanation,
            quiz=questions or None,
        )

    def _parse_question(self, block: str, i: int, chunk_id: str) -> Optional[QuizQuestion]:
        fields = {name: self._section(pattern, block) for name, pattern in self.field_patterns.items()}

        if not fields["PROMPT"] or not fields["ANSWER"]:
            logger.warning(f"Skipping question {i} for {chunk_id}: missing prompt or answer")
            return None

        question_type = (fields["TYPE"] or "short_answer").lower()
        if question_type not in QUESTION_TYPES:
            logger.warning(f"Invalid question type in question {i} for {chunk_id}: {question_type}")
            question_type = "short_answer"

        difficulty = (fields["DIFFICULTY"] or "medium").lower()
        if difficulty not in DIFFICULTIES:
            logger.warning(f"Invalid difficulty in question {i} for {chunk_id}: {difficulty}")
            difficulty = "medium"

        return QuizQuestion(
            question=fields["PROMPT"],
            question_type=question_type,
            correct_answer=fields["ANSWER"],
            difficulty=difficulty,
            options=self._split_options(fields["OPTIONS"]),
            explanation=fields["RATIONALE"],
            topic=fields["TOPIC"],
        )

    @staticmethod
    def _section(pattern: re.Pattern, text: str) -> Optional[str]:
        match = pattern.search(text)
        if not match:
            return None
        value = match.group(1).strip()
        return value or None

    @staticmethod
    def _split_options(raw: Optional[str]) -> Optional[List[str]]:
        if not raw:
            return None
        options = [option.strip() for option in raw.split("|")]
        return [option for option in options if option] or None
