"""
LLM-backed per-chunk operation producing summaries, explanations and quiz questions.
"""

import logging
from typing import Optional

from tenacity import retry, stop_after_attempt, wait_exponential

from . import config
from .chunk_parser import ChunkParser
from .data_models import ChunkOutput
from .models import DocumentChunk

logger = logging.getLogger(__name__)


class LLMChunkAnalyzer:
    """
    Async callable that sends one chunk to an LLM and parses the reply.

    This class handles:
    1. Building a study prompt from the chunk text and its content flags
    2. Calling the Gemini or OpenAI API, chosen by model name
    3. Parsing the tagged response into a ChunkOutput
    """

    def __init__(
        self,
        model_name: Optional[str] = None,
        api_key: Optional[str] = None,
        max_tokens: int = config.LLM_MAX_OUTPUT_TOKENS,
        temperature: float = config.LLM_TEMPERATURE,
        preserve_equations: bool = True,
        explanation_level: str = "intermediate",
        questions_per_chunk: int = 3,
    ):
        """
        Initialize the analyzer.

        Args:
            model_name: Name of the model to use (default: LLM_MODEL)
            api_key: API key for the model provider
            max_tokens: Maximum tokens in the response
            temperature: Temperature for generation (lower = more deterministic)
            preserve_equations: Ask the model to keep LaTeX and formulas intact
            explanation_level: Target audience level for explanations
            questions_per_chunk: Number of quiz questions requested per chunk
        """
        self.model_name = model_name or config.LLM_MODEL
        self.is_gemini = "gemini" in self.model_name.lower()
        self.api_key = api_key or (config.GEMINI_API_KEY if self.is_gemini else config.OPENAI_API_KEY)

        if not self.api_key:
            raise ValueError(
                "API key not provided. Set it in the constructor or "
                "as GEMINI_API_KEY or OPENAI_API_KEY environment variable."
            )

        self.max_tokens = max_tokens
        self.temperature = temperature
        self.preserve_equations = preserve_equations
        self.explanation_level = explanation_level
        self.questions_per_chunk = questions_per_chunk
        self.parser = ChunkParser()
        self._init_client()

    def _init_client(self):
        """Initialize the appropriate client based on model name."""
        if self.is_gemini:
            self._init_gemini_client()
        else:
            self._init_openai_client()

    def _init_gemini_client(self):
        """Initialize Google Gemini client."""
        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai package not installed. "
                "Install it with: pip install google-generativeai"
            )

        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(
            model_name=self.model_name,
            generation_config={
                "max_output_tokens": self.max_tokens,
                "temperature": self.temperature,
            }
        )
        logger.info(f"Initialized Gemini client with model: {self.model_name}")

    def _init_openai_client(self):
        """Initialize OpenAI client."""
        try:
            from openai import AsyncOpenAI
        except ImportError:
            raise ImportError(
                "openai package not installed. "
                "Install it with: pip install openai"
            )

        self.client = AsyncOpenAI(api_key=self.api_key)
        self.model = self.model_name
        logger.info(f"Initialized OpenAI client with model: {self.model_name}")

    async def __call__(self, chunk: DocumentChunk) -> ChunkOutput:
        prompt = self._create_prompt(chunk)
        logger.info(f"Sending {chunk.id} ({chunk.word_count} words) to {self.model_name}")

        response = await self._generate(prompt)
        return self.parser.parse_llm_response(response, chunk.id)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        reraise=True,
    )
    async def _generate(self, prompt: str) -> str:
        if self.is_gemini:
            return await self._call_gemini_api(prompt)
        return await self._call_openai_api(prompt)

    def _create_prompt(self, chunk: DocumentChunk) -> str:
        """
        Create a study prompt for one chunk.

        Args:
            chunk: The chunk to analyze

        Returns:
            Formatted prompt string
        """
        task_description = f"""
You are an expert tutor helping a student study an uploaded document.
The text below is one section of a longer document; it may begin with a few
sentences repeated from the previous section for context.

Write a concise summary, an explanation at the {self.explanation_level} level,
and {self.questions_per_chunk} quiz questions covering the section.
"""

        notation_notes = []
        if chunk.has_equations and self.preserve_equations:
            notation_notes.append("- The section contains equations. Keep them intact, using LaTeX between $ signs.")
        if chunk.has_chemical:
            notation_notes.append("- The section may contain chemical formulas. Write them with correct subscripts.")
        if chunk.has_supersub:
            notation_notes.append("- The section uses superscripts or subscripts. Preserve exponents and indices.")
        notation_section = ""
        if notation_notes:
            notation_section = "\nNOTATION:\n" + "\n".join(notation_notes) + "\n"

        format_instructions = """
OUTPUT FORMAT:
[SUMMARY]Summary text[/SUMMARY]
[EXPLANATION]Explanation text[/EXPLANATION]
[QUESTION]
[TYPE]multiple_choice|short_answer|true_false|fill_in_blank[/TYPE]
[PROMPT]The question[/PROMPT]
[OPTIONS]Option A | Option B | Option C | Option D[/OPTIONS]
[ANSWER]The correct answer, exactly as written in OPTIONS for multiple_choice[/ANSWER]
[RATIONALE]Why the answer is correct[/RATIONALE]
[DIFFICULTY]easy|medium|hard[/DIFFICULTY]
[TOPIC]Short topic label[/TOPIC]
[/QUESTION]

Repeat the [QUESTION] block for each question. Only multiple_choice questions need [OPTIONS].
USE THE EXACT TAGS SHOWN ABOVE.
"""

        return (
            task_description
            + notation_section
            + format_instructions
            + f"\nSECTION ({chunk.id}):\n{chunk.content}\n"
        )

    async def _call_gemini_api(self, prompt: str) -> str:
        """
        Call the Google Gemini API.

        Args:
            prompt: Formatted prompt string

        Returns:
            Raw response text
        """
        try:
            response = await self.model.generate_content_async(prompt)

            if not hasattr(response, "text"):
                raise ValueError(f"Unexpected response format: {response}")

            return response.text

        except Exception as e:
            logger.error(f"Error calling Gemini API: {str(e)}")
            raise

    async def _call_openai_api(self, prompt: str) -> str:
        """
        Call the OpenAI API.

        Args:
            prompt: Formatted prompt string

        Returns:
            Raw response text
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )

            return response.choices[0].message.content

        except Exception as e:
            logger.error(f"Error calling OpenAI API: {str(e)}")
            raise
