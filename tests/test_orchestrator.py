"""
End-to-end tests for the chunked pipeline with the offline analyzer.
"""

import os
import sys
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock

sys.path.append(str(Path(__file__).parent.parent))

from study_chunking.batch import NoPacing
from study_chunking.chunker import create_text_chunks
from study_chunking.extractive import BLANK, HeuristicChunkAnalyzer
from study_chunking.orchestrator import StudyDocumentProcessor, process_text_file


def make_document(paragraphs: int = 30) -> str:
    return "\n\n".join(
        f"Section {p} explains how mitochondria produce energy for the cell. "
        f"Ribosomes assemble proteins from amino acids in section {p}. "
        f"Membranes regulate transport across boundaries."
        for p in range(paragraphs)
    )


class TestHeuristicChunkAnalyzer(unittest.IsolatedAsyncioTestCase):
    """Tests for the offline analyzer."""

    async def test_outputs(self):
        chunk = create_text_chunks("Mitochondria produce chemical energy inside cells. Short one. ")[0]
        output = await HeuristicChunkAnalyzer()(chunk)

        self.assertEqual(output.summary, "Summary for chunk chunk-0: Mitochondria produce chemical energy inside cells...")
        self.assertIn("chunk-0", output.explanation)
        self.assertEqual(len(output.quiz), 1)

        question = output.quiz[0]
        self.assertEqual(question.question_type, "fill_in_blank")
        self.assertEqual(question.correct_answer, "energy")
        self.assertIn(BLANK, question.question)
        self.assertEqual(question.options[0], "energy")
        self.assertNotIn("energy", question.options[1:])
        self.assertEqual(question.topic, "Content from chunk-0")

    async def test_empty_chunk(self):
        chunk = create_text_chunks("")[0]
        output = await HeuristicChunkAnalyzer()(chunk)

        self.assertEqual(output.summary, "Summary for chunk chunk-0: Content summary...")
        self.assertEqual(output.quiz, [])


class TestStudyDocumentProcessor(unittest.IsolatedAsyncioTestCase):
    """Tests for the StudyDocumentProcessor class."""

    async def test_process_document(self):
        text = make_document()
        progress = []
        processor = StudyDocumentProcessor(
            HeuristicChunkAnalyzer(),
            {"chunk_size": 1000, "overlap_size": 100},
            pacing=NoPacing(),
        )

        merged = await processor.process(text, on_progress=lambda percent, index: progress.append(percent))

        self.assertGreater(merged.total_chunks, 1)
        self.assertEqual(len(progress), merged.total_chunks)
        self.assertEqual(progress[-1], 100.0)
        self.assertTrue(merged.summary.startswith("## Document Summary"))
        self.assertLessEqual(len(merged.quiz), 15)
        self.assertEqual(merged.failed_chunk_ids, [])
        self.assertEqual(merged.chunks[-1].end_index, len(text))

    async def test_partial_failure_still_merges(self):
        text = make_document()
        analyzer = HeuristicChunkAnalyzer()

        async def flaky(chunk):
            if chunk.id == "chunk-1":
                raise TimeoutError("model timed out")
            return await analyzer(chunk)

        processor = StudyDocumentProcessor(flaky, {"chunk_size": 1000}, pacing=NoPacing())
        merged = await processor.process(text)

        self.assertEqual(merged.failed_chunk_ids, ["chunk-1"])
        self.assertNotIn("chunk chunk-1:", merged.summary)
        self.assertIn("chunk chunk-0:", merged.summary)
        self.assertIn(merged.chunks[1].content, merged.extracted_text)

    async def test_preprocess_before_chunking(self):
        operation = AsyncMock(return_value=None)
        processor = StudyDocumentProcessor(operation, pacing=NoPacing())

        merged = await processor.process("camelCase   text", preprocess=True)

        self.assertEqual(merged.extracted_text, "camel Case text")
        operation.assert_awaited_once()


class TestProcessTextFile(unittest.TestCase):
    """Tests for the file-level orchestration."""

    def test_writes_report(self):
        with tempfile.TemporaryDirectory() as tmp:
            input_path = os.path.join(tmp, "notes.txt")
            output_path = os.path.join(tmp, "notes_study.json")
            with open(input_path, "w", encoding="utf-8") as f:
                f.write(make_document(5))

            result_path = process_text_file(
                input_path,
                output_path,
                HeuristicChunkAnalyzer(),
                {"chunk_size": 300},
                pacing=NoPacing(),
            )

            self.assertEqual(result_path, output_path)
            with open(output_path, encoding="utf-8") as f:
                data = json.load(f)

        self.assertEqual(data["document_name"], "notes.txt")
        self.assertEqual(data["estimate"]["chunksRequired"], data["result"]["totalChunks"])
        self.assertTrue(data["report"]["is_chunked"])
        self.assertIn("summary", data["report"])
        self.assertEqual(data["result"]["partialFailureCount"], 0)


if __name__ == "__main__":
    unittest.main()
