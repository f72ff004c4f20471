"""
Test suite for the text chunker and content feature detection.
"""

import sys
import unittest
from pathlib import Path

# Add the project root to the Python path
sys.path.append(str(Path(__file__).parent.parent))

from study_chunking.chunker import TextChunker, count_words, create_text_chunks
from study_chunking.detection import ContentFeatureDetector, detect_content_features
from study_chunking.models import ContentFeatures, ProcessingOptions


def make_document(paragraphs: int = 40) -> str:
    """Build text with sentence and paragraph breaks."""
    parts = []
    for p in range(paragraphs):
        sentences = [
            f"Paragraph {p} sentence {s} talks about cells and energy transfer."
            for s in range(6)
        ]
        parts.append(" ".join(sentences))
    return "\n\n".join(parts)


class TestSingleChunk(unittest.TestCase):
    """Tests for texts that fit in one chunk."""

    def test_short_text_is_one_chunk(self):
        text = "Photosynthesis converts light into chemical energy."
        chunks = create_text_chunks(text)

        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].id, "chunk-0")
        self.assertEqual(chunks[0].content, text)
        self.assertEqual(chunks[0].start_index, 0)
        self.assertEqual(chunks[0].end_index, len(text))
        self.assertEqual(chunks[0].word_count, 6)

    def test_text_exactly_chunk_size(self):
        text = "x" * 50
        chunks = create_text_chunks(text, {"chunkSize": 50})
        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].content, text)

    def test_empty_text(self):
        chunks = create_text_chunks("")

        self.assertEqual(len(chunks), 1)
        self.assertEqual(chunks[0].content, "")
        self.assertEqual(chunks[0].end_index, 0)
        self.assertEqual(chunks[0].word_count, 1)
        self.assertFalse(chunks[0].has_equations)
        self.assertFalse(chunks[0].has_chemical)
        self.assertFalse(chunks[0].has_supersub)


class TestMultiChunk(unittest.TestCase):
    """Tests for the splitting loop."""

    def test_primary_spans_cover_text(self):
        text = make_document()
        chunks = create_text_chunks(text, ProcessingOptions(chunk_size=500, overlap_size=50))

        self.assertGreater(len(chunks), 1)
        self.assertEqual(chunks[0].start_index, 0)
        for current, following in zip(chunks, chunks[1:]):
            self.assertEqual(current.end_index, following.start_index)
        self.assertEqual(chunks[-1].end_index, len(text))
        self.assertEqual("".join(text[c.start_index:c.end_index] for c in chunks), text)

    def test_ids_are_sequential(self):
        chunks = create_text_chunks(make_document(), ProcessingOptions(chunk_size=400))
        self.assertEqual([c.id for c in chunks], [f"chunk-{i}" for i in range(len(chunks))])

    def test_breaks_on_paragraph_or_sentence(self):
        text = make_document()
        chunks = create_text_chunks(text, ProcessingOptions(chunk_size=500, overlap_size=0))

        for chunk in chunks[:-1]:
            # The cut lands just after a newline or a sentence terminator
            self.assertIn(text[chunk.end_index - 1], "\n.!?")
            self.assertGreater(chunk.end_index - chunk.start_index, 500 * 0.7)

    def test_overlap_prefixes_following_chunks(self):
        text = "x" * 9000
        chunks = create_text_chunks(text, ProcessingOptions(chunk_size=4000, overlap_size=200, max_concurrency=3))

        self.assertEqual(len(chunks), 3)
        self.assertEqual(chunks[0].content, text[0:4000])
        self.assertTrue(chunks[1].content.startswith(text[3800:4000]))
        self.assertEqual(len(chunks[1].content), 4200)
        self.assertEqual(chunks[2].start_index, 8000)
        self.assertEqual(chunks[2].content, text[7800:9000])

    def test_overlap_follows_break_point(self):
        text = make_document()
        chunks = create_text_chunks(text, ProcessingOptions(chunk_size=600, overlap_size=100))

        for previous, chunk in zip(chunks, chunks[1:]):
            primary_tail = text[previous.start_index:previous.end_index][-100:]
            self.assertTrue(chunk.content.startswith(primary_tail))

    def test_unbreakable_text_uses_hard_cuts(self):
        text = "A." * 5000
        chunks = create_text_chunks(text)

        self.assertEqual(len(chunks), 3)
        self.assertEqual([c.end_index for c in chunks], [4000, 8000, 10000])
        for chunk in chunks:
            self.assertLessEqual(len(chunk.content), 4000 + 200 + 1)

    def test_break_point_too_early_is_ignored(self):
        # Only separator sits in the first half of the window
        text = "word. " + "y" * 200
        chunks = create_text_chunks(text, ProcessingOptions(chunk_size=100, overlap_size=0))
        self.assertEqual(chunks[0].end_index, 100)

    def test_rightmost_break_point_wins(self):
        text = "a" * 75 + ". " + "b" * 10 + "\n" + "c" * 200
        chunks = create_text_chunks(text, ProcessingOptions(chunk_size=100, overlap_size=0))
        # Newline at 87 is right of the sentence break at 75
        self.assertEqual(chunks[0].end_index, 88)

    def test_word_count_keeps_edge_tokens(self):
        self.assertEqual(count_words("one two"), 2)
        self.assertEqual(count_words(" one two "), 4)
        self.assertEqual(count_words(""), 1)


class TestFeatureTagging(unittest.TestCase):
    """Tests for feature flags on chunks."""

    def test_chunks_are_tagged(self):
        chunks = create_text_chunks("E = mc^2 for H2O")
        self.assertTrue(chunks[0].has_equations)
        self.assertTrue(chunks[0].has_chemical)
        self.assertTrue(chunks[0].has_supersub)

    def test_detection_disabled(self):
        chunks = create_text_chunks("E = mc^2 for H2O", {"enable_math_detection": False})
        self.assertFalse(chunks[0].has_equations)
        self.assertFalse(chunks[0].has_chemical)
        self.assertFalse(chunks[0].has_supersub)

    def test_custom_detector_is_used(self):
        class AlwaysChemical(ContentFeatureDetector):
            def detect(self, text):
                return ContentFeatures(has_chemical=True)

        chunker = TextChunker(ProcessingOptions(chunk_size=100), detector=AlwaysChemical())
        chunks = chunker.chunk("1 2 3")
        self.assertTrue(chunks[0].has_chemical)
        self.assertFalse(chunks[0].has_equations)


class TestContentFeatureDetector(unittest.TestCase):
    """Tests for the regex heuristics."""

    def test_equations(self):
        self.assertTrue(detect_content_features("$x$").has_equations)
        self.assertTrue(detect_content_features(r"\frac{a}{b}").has_equations)
        self.assertTrue(detect_content_features("3 + 4").has_equations)
        self.assertTrue(detect_content_features("angle θ").has_equations)
        self.assertFalse(detect_content_features("plain words only").has_equations)

    def test_chemical(self):
        self.assertTrue(detect_content_features("NaCl dissolves").has_chemical)
        self.assertFalse(detect_content_features("2024 3.5").has_chemical)

    def test_supersub(self):
        self.assertTrue(detect_content_features("x^2").has_supersub)
        self.assertTrue(detect_content_features("a_1").has_supersub)
        self.assertTrue(detect_content_features("area in cm³").has_supersub)
        self.assertFalse(detect_content_features("no notation here").has_supersub)

    def test_disabled_short_circuits(self):
        class Exploding(ContentFeatureDetector):
            def detect(self, text):
                raise AssertionError("detector should not run")

        features = detect_content_features("x^2 = H2O", enabled=False, detector=Exploding())
        self.assertEqual(features, ContentFeatures())


class TestProcessingOptions(unittest.TestCase):
    """Tests for option resolution and validation."""

    def test_defaults(self):
        options = ProcessingOptions.resolve(None)
        self.assertEqual(options.chunk_size, 4000)
        self.assertEqual(options.overlap_size, 200)
        self.assertEqual(options.max_concurrency, 3)
        self.assertTrue(options.preserve_equations)
        self.assertTrue(options.enable_math_detection)

    def test_camel_case_overrides(self):
        options = ProcessingOptions.resolve({"chunkSize": 1000, "maxConcurrency": 5})
        self.assertEqual(options.chunk_size, 1000)
        self.assertEqual(options.max_concurrency, 5)
        self.assertEqual(options.overlap_size, 200)

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            ProcessingOptions(chunk_size=0)
        with self.assertRaises(ValueError):
            ProcessingOptions(overlap_size=-1)
        with self.assertRaises(ValueError):
            ProcessingOptions(max_concurrency=0)
        with self.assertRaises(ValueError):
            ProcessingOptions.resolve({"chunk_sise": 10})


if __name__ == "__main__":
    unittest.main()
