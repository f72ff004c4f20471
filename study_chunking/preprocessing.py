"""
Text cleanup applied to OCR output before chunking.
"""

import re
import logging

logger = logging.getLogger(__name__)

# (pattern, replacement) pairs applied in order
_OCR_FIXES = [
    (re.compile(r"(?:^|\s)(\d+)(?:\s*[oO](?:\s*(?=\d)|\s+(?=\w)))"), r"\1 0 "),  # 'o' read as zero
    (re.compile(r"(?:^|\s)([Il])(?=\d)"), " 1"),  # 'I' or 'l' read as one
    (re.compile(r"([a-z])([A-Z])"), r"\1 \2"),
    (re.compile(r"(\d)([A-Za-z])"), r"\1 \2"),
    (re.compile(r"([A-Za-z])(\d)"), r"\1 \2"),
]
_MATH_FIXES = [
    (re.compile(r"(\d)\s*\*\s*(\d)"), r"\1 × \2"),
    (re.compile(r"(\d)\s*/\s*(\d)"), r"\1 ÷ \2"),
    (re.compile(r"\s*=\s*"), " = "),
    (re.compile(r"\s*\+\s*"), " + "),
    (re.compile(r"\s*-\s*"), " - "),
]
_PUNCTUATION_FIXES = [
    (re.compile(r"\s*\.\s*"), ". "),
    (re.compile(r"\s*,\s*"), ", "),
    (re.compile(r"\s*;\s*"), "; "),
    (re.compile(r"\s*:\s*"), ": "),
]


def preprocess_document_text(text: str) -> str:
    """
    Normalize OCR text for better AI processing.

    Collapses whitespace, fixes common OCR digit confusions, separates
    letter/digit and case transitions, and normalizes math operators and
    punctuation spacing. Paragraph structure is not preserved.

    Args:
        text: Raw extracted text

    Returns:
        The normalized text
    """
    processed = re.sub(r"\s+", " ", text).strip()

    for pattern, replacement in _OCR_FIXES + _MATH_FIXES + _PUNCTUATION_FIXES:
        processed = pattern.sub(replacement, processed)

    logger.debug(f"Preprocessed {len(text)} characters into {len(processed)}")
    return processed
