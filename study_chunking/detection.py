"""
Heuristic content classification for equations, chemistry and super/subscript notation.

The patterns are intentionally permissive: they are a triage signal for richer
rendering and processing downstream, not a precise classifier.
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .models import ContentFeatures
from .data_models import MathContentAnalysis

logger = logging.getLogger(__name__)


EQUATION_PATTERN = re.compile(
    r"\$.*\$|\\\w+|\\frac|\\sqrt|\\sum|\\int|=|\+|-|\*|/|\^|\(|\)"
    r"|∑|∫|π|α|β|γ|δ|θ|λ|μ|σ|φ|ψ|ω",
    re.IGNORECASE,
)
# Case-insensitive, so any Latin letter looks like an element symbol
CHEMICAL_PATTERN = re.compile(
    r"[A-Z][a-z]?[0-9]*|H2O|CO2|NaCl|CH4|O2|N2|Ca\(OH\)2|H2SO4|HCl|NaOH",
    re.IGNORECASE,
)
SUPERSUB_PATTERN = re.compile(
    r"\^[a-zA-Z0-9]+|_{1,2}[a-zA-Z0-9]+|[0-9]+\^[0-9]+|[a-zA-Z]+_[0-9]+"
    r"|x²|x³|m²|cm³|kg/m³",
    re.IGNORECASE,
)


class ContentFeatureDetector(ABC):
    """Strategy interface for tagging text spans with content features."""

    @abstractmethod
    def detect(self, text: str) -> ContentFeatures:
        """Return the feature flags for a span of text."""
        pass


class RegexFeatureDetector(ContentFeatureDetector):
    """Independent regular-expression tests, one per feature."""

    def __init__(self):
        self.equation_pattern = EQUATION_PATTERN
        self.chemical_pattern = CHEMICAL_PATTERN
        self.supersub_pattern = SUPERSUB_PATTERN

    def detect(self, text: str) -> ContentFeatures:
        return ContentFeatures(
            has_equations=bool(self.equation_pattern.search(text)),
            has_chemical=bool(self.chemical_pattern.search(text)),
            has_supersub=bool(self.supersub_pattern.search(text)),
        )


_default_detector = RegexFeatureDetector()


def detect_content_features(
    text: str,
    enabled: bool = True,
    detector: Optional[ContentFeatureDetector] = None,
) -> ContentFeatures:
    """
    Flag equations, chemical formulas and super/subscript notation in text.

    Args:
        text: Span of text to classify
        enabled: When False, return all-false flags without running any pattern
        detector: Detection strategy (default: regex heuristics)

    Returns:
        ContentFeatures with the three flags
    """
    if not enabled:
        return ContentFeatures()
    return (detector or _default_detector).detect(text)


# Patterns for the detailed analysis
_EQUATION_COUNT_PATTERNS = [
    re.compile(r"\$[^$]+\$"),  # LaTeX inline math
    re.compile(r"\$\$[^$]+\$\$"),  # LaTeX block math
    re.compile(r"[a-zA-Z0-9\s]*=\s*[a-zA-Z0-9\s+\-*/()^]+"),  # Simple equations
    re.compile(r"\\\w+"),  # LaTeX commands
]
_FORMULA_PATTERN = re.compile(r"[A-Z][a-z]?[0-9]*(?:\([A-Z][a-z]?[0-9]*\))*[0-9]*")
_ELEMENT_PATTERN = re.compile(r"[A-Z][a-z]?[0-9]*")
COMMON_CHEMICALS = ("H2O", "CO2", "NaCl", "CH4", "O2", "N2", "Ca(OH)2", "H2SO4")
_SUPERSUB_USAGE_PATTERNS = [
    re.compile(r"\^[a-zA-Z0-9]+"),
    re.compile(r"_[a-zA-Z0-9]+"),
    re.compile(r"[0-9]+\^[0-9]+"),
    re.compile(r"[a-zA-Z]+_[0-9]+"),
    re.compile(r"x²|x³|m²|cm³|kg/m³"),
]
MAX_ANALYSIS_SAMPLES = 10


def _unique(values: List[str], limit: int) -> List[str]:
    return list(dict.fromkeys(values))[:limit]


def analyze_math_content(text: str) -> MathContentAnalysis:
    """
    Count equations and collect chemical formulas and super/subscript usage.

    Args:
        text: Full document text

    Returns:
        MathContentAnalysis with up to 10 unique samples per category
    """
    equations_count = sum(len(pattern.findall(text)) for pattern in _EQUATION_COUNT_PATTERNS)

    formulas = [
        formula
        for formula in _FORMULA_PATTERN.findall(text)
        if any(chem in formula for chem in COMMON_CHEMICALS) or _ELEMENT_PATTERN.fullmatch(formula)
    ]

    supersub_usage: List[str] = []
    for pattern in _SUPERSUB_USAGE_PATTERNS:
        supersub_usage.extend(pattern.findall(text))

    analysis = MathContentAnalysis(
        detected=equations_count > 0 or bool(formulas) or bool(supersub_usage),
        equations_count=equations_count,
        chemical_formulas=_unique(formulas, MAX_ANALYSIS_SAMPLES),
        superscript_subscript_usage=_unique(supersub_usage, MAX_ANALYSIS_SAMPLES),
    )
    logger.debug(
        f"Math analysis: {analysis.equations_count} equations, "
        f"{len(analysis.chemical_formulas)} formulas, "
        f"{len(analysis.superscript_subscript_usage)} super/subscripts"
    )
    return analysis
