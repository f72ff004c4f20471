"""
Shared data models for the chunking system.
"""

import os
from typing import Any, Dict, Mapping, Optional, Union
from dataclasses import dataclass, fields, replace

from . import config


@dataclass
class ContentFeatures:
    """Heuristic content flags for a span of text."""

    has_equations: bool = False
    has_chemical: bool = False
    has_supersub: bool = False

    def any(self) -> bool:
        return self.has_equations or self.has_chemical or self.has_supersub


@dataclass
class DocumentChunk:
    """A contiguous slice of a document with its primary span offsets."""

    id: str
    content: str
    start_index: int
    end_index: int
    word_count: int
    has_equations: Optional[bool] = None
    has_chemical: Optional[bool] = None
    has_supersub: Optional[bool] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "id": self.id,
            "content": self.content,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "wordCount": self.word_count,
        }
        if self.has_equations is not None:
            data["hasEquations"] = self.has_equations
        if self.has_chemical is not None:
            data["hasChemical"] = self.has_chemical
        if self.has_supersub is not None:
            data["hasSupersub"] = self.has_supersub
        return data


# camelCase spellings accepted when options arrive as a mapping
_OPTION_ALIASES = {
    "chunkSize": "chunk_size",
    "overlapSize": "overlap_size",
    "maxConcurrency": "max_concurrency",
    "preserveEquations": "preserve_equations",
    "enableMathDetection": "enable_math_detection",
}


@dataclass
class ProcessingOptions:
    """Tunable knobs for chunking and scheduling."""

    chunk_size: int = config.DEFAULT_CHUNK_SIZE
    overlap_size: int = config.DEFAULT_OVERLAP_SIZE
    max_concurrency: int = config.DEFAULT_MAX_CONCURRENCY
    preserve_equations: bool = config.DEFAULT_PRESERVE_EQUATIONS
    enable_math_detection: bool = config.DEFAULT_ENABLE_MATH_DETECTION

    def __post_init__(self):
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be a positive integer, got {self.chunk_size}")
        if self.overlap_size < 0:
            raise ValueError(f"overlap_size must be non-negative, got {self.overlap_size}")
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {self.max_concurrency}")

    @classmethod
    def resolve(
        cls,
        options: Union["ProcessingOptions", Mapping[str, Any], None] = None,
    ) -> "ProcessingOptions":
        """
        Build validated options from None, an instance, or a mapping of overrides.

        Args:
            options: Options to resolve; missing fields take their defaults

        Returns:
            A ProcessingOptions instance
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise TypeError(f"Unsupported options type: {type(options).__name__}")

        known = {f.name for f in fields(cls)}
        overrides = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown processing option: {key}")
            if value is not None:
                overrides[name] = value
        return cls(**overrides)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ProcessingOptions":
        """Read CHUNK_SIZE, OVERLAP_SIZE and MAX_CONCURRENCY from the environment."""
        values: Dict[str, Any] = {
            "chunk_size": int(os.getenv("CHUNK_SIZE", str(config.DEFAULT_CHUNK_SIZE))),
            "overlap_size": int(os.getenv("OVERLAP_SIZE", str(config.DEFAULT_OVERLAP_SIZE))),
            "max_concurrency": int(os.getenv("MAX_CONCURRENCY", str(config.DEFAULT_MAX_CONCURRENCY))),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.resolve(values)

    def with_overrides(self, **overrides: Any) -> "ProcessingOptions":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
