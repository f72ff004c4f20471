from .chunk_processor import ChunkProcessor, ProgressCallback

__all__ = ["ChunkProcessor", "ProgressCallback"]
