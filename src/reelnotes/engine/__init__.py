"""Reel extraction and the capture pipeline."""

from .extractor import ReelExtractor, extract_reel_id
from .pipeline import NotePipeline

__all__ = ["NotePipeline", "ReelExtractor", "extract_reel_id"]
