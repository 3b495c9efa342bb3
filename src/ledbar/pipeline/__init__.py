"""Merge-and-classify pipeline run by the supervisor."""

from ledbar.pipeline.merge import merge_streams
from ledbar.pipeline.processor import ClassificationError, EventProcessor, classify

__all__ = ["ClassificationError", "EventProcessor", "classify", "merge_streams"]
