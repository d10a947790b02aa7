"""Pipeline architecture for extraction operations."""

from .base import EventEmitter, ExtractionPipeline, PageContext, PipelineStep

__all__ = ["EventEmitter", "ExtractionPipeline", "PageContext", "PipelineStep"]
