"""Per-document diagram substitution pipeline."""

from mermaid_ssr.pipeline.annotation import comment_annotation, neutralize_fences
from mermaid_ssr.pipeline.models import Chapter, DiagramRenderError, PipelineState
from mermaid_ssr.pipeline.orchestrator import DiagramPipeline

__all__ = [
    "Chapter",
    "DiagramPipeline",
    "DiagramRenderError",
    "PipelineState",
    "comment_annotation",
    "neutralize_fences",
]
