"""Pipeline module - end-to-end ranking request."""

from .models import PipelineConfig, PipelineResult
from .pipeline import ValuationPipeline

__all__ = [
    "PipelineConfig",
    "PipelineResult",
    "ValuationPipeline",
]
