"""
Sales Integration Engine

Normalizes messy multi-source sales exports into a deduplicated star schema.
"""

from sales_engine.exceptions import EngineError, MissingKeyColumnError, UnknownSourceError
from sales_engine.pipeline import PipelineResult, SalesModelPipeline, SourceBatch, run_pipeline

__version__ = "1.0.0"

__all__ = [
    "EngineError",
    "MissingKeyColumnError",
    "UnknownSourceError",
    "PipelineResult",
    "SalesModelPipeline",
    "SourceBatch",
    "run_pipeline",
]
