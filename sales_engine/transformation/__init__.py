"""
Data Transformation Module
"""
from .cleaners import CleaningStats, RowCleaner, clean_rows
from .deduplication import DedupPolicy, DedupResult, DedupStrategy, Deduplicator, default_dedup_policies
from .enrichers import DataEnricher, build_fact_sales
from .sources import SOURCE_SCHEMAS, get_source_schema
from .transformers import FieldSpec, SourceSchema, SourceTransformer, TransformResult, transform_source

__all__ = [
    "CleaningStats",
    "RowCleaner",
    "clean_rows",
    "DedupPolicy",
    "DedupResult",
    "DedupStrategy",
    "Deduplicator",
    "default_dedup_policies",
    "DataEnricher",
    "build_fact_sales",
    "SOURCE_SCHEMAS",
    "get_source_schema",
    "FieldSpec",
    "SourceSchema",
    "SourceTransformer",
    "TransformResult",
    "transform_source",
]
