"""
Integration Pipeline

Runs the whole engine over one batch of sources:

    clean -> parse -> deduplicate -> join -> validate

Sources are independent until deduplication has finished for every entity;
the fact table is only built once all dimensions are deduplicated.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import polars as pl
import structlog

from sales_engine.config import get_settings
from sales_engine.config.settings import Settings
from sales_engine.models import ENTITY_TYPES, CanonicalRecord, to_frame
from sales_engine.quality.validators import ValidationResult, validate_star_schema
from sales_engine.transformation.deduplication import (
    DedupPolicy,
    DedupResult,
    Deduplicator,
    default_dedup_policies,
)
from sales_engine.transformation.enrichers import DataEnricher, with_sales_amount
from sales_engine.transformation.sources import get_source_schema
from sales_engine.transformation.transformers import SourceSchema, SourceTransformer, TransformResult

logger = structlog.get_logger(__name__)


@dataclass
class SourceBatch:
    """Raw rows of one source table"""
    schema: Union[SourceSchema, str]
    rows: Sequence[Mapping[str, Any]]
    name: Optional[str] = None

    def resolve_schema(self) -> SourceSchema:
        if isinstance(self.schema, SourceSchema):
            return self.schema
        return get_source_schema(self.schema)

    @property
    def source_name(self) -> str:
        return self.name or self.resolve_schema().name


@dataclass
class PipelineResult:
    """Output of one pipeline run"""
    records: Dict[str, Tuple[CanonicalRecord, ...]]
    tables: Dict[str, pl.DataFrame]
    fact_sales: pl.DataFrame
    validation: ValidationResult
    transform_results: List[TransformResult] = field(default_factory=list)
    dedup_results: Dict[str, DedupResult] = field(default_factory=dict)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if not self.started_at or not self.completed_at:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def invalid_rows(self) -> int:
        return sum(r.invalid_rows for r in self.transform_results)

    def report(self) -> List[Dict[str, Any]]:
        """Validator report: ordered {check_name, status, violation_count} entries"""
        return self.validation.report()


class SalesModelPipeline:
    """
    Pipeline orchestrator turning raw source batches into the star schema.

    Example:
        pipeline = SalesModelPipeline()
        result = pipeline.run([
            SourceBatch("sales", q1_rows, name="sales_q1"),
            SourceBatch("sales", q2_rows, name="sales_q2"),
            SourceBatch("products", product_rows),
            SourceBatch("customers", customer_rows),
        ])
        result.report()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        policies: Optional[Mapping[str, DedupPolicy]] = None,
    ):
        self.settings = settings or get_settings()
        policy_map = default_dedup_policies(self.settings)
        policy_map.update(policies or {})
        self.deduplicator = Deduplicator(policy_map)
        self.enricher = DataEnricher()

    def transform_sources(
        self, batches: Iterable[SourceBatch]
    ) -> Tuple[Dict[str, List[CanonicalRecord]], List[TransformResult]]:
        """Parse every batch, concatenating records per entity in batch order"""
        records: Dict[str, List[CanonicalRecord]] = {t.entity: [] for t in ENTITY_TYPES}
        results: List[TransformResult] = []

        for batch in batches:
            schema = batch.resolve_schema()
            result = SourceTransformer(schema).transform(batch.rows, source=batch.source_name)
            records[result.entity].extend(result.records)
            results.append(result)

        return records, results

    def deduplicate(
        self, records: Mapping[str, Sequence[CanonicalRecord]]
    ) -> Tuple[Dict[str, Tuple[CanonicalRecord, ...]], Dict[str, DedupResult]]:
        """Deduplicate every entity"""
        survivors: Dict[str, Tuple[CanonicalRecord, ...]] = {}
        results: Dict[str, DedupResult] = {}
        for entity, entity_records in records.items():
            result = self.deduplicator.deduplicate(entity_records, entity)
            survivors[entity] = result.records
            results[entity] = result
        return survivors, results

    def run(self, batches: Iterable[SourceBatch]) -> PipelineResult:
        """
        Run the full pipeline.

        Args:
            batches: Source batches; batches of the same entity are merged in
                the order given, which decides keep_first deduplication

        Returns:
            PipelineResult with canonical tables, fact table and report

        Raises:
            MissingKeyColumnError: a source lacks a natural-key column
            UnknownSourceError: a batch names an unregistered schema
        """
        started_at = datetime.now(timezone.utc)
        logger.info("Starting integration pipeline")

        parsed, transform_results = self.transform_sources(batches)
        records, dedup_results = self.deduplicate(parsed)

        # every dimension is deduplicated from here on
        records["sales"] = with_sales_amount(records["sales"])
        fact_sales = self.enricher.build_fact_sales(
            records["sales"], records["products"], records["customers"]
        )

        tables = {
            record_type.entity: to_frame(records[record_type.entity], record_type)
            for record_type in ENTITY_TYPES
        }

        validation = validate_star_schema(fact_sales, tables, transform_results, self.settings)
        completed_at = datetime.now(timezone.utc)

        result = PipelineResult(
            records=records,
            tables=tables,
            fact_sales=fact_sales,
            validation=validation,
            transform_results=transform_results,
            dedup_results=dedup_results,
            started_at=started_at,
            completed_at=completed_at,
        )

        logger.info(
            "Integration pipeline complete",
            sources=len(transform_results),
            input_rows=sum(r.input_rows for r in transform_results),
            invalid_rows=result.invalid_rows,
            duplicates_removed=sum(r.duplicates_removed for r in dedup_results.values()),
            fact_rows=fact_sales.height,
            status=validation.status.value,
            duration=f"{result.duration_seconds:.2f}s",
        )

        return result


def run_pipeline(
    batches: Iterable[SourceBatch],
    settings: Optional[Settings] = None,
    policies: Optional[Mapping[str, DedupPolicy]] = None,
) -> PipelineResult:
    """
    Convenience function to run the pipeline.

    Args:
        batches: Source batches
        settings: Optional settings override
        policies: Optional per-entity deduplication policy overrides

    Returns:
        PipelineResult
    """
    return SalesModelPipeline(settings, policies).run(batches)
