"""
Deduplication Module

Collapses records sharing a natural key to exactly one winner. Which record
wins is a per-entity policy:

- keep_first: the first record in input order (default)
- keep_latest: the record with the greatest value of a date field; records
  with no value lose to any dated record, ties go to the earlier record

Records are handled as an ordered sequence, never as a set. The output keeps
the order in which each key first appeared, so "first" always means first in
the order the batches were supplied.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import structlog

from sales_engine.config import get_settings
from sales_engine.config.settings import Settings
from sales_engine.models import CanonicalRecord, ENTITY_TYPES

logger = structlog.get_logger(__name__)


class DedupStrategy(str, Enum):
    """Winner selection strategies"""
    KEEP_FIRST = "keep_first"
    KEEP_LATEST = "keep_latest"


@dataclass(frozen=True)
class DedupPolicy:
    """Natural key and winner selection for one entity"""
    key: Tuple[str, ...]
    strategy: DedupStrategy = DedupStrategy.KEEP_FIRST
    order_by: Optional[str] = None

    def __post_init__(self):
        if self.strategy == DedupStrategy.KEEP_LATEST and not self.order_by:
            raise ValueError("keep_latest requires an order_by field")


# entity -> date field a keep_latest policy ranks by
RECENCY_FIELDS: Mapping[str, str] = MappingProxyType({
    "sales": "order_date",
    "customers": "join_date",
    "returns": "return_date",
    "shipping": "ship_date",
})


@dataclass
class DedupResult:
    """Result of deduplicating one entity"""
    records: Tuple[CanonicalRecord, ...]
    input_rows: int
    duplicates_removed: int


def default_dedup_policies(settings: Optional[Settings] = None) -> Dict[str, DedupPolicy]:
    """
    Build the per-entity policy map from settings.

    Customers default to keep_latest on join_date, everything else to
    keep_first.
    """
    settings = settings or get_settings()
    default = DedupStrategy(settings.dedup.default_strategy)

    policies: Dict[str, DedupPolicy] = {}
    for record_type in ENTITY_TYPES:
        entity = record_type.entity
        strategy = default
        if entity == "customers":
            strategy = DedupStrategy(settings.dedup.customer_strategy)
        order_by = RECENCY_FIELDS.get(entity)
        if order_by is None:
            # nothing to rank by
            strategy = DedupStrategy.KEEP_FIRST
        policies[entity] = DedupPolicy(
            key=record_type.natural_key,
            strategy=strategy,
            order_by=order_by if strategy == DedupStrategy.KEEP_LATEST else None,
        )
    return policies


class Deduplicator:
    """
    Deduplicator applying a per-entity DedupPolicy.

    Example:
        dedup = Deduplicator()
        result = dedup.deduplicate(customers, "customers")
    """

    def __init__(self, policies: Optional[Mapping[str, DedupPolicy]] = None):
        self.policies: Dict[str, DedupPolicy] = dict(policies or default_dedup_policies())

    def policy_for(self, entity: str) -> DedupPolicy:
        """Policy of an entity"""
        try:
            return self.policies[entity]
        except KeyError:
            raise KeyError(f"No deduplication policy for entity '{entity}'") from None

    @staticmethod
    def _key(record: CanonicalRecord, policy: DedupPolicy) -> Tuple[Any, ...]:
        return tuple(getattr(record, name) for name in policy.key)

    @staticmethod
    def _is_newer(candidate: Any, current: Any) -> bool:
        if candidate is None:
            return False
        if current is None:
            return True
        return candidate > current

    def _keep_first(
        self, records: Sequence[CanonicalRecord], policy: DedupPolicy
    ) -> List[CanonicalRecord]:
        winners: Dict[Tuple[Any, ...], CanonicalRecord] = {}
        for record in records:
            winners.setdefault(self._key(record, policy), record)
        return list(winners.values())

    def _keep_latest(
        self, records: Sequence[CanonicalRecord], policy: DedupPolicy
    ) -> List[CanonicalRecord]:
        # dict insertion order fixes each key's slot at its first appearance
        winners: Dict[Tuple[Any, ...], CanonicalRecord] = {}
        for record in records:
            key = self._key(record, policy)
            current = winners.get(key)
            if current is None or self._is_newer(
                getattr(record, policy.order_by), getattr(current, policy.order_by)
            ):
                winners[key] = record
        return list(winners.values())

    def deduplicate(
        self,
        records: Iterable[CanonicalRecord],
        entity: str,
        policy: Optional[DedupPolicy] = None,
    ) -> DedupResult:
        """
        Keep one record per natural key.

        Args:
            records: Records of one entity, in input order
            entity: Entity name used to pick the policy
            policy: Explicit policy overriding the configured one

        Returns:
            DedupResult with surviving records in first-appearance order
        """
        policy = policy or self.policy_for(entity)
        ordered = list(records)

        if policy.strategy == DedupStrategy.KEEP_LATEST:
            survivors = self._keep_latest(ordered, policy)
        else:
            survivors = self._keep_first(ordered, policy)

        removed = len(ordered) - len(survivors)
        if removed:
            logger.info(
                "Duplicates removed",
                entity=entity,
                strategy=policy.strategy.value,
                removed=removed,
            )

        return DedupResult(
            records=tuple(survivors),
            input_rows=len(ordered),
            duplicates_removed=removed,
        )
