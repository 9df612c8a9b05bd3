from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence

from sqlalchemy.orm import Query

from portal.core.tiers import (
    Tier,
    TIER_HIERARCHY,
    normalize_tier,
    has_tier_access,
    tier_restriction_message,
)

"""
CONTENT CLASSIFICATION => SHARED BY EVERY TIERED CONTENT ROUTE

1) FETCH RAW RECORDS (ROUTE, NON-TIER FILTERS ONLY)
2) CLASSIFY EACH RECORD AGAINST THE MEMBER TIER
3) SORT: EXACT TIER MATCHES, OTHER ACCESSIBLE, THEN RESTRICTED (NEWEST FIRST WITHIN EACH)
4) SERIALISE WITH FACETS AND ACCESS STATS
"""


@dataclass(frozen=True)
class ClassifiedItem:
    record: Any
    tier: Tier
    is_accessible: bool
    is_exact: bool


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


#Filter values that mean "no filter"
NO_FILTER_VALUES = frozenset({"", "all", "All"})


def _is_unfiltered(value: Any) -> bool:
    return value is None or value in NO_FILTER_VALUES


def _recency(record: Any) -> float:
    stamp = getattr(record, "updated_at", None) or getattr(record, "created_at", None)
    if not isinstance(stamp, datetime):
        return float("-inf")
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return (stamp - _EPOCH).total_seconds()


def classify(records: Iterable[Any], user_tier: Optional[str]) -> list[ClassifiedItem]:
    user = normalize_tier(user_tier)
    classified = []

    for record in records:
        raw = getattr(record, "tier_restriction", None)
        tier = normalize_tier(raw)
        classified.append(
            ClassifiedItem(
                record=record,
                tier=tier,
                is_accessible=has_tier_access(raw, user_tier),
                is_exact=tier is user,
            )
        )

    return classified


def sort_by_access(classified: Sequence[ClassifiedItem]) -> list[ClassifiedItem]:
    """
    Order items for display.

    Accessible items whose tier equals the member's come first, then the
    remaining accessible items, then restricted ones. Within each group the
    newest record (updated_at, falling back to created_at) leads.
    """
    def _key(item: ClassifiedItem):
        if not item.is_accessible:
            group = 2
        elif item.is_exact:
            group = 0
        else:
            group = 1
        return (group, -_recency(item.record))

    return sorted(classified, key=_key)


def partition(
    classified: Iterable[ClassifiedItem],
) -> tuple[list[ClassifiedItem], list[ClassifiedItem]]:
    accessible, restricted = [], []
    for item in classified:
        (accessible if item.is_accessible else restricted).append(item)
    return accessible, restricted


def filter_by_tier(
    classified: Iterable[ClassifiedItem],
    tier: Optional[str],
) -> list[ClassifiedItem]:
    if _is_unfiltered(tier):
        return list(classified)
    wanted = normalize_tier(tier)
    return [item for item in classified if item.tier is wanted]


def access_stats(classified: Sequence[ClassifiedItem]) -> dict[str, int]:
    accessible, restricted = partition(classified)
    return {
        "total": len(classified),
        "accessible": len(accessible),
        "restricted": len(restricted),
    }


#Equality filters on plain columns; empty values are ignored
def apply_filters(query: Query, model: Any, filters: Mapping[str, Any]) -> Query:
    for field, value in filters.items():
        if _is_unfiltered(value):
            continue
        query = query.filter(getattr(model, field) == value)
    return query


def filter_facets(records: Iterable[Any], fields: Sequence[str]) -> dict[str, list[str]]:
    """
    Distinct values observed per field, for building filter dropdowns.

    tier_restriction values are reported as canonical tier names in rank
    order; other fields are trimmed, de-duplicated and sorted.
    """
    records = list(records)
    facets: dict[str, list[str]] = {}

    for field in fields:
        if field == "tier_restriction":
            tiers = {normalize_tier(getattr(r, field, None)) for r in records}
            facets[field] = [
                t.value for t in sorted(tiers, key=TIER_HIERARCHY.__getitem__)
            ]
            continue

        values = set()
        for record in records:
            value = getattr(record, field, None)
            if isinstance(value, str):
                value = value.strip()
            if value:
                values.add(value)
        facets[field] = sorted(values)

    return facets


def serialise(
    item: ClassifiedItem,
    gated_fields: Sequence[str] = (),
) -> dict[str, Any]:
    record = item.record
    data = {column.name: getattr(record, column.name) for column in record.__table__.columns}

    data["tier_restriction"] = item.tier.value
    data["is_accessible"] = item.is_accessible
    data["restriction_message"] = None

    if not item.is_accessible:
        data["restriction_message"] = tier_restriction_message(item.tier)
        for field in gated_fields:
            if field in data:
                data[field] = None

    return data
