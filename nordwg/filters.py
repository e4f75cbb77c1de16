"""
ServerFilter:
- predicate: online + protocol support + p2p flag + free-text query
- ranking: stable ascending sort by load
- pick: one candidate by position in the ranked list
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .normalizer import ServerRecord


@dataclass(frozen=True)
class FilterCriteria:
    query: str = ""
    p2p: bool = True


@dataclass
class FilterStats:
    before: int = 0
    dropped_offline: int = 0
    dropped_protocol: int = 0
    dropped_p2p: int = 0
    dropped_query: int = 0
    after: int = 0

    def to_dict(self) -> Dict:
        return {
            "before": self.before,
            "dropped_offline": self.dropped_offline,
            "dropped_protocol": self.dropped_protocol,
            "dropped_p2p": self.dropped_p2p,
            "dropped_query": self.dropped_query,
            "after": self.after,
        }


def matches_query(record: ServerRecord, query: str) -> bool:
    """Case-insensitive substring match on identifier / country / code / city."""
    needle = query.casefold()
    if not needle:
        return True
    fields = (record.identifier, record.country, record.country_code, record.city)
    return any(needle in field.casefold() for field in fields)


def matches(record: ServerRecord, criteria: FilterCriteria) -> bool:
    return (
        record.online
        and record.supports_protocol
        and record.p2p == criteria.p2p
        and matches_query(record, criteria.query)
    )


class ServerFilter:
    def __init__(self, criteria: Optional[FilterCriteria] = None):
        self.criteria = criteria or FilterCriteria()

    def apply(self, catalog: Iterable[ServerRecord]) -> Tuple[List[ServerRecord], Dict]:
        """Filter + rank, with a per-reason drop count for reporting."""
        stats = FilterStats()
        kept: List[ServerRecord] = []

        for record in catalog:
            stats.before += 1

            if not record.online:
                stats.dropped_offline += 1
                continue

            if not record.supports_protocol:
                stats.dropped_protocol += 1
                continue

            if record.p2p != self.criteria.p2p:
                stats.dropped_p2p += 1
                continue

            if not matches_query(record, self.criteria.query):
                stats.dropped_query += 1
                continue

            kept.append(record)

        # sorted() is stable: equal loads keep catalog order
        ranked = sorted(kept, key=lambda r: r.load)
        stats.after = len(ranked)
        return ranked, stats.to_dict()


def select(catalog: Iterable[ServerRecord], criteria: FilterCriteria) -> List[ServerRecord]:
    ranked, _ = ServerFilter(criteria).apply(catalog)
    return ranked


def pick(candidates: List[ServerRecord], index: int = 0) -> Optional[ServerRecord]:
    if index < 0 or index >= len(candidates):
        return None
    return candidates[index]
