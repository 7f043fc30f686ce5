import logging
import random
from typing import Dict, Iterable, Optional, Tuple

from pvinspect.config import DEFAULT_RECOMMENDED_LIMIT
from pvinspect.models import CatalogStatistics, CategoryBreakdown, DemoEntry, PanelCondition
from pvinspect.panel_data import CATEGORY_LABELS

logger = logging.getLogger(__name__)


class EmptyCatalogError(LookupError):
    """Raised when a random pick is requested from a catalog with no entries."""


def mean_confidence(entry: DemoEntry) -> float:
    """Mean confidence over an entry's samples."""
    results = entry.expected_results
    return sum(r.confidence for r in results) / len(results)


class ResultAggregator:
    """
    Read-only queries over a catalog of showcase entries.

    The catalog is frozen into a tuple at construction and every query returns
    tuples or freshly built models, so callers cannot reorder or edit it.
    """

    def __init__(self, catalog: Iterable[DemoEntry], rng: Optional[random.Random] = None):
        self._catalog: Tuple[DemoEntry, ...] = tuple(catalog)
        self._rng = rng or random.Random()

        ids = [entry.id for entry in self._catalog]
        if len(ids) != len(set(ids)):
            raise ValueError("Catalog entry ids must be unique")

    def __len__(self) -> int:
        return len(self._catalog)

    def get_all(self) -> Tuple[DemoEntry, ...]:
        return self._catalog

    def get_by_id(self, entry_id: str) -> Optional[DemoEntry]:
        return next((entry for entry in self._catalog if entry.id == entry_id), None)

    def get_by_category(self, category: PanelCondition) -> Tuple[DemoEntry, ...]:
        return tuple(entry for entry in self._catalog if entry.category == category)

    def get_random(self) -> DemoEntry:
        if not self._catalog:
            raise EmptyCatalogError("Showcase catalog is empty")
        return self._rng.choice(self._catalog)

    def search(self, query: str) -> Tuple[DemoEntry, ...]:
        """Case-insensitive substring match on title, description and category."""
        q = query.lower()
        return tuple(
            entry for entry in self._catalog
            if q in entry.title.lower()
            or q in entry.description.lower()
            or q in entry.category.value.lower()
        )

    def get_statistics(self) -> CatalogStatistics:
        """
        Counts per top-level category plus the mean of per-entry mean confidences.
        Each entry weighs the same regardless of how many samples it holds.
        """
        by_category: Dict[PanelCondition, int] = {}
        for entry in self._catalog:
            by_category[entry.category] = by_category.get(entry.category, 0) + 1

        total = len(self._catalog)
        average = sum(mean_confidence(e) for e in self._catalog) / total if total else 0.0

        return CatalogStatistics(total=total, by_category=by_category, average_confidence=average)

    def get_recommended(self, limit: int = DEFAULT_RECOMMENDED_LIMIT) -> Tuple[DemoEntry, ...]:
        """Entries by descending mean confidence; ties keep catalog order."""
        # sorted() builds a new list, the catalog keeps its order
        ranked = sorted(self._catalog, key=mean_confidence, reverse=True)
        return tuple(ranked[:max(limit, 0)])

    def get_category_breakdown(self) -> Tuple[CategoryBreakdown, ...]:
        stats = self.get_statistics()
        return tuple(
            CategoryBreakdown(category=category, count=count, label=CATEGORY_LABELS[category])
            for category, count in stats.by_category.items()
        )
