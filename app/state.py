"""
Portfolio State - AI Use-Case Portfolio
app/state.py

Immutable snapshot of the loaded use-case list plus the active filters.
Transitions return new states; persistence goes through PortfolioClient.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple

from app.models.enumerations import Quadrant
from app.models.use_case import UseCaseResponse
from app.scoring.overrides import effective_quadrant


def _matches_tag(value: Optional[str], single: Optional[str], multi: Iterable[str]) -> bool:
    if not value:
        return True
    return single == value or value in (multi or [])


@dataclass(frozen=True)
class PortfolioFilters:
    search: str = ""
    process: Optional[str] = None
    line_of_business: Optional[str] = None
    business_segment: Optional[str] = None
    geography: Optional[str] = None
    use_case_type: Optional[str] = None
    quadrant: Optional[str] = None
    library_tier: Optional[str] = None

    def matches(self, use_case: UseCaseResponse) -> bool:
        if self.search:
            needle = self.search.lower()
            haystack = f"{use_case.title} {use_case.description}".lower()
            if needle not in haystack:
                return False
        if not _matches_tag(self.process, use_case.process, use_case.processes):
            return False
        if not _matches_tag(self.line_of_business, use_case.line_of_business, use_case.lines_of_business):
            return False
        if not _matches_tag(self.business_segment, use_case.business_segment, use_case.business_segments):
            return False
        if not _matches_tag(self.geography, use_case.geography, use_case.geographies):
            return False
        if self.use_case_type and use_case.use_case_type != self.use_case_type:
            return False
        if self.quadrant and effective_quadrant(use_case) != self.quadrant:
            return False
        if self.library_tier and use_case.library_tier.value != self.library_tier:
            return False
        return True


@dataclass(frozen=True)
class PortfolioState:
    use_cases: Tuple[UseCaseResponse, ...] = ()
    filters: PortfolioFilters = field(default_factory=PortfolioFilters)

    # -------------------------
    # Transitions
    # -------------------------
    def replace_all(self, use_cases: Iterable[UseCaseResponse]) -> "PortfolioState":
        return replace(self, use_cases=tuple(use_cases))

    def with_use_case(self, use_case: UseCaseResponse) -> "PortfolioState":
        """Insert, or replace the use case with the same id in place."""
        if any(uc.id == use_case.id for uc in self.use_cases):
            updated = tuple(use_case if uc.id == use_case.id else uc for uc in self.use_cases)
        else:
            updated = self.use_cases + (use_case,)
        return replace(self, use_cases=updated)

    def without_use_case(self, use_case_id: str) -> "PortfolioState":
        return replace(self, use_cases=tuple(uc for uc in self.use_cases if uc.id != use_case_id))

    def with_filters(self, **changes) -> "PortfolioState":
        return replace(self, filters=replace(self.filters, **changes))

    def cleared_filters(self) -> "PortfolioState":
        return replace(self, filters=PortfolioFilters())

    # -------------------------
    # Queries
    # -------------------------
    def get(self, use_case_id: str) -> Optional[UseCaseResponse]:
        for uc in self.use_cases:
            if uc.id == use_case_id:
                return uc
        return None

    def filtered(self) -> List[UseCaseResponse]:
        return [uc for uc in self.use_cases if self.filters.matches(uc)]

    def quadrant_counts(self) -> Dict[str, int]:
        """Use cases per effective quadrant, over the filtered list."""
        counts = {q.value: 0 for q in Quadrant}
        for uc in self.filtered():
            counts[effective_quadrant(uc)] += 1
        return counts
