"""Rank candidate regions by how many track points they contain."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Optional, Sequence

from .errors import EmptyTrackError, NoMatchError
from .geometry.containment import count_contained
from .geometry.projection import buffer_region
from .models import BufferedRegion, PositionSample, RegionCandidate, RegionGeometry

LOGGER = logging.getLogger(__name__)

NO_MATCH = "no_match"
AUTO_SELECT = "auto_select"
AMBIGUOUS = "ambiguous"


@dataclass(slots=True)
class ScoreResult:
    """Ranked candidates plus the selection decision derived from them."""

    decision: str
    candidates: List[RegionCandidate] = field(default_factory=list)
    total_points: int = 0

    @property
    def selected(self) -> Optional[RegionCandidate]:
        """Return the auto-selected candidate, or None when a choice is needed."""

        if self.decision == AUTO_SELECT:
            return self.candidates[0]
        return None

    @property
    def is_ambiguous(self) -> bool:
        return self.decision == AMBIGUOUS

    def require_selection(self) -> Optional[BufferedRegion]:
        """Return the auto-selected buffered region.

        Raises ``NoMatchError`` when nothing matched; returns None when the
        caller has to pick from ``candidates``.
        """

        if self.decision == NO_MATCH:
            raise NoMatchError(
                "No track points found inside any of the provided regions "
                "(even with buffer)"
            )
        selected = self.selected
        return selected.buffered if selected is not None else None


def score_regions(
    points: Sequence[PositionSample],
    regions: Sequence[RegionGeometry],
    buffer_m: float,
) -> ScoreResult:
    """Buffer each polygonal region and count the points it contains.

    Regions without any contained point are dropped. Survivors are ranked by
    count, highest first; equal counts keep their input order. One survivor
    is auto-selected, several are returned for the caller to choose from.
    """

    if not points:
        raise EmptyTrackError("Cannot score regions against an empty point sequence")
    total = len(points)
    candidates: List[RegionCandidate] = []
    for index, region in enumerate(regions):
        if not region.is_polygonal:
            LOGGER.debug(
                "Ignoring non-polygonal region %s (%s)",
                region.display_name,
                region.geometry.geom_type,
            )
            continue
        if region.geometry.is_empty:
            LOGGER.debug("Ignoring empty region %s", region.display_name)
            continue
        buffered = buffer_region(region, buffer_m)
        count = count_contained(points, buffered.geometry)
        LOGGER.debug(
            "Region %s contains %d/%d points (buffer=%.1fm)",
            region.display_name,
            count,
            total,
            buffer_m,
        )
        if count == 0:
            continue
        candidates.append(
            RegionCandidate(
                region=region,
                buffered=buffered,
                name=region.display_name,
                count=count,
                percentage=round(count / total * 100, 1),
                index=index,
            )
        )

    candidates.sort(key=lambda c: (-c.count, c.index))

    if not candidates:
        decision = NO_MATCH
    elif len(candidates) == 1:
        decision = AUTO_SELECT
    else:
        decision = AMBIGUOUS
    LOGGER.info(
        "Scored %d regions against %d points: %s (%d candidates)",
        len(regions),
        total,
        decision,
        len(candidates),
    )
    return ScoreResult(decision=decision, candidates=candidates, total_points=total)


__all__ = [
    "NO_MATCH",
    "AUTO_SELECT",
    "AMBIGUOUS",
    "ScoreResult",
    "score_regions",
]
