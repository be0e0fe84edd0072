"""Route generation service.

Orchestrates extraction, region scoring and route synthesis so callers
depend on one stable API. Each call recomputes from its inputs; nothing is
cached between calls.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Sequence, Union

from ..config import (
    MAX_WORKERS,
    ROUTE_BUFFER_METERS,
    ROUTE_SMOOTHING_TOLERANCE,
    ROUTE_SNAP_TO_NETWORK,
)
from ..errors import RouteGenerationError
from ..geometry.extraction import extract_points
from ..geometry.projection import buffer_region
from ..map_matching import MapMatchingClient
from ..models import (
    BufferedRegion,
    PositionSample,
    RegionCandidate,
    RegionGeometry,
    SynthesisOptions,
    SynthesisResult,
    TrackGeometry,
)
from ..scoring import ScoreResult, score_regions
from ..synthesis import synthesize

Selection = Union[RegionCandidate, BufferedRegion, RegionGeometry]


@dataclass(slots=True)
class RouteServiceConfig:
    buffer_m: float = ROUTE_BUFFER_METERS
    smoothing_tolerance: float = ROUTE_SMOOTHING_TOLERANCE
    snap_to_network: bool = ROUTE_SNAP_TO_NETWORK
    profile: Optional[str] = None
    max_workers: int = MAX_WORKERS
    client: Optional[MapMatchingClient] = None
    logger: logging.Logger | None = None

    def synthesis_options(self) -> SynthesisOptions:
        return SynthesisOptions(
            smoothing_tolerance=self.smoothing_tolerance,
            snap_to_network=self.snap_to_network,
            profile=self.profile,
        )


@dataclass(slots=True)
class TrackAnalysis:
    """Extracted points and the scoring outcome for one track."""

    points: List[PositionSample]
    score: ScoreResult

    @property
    def candidates(self) -> List[RegionCandidate]:
        return self.score.candidates


@dataclass(slots=True)
class RouteRun:
    """Outcome of :meth:`RouteService.run`.

    ``result`` is None when several regions matched and the caller must pick
    one of ``analysis.candidates`` and call :meth:`RouteService.generate`.
    """

    analysis: TrackAnalysis
    result: Optional[SynthesisResult] = None

    @property
    def needs_selection(self) -> bool:
        return self.result is None


@dataclass(slots=True)
class BatchOutcome:
    name: str
    result: Optional[SynthesisResult] = None
    error: Optional[RouteGenerationError] = None


@dataclass(slots=True)
class _Job:
    index: int
    name: str
    selection: Selection


class RouteService:
    def __init__(self, config: RouteServiceConfig | None = None):
        self.config = config or RouteServiceConfig()
        if self.config.buffer_m < 0:
            raise ValueError("buffer_m must be zero or positive")
        if self.config.smoothing_tolerance < 0:
            raise ValueError("smoothing_tolerance must be zero or positive")
        if self.config.max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def analyze(
        self, track: TrackGeometry, regions: Sequence[RegionGeometry]
    ) -> TrackAnalysis:
        """Extract the track's points and score every region against them."""

        points = extract_points(track)
        self._log.info(
            "Analysing %d track points against %d regions (buffer=%.1fm)",
            len(points),
            len(regions),
            self.config.buffer_m,
        )
        score = score_regions(points, regions, self.config.buffer_m)
        return TrackAnalysis(points=points, score=score)

    def generate(
        self, points: Sequence[PositionSample], selection: Selection
    ) -> SynthesisResult:
        """Synthesise a route for a caller-chosen region.

        ``selection`` may be a scored candidate, an already buffered region,
        or a raw region which is buffered with the configured tolerance.
        """

        region = self._resolve_region(selection)
        return synthesize(
            region,
            points,
            self.config.synthesis_options(),
            client=self.config.client,
        )

    def run(
        self, track: TrackGeometry, regions: Sequence[RegionGeometry]
    ) -> RouteRun:
        """Analyse ``track`` and generate a route when one region is unambiguous.

        Raises ``NoMatchError`` when no region contains any point.
        """

        analysis = self.analyze(track, regions)
        selected = analysis.score.require_selection()
        if selected is None:
            self._log.info(
                "Track matched %d regions; waiting for a selection (%s)",
                len(analysis.candidates),
                ", ".join(
                    f"{c.name}={c.count} ({c.percentage}%)"
                    for c in analysis.candidates
                ),
            )
            return RouteRun(analysis=analysis)
        result = self.generate(analysis.points, selected)
        return RouteRun(analysis=analysis, result=result)

    def generate_many(
        self,
        points: Sequence[PositionSample],
        selections: Sequence[Selection],
    ) -> List[BatchOutcome]:
        """Generate routes for several regions concurrently.

        Outcomes are returned in the order of ``selections``. Failures are
        reported per region in ``BatchOutcome.error`` rather than aborting the
        remaining work; raw regions are buffered inside each job so a bad
        boundary only fails its own outcome.
        """

        jobs = [
            _Job(index=index, name=_selection_name(selection), selection=selection)
            for index, selection in enumerate(selections)
        ]
        if not jobs:
            return []
        outcomes: Dict[int, BatchOutcome] = {}
        workers = min(self.config.max_workers, len(jobs))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_map = {
                executor.submit(self.generate, points, job.selection): job
                for job in jobs
            }
            for future in as_completed(future_map):
                job = future_map[future]
                try:
                    result = future.result()
                except RouteGenerationError as exc:
                    self._log.error("Route generation for %s failed: %s", job.name, exc)
                    outcomes[job.index] = BatchOutcome(name=job.name, error=exc)
                    continue
                outcomes[job.index] = BatchOutcome(name=job.name, result=result)
        failed = sum(1 for outcome in outcomes.values() if outcome.error is not None)
        self._log.info("Generated %d/%d routes", len(jobs) - failed, len(jobs))
        return [outcomes[job.index] for job in jobs]

    def _resolve_region(self, selection: Selection) -> BufferedRegion:
        if isinstance(selection, RegionCandidate):
            return selection.buffered
        if isinstance(selection, BufferedRegion):
            return selection
        if isinstance(selection, RegionGeometry):
            return buffer_region(selection, self.config.buffer_m)
        raise TypeError(f"Unsupported region selection: {type(selection).__name__}")


def _selection_name(selection: Selection) -> str:
    if isinstance(selection, RegionGeometry):
        return selection.display_name
    if isinstance(selection, (RegionCandidate, BufferedRegion)):
        return selection.name
    raise TypeError(f"Unsupported region selection: {type(selection).__name__}")


__all__ = [
    "BatchOutcome",
    "RouteRun",
    "RouteService",
    "RouteServiceConfig",
    "TrackAnalysis",
]
