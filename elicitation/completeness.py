"""Session completeness rollup over per-area discovery notes."""

import math
from typing import Mapping, Optional, Sequence

from contracts import CompletenessReport, QualityLevel
from elicitation.depth_manager import ElicitationDepthManager

QUALITY_POINTS = {
    QualityLevel.HIGH: 3,
    QualityLevel.MEDIUM: 2,
    QualityLevel.LOW: 1,
}
MAX_POINTS_PER_AREA = 3

HIGH_THRESHOLD = 80
MEDIUM_THRESHOLD = 60


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def classify_percentage(percentage: int) -> QualityLevel:
    if percentage >= HIGH_THRESHOLD:
        return QualityLevel.HIGH
    if percentage >= MEDIUM_THRESHOLD:
        return QualityLevel.MEDIUM
    return QualityLevel.LOW


def calculate_discovery_completeness(
    notes_per_area: Mapping[str, Sequence[str]],
    depth_manager: Optional[ElicitationDepthManager] = None,
) -> CompletenessReport:
    """Score how thoroughly a session has explored its areas.

    Areas with fewer than MIN_DEPTH notes score zero. Others score 3/2/1 for
    high/medium/low combined note quality. Gaps are reported in area order.

    Args:
        notes_per_area: Area name to ordered note texts
        depth_manager: Manager used to assess quality (default instance if None)

    Returns:
        CompletenessReport with percentage, quality and gaps. An empty mapping
        yields 0% / low with no gaps.
    """
    manager = depth_manager or ElicitationDepthManager()
    if not notes_per_area:
        return CompletenessReport(percentage=0, quality=QualityLevel.LOW, gaps=[])

    total_points = 0
    gaps = []

    for area, notes in notes_per_area.items():
        if len(notes) < manager.MIN_DEPTH:
            gaps.append(
                f"{area}: Needs more exploration ({len(notes)}/{manager.MIN_DEPTH} minimum)"
            )
            continue

        quality = manager.assess_note_quality(" ".join(notes))
        total_points += QUALITY_POINTS[quality.overall_quality]

        if not quality.has_quantification:
            gaps.append(f"{area}: Missing quantification/metrics")
        if not quality.has_technical_detail and "Tech" in area:
            gaps.append(f"{area}: Needs technical specifics")

    max_points = len(notes_per_area) * MAX_POINTS_PER_AREA
    percentage = _round_half_up(total_points / max_points * 100)

    return CompletenessReport(
        percentage=percentage,
        quality=classify_percentage(percentage),
        gaps=gaps,
    )
