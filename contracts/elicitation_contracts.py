"""Elicitation contracts: note quality signals and completeness rollups."""

from pydantic import BaseModel, Field, computed_field
from typing import List
from enum import Enum


class QualityLevel(str, Enum):
    """Three-level classification used for notes and sessions."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class NoteQuality(BaseModel):
    """Completeness signals found in a block of discovery notes.

    overall_quality is derived from the four flags on every access, so it can
    never drift from them.
    """
    model_config = {"frozen": True}

    has_uncovered_complexity: bool = Field(False, description="Risk, urgency or problem vocabulary present")
    has_specific_requirements: bool = Field(False, description="Obligation vocabulary present (must have, need, ...)")
    has_quantification: bool = Field(False, description="A number with a time, money or percent unit")
    has_technical_detail: bool = Field(False, description="System or integration vocabulary present")

    @computed_field
    @property
    def signal_count(self) -> int:
        return sum([
            self.has_uncovered_complexity,
            self.has_specific_requirements,
            self.has_quantification,
            self.has_technical_detail,
        ])

    @computed_field
    @property
    def overall_quality(self) -> QualityLevel:
        if self.signal_count >= 3:
            return QualityLevel.HIGH
        if self.signal_count == 2:
            return QualityLevel.MEDIUM
        return QualityLevel.LOW

    @classmethod
    def empty(cls) -> "NoteQuality":
        """All signals false; what callers pass before any notes exist."""
        return cls()


class CompletenessReport(BaseModel):
    """Session-level rollup of how thoroughly each area has been explored."""
    percentage: int = Field(..., ge=0, le=100)
    quality: QualityLevel
    gaps: List[str] = Field(default_factory=list, description="Human-readable gap descriptions, one per finding")
