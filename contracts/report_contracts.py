"""Contracts for generated discovery questions and business reports."""

from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum


class GenerationSource(str, Enum):
    """Whether an artifact came from the LLM or the rule-based fallback."""
    LLM = "llm"
    FALLBACK = "fallback"


class QuestionDraft(BaseModel):
    """Raw LLM output for the next discovery question."""
    question: str = Field(..., min_length=1, description="The next strategic elicitation question")
    reasoning: str = Field("", description="Why this question will uncover critical insights")


class DiscoveryQuestionResult(BaseModel):
    """The next question for an area, with the heuristics that shaped it."""
    area: str
    question: str
    reasoning: str
    depth: int = Field(..., ge=0)
    guidance: str
    should_continue: bool
    source: GenerationSource = GenerationSource.LLM


class ReportSection(BaseModel):
    title: str
    content: str
    subsections: List["ReportSection"] = Field(default_factory=list)


class ReportSections(BaseModel):
    """The seven fixed sections of a discovery report."""
    executive_summary: ReportSection
    current_state: ReportSection
    opportunities: ReportSection
    recommendations: ReportSection
    roadmap: ReportSection
    roi_projections: ReportSection
    next_steps: ReportSection

    def ordered(self) -> List[ReportSection]:
        return [
            self.executive_summary,
            self.current_state,
            self.opportunities,
            self.recommendations,
            self.roadmap,
            self.roi_projections,
            self.next_steps,
        ]


class ReportDraft(BaseModel):
    """Raw LLM output for a report."""
    sections: ReportSections
    confidence_score: float = Field(..., ge=0.0, le=1.0)


class GenerationMetadata(BaseModel):
    tokens_used: int = 0
    generation_time_ms: int = 0
    model_version: str = "fallback"


class GeneratedReport(BaseModel):
    """Narrative business report produced at the end of a session."""
    id: str
    session_id: str
    sections: ReportSections
    confidence_score: float = Field(..., ge=0.0, le=1.0)
    completeness_percentage: int = Field(..., ge=0, le=100)
    generation_metadata: GenerationMetadata = Field(default_factory=GenerationMetadata)
    source: GenerationSource = GenerationSource.LLM
    research_context: Optional[str] = None

    def to_markdown(self) -> str:
        """Render the report as a markdown document."""
        lines = []
        for section in self.sections.ordered():
            lines.append(f"## {section.title}\n")
            lines.append(section.content.strip() + "\n")
            for sub in section.subsections:
                lines.append(f"### {sub.title}\n")
                lines.append(sub.content.strip() + "\n")
        lines.append(
            f"_Confidence: {self.confidence_score:.0%} | "
            f"Discovery completeness: {self.completeness_percentage}%_\n"
        )
        return "\n".join(lines)
