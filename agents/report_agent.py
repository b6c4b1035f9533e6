"""Report Agent - The Analyst.

Turns a finished discovery session into a seven-section business report.
Falls back to a template report assembled from the notes and the
completeness rollup when the LLM is unavailable or returns bad output.
"""

import json
import time
import uuid
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ValidationError

from agents.base_agent import BaseAgent
from contracts import (
    ICP_CONFIGS,
    CompletenessReport,
    DiscoveryNote,
    DiscoverySession,
    GeneratedReport,
    GenerationMetadata,
    GenerationSource,
    ReportDraft,
    ReportSection,
    ReportSections,
)
from elicitation import assess_note_quality, calculate_discovery_completeness
from providers import ProviderError
from config import settings


class ReportInput(BaseModel):
    """Input for the Report Agent."""
    session: DiscoverySession
    discovery_notes: List[DiscoveryNote]
    research_context: Optional[str] = None


class ReportAgent(BaseAgent):
    """The Analyst - extracts and prioritizes intelligence from discovery notes."""

    SYSTEM_PROMPT = """You are an elite business intelligence analyst specializing in B2B software consulting. Your role is to:

1. EXTRACT critical business intelligence from discovery notes - look for specifics like dollar amounts, timeframes, names, failed vendors, political dynamics
2. CORRELATE discovered pain points with market research findings - connect their specific challenges to industry trends and solutions
3. PRIORITIZE insights by business impact - what will move the needle for THIS specific client
4. SURFACE hidden opportunities and risks - what did they reveal that they might not realize is important?
5. GENERATE hyper-specific recommendations - no generic advice, everything tied to their exact context

## Section Requirements

- executive_summary: 3-4 bullet points of the most critical findings
- current_state: prioritized pain points WITH NUMBERS and failed solutions already tried
- opportunities: market intelligence and competitive analysis tied to their challenges
- recommendations: specific solutions accounting for decision dynamics and timeline pressure
- roadmap: phased plan addressing urgent needs first, with risk mitigations
- roi_projections: business case built from their stated pain points and numbers
- next_steps: who to engage, what to demonstrate, how to position

Set confidence_score (0-1) by how well the notes support your findings.
"""

    def __init__(
        self,
        model: Optional[str] = None,
        provider: Optional[str] = None,
        **kwargs,
    ):
        """Initialize the Report Agent."""
        super().__init__(
            role="report",
            system_prompt=self.SYSTEM_PROMPT,
            output_schema=ReportDraft,
            model=model,
            provider=provider,
            max_tokens=settings.max_tokens_report,
            **kwargs,
        )

    def get_task_description(self) -> str:
        return "Generate a strategic discovery report from session notes and research"

    def generate(
        self,
        session: DiscoverySession,
        discovery_notes: Sequence[DiscoveryNote],
        research_context: Optional[str] = None,
    ) -> GeneratedReport:
        """Generate the report for a session.

        Args:
            session: The discovery session
            discovery_notes: Notes for every area
            research_context: Optional scraped/market research text

        Returns:
            GeneratedReport; source tells whether the LLM wrote it
        """
        completeness = calculate_discovery_completeness(
            {note.area_name: note.note_texts for note in discovery_notes}
        )

        if self.llm_available:
            started = time.monotonic()
            try:
                report_input = ReportInput(
                    session=session,
                    discovery_notes=list(discovery_notes),
                    research_context=research_context,
                )
                prompt = self.build_prompt(session, discovery_notes, research_context, completeness)
                result = self.run(report_input, user_message=prompt)
                draft: ReportDraft = result.output
                return GeneratedReport(
                    id=f"report_{uuid.uuid4().hex[:12]}",
                    session_id=session.id,
                    sections=draft.sections,
                    confidence_score=draft.confidence_score,
                    completeness_percentage=completeness.percentage,
                    generation_metadata=GenerationMetadata(
                        tokens_used=result.token_usage.total_tokens,
                        generation_time_ms=int((time.monotonic() - started) * 1000),
                        model_version=result.model,
                    ),
                    source=GenerationSource.LLM,
                    research_context=research_context,
                )
            except (ProviderError, json.JSONDecodeError, ValidationError) as e:
                print(f"[report] LLM report generation failed ({e}); using template report")

        return self.fallback_report(session, discovery_notes, completeness, research_context)

    def build_prompt(
        self,
        session: DiscoverySession,
        discovery_notes: Sequence[DiscoveryNote],
        research_context: Optional[str],
        completeness: CompletenessReport,
    ) -> str:
        """Render the report prompt for the LLM."""
        lines = [
            "Analyze this discovery session and market research to generate a strategic assessment report.",
            "",
            "=== CLIENT CONTEXT ===",
            f"Company: {session.account_name}",
            f"Contact: {session.contact_name} ({session.contact_role})",
            f"Industry: {session.client_icp.value}",
            f"Focus Area: {session.business_area}",
            f"Catalyst: {session.discovery_context}",
            f"Solution Scope: {session.solution_scope.value}",
            f"Next Step Goal: {session.next_step_goal.value}",
            "",
            "=== DISCOVERY INSIGHTS (FULL NOTES FROM SESSION) ===",
        ]
        for note in discovery_notes:
            if not note.questions:
                continue
            lines.append(f"\n## {note.area_name}")
            for block in note.questions:
                lines.append(f"Q: {block.question_text}\nA: {block.notes}")

        lines.extend([
            "",
            "=== DISCOVERY COMPLETENESS ===",
            f"{completeness.percentage}% ({completeness.quality.value})",
            *[f"- Gap: {gap}" for gap in completeness.gaps],
            "",
            "=== ADDITIONAL CONTEXT & MARKET RESEARCH ===",
            research_context or "Not specified",
            "",
            "Generate a report that demonstrates deep understanding of their SPECIFIC situation, "
            "not generic recommendations.",
        ])
        return "\n".join(lines)

    def fallback_report(
        self,
        session: DiscoverySession,
        discovery_notes: Sequence[DiscoveryNote],
        completeness: CompletenessReport,
        research_context: Optional[str] = None,
    ) -> GeneratedReport:
        """Assemble a report from the notes without an LLM."""
        notes_by_area: Dict[str, List[str]] = {
            note.area_name: [n for n in note.note_texts if n.strip()]
            for note in discovery_notes
        }
        explored = [area for area, notes in notes_by_area.items() if notes]
        icp = ICP_CONFIGS.get(session.client_icp)

        summary_points = [
            f"- {session.account_name} is exploring {session.discovery_context} in {session.business_area}.",
            f"- {len(explored)} of {len(notes_by_area)} discovery areas explored; "
            f"completeness {completeness.percentage}% ({completeness.quality.value}).",
        ]
        if completeness.gaps:
            summary_points.append(f"- {len(completeness.gaps)} open gaps remain before a proposal.")

        current_state = _area_digest(notes_by_area) or "No notes were captured during the session."
        gaps_text = "\n".join(f"- {gap}" for gap in completeness.gaps) or "- No open gaps."

        sections = ReportSections(
            executive_summary=ReportSection(
                title="Executive Summary",
                content="\n".join(summary_points),
            ),
            current_state=ReportSection(
                title="Critical Pain Points & Quantified Impact",
                content=current_state,
            ),
            opportunities=ReportSection(
                title="Market Intelligence & Competitive Analysis",
                content=(research_context or
                         f"Industry focus: {session.client_icp.value}"
                         + (f" ({icp.description})" if icp else "")
                         + ". No market research was attached to this session."),
            ),
            recommendations=ReportSection(
                title="Strategic Recommendations & Political Navigation",
                content=(
                    f"Scope the engagement as: {session.solution_scope.value}. "
                    f"Close the open discovery gaps before committing to a solution design:\n{gaps_text}"
                ),
            ),
            roadmap=ReportSection(
                title="Implementation Roadmap & Risk Mitigation",
                content=(
                    "Phase 1: close discovery gaps and validate quantified pain. "
                    "Phase 2: pilot against the highest-impact pain point. "
                    "Phase 3: scale and integrate with existing systems."
                ),
            ),
            roi_projections=ReportSection(
                title="Business Case & Investment Analysis",
                content=_quantified_lines(notes_by_area)
                or "No quantified impact was captured; the business case needs numbers from the prospect.",
            ),
            next_steps=ReportSection(
                title="Immediate Actions & Deal Strategy",
                content=(
                    f"Goal: {session.next_step_goal.value}. "
                    f"Follow up with {session.contact_name or 'the contact'} on the gaps listed above."
                ),
            ),
        )

        return GeneratedReport(
            id=f"report_{uuid.uuid4().hex[:12]}",
            session_id=session.id,
            sections=sections,
            confidence_score=completeness.percentage / 100,
            completeness_percentage=completeness.percentage,
            generation_metadata=GenerationMetadata(model_version="fallback"),
            source=GenerationSource.FALLBACK,
            research_context=research_context,
        )


def _area_digest(notes_by_area: Dict[str, List[str]]) -> str:
    blocks = []
    for area, notes in notes_by_area.items():
        if notes:
            blocks.append(f"{area}:\n" + "\n".join(f"- {n}" for n in notes))
    return "\n\n".join(blocks)


def _quantified_lines(notes_by_area: Dict[str, List[str]]) -> str:
    lines = [
        f"- {note}"
        for notes in notes_by_area.values()
        for note in notes
        if assess_note_quality(note).has_quantification
    ]
    return "\n".join(lines)
