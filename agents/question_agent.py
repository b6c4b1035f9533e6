"""Discovery Question Agent - The Elicitor.

Generates the next discovery question for an area. The elicitation heuristics
decide depth and focus; the LLM turns that into a natural question. When the
LLM is off or fails, a template question is returned instead.
"""

import json
from typing import List, Optional, Sequence

from pydantic import BaseModel, ValidationError

from agents.base_agent import BaseAgent
from contracts import (
    DISCOVERY_AREA_PROMPTS,
    ICP_CONFIGS,
    DiscoveryAreaName,
    DiscoveryNote,
    DiscoveryQuestionResult,
    DiscoverySession,
    GenerationSource,
    NoteQuality,
    QuestionDraft,
)
from elicitation import (
    DEFAULT_QUESTION,
    ElicitationDepthManager,
    get_question_progression,
    has_placeholders,
)
from providers import ProviderError
from config import settings


# Openers for a fresh area, keyed by universal elicitation area
CONTEXTUAL_OPENERS = {
    "Current State Assessment": "Given your {business_area} operations and {context}, walk me through how things currently work in this area?",
    "Pain Points & Challenges": "What's the biggest operational challenge in your {business_area} that relates to {context}?",
    "Desired Future State": "What would success look like for {context} in your {business_area} operations?",
    "Constraints & Requirements": "Given your {icp} industry requirements, what are the non-negotiable constraints for addressing {context}?",
    "Decision Process & Timeline": "For addressing {context}, who needs to be involved in the decision process?",
    "Budget & Resources": "What's the business case driving investment in solving {context}?",
    "Success Metrics": "How would you measure the success of resolving {context} in your {business_area}?",
    "Stakeholders & Politics": "Who else in your organization would be impacted by changes to {context} in {business_area}?",
}


# Used for areas without their own follow-up list
GENERIC_FOLLOW_UPS = [
    "Can you elaborate on that?",
    "Can you walk me through a recent example?",
    "What would you change first if you could?",
]

class QuestionRequest(BaseModel):
    """Input for the Discovery Question Agent."""
    session: DiscoverySession
    area: str
    discovery_notes: List[DiscoveryNote]


class DiscoveryQuestionAgent(BaseAgent):
    """The Elicitor - asks the next best question in a discovery area."""

    SYSTEM_PROMPT = """You are an expert B2B software consultant and Certified Business Analysis Professional conducting discovery.

Ask probing, strategic questions that uncover business pain, quantify impact, and identify specific opportunities.
Focus on gathering actionable intelligence for solution design.

## Rules

- Ask exactly ONE question
- Reference specific details from earlier answers when there are any
- Never offer solutions; only elicit facts
- Sound natural and conversational, not like a template
"""

    def __init__(
        self,
        model: Optional[str] = None,
        provider: Optional[str] = None,
        depth_manager: Optional[ElicitationDepthManager] = None,
        **kwargs,
    ):
        """Initialize the Discovery Question Agent."""
        super().__init__(
            role="question",
            system_prompt=self.SYSTEM_PROMPT,
            output_schema=QuestionDraft,
            model=model,
            provider=provider,
            max_tokens=settings.max_tokens_question,
            **kwargs,
        )
        self.depth_manager = depth_manager or ElicitationDepthManager()

    def get_task_description(self) -> str:
        return "Generate the next discovery question from depth and note-quality heuristics"

    def generate(
        self,
        session: DiscoverySession,
        area: str,
        discovery_notes: Sequence[DiscoveryNote],
    ) -> DiscoveryQuestionResult:
        """Produce the next question for an area.

        Args:
            session: The discovery session (pre-knowledge context)
            area: Area being explored
            discovery_notes: Notes for every area of the session

        Returns:
            DiscoveryQuestionResult; source tells whether the LLM wrote it
        """
        area_note = _find_area(discovery_notes, area)
        previous_notes = area_note.note_texts if area_note else []
        depth = len(previous_notes)

        quality = (
            self.depth_manager.assess_note_quality(" ".join(previous_notes))
            if previous_notes else NoteQuality.empty()
        )
        guidance = self.depth_manager.get_depth_guidance(depth, quality)
        should_continue = self.depth_manager.should_continue_questioning(depth, quality)

        if self.llm_available:
            try:
                prompt = self.build_prompt(session, area, discovery_notes, quality, guidance)
                request = QuestionRequest(session=session, area=area, discovery_notes=list(discovery_notes))
                result = self.run(request, user_message=prompt)
                draft: QuestionDraft = result.output
                return DiscoveryQuestionResult(
                    area=area,
                    question=draft.question.strip(),
                    reasoning=draft.reasoning,
                    depth=depth,
                    guidance=guidance,
                    should_continue=should_continue,
                    source=GenerationSource.LLM,
                )
            except (ProviderError, json.JSONDecodeError, ValidationError) as e:
                print(f"[question] LLM question generation failed ({e}); using template")

        question, reasoning = self.fallback_question(session, area, previous_notes, quality)
        return DiscoveryQuestionResult(
            area=area,
            question=question,
            reasoning=reasoning,
            depth=depth,
            guidance=guidance,
            should_continue=should_continue,
            source=GenerationSource.FALLBACK,
        )

    def build_prompt(
        self,
        session: DiscoverySession,
        area: str,
        discovery_notes: Sequence[DiscoveryNote],
        quality: NoteQuality,
        guidance: str,
    ) -> str:
        """Render the elicitation prompt for the LLM."""
        area_note = _find_area(discovery_notes, area)
        previous_notes = area_note.note_texts if area_note else []
        depth = len(previous_notes)
        icp = ICP_CONFIGS.get(session.client_icp)
        progression = get_question_progression(area, depth, previous_notes)

        parts = [
            "# PRE-KNOWLEDGE CONTEXT\n",
            f"- Prospect: {session.contact_name}, {session.contact_role} at {session.account_name}",
            f"- Industry: {session.client_icp.value} - {icp.description if icp else ''}",
            f"- Business Area: {session.business_area}",
            f"- Discovery Catalyst: {session.discovery_context}",
            f"- Expected Solution Scope: {session.solution_scope.value}",
            f"- Expected Next Step: {session.next_step_goal.value}",
            "",
            f"# CURRENT ELICITATION AREA: {area}",
            f"QUESTION DEPTH: {depth} ({self.depth_manager.depth_phase(depth)})",
            f"DEPTH GUIDANCE: {guidance}",
            f"PROGRESSION TEMPLATE: {progression}",
            "",
        ]

        if depth == 0:
            parts.extend([
                "Generate an initial question that:",
                f"1. Addresses {area} specifically for their {session.business_area}",
                f"2. Connects directly to their discovery catalyst: \"{session.discovery_context}\"",
                "3. Is specific enough to avoid generic answers",
                f"4. Uses industry terminology relevant to {session.client_icp.value}",
            ])
        else:
            parts.append("# PREVIOUS RESPONSES IN THIS AREA\n")
            for i, block in enumerate(area_note.questions, start=1):
                parts.append(f"Q{i}: {block.question_text}\nResponse: {block.notes}\n")
            parts.extend([
                "# NOTE QUALITY ANALYSIS",
                f"- Complexity uncovered: {_yes_no(quality.has_uncovered_complexity)}",
                f"- Specific requirements: {_yes_no(quality.has_specific_requirements)}",
                f"- Quantification present: {_yes_no(quality.has_quantification)}",
                f"- Technical details: {_yes_no(quality.has_technical_detail)}",
                f"- Overall quality: {quality.overall_quality.value}",
                "",
                "Generate a DEEPER follow-up question that:",
                "1. References specific details from their previous answers",
                "2. " + ("Probes for specific metrics, numbers, timeframes"
                         if not quality.has_quantification else "Builds on quantified insights"),
                "3. " + ("Digs into technical architecture and systems"
                         if not quality.has_technical_detail and "Tech" in area
                         else "Explores business implications"),
                "4. " + ("Uncovers concrete requirements and constraints"
                         if not quality.has_specific_requirements else "Prioritizes competing requirements"),
                f"5. Connects to the discovery catalyst: \"{session.discovery_context}\"",
            ])

        other_areas = [
            f"- {note.area_name}: Key insight - {note.questions[-1].notes}"
            for note in discovery_notes
            if note.area_name != area and note.questions
        ]
        parts.append("\n# CONTEXT FROM OTHER AREAS\n")
        parts.append("\n".join(other_areas) if other_areas else "No other areas explored yet")
        parts.append(
            f"\nExplain in `reasoning` why this question will uncover critical insights "
            f"for a {session.solution_scope.value} engagement."
        )
        return "\n".join(parts)

    def fallback_question(
        self,
        session: DiscoverySession,
        area: str,
        previous_notes: Sequence[str],
        quality: NoteQuality,
    ) -> tuple:
        """Template question and reasoning, used when the LLM is not.

        Returns:
            (question, reasoning)
        """
        depth = len(previous_notes)

        if depth == 0:
            question = self._opening_question(session, area)
            reasoning = (
                f"Generated contextual initial question for {area}, incorporating discovery "
                f"catalyst \"{session.discovery_context}\" and {session.client_icp.value} industry context."
            )
            return question, reasoning

        question = get_question_progression(area, depth, previous_notes)
        if question == DEFAULT_QUESTION:
            question = self._session_area_question(session, area, depth)
        else:
            question = self._fill_session_placeholders(question, session)
            if has_placeholders(question):
                question = self._follow_up(area, depth)

        if not quality.has_quantification:
            target = "quantification"
        elif not quality.has_technical_detail:
            target = "technical details"
        else:
            target = "requirements"
        reasoning = (
            f"Generated depth-{depth} question based on {quality.overall_quality.value} "
            f"quality notes, targeting {target}."
        )
        return question, reasoning

    def _opening_question(self, session: DiscoverySession, area: str) -> str:
        opener = CONTEXTUAL_OPENERS.get(area)
        if opener:
            return opener.format(
                business_area=session.business_area,
                context=session.discovery_context,
                icp=session.client_icp.value,
            )
        area_prompt = DISCOVERY_AREA_PROMPTS.get(area)
        if area_prompt:
            return area_prompt.initial_questions[0]
        return (
            f"Tell me about how {session.discovery_context} affects your "
            f"{session.business_area} operations."
        )

    def _session_area_question(self, session: DiscoverySession, area: str, depth: int) -> str:
        area_prompt = DISCOVERY_AREA_PROMPTS.get(area)
        if area_prompt and depth < len(area_prompt.initial_questions):
            return area_prompt.initial_questions[depth]

        icp = ICP_CONFIGS.get(session.client_icp)
        if area == DiscoveryAreaName.CURRENT_TECHNOLOGY_STACK.value and icp and icp.questions:
            return icp.questions[depth % len(icp.questions)]
        return self._follow_up(area, depth)

    @staticmethod
    def _follow_up(area: str, depth: int) -> str:
        """Cycle the area's follow-ups by depth so consecutive questions differ."""
        area_prompt = DISCOVERY_AREA_PROMPTS.get(area)
        follow_ups = (area_prompt.follow_ups if area_prompt else None) or GENERIC_FOLLOW_UPS
        return follow_ups[depth % len(follow_ups)]

    @staticmethod
    def _fill_session_placeholders(question: str, session: DiscoverySession) -> str:
        icp = ICP_CONFIGS.get(session.client_icp)
        question = question.replace("[business area from context]", session.business_area)
        question = question.replace("[solution scope]", session.solution_scope.value)
        if icp and icp.keywords:
            question = question.replace("[compliance/regulatory concern]", icp.keywords[0])
        return question


def _find_area(discovery_notes: Sequence[DiscoveryNote], area: str) -> Optional[DiscoveryNote]:
    for note in discovery_notes:
        if note.area_name == area:
            return note
    return None


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"
