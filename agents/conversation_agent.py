"""Conversation Agent - generates short pain-point discovery demos.

Given a BusinessContext (who is selling, who is buying, and why now), writes a
four-turn sample conversation: context line, broad pain question, prospect
answer, drill-down question. Used to show prospects what a session feels like.
"""

import re
from typing import Dict, List, Optional, Sequence

from agents.base_agent import BaseAgent
from contracts import BusinessContext, ConversationMetadata, GeneratedConversation
from providers import ProviderError


FOLLOW_UP_FALLBACK = (
    "That's really insightful. Can you tell me more about how frequently "
    "this impacts your operations?"
)

LINE_PREFIXES = {
    "CONTEXT:": "pre_history_context",
    "Q1:": "question_1",
    "RESPONSE:": "prospect_response",
    "Q2:": "question_2",
}


class ConversationAgent(BaseAgent):
    """Writes demo discovery conversations focused on pain points."""

    SYSTEM_PROMPT = """You write realistic B2B discovery conversations between DeepRabbit (an AI discovery assistant) and a prospect.

Focus EXCLUSIVELY on discovering and drilling into PAIN POINTS:
- Focus on problems, never solutions
- Use industry-specific language
- Prospect responses reveal genuine business pain with specifics
- Questions feel natural and consultative
"""

    def __init__(self, model: Optional[str] = None, provider: Optional[str] = None, **kwargs):
        super().__init__(
            role="conversation",
            system_prompt=self.SYSTEM_PROMPT,
            output_schema=GeneratedConversation,
            model=model,
            provider=provider,
            max_tokens=800,
            temperature=0.8,
            **kwargs,
        )

    def get_task_description(self) -> str:
        return "Generate a sample pain-point discovery conversation"

    def generate(self, business_context: BusinessContext) -> GeneratedConversation:
        """Generate a demo conversation, falling back to a template one."""
        if not self.llm_available:
            return self.fallback_conversation(business_context)

        try:
            print(f"[conversation] Generating conversation for {business_context.prospect.name}")
            response = self.complete_text(self.build_prompt(business_context))
        except ProviderError as e:
            print(f"[conversation] Generation failed ({e}); using template conversation")
            return self.fallback_conversation(business_context)

        return self.parse_response(response, business_context)

    def build_prompt(self, business_context: BusinessContext) -> str:
        you = business_context.your_company
        prospect = business_context.prospect
        return f"""Generate a realistic pain point discovery conversation with a prospect from {prospect.name}.

CONTEXT:
- Your Company: {you.name} ({you.sub_industry}) offering {', '.join(you.services)}
- Prospect: {prospect.name} ({prospect.org_type} in {prospect.industry})
- Business Case: {business_context.business_case}
- Catalyst: {business_context.catalyst}

Generate exactly:
1. Pre-history context (1 sentence about the catalyst/situation)
2. DeepRabbit Q1: Broad pain discovery question related to the catalyst
3. Prospect Response: Realistic answer revealing a pain point with specifics
4. DeepRabbit Q2: Drilling deeper into impact, scale, or frequency of that pain

Be specific to the catalyst: {business_context.catalyst}

FORMAT:
CONTEXT: [Pre-history context]
Q1: [Broad pain question]
RESPONSE: [Prospect's pain revelation]
Q2: [Deeper drill-down question]"""

    def parse_response(self, response: str, business_context: BusinessContext) -> GeneratedConversation:
        """Parse the CONTEXT/Q1/RESPONSE/Q2 format.

        Missing lines are recovered from free-form sentences when there are
        at least three, otherwise filled with catalyst-based defaults.
        """
        parsed: Dict[str, str] = {}
        for line in response.strip().splitlines():
            line = line.strip()
            for prefix, field in LINE_PREFIXES.items():
                if line.startswith(prefix):
                    parsed[field] = line[len(prefix):].strip()
                    break

        if not all(parsed.get(f) for f in ("question_1", "prospect_response", "question_2")):
            sentences = [s.strip() for s in re.split(r"[.!?]+", response) if len(s.strip()) > 10]
            if len(sentences) >= 3:
                parsed.setdefault("question_1", sentences[0] + "?")
                parsed.setdefault("prospect_response", sentences[1] + ".")
                parsed.setdefault("question_2", sentences[2] + "?")

        catalyst = business_context.catalyst.lower()
        return GeneratedConversation(
            pre_history_context=parsed.get("pre_history_context") or f"Discussing {catalyst}",
            question_1=parsed.get("question_1")
            or f"How is {catalyst} affecting your current operations?",
            prospect_response=parsed.get("prospect_response")
            or f"We're experiencing some challenges with {business_context.prospect.industry} operations.",
            question_2=parsed.get("question_2")
            or "Can you walk me through the specific impact this is having?",
            metadata=_metadata(business_context, "operational efficiency"),
        )

    def fallback_conversation(self, business_context: BusinessContext) -> GeneratedConversation:
        prospect = business_context.prospect
        catalyst = business_context.catalyst.lower()
        return GeneratedConversation(
            pre_history_context=f"Discussing {catalyst} and its impact on {prospect.name}",
            question_1=(
                f"Given the {catalyst}, how is this affecting your {prospect.industry} "
                f"operations at {prospect.name}?"
            ),
            prospect_response=(
                f"We're seeing significant challenges in our {prospect.industry} processes. "
                f"The {catalyst} has created bottlenecks and we're struggling to maintain efficiency."
            ),
            question_2="When these bottlenecks occur, what's the typical impact on your team and timeline?",
            metadata=_metadata(business_context, "operational bottlenecks"),
        )

    def follow_up(self, history: Sequence[Dict[str, str]], business_context: BusinessContext) -> str:
        """One deeper follow-up question for the latest prospect message.

        Args:
            history: Messages as {"role": "prospect" | "assistant", "content": ...}
            business_context: The demo's business context
        """
        prospect_messages: List[str] = [m.get("content", "") for m in history if m.get("role") == "prospect"]
        last_message = prospect_messages[-1] if prospect_messages else ""

        if not self.llm_available:
            return FOLLOW_UP_FALLBACK

        prompt = f"""Based on this pain point discovery conversation context:
Business Case: {business_context.business_case}
Catalyst: {business_context.catalyst}
Last prospect response: "{last_message}"

Generate ONE specific follow-up question that:
1. Digs deeper into the pain point impact
2. Explores scale, frequency, or business consequences
3. Stays focused on problems (no solutions)

Return just the question:"""

        try:
            question = self.complete_text(prompt, max_tokens=150, temperature=0.7)
        except ProviderError as e:
            print(f"[conversation] Follow-up failed ({e})")
            return FOLLOW_UP_FALLBACK
        return question or FOLLOW_UP_FALLBACK


def _metadata(business_context: BusinessContext, key_pain_point: str) -> ConversationMetadata:
    return ConversationMetadata(
        prospect_company=business_context.prospect.name,
        prospect_industry=business_context.prospect.industry,
        key_pain_point=key_pain_point,
        business_case=business_context.business_case,
        catalyst=business_context.catalyst,
    )
