"""Question templates per universal discovery area and depth.

Templates carry bracketed placeholders that get filled from the most recent
note in the area. Every area must define depth0 through depth4; the table is
checked when the package is imported.
"""

import re
from typing import Dict, List, Mapping, Sequence

from elicitation.depth_manager import ElicitationDepthManager


class PatternConfigurationError(ValueError):
    """Raised when the question template table is missing entries."""


UNIVERSAL_ELICITATION_AREAS: List[str] = [
    "Current State Assessment",      # What exists now
    "Pain Points & Challenges",      # What's broken
    "Desired Future State",          # Where they want to be
    "Constraints & Requirements",    # What limits the solution
    "Decision Process & Timeline",   # How/when they'll decide
    "Budget & Resources",            # What they can invest
    "Success Metrics",               # How they'll measure success
    "Stakeholders & Politics",       # Who influences/blocks
]

REQUIRED_DEPTH_KEYS: List[str] = [f"depth{d}" for d in range(ElicitationDepthManager.MAX_DEPTH)]

DEFAULT_QUESTION = "Tell me more about this area."

ELICITATION_PATTERNS: Dict[str, Dict[str, str]] = {
    "Current State Assessment": {
        "depth0": "Walk me through how [business area from context] operates today?",
        "depth1": "What systems, processes, or tools currently handle [specific process mentioned]?",
        "depth2": "When [specific scenario from notes], what's the current workflow step-by-step?",
        "depth3": "What happens when [edge case scenario] - who gets involved and what's the workaround?",
        "depth4": "If I shadowed your team for a day, what would surprise me about how this really works?",
    },
    "Pain Points & Challenges": {
        "depth0": "What's the biggest bottleneck or frustration in [business area from context]?",
        "depth1": "How much time/money does [specific pain mentioned] cost you monthly?",
        "depth2": "When did this problem first surface, and what triggered it?",
        "depth3": "What would happen to [business metric] if this wasn't fixed in 6 months?",
        "depth4": "Who internally is most impacted when [specific pain point] occurs?",
    },
    "Desired Future State": {
        "depth0": "What would success look like for [business area from context] in 12 months?",
        "depth1": "If you could wave a magic wand, how would [specific process mentioned] work ideally?",
        "depth2": "What capabilities do you wish you had that you don't have today?",
        "depth3": "How would [specific improvement] change day-to-day operations for your team?",
        "depth4": "What would be possible if [constraint mentioned] was no longer an issue?",
    },
    "Constraints & Requirements": {
        "depth0": "What are the non-negotiable requirements for any solution?",
        "depth1": "How does [specific requirement mentioned] relate to [compliance/regulatory concern]?",
        "depth2": "What happens if [specific requirement] can't be met exactly as specified?",
        "depth3": "Which requirement would you compromise on first if you had to choose?",
        "depth4": "What constraints aren't obvious but could derail a project later?",
    },
    "Decision Process & Timeline": {
        "depth0": "Who needs to approve a solution for [solution scope]?",
        "depth1": "What criteria will [specific stakeholder mentioned] use to evaluate options?",
        "depth2": "What happened the last time you made a similar decision?",
        "depth3": "What internal politics or competing priorities could affect this decision?",
        "depth4": "If [key stakeholder] says no, what's the escalation path?",
    },
    "Budget & Resources": {
        "depth0": "What's the cost of maintaining the current [problem state from context]?",
        "depth1": "What budget range has been discussed for [solution scope]?",
        "depth2": "How does [specific budget mentioned] compare to other initiatives' funding?",
        "depth3": "Who controls budget approval for [specific amount range]?",
        "depth4": "What would justify exceeding the initial budget by 20-30%?",
    },
    "Success Metrics": {
        "depth0": "How will you measure success in the first 90 days?",
        "depth1": "What specific number or metric would indicate [outcome mentioned]?",
        "depth2": "How do you track [specific metric] today, and what's the baseline?",
        "depth3": "What would make this project a failure despite hitting target metrics?",
        "depth4": "How would [specific stakeholder] define wild success versus just meeting goals?",
    },
    "Stakeholders & Politics": {
        "depth0": "Who else would be impacted by changes to [business area from context]?",
        "depth1": "Which [specific stakeholder mentioned] would be most resistant to change and why?",
        "depth2": "What groups or departments have competing interests in this area?",
        "depth3": "Who has been burned by similar initiatives in the past?",
        "depth4": "What unspoken dynamics could influence whether this succeeds or fails?",
    },
}

# Key terms pulled from the last note to fill template placeholders
_SYSTEM_TERM = re.compile(r"\b([A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+)*)\b")
_AMOUNT_TERM = re.compile(r"\d+\s*(?:hours?|days?|weeks?|months?|dollars?|\$|%)")
_PAIN_TERM = re.compile(r"(?:challenge|issue|problem|bottleneck|pain):\s*([^.]+)", re.IGNORECASE)
_REQUIREMENT_TERM = re.compile(r"(?:must have|needs?|requires?)\s+(?:to\s+)?([^.,;]+)", re.IGNORECASE)
_PLACEHOLDER = re.compile(r"\[[^\]]+\]")


def check_pattern_completeness(
    patterns: Mapping[str, Mapping[str, str]] = ELICITATION_PATTERNS,
    areas: Sequence[str] = UNIVERSAL_ELICITATION_AREAS,
) -> List[str]:
    """List every missing or blank 'area/depthN' entry in the template table."""
    missing = []
    for area in areas:
        templates = patterns.get(area, {})
        for key in REQUIRED_DEPTH_KEYS:
            if not (templates.get(key) or "").strip():
                missing.append(f"{area}/{key}")
    return missing


def validate_elicitation_patterns(
    patterns: Mapping[str, Mapping[str, str]] = ELICITATION_PATTERNS,
    areas: Sequence[str] = UNIVERSAL_ELICITATION_AREAS,
) -> None:
    """Raise PatternConfigurationError if any area lacks a depth template."""
    missing = check_pattern_completeness(patterns, areas)
    if missing:
        raise PatternConfigurationError(
            f"Elicitation templates missing for: {', '.join(missing)}"
        )


def fill_placeholders(template: str, last_note: str) -> str:
    """Replace known placeholders with terms found in the last note."""
    system_match = _SYSTEM_TERM.search(last_note)
    amount_match = _AMOUNT_TERM.search(last_note)
    pain_match = _PAIN_TERM.search(last_note)
    requirement_match = _REQUIREMENT_TERM.search(last_note)

    if system_match:
        template = template.replace("[specific system mentioned]", system_match.group(0), 1)
        template = template.replace("[system A]", system_match.group(0), 1)

    if amount_match:
        template = template.replace("[specific amount mentioned]", amount_match.group(0), 1)

    if pain_match:
        template = template.replace("[specific pain mentioned]", pain_match.group(1).strip(), 1)

    if requirement_match:
        requirement = requirement_match.group(1).strip()
        template = template.replace("[specific requirement mentioned]", requirement, 1)
        template = template.replace("[specific requirement]", requirement, 1)

    return template


def has_placeholders(text: str) -> bool:
    """True if any bracketed placeholder is left in the text."""
    return bool(_PLACEHOLDER.search(text))


def get_question_progression(area: str, depth: int, previous_notes: Sequence[str]) -> str:
    """Pick the question template for an area at a depth.

    Args:
        area: Universal elicitation area name
        depth: Questions already asked in the area
        previous_notes: Notes recorded so far, oldest first

    Returns:
        Template text with placeholders filled where the notes allow
    """
    templates = ELICITATION_PATTERNS.get(area)
    if not templates:
        return DEFAULT_QUESTION

    # Past the ceiling there is no deeper template; start the cycle again
    template = templates.get(f"depth{depth}") or templates["depth0"]

    if previous_notes:
        template = fill_placeholders(template, previous_notes[-1])

    return template
