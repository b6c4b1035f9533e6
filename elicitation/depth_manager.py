"""Elicitation depth manager.

Decides how many questions to ask per discovery area and scores free-text
notes for completeness signals. Pure functions over their inputs: nothing here
does I/O or keeps state between calls.
"""

import re
from typing import Pattern

from contracts import NoteQuality


class ElicitationDepthManager:
    """Rule-based gate for questioning depth.

    Every area gets at least MIN_DEPTH questions and never more than
    MAX_DEPTH. In between, questioning continues only while the notes show a
    problem signal without a concrete requirement.
    """

    MIN_DEPTH = 2
    MAX_DEPTH = 5

    # Presence tests, case-insensitive, no word boundaries.
    COMPLEXITY_PATTERN: Pattern[str] = re.compile(
        r"critical|urgent|blocked|failed|risk|challenge|issue|problem",
        re.IGNORECASE,
    )
    REQUIREMENTS_PATTERN: Pattern[str] = re.compile(
        r"must have|need|require|essential|mandatory|critical",
        re.IGNORECASE,
    )
    # A digit run followed by a unit ("3 days", "15%", "50 percent"), or a
    # leading currency amount ("$500").
    QUANTIFICATION_PATTERN: Pattern[str] = re.compile(
        r"\d+\s*(?:hours?|days?|weeks?|months?|dollars?|usd|\$|%|percent)"
        r"|\$\s*\d",
        re.IGNORECASE,
    )
    TECHNICAL_PATTERN: Pattern[str] = re.compile(
        r"system|api|database|workflow|integration|platform|architecture|infrastructure",
        re.IGNORECASE,
    )

    GUIDANCE_INITIAL = "Initial exploration - broad but specific to their context"
    GUIDANCE_QUANTIFY = "Probe for specific metrics, numbers, timeframes"
    GUIDANCE_TECHNICAL = "Dig into technical specifics and system details"
    GUIDANCE_REQUIREMENTS = "Extract concrete requirements and must-haves"
    GUIDANCE_COMPLEXITY = "Explore the complexity - what makes this challenging?"
    GUIDANCE_SYNTHESIZE = "Synthesize and confirm understanding"

    def should_continue_questioning(self, current_depth: int, note_quality: NoteQuality) -> bool:
        """Decide whether to ask another question in this area.

        Args:
            current_depth: Questions already asked in the area (non-negative)
            note_quality: Quality of the accumulated notes; pass
                NoteQuality.empty() when there are none yet

        Returns:
            True to keep probing, False to move on
        """
        if current_depth < self.MIN_DEPTH:
            return True

        # Hard stop, regardless of what the notes say
        if current_depth >= self.MAX_DEPTH:
            return False

        return note_quality.has_uncovered_complexity and not note_quality.has_specific_requirements

    def assess_note_quality(self, text: str) -> NoteQuality:
        """Score a block of notes for the four completeness signals."""
        text = text or ""
        return NoteQuality(
            has_uncovered_complexity=bool(self.COMPLEXITY_PATTERN.search(text)),
            has_specific_requirements=bool(self.REQUIREMENTS_PATTERN.search(text)),
            has_quantification=bool(self.QUANTIFICATION_PATTERN.search(text)),
            has_technical_detail=bool(self.TECHNICAL_PATTERN.search(text)),
        )

    def get_depth_guidance(self, depth: int, quality: NoteQuality) -> str:
        """Describe what the next question should target.

        The first missing signal wins: numbers before technical detail, technical
        detail before requirements, requirements before exploring complexity.
        """
        if depth == 0:
            return self.GUIDANCE_INITIAL

        if not quality.has_quantification:
            return self.GUIDANCE_QUANTIFY

        if not quality.has_technical_detail:
            return self.GUIDANCE_TECHNICAL

        if not quality.has_specific_requirements:
            return self.GUIDANCE_REQUIREMENTS

        if quality.has_uncovered_complexity:
            return self.GUIDANCE_COMPLEXITY

        return self.GUIDANCE_SYNTHESIZE

    def depth_phase(self, depth: int) -> str:
        """Label used in prompts for where the area stands."""
        if depth < self.MIN_DEPTH:
            return "Foundation"
        if depth < self.MAX_DEPTH - 1:
            return "Deep Dive"
        return "Synthesis"


_default_manager = ElicitationDepthManager()


def assess_note_quality(text: str) -> NoteQuality:
    """Score notes with the default manager."""
    return _default_manager.assess_note_quality(text)


def should_continue_questioning(current_depth: int, note_quality: NoteQuality) -> bool:
    """Depth gate with the default manager."""
    return _default_manager.should_continue_questioning(current_depth, note_quality)


def get_depth_guidance(depth: int, quality: NoteQuality) -> str:
    """Next-question guidance with the default manager."""
    return _default_manager.get_depth_guidance(depth, quality)
