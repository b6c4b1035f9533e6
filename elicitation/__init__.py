"""Elicitation intelligence: depth gating, note quality and completeness."""

from .depth_manager import (
    ElicitationDepthManager,
    assess_note_quality,
    should_continue_questioning,
    get_depth_guidance,
)
from .patterns import (
    PatternConfigurationError,
    UNIVERSAL_ELICITATION_AREAS,
    ELICITATION_PATTERNS,
    DEFAULT_QUESTION,
    check_pattern_completeness,
    validate_elicitation_patterns,
    fill_placeholders,
    has_placeholders,
    get_question_progression,
)
from .completeness import calculate_discovery_completeness, classify_percentage

# Fail at startup rather than serving a fallback template
validate_elicitation_patterns()

__all__ = [
    "ElicitationDepthManager",
    "assess_note_quality",
    "should_continue_questioning",
    "get_depth_guidance",
    "PatternConfigurationError",
    "UNIVERSAL_ELICITATION_AREAS",
    "ELICITATION_PATTERNS",
    "DEFAULT_QUESTION",
    "check_pattern_completeness",
    "validate_elicitation_patterns",
    "fill_placeholders",
    "has_placeholders",
    "get_question_progression",
    "calculate_discovery_completeness",
    "classify_percentage",
]
