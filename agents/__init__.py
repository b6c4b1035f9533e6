"""Agent implementations for DeepRabbit Discovery.

Each agent is specialized for one step of a discovery session.
"""

from .base_agent import BaseAgent, AgentResult, TokenUsage
from .question_agent import DiscoveryQuestionAgent, QuestionRequest
from .report_agent import ReportAgent, ReportInput
from .conversation_agent import ConversationAgent

__all__ = [
    # Base
    "BaseAgent",
    "AgentResult",
    "TokenUsage",
    # Session agents
    "DiscoveryQuestionAgent",
    "QuestionRequest",
    "ReportAgent",
    "ReportInput",
    # Demo
    "ConversationAgent",
]
