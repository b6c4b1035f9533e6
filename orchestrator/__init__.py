"""Orchestrator module for DeepRabbit discovery sessions."""

from .cost_controller import (
    CostController,
    TokenUsage,
    AgentCostRecord,
    get_cost_controller,
    reset_cost_controller,
)
from .session_manager import DiscoverySessionManager

__all__ = [
    "CostController",
    "TokenUsage",
    "AgentCostRecord",
    "get_cost_controller",
    "reset_cost_controller",
    "DiscoverySessionManager",
]
