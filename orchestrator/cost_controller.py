"""Cost controller for tracking and limiting LLM spend per discovery session.

Agents report token usage after each call; the controller prices it with the
configured per-million token rates and writes a manifest alongside the
session outputs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Any
import json
from pathlib import Path

from config import settings


@dataclass
class TokenUsage:
    """Token usage for a single API call."""
    input_tokens: int
    output_tokens: int
    model: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def cost(self) -> float:
        """Calculate cost based on settings."""
        return settings.calculate_cost(self.input_tokens, self.output_tokens)


@dataclass
class AgentCostRecord:
    """Cost record for a single agent call."""
    agent_name: str
    area: str
    usage: TokenUsage


class CostController:
    """Tracks session spend and generates cost manifests."""

    def __init__(self, max_cost_usd: Optional[float] = None):
        self.max_cost_usd = max_cost_usd or settings.max_cost_per_session_usd
        self.records: List[AgentCostRecord] = []

    @property
    def total_input_tokens(self) -> int:
        return sum(r.usage.input_tokens for r in self.records)

    @property
    def total_output_tokens(self) -> int:
        return sum(r.usage.output_tokens for r in self.records)

    @property
    def total_cost_usd(self) -> float:
        return sum(r.usage.cost for r in self.records)

    @property
    def remaining_budget_usd(self) -> float:
        return max(0, self.max_cost_usd - self.total_cost_usd)

    @property
    def is_budget_exceeded(self) -> bool:
        return self.total_cost_usd >= self.max_cost_usd

    def record_usage(
        self,
        agent_name: str,
        input_tokens: int,
        output_tokens: int,
        model: str,
        area: str = "",
    ) -> bool:
        """Record one call.

        Returns:
            True while the session is still within budget
        """
        if input_tokens or output_tokens:
            self.records.append(
                AgentCostRecord(
                    agent_name=agent_name,
                    area=area,
                    usage=TokenUsage(input_tokens, output_tokens, model),
                )
            )
        if self.is_budget_exceeded:
            print(
                f"[DeepRabbit] Session budget exceeded: "
                f"${self.total_cost_usd:.4f} of ${self.max_cost_usd:.2f}"
            )
        return not self.is_budget_exceeded

    def check_budget(self, estimated_cost: float = 0.0) -> bool:
        """Check if budget allows for an estimated additional cost."""
        return (self.total_cost_usd + estimated_cost) < self.max_cost_usd

    def get_cost_by_agent(self) -> Dict[str, float]:
        costs: Dict[str, float] = {}
        for r in self.records:
            costs[r.agent_name] = costs.get(r.agent_name, 0) + r.usage.cost
        return costs

    def get_cost_by_area(self) -> Dict[str, float]:
        costs: Dict[str, float] = {}
        for r in self.records:
            if r.area:
                costs[r.area] = costs.get(r.area, 0) + r.usage.cost
        return costs

    def generate_manifest(self) -> Dict[str, Any]:
        """Generate a cost manifest for the session."""
        total = self.total_cost_usd
        return {
            "summary": {
                "total_input_tokens": self.total_input_tokens,
                "total_output_tokens": self.total_output_tokens,
                "total_cost_usd": round(total, 4),
                "max_budget_usd": self.max_cost_usd,
                "budget_used_percent": round(
                    (total / self.max_cost_usd * 100) if self.max_cost_usd > 0 else 0, 1
                ),
                "budget_exceeded": self.is_budget_exceeded,
            },
            "by_agent": {k: round(v, 4) for k, v in self.get_cost_by_agent().items()},
            "by_area": {k: round(v, 4) for k, v in self.get_cost_by_area().items()},
            "detailed_records": [
                {
                    "agent": r.agent_name,
                    "area": r.area,
                    "model": r.usage.model,
                    "input_tokens": r.usage.input_tokens,
                    "output_tokens": r.usage.output_tokens,
                    "cost_usd": round(r.usage.cost, 4),
                    "timestamp": r.usage.timestamp.isoformat(),
                }
                for r in self.records
            ],
        }

    def save_manifest(self, output_path: Path) -> str:
        """Save cost manifest to file.

        Args:
            output_path: Directory to save manifest

        Returns:
            Path to saved manifest file
        """
        manifest = self.generate_manifest()
        manifest_path = output_path / "cost_manifest.json"
        manifest_path.write_text(json.dumps(manifest, indent=2))
        return str(manifest_path)


# Global cost controller for the current session
_current_controller: Optional[CostController] = None


def get_cost_controller() -> CostController:
    """Get the current cost controller, creating one if needed."""
    global _current_controller
    if _current_controller is None:
        _current_controller = CostController()
    return _current_controller


def reset_cost_controller(max_cost_usd: Optional[float] = None) -> CostController:
    """Reset the cost controller for a new session."""
    global _current_controller
    _current_controller = CostController(max_cost_usd)
    return _current_controller
