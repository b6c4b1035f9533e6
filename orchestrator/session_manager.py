"""Discovery Session Manager - central orchestrator for a discovery session.

The session manager:
1. Starts a session and opens an empty note for every discovery area
2. Asks the question agent for the next question in an area
3. Records the consultant's notes (append-only)
4. Decides when an area is done and rolls notes up into completeness
5. Generates the final report and saves session artifacts
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from agents import BaseAgent, DiscoveryQuestionAgent, ReportAgent
from contracts import (
    DISCOVERY_AREAS,
    AreaProgress,
    ClientICP,
    CompletenessReport,
    DiscoveryNote,
    DiscoveryQuestionResult,
    DiscoverySession,
    GeneratedReport,
    NextStepGoal,
    ProgressTracking,
    QuestionBlock,
    SessionStatus,
    SolutionScope,
)
from elicitation import ElicitationDepthManager, calculate_discovery_completeness
from orchestrator.cost_controller import CostController, reset_cost_controller
from providers import RateLimiter
from config import settings


class DiscoverySessionManager:
    """State holder for one discovery session.

    Responsibilities:
    - Own the session and its per-area notes
    - Route question and report generation to the agents
    - Feed agent token usage to the cost controller
    - Persist and restore sessions
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        max_cost_usd: Optional[float] = None,
        output_dir: Optional[str] = None,
        depth_manager: Optional[ElicitationDepthManager] = None,
        question_agent: Optional[DiscoveryQuestionAgent] = None,
        report_agent: Optional[ReportAgent] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """Initialize the session manager.

        Args:
            provider: LLM provider (openai, anthropic)
            model: Model name override (e.g. gpt-4o, claude-sonnet-4)
            max_cost_usd: Maximum LLM spend for the session
            output_dir: Directory for saved sessions
            depth_manager: Heuristics used for should_continue and completeness
            question_agent: Pre-built question agent (tests, custom prompts)
            report_agent: Pre-built report agent
            rate_limiter: Limiter shared by both agents
        """
        self.output_dir = Path(output_dir) if output_dir else settings.get_output_path()
        self.depth_manager = depth_manager or ElicitationDepthManager()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.question_agent = question_agent or DiscoveryQuestionAgent(
            model=model,
            provider=provider,
            depth_manager=self.depth_manager,
            rate_limiter=self.rate_limiter,
        )
        self.report_agent = report_agent or ReportAgent(
            model=model, provider=provider, rate_limiter=self.rate_limiter
        )
        self.cost_controller: CostController = reset_cost_controller(max_cost_usd)

        self.session: Optional[DiscoverySession] = None
        self.notes: Dict[str, DiscoveryNote] = {}
        self.report: Optional[GeneratedReport] = None

    def start_session(
        self,
        account_name: str,
        client_icp: ClientICP,
        business_area: str,
        discovery_context: str,
        contact_name: str = "",
        contact_role: str = "",
        solution_scope: SolutionScope = SolutionScope.CUSTOM_DEVELOPMENT,
        next_step_goal: NextStepGoal = NextStepGoal.TECHNICAL_DEEP_DIVE,
        areas: Optional[Iterable[str]] = None,
    ) -> DiscoverySession:
        """Start a new session with an empty note per area.

        Args:
            areas: Areas to walk through; all eight session areas if None
        """
        self.session = DiscoverySession(
            account_name=account_name,
            contact_name=contact_name,
            contact_role=contact_role,
            client_icp=client_icp,
            business_area=business_area,
            discovery_context=discovery_context,
            solution_scope=solution_scope,
            next_step_goal=next_step_goal,
        )
        area_names = list(areas) if areas is not None else list(DISCOVERY_AREAS)
        self.notes = {area: DiscoveryNote(area_name=area) for area in area_names}
        self.report = None
        self.rate_limiter.reset()

        print(
            f"[DeepRabbit] Session {self.session.id} started for {account_name} "
            f"({len(area_names)} areas)"
        )
        return self.session

    @property
    def areas(self) -> List[str]:
        return list(self.notes.keys())

    def _require_session(self) -> DiscoverySession:
        if self.session is None:
            raise RuntimeError("No active session; call start_session() first")
        return self.session

    def _note(self, area: str) -> DiscoveryNote:
        self._require_session()
        if area not in self.notes:
            raise ValueError(f"Unknown discovery area: {area}. Session areas: {self.areas}")
        return self.notes[area]

    def _track(self, agent: BaseAgent, before: int, before_out: int, area: str = "") -> None:
        input_tokens = agent.total_usage.input_tokens - before
        output_tokens = agent.total_usage.output_tokens - before_out
        self.cost_controller.record_usage(agent.role, input_tokens, output_tokens, agent.model, area)

    def next_question(self, area: str) -> DiscoveryQuestionResult:
        """Generate the next question for an area."""
        session = self._require_session()
        self._note(area)

        agent = self.question_agent
        before, before_out = agent.total_usage.input_tokens, agent.total_usage.output_tokens
        result = agent.generate(session, area, list(self.notes.values()))
        self._track(agent, before, before_out, area)
        return result

    def record_response(self, area: str, question: str, notes: str) -> QuestionBlock:
        """Append a question and the consultant's notes to an area."""
        note = self._note(area)
        block = QuestionBlock(
            question_text=question,
            question_number=note.depth + 1,
            notes=notes,
        )
        note.questions.append(block)
        note.last_updated = block.timestamp
        self.session.updated_at = block.timestamp
        return block

    def should_continue(self, area: str) -> bool:
        """Whether the area needs another question, judged from its notes so far."""
        note = self._note(area)
        texts = note.note_texts
        quality = self.depth_manager.assess_note_quality(" ".join(texts))
        return self.depth_manager.should_continue_questioning(len(texts), quality)

    def completeness(self) -> CompletenessReport:
        self._require_session()
        return calculate_discovery_completeness(
            {area: note.note_texts for area, note in self.notes.items()},
            depth_manager=self.depth_manager,
        )

    def progress(self) -> ProgressTracking:
        """Questions asked per area against the minimum-depth target."""
        self._require_session()
        target = self.depth_manager.MIN_DEPTH
        breakdown = {
            area: AreaProgress(
                questions_asked=note.depth,
                has_notes=any(text.strip() for text in note.note_texts),
                last_updated=note.last_updated if note.questions else None,
            )
            for area, note in self.notes.items()
        }
        total = len(self.notes) * target
        completed = sum(min(note.depth, target) for note in self.notes.values())
        return ProgressTracking(
            total_assessments=total,
            completed_assessments=completed,
            area_breakdown=breakdown,
            is_complete=completed >= total,
        )

    def generate_report(self, research_context: Optional[str] = None) -> GeneratedReport:
        """Generate the session report and mark the session completed."""
        session = self._require_session()
        print(f"[DeepRabbit] Generating report for {session.account_name}")

        agent = self.report_agent
        before, before_out = agent.total_usage.input_tokens, agent.total_usage.output_tokens
        self.report = agent.generate(session, list(self.notes.values()), research_context)
        self._track(agent, before, before_out)

        session.status = SessionStatus.COMPLETED
        session.updated_at = datetime.now()
        return self.report

    def save(self, output_dir: Optional[Union[str, Path]] = None) -> Path:
        """Write session, report and cost manifest to <output_dir>/<session_id>/.

        Returns:
            The session directory
        """
        session = self._require_session()
        output_path = Path(output_dir or self.output_dir) / session.id
        output_path.mkdir(parents=True, exist_ok=True)

        payload = {
            "session": session.model_dump(mode="json"),
            "notes": [note.model_dump(mode="json") for note in self.notes.values()],
        }
        (output_path / "session.json").write_text(json.dumps(payload, indent=2))

        if self.report is not None:
            (output_path / "report.json").write_text(self.report.model_dump_json(indent=2))
            title = f"# Discovery Report: {session.account_name}\n\n"
            (output_path / "report.md").write_text(title + self.report.to_markdown())

        self.cost_controller.save_manifest(output_path)
        print(f"[DeepRabbit] Session saved to {output_path}")
        return output_path

    @classmethod
    def load(cls, path: Union[str, Path], **kwargs) -> "DiscoverySessionManager":
        """Restore a saved session.

        Args:
            path: Session directory or its session.json
            **kwargs: Passed to the constructor (provider, model, agents...)
        """
        path = Path(path)
        session_file = path / "session.json" if path.is_dir() else path
        payload = json.loads(session_file.read_text())

        manager = cls(output_dir=str(session_file.parent.parent), **kwargs)
        manager.session = DiscoverySession.model_validate(payload["session"])
        manager.notes = {}
        for raw in payload.get("notes", []):
            note = DiscoveryNote.model_validate(raw)
            manager.notes[note.area_name] = note

        report_file = session_file.parent / "report.json"
        if report_file.exists():
            manager.report = GeneratedReport.model_validate_json(report_file.read_text())
        return manager
